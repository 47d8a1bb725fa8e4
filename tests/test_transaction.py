"""
Unit tests for legacy transactions and the transaction builders.
"""

import base64

import pytest

from solana_tx import (
    AccountMeta,
    ConstructionError,
    Keypair,
    Ordering,
    SerializationError,
    Transaction,
    TransactionBuilder,
    TransactionInstruction,
)
from solana_tx.programs import MemoProgram, SystemProgram

from conftest import BLOCKHASH, MEMO_TX_BASE64, TRANSFER_TX_BASE64


@pytest.fixture
def signed_transfer(signer, transfer_instruction):
    transaction = Transaction()
    transaction.add_instruction(transfer_instruction)
    transaction.set_recent_blockhash(BLOCKHASH)
    transaction.sign([signer])
    return transaction


class TestSignAndSerialize:
    """Tests for Transaction.sign and Transaction.serialize."""

    @pytest.mark.unit
    def test_reference_transfer(self, signed_transfer):
        assert base64.b64encode(signed_transfer.serialize()).decode() == TRANSFER_TX_BASE64
        assert signed_transfer.to_base64() == TRANSFER_TX_BASE64

    @pytest.mark.unit
    def test_transaction_id(self, signed_transfer):
        assert signed_transfer.signature == (
            "nXkZvmiP3kzZbR7u95NSoK78Y3YqgSSthseuba99uBGsEBnR4RXugEhrAFmqhvWiN8k9aZNTZTE22NH6nBX3B7T"
        )

    @pytest.mark.unit
    def test_single_keypair_accepted(self, signer, transfer_instruction):
        transaction = Transaction().add_instruction(transfer_instruction).set_recent_blockhash(BLOCKHASH)
        transaction.sign(signer)
        assert transaction.to_base64() == TRANSFER_TX_BASE64

    @pytest.mark.unit
    def test_empty_signers_rejected(self, transfer_instruction):
        transaction = Transaction().add_instruction(transfer_instruction).set_recent_blockhash(BLOCKHASH)
        with pytest.raises(ConstructionError, match="No signers"):
            transaction.sign([])

    @pytest.mark.unit
    def test_unsigned_serialize_rejected(self, transfer_instruction):
        transaction = Transaction().add_instruction(transfer_instruction).set_recent_blockhash(BLOCKHASH)
        with pytest.raises(ConstructionError, match="not been signed"):
            transaction.serialize()

    @pytest.mark.unit
    def test_first_signer_becomes_fee_payer(self, signer, random_key):
        payer = Keypair()
        transaction = Transaction()
        transaction.add_instruction(SystemProgram.transfer(signer.public_key, random_key(), 10))
        transaction.set_recent_blockhash(BLOCKHASH)
        transaction.sign([payer, signer])

        keys = [meta.public_key for meta in transaction.message.get_account_keys()]
        assert keys[:2] == [payer.public_key, signer.public_key]
        assert transaction.message.header.num_required_signatures == 2
        assert transaction.verify_signatures()

    @pytest.mark.unit
    def test_signatures_follow_signer_order(self, signer):
        payer = Keypair()
        transaction = Transaction()
        transaction.add_instruction(MemoProgram.write_utf8(signer.public_key, "hi"))
        transaction.set_recent_blockhash(BLOCKHASH)
        transaction.sign([payer, signer])

        payload = transaction.message.serialize()
        assert transaction.signatures == [payer.sign(payload), signer.sign(payload)]

    @pytest.mark.unit
    def test_mutation_after_signing_invalidates(self, signed_transfer, random_key):
        assert signed_transfer.verify_signatures()
        signed_transfer.add_instruction(MemoProgram.write_utf8(random_key(), "late"))
        assert not signed_transfer.verify_signatures()

    @pytest.mark.unit
    def test_signing_errors_propagate(self):
        class BrokenSigner(Keypair):
            def sign(self, message):
                raise RuntimeError("hardware wallet unplugged")

        broken = BrokenSigner()
        transaction = Transaction().add_instruction(MemoProgram.write_utf8(broken.public_key, "x"))
        transaction.set_recent_blockhash(BLOCKHASH)
        with pytest.raises(RuntimeError, match="unplugged"):
            transaction.sign([broken])

    @pytest.mark.unit
    def test_signatures_follow_account_order(self, signer, random_key):
        first = Keypair()
        second = Keypair()
        instruction = TransactionInstruction(random_key(), [
            AccountMeta(first.public_key, is_signer=True, is_writable=True),
            AccountMeta(second.public_key, is_signer=True, is_writable=True),
        ])
        transaction = Transaction().add_instruction(instruction).set_recent_blockhash(BLOCKHASH)
        transaction.sign([signer, second, first])

        payload = transaction.message.serialize()
        assert transaction.signatures == [signer.sign(payload), first.sign(payload), second.sign(payload)]
        assert transaction.verify_signatures()

    @pytest.mark.unit
    def test_missing_signer_rejected(self, signer, random_key):
        other = Keypair()
        transaction = Transaction().add_instruction(SystemProgram.transfer(other.public_key, random_key(), 1))
        transaction.set_recent_blockhash(BLOCKHASH)

        with pytest.raises(ConstructionError, match="Missing signer") as exc_info:
            transaction.sign([signer])
        assert exc_info.value.details["missing"] == [other.public_key.to_base58()]
        assert transaction.signatures == []

    @pytest.mark.unit
    def test_unneeded_signer_rejected(self, signer, transfer_instruction):
        transaction = Transaction().add_instruction(transfer_instruction).set_recent_blockhash(BLOCKHASH)
        with pytest.raises(ConstructionError, match="not required"):
            transaction.sign([signer, Keypair()])

    @pytest.mark.unit
    def test_explicit_ordering(self, signer, random_key):
        program = random_key()
        other = random_key()
        instruction = TransactionInstruction(program, [
            AccountMeta(other, is_signer=False, is_writable=False, order_hint=1),
            AccountMeta(signer.public_key, is_signer=True, is_writable=True, order_hint=0),
        ], b'\x01')
        transaction = Transaction()
        transaction.message.ordering = Ordering.EXPLICIT
        transaction.add_instruction(instruction)
        transaction.add_instruction(TransactionInstruction(
            program, [AccountMeta(program, is_signer=False, is_writable=False, order_hint=2)]
        ))
        transaction.set_recent_blockhash(BLOCKHASH)
        transaction.sign(signer)

        keys = [meta.public_key for meta in transaction.message.get_account_keys()]
        assert keys == [signer.public_key, other, program]


class TestDeserialize:
    """Tests for Transaction.deserialize."""

    @pytest.mark.unit
    def test_reference_transfer(self, fee_payer, recipient):
        transaction = Transaction.deserialize(base64.b64decode(TRANSFER_TX_BASE64))

        assert transaction.signature == (
            "nXkZvmiP3kzZbR7u95NSoK78Y3YqgSSthseuba99uBGsEBnR4RXugEhrAFmqhvWiN8k9aZNTZTE22NH6nBX3B7T"
        )
        assert transaction.to_base64() == TRANSFER_TX_BASE64
        assert transaction.verify_signatures()

    @pytest.mark.unit
    def test_round_trip(self, signer, random_key):
        payer = Keypair()
        readonly = random_key()
        transaction = Transaction()
        transaction.add_instruction(SystemProgram.transfer(signer.public_key, random_key(), 42))
        transaction.add_instruction(TransactionInstruction(
            MemoProgram.PROGRAM_ID,
            [AccountMeta(readonly, is_signer=False, is_writable=False)],
            b'memo data',
        ))
        transaction.add_instruction(MemoProgram.write_utf8(payer.public_key, "paid"))
        transaction.set_recent_blockhash(BLOCKHASH)
        transaction.sign([payer, signer])

        restored = Transaction.deserialize(transaction.serialize())

        def flags(tx):
            return [(m.public_key, m.is_signer, m.is_writable) for m in tx.message.get_account_keys()]

        def instructions(tx):
            return [
                (ix.program_id, [meta.public_key for meta in ix.keys], ix.data)
                for ix in tx.message.instructions
            ]

        assert flags(restored) == flags(transaction)
        assert instructions(restored) == instructions(transaction)
        assert restored.signatures == transaction.signatures
        assert restored.serialize() == transaction.serialize()

    @pytest.mark.unit
    @pytest.mark.parametrize("cut", [0, 1, 64, 65, 100, 200])
    def test_truncated_input(self, cut):
        data = base64.b64decode(TRANSFER_TX_BASE64)[:cut]
        with pytest.raises(SerializationError):
            Transaction.deserialize(data)

    @pytest.mark.unit
    def test_signature_count_exceeding_data(self):
        data = bytearray(base64.b64decode(TRANSFER_TX_BASE64))
        data[0] = 5
        with pytest.raises(SerializationError):
            Transaction.deserialize(bytes(data))

    @pytest.mark.unit
    def test_signature_count_must_match_header(self):
        data = bytearray(base64.b64decode(TRANSFER_TX_BASE64))
        data[1 + 64] = 2
        with pytest.raises(SerializationError, match="requires 2 signatures, found 1"):
            Transaction.deserialize(bytes(data))

    @pytest.mark.unit
    def test_stale_signature_count_does_not_parse(self, signer, random_key):
        transaction = Transaction().add_instruction(MemoProgram.write_utf8(signer.public_key, "a"))
        transaction.set_recent_blockhash(BLOCKHASH)
        transaction.sign([signer])
        transaction.add_instruction(MemoProgram.write_utf8(random_key(), "b"))

        with pytest.raises(SerializationError):
            Transaction.deserialize(transaction.serialize())


class TestTransactionBuilder:
    """Tests for TransactionBuilder."""

    @pytest.mark.unit
    def test_memo_transaction(self, signer):
        transaction = (
            TransactionBuilder()
            .add_instruction(MemoProgram.write_utf8(signer.public_key, "Test memo"))
            .set_recent_blockhash(BLOCKHASH)
            .set_signers([signer])
            .build()
        )
        assert transaction.to_base64() == MEMO_TX_BASE64

    @pytest.mark.unit
    def test_add_instructions(self, signer, transfer_instruction):
        transaction = (
            TransactionBuilder()
            .add_instructions([transfer_instruction])
            .set_recent_blockhash(BLOCKHASH)
            .set_signers(signer)
            .build()
        )
        assert transaction.to_base64() == TRANSFER_TX_BASE64

    @pytest.mark.unit
    def test_missing_blockhash(self, signer, transfer_instruction):
        builder = TransactionBuilder().add_instruction(transfer_instruction).set_signers([signer])
        with pytest.raises(ConstructionError, match="blockhash"):
            builder.build()

    @pytest.mark.unit
    def test_empty_signers(self):
        with pytest.raises(ConstructionError):
            TransactionBuilder().set_signers([])

    @pytest.mark.unit
    def test_no_signers_at_build(self, transfer_instruction):
        builder = TransactionBuilder().add_instruction(transfer_instruction).set_recent_blockhash(BLOCKHASH)
        with pytest.raises(ConstructionError):
            builder.build()
