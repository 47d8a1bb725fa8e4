"""Transaction builder and utilities"""

import base64
import logging
from typing import Iterable, List, Optional, Sequence, Union

import base58

from .account import Ordering
from .constants import SIGNATURE_LENGTH
from .errors import ConstructionError, SerializationError
from .instruction import TransactionInstruction
from .keypair import Keypair, as_signer_list, verify_signature
from .lookup import AddressTableLookup
from .message import Message
from .publickey import PublicKey
from .shortvec import encode_length
from .utils import ByteReader
from .versioned import VersionedMessage, VersionedTransaction

logger = logging.getLogger(__name__)


class Transaction:
    """Legacy transaction: a message plus signatures in signer order"""

    def __init__(self, message: Optional[Message] = None, signatures: Optional[List[bytes]] = None):
        self.message = message if message is not None else Message()
        self.signatures: List[bytes] = list(signatures or [])

    def add_instruction(self, instruction: TransactionInstruction) -> 'Transaction':
        self.message.add_instruction(instruction)
        return self

    def add_instructions(self, instructions: Iterable[TransactionInstruction]) -> 'Transaction':
        self.message.add_instructions(instructions)
        return self

    def set_recent_blockhash(self, recent_blockhash: Union[str, bytes]) -> 'Transaction':
        self.message.set_recent_blockhash(recent_blockhash)
        return self

    def set_fee_payer(self, fee_payer: PublicKey) -> 'Transaction':
        self.message.set_fee_payer(fee_payer)
        return self

    def sign(self, signers: Union[Keypair, Sequence[Keypair]]) -> None:
        """Sign with every required signer; the first signer pays the fee.

        Signatures are emitted in the order the signer accounts appear in the
        compiled message, whatever order ``signers`` is given in. Every signer
        account must have a keypair and every keypair must be a signer account.
        """
        signers = as_signer_list(signers)
        self.message.set_fee_payer(signers[0].public_key)

        required = self._signer_keys()
        by_key = {bytes(signer.public_key): signer for signer in signers}
        missing = [key.to_base58() for key in required if bytes(key) not in by_key]
        if missing:
            raise ConstructionError("Missing signer for account", {"missing": missing})
        extra = set(by_key) - {bytes(key) for key in required}
        if extra:
            raise ConstructionError(
                "Signer is not required by the message",
                {"extra": sorted(PublicKey(key).to_base58() for key in extra)},
            )

        payload = self.message.serialize()
        self.signatures = [by_key[bytes(key)].sign(payload) for key in required]
        logger.debug("Signed legacy transaction with %d signers", len(signers))

    def _signer_keys(self) -> List[PublicKey]:
        _, metas, _ = self.message.compile()
        return [meta.public_key for meta in metas if meta.is_signer]

    @property
    def signature(self) -> Optional[str]:
        """First signature as base58 text, the transaction id"""
        if not self.signatures:
            return None
        return base58.b58encode(self.signatures[0]).decode('ascii')

    def verify_signatures(self) -> bool:
        """Check every signature against the current message bytes"""
        required = self._signer_keys()
        if len(self.signatures) != len(required):
            return False
        payload = self.message.serialize()
        return all(
            verify_signature(key, payload, signature)
            for key, signature in zip(required, self.signatures)
        )

    def serialize(self) -> bytes:
        """Serialize transaction to bytes"""
        if not self.signatures:
            raise ConstructionError("Transaction has not been signed")

        parts = [encode_length(len(self.signatures))]
        parts.extend(self.signatures)
        parts.append(self.message.serialize())
        return b''.join(parts)

    def to_base64(self) -> str:
        """Encoded form expected by the sendTransaction RPC call"""
        return base64.b64encode(self.serialize()).decode('ascii')

    @classmethod
    def deserialize(cls, data: bytes) -> 'Transaction':
        reader = ByteReader(data)
        signatures = [reader.read(SIGNATURE_LENGTH) for _ in range(reader.read_length())]
        message_offset = reader.offset
        message = Message._read(reader)
        reader.expect_end()

        num_required = reader.data[message_offset]
        if len(signatures) != num_required:
            raise SerializationError(
                f"Header requires {num_required} signatures, found {len(signatures)}",
                message_offset,
            )
        return cls(message, signatures)


class TransactionBuilder:
    """Builder for constructing legacy transactions"""

    def __init__(self):
        self.transaction = Transaction()
        self.signers: List[Keypair] = []

    def add_instruction(self, instruction: TransactionInstruction) -> 'TransactionBuilder':
        """Add an instruction"""
        self.transaction.add_instruction(instruction)
        return self

    def add_instructions(self, instructions: Iterable[TransactionInstruction]) -> 'TransactionBuilder':
        if instructions is None:
            raise ConstructionError("Instructions list cannot be None")
        self.transaction.add_instructions(instructions)
        return self

    def set_recent_blockhash(self, blockhash: Union[str, bytes]) -> 'TransactionBuilder':
        """Set recent blockhash"""
        self.transaction.set_recent_blockhash(blockhash)
        return self

    def set_ordering(self, ordering: Ordering) -> 'TransactionBuilder':
        self.transaction.message.ordering = ordering
        return self

    def set_signers(self, signers: Union[Keypair, Sequence[Keypair]]) -> 'TransactionBuilder':
        self.signers = as_signer_list(signers)
        return self

    def build(self) -> Transaction:
        """Sign and return the transaction"""
        if self.transaction.message.recent_blockhash is None:
            raise ConstructionError("Recent blockhash not set")
        self.transaction.sign(self.signers)
        return self.transaction


class VersionedTransactionBuilder:
    """Builder for versioned transactions"""

    def __init__(self, version: int = 0):
        self.message = VersionedMessage(version=version)
        self.signers: List[Keypair] = []

    def set_fee_payer(self, fee_payer: PublicKey) -> 'VersionedTransactionBuilder':
        """Register the fee payer first so it takes account index 0"""
        if self.message.account_keys and self.message.account_keys[0] != PublicKey(fee_payer):
            raise ConstructionError("Fee payer must be set before any other account is added")
        self.message.add_account_key(fee_payer)
        return self

    def add_instruction(self, instruction: TransactionInstruction) -> 'VersionedTransactionBuilder':
        self.message.add_instruction(instruction)
        return self

    def add_instructions(self, instructions: Iterable[TransactionInstruction]) -> 'VersionedTransactionBuilder':
        self.message.add_instructions(instructions)
        return self

    def add_address_table_lookup(self, lookup: AddressTableLookup) -> 'VersionedTransactionBuilder':
        self.message.add_address_table_lookup(lookup)
        return self

    def set_recent_blockhash(self, blockhash: Union[str, bytes]) -> 'VersionedTransactionBuilder':
        self.message.set_recent_blockhash(blockhash)
        return self

    def set_signers(self, signers: Union[Keypair, Sequence[Keypair]]) -> 'VersionedTransactionBuilder':
        self.signers = as_signer_list(signers)
        return self

    def build(self) -> VersionedTransaction:
        transaction = VersionedTransaction(self.message)
        transaction.sign(self.signers)
        return transaction
