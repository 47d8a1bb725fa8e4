"""Legacy message: header, account table, blockhash and compiled instructions"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from .account import AccountKeysList, AccountMeta, Ordering
from .constants import BLOCKHASH_LENGTH, HEADER_LENGTH, MAX_ACCOUNT_INDEX, PUBLIC_KEY_LENGTH
from .errors import AccountIndexError, ConstructionError, SerializationError
from .instruction import TransactionInstruction
from .publickey import PublicKey
from .shortvec import encode_length
from .utils import ByteReader, decode_blockhash, encode_blockhash

logger = logging.getLogger(__name__)


@dataclass
class MessageHeader:
    """Transaction message header"""
    num_required_signatures: int = 0
    num_readonly_signed_accounts: int = 0
    num_readonly_unsigned_accounts: int = 0

    def serialize(self) -> bytes:
        return bytes([
            self.num_required_signatures,
            self.num_readonly_signed_accounts,
            self.num_readonly_unsigned_accounts,
        ])

    @classmethod
    def deserialize(cls, reader: ByteReader) -> 'MessageHeader':
        raw = reader.read(HEADER_LENGTH)
        return cls(raw[0], raw[1], raw[2])


@dataclass
class CompiledInstruction:
    """Instruction whose program and accounts are indices into the message keys"""
    program_id_index: int
    accounts: List[int] = field(default_factory=list)
    data: bytes = b''

    def serialize(self) -> bytes:
        parts = [
            bytes([self.program_id_index]),
            encode_length(len(self.accounts)),
            bytes(self.accounts),
            encode_length(len(self.data)),
            self.data,
        ]
        return b''.join(parts)

    @classmethod
    def deserialize(cls, reader: ByteReader) -> 'CompiledInstruction':
        program_id_index = reader.read_u8()
        accounts = list(reader.read(reader.read_length()))
        data = reader.read(reader.read_length())
        return cls(program_id_index, accounts, data)


def find_account_index(keys: List[PublicKey], public_key: PublicKey) -> int:
    for index, key in enumerate(keys):
        if key == public_key:
            return index
    raise AccountIndexError(str(public_key))


def serialize_account_keys(keys: Iterable[PublicKey]) -> bytes:
    keys = list(keys)
    return encode_length(len(keys)) + b''.join(bytes(key) for key in keys)


def read_account_keys(reader: ByteReader) -> List[PublicKey]:
    offset = reader.offset
    count = reader.read_length()
    if count > MAX_ACCOUNT_INDEX + 1:
        raise SerializationError(f"Too many account keys: {count}", offset)
    return [PublicKey(reader.read(PUBLIC_KEY_LENGTH)) for _ in range(count)]


def read_compiled_instructions(reader: ByteReader, num_keys: int) -> List[CompiledInstruction]:
    instructions = []
    for _ in range(reader.read_length()):
        offset = reader.offset
        compiled = CompiledInstruction.deserialize(reader)
        indices = [compiled.program_id_index] + compiled.accounts
        if any(index >= num_keys for index in indices):
            raise SerializationError("Instruction references an account index out of range", offset)
        instructions.append(compiled)
    return instructions


class Message:
    """Legacy (pre-versioning) transaction message.

    Instructions are accumulated with ``add_instruction``; the header, the
    ordered account keys and the compiled instructions are derived only when
    the message is compiled or serialized.
    """

    def __init__(
        self,
        recent_blockhash: Optional[str] = None,
        fee_payer: Optional[PublicKey] = None,
        ordering: Ordering = Ordering.DEFAULT,
    ):
        self.account_keys_list = AccountKeysList()
        self.instructions: List[TransactionInstruction] = []
        self.recent_blockhash = recent_blockhash
        self.fee_payer = PublicKey(fee_payer) if fee_payer is not None else None
        self.ordering = ordering

    def add_instruction(self, instruction: TransactionInstruction) -> 'Message':
        if instruction is None:
            raise ConstructionError("Instruction cannot be None")
        self.account_keys_list.add_all(instruction.keys)
        self.account_keys_list.add(AccountMeta(instruction.program_id, is_signer=False, is_writable=False))
        self.instructions.append(instruction)
        return self

    def add_instructions(self, instructions: Iterable[TransactionInstruction]) -> 'Message':
        for instruction in instructions:
            self.add_instruction(instruction)
        return self

    def set_recent_blockhash(self, recent_blockhash: Union[str, bytes]) -> 'Message':
        if recent_blockhash is None:
            raise ConstructionError("Recent blockhash cannot be None")
        if isinstance(recent_blockhash, (bytes, bytearray)):
            recent_blockhash = encode_blockhash(bytes(recent_blockhash))
        self.recent_blockhash = recent_blockhash
        return self

    def set_fee_payer(self, fee_payer: PublicKey) -> 'Message':
        self.fee_payer = PublicKey(fee_payer)
        return self

    def get_account_keys(self) -> List[AccountMeta]:
        """Account metas in wire order, fee payer first"""
        return self.account_keys_list.get_list(self.fee_payer, self.ordering)

    def compile(self) -> Tuple[MessageHeader, List[AccountMeta], List[CompiledInstruction]]:
        if self.recent_blockhash is None:
            raise ConstructionError("Recent blockhash required")
        if not self.instructions:
            raise ConstructionError("No instructions provided")

        metas = self.get_account_keys()
        if len(metas) > MAX_ACCOUNT_INDEX + 1:
            raise ConstructionError(
                f"Too many accounts: {len(metas)} exceeds {MAX_ACCOUNT_INDEX + 1}",
                {"accounts": len(metas)},
            )
        keys = [meta.public_key for meta in metas]

        compiled = [
            CompiledInstruction(
                program_id_index=find_account_index(keys, instruction.program_id),
                accounts=[find_account_index(keys, meta.public_key) for meta in instruction.keys],
                data=instruction.data,
            )
            for instruction in self.instructions
        ]

        header = MessageHeader()
        for meta in metas:
            if meta.is_signer:
                header.num_required_signatures += 1
                if not meta.is_writable:
                    header.num_readonly_signed_accounts += 1
            elif not meta.is_writable:
                header.num_readonly_unsigned_accounts += 1

        return header, metas, compiled

    @property
    def header(self) -> MessageHeader:
        return self.compile()[0]

    def serialize(self) -> bytes:
        """Serialize message to bytes"""
        header, metas, compiled = self.compile()

        parts = [
            header.serialize(),
            serialize_account_keys(meta.public_key for meta in metas),
            decode_blockhash(self.recent_blockhash),
            encode_length(len(compiled)),
        ]
        parts.extend(instruction.serialize() for instruction in compiled)

        serialized = b''.join(parts)
        logger.debug(
            "Compiled legacy message: %d accounts, %d instructions, %d bytes",
            len(metas), len(compiled), len(serialized),
        )
        return serialized

    @classmethod
    def deserialize(cls, data: bytes) -> 'Message':
        """Rebuild a message from its wire bytes.

        Signer and writable flags are recovered from the header counts, so
        serializing the result reproduces ``data``.
        """
        reader = ByteReader(data)
        message = cls._read(reader)
        reader.expect_end()
        return message

    @classmethod
    def _read(cls, reader: ByteReader) -> 'Message':
        header = MessageHeader.deserialize(reader)
        keys = read_account_keys(reader)

        num_signed = header.num_required_signatures
        if num_signed > len(keys) or header.num_readonly_signed_accounts > num_signed or \
                header.num_readonly_unsigned_accounts > len(keys) - num_signed:
            raise SerializationError("Message header counts do not match the account keys")

        metas = []
        for index, key in enumerate(keys):
            is_signer = index < num_signed
            if is_signer:
                is_writable = index < num_signed - header.num_readonly_signed_accounts
            else:
                is_writable = index < len(keys) - header.num_readonly_unsigned_accounts
            metas.append(AccountMeta(key, is_signer=is_signer, is_writable=is_writable))

        recent_blockhash = encode_blockhash(reader.read(BLOCKHASH_LENGTH))
        compiled = read_compiled_instructions(reader, len(keys))

        message = cls(recent_blockhash=recent_blockhash, fee_payer=keys[0] if num_signed else None)
        message.account_keys_list.add_all(metas)
        for instruction in compiled:
            message.instructions.append(TransactionInstruction(
                program_id=keys[instruction.program_id_index],
                keys=[metas[index] for index in instruction.accounts],
                data=instruction.data,
            ))
        return message
