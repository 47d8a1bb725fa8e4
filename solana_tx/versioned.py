"""Versioned (v0) messages and transactions with address lookup tables"""

import base64
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union

import base58

from .constants import (
    BLOCKHASH_LENGTH, MAX_ACCOUNT_INDEX, SIGNATURE_LENGTH, VERSION_PREFIX_MASK,
)
from .errors import ConstructionError, SerializationError
from .instruction import TransactionInstruction
from .keypair import Keypair, as_signer_list, verify_signature
from .lookup import AddressTableLookup
from .message import (
    CompiledInstruction, MessageHeader, read_account_keys, read_compiled_instructions,
    serialize_account_keys,
)
from .publickey import PublicKey
from .shortvec import encode_length
from .utils import ByteReader, decode_blockhash, encode_blockhash

logger = logging.getLogger(__name__)


class VersionedMessage:
    """Version 0 message.

    Account keys are kept in first-seen order through an append-only
    address -> index map; nothing is reordered afterwards. A fee payer that
    must sit at index 0 has to be registered with ``add_account_key`` before
    the first instruction, since each instruction indexes its program id
    ahead of its accounts.
    """

    def __init__(self, version: int = 0, recent_blockhash: Optional[str] = None):
        if not 0 <= version < VERSION_PREFIX_MASK:
            raise ConstructionError(f"Message version must be between 0 and 127, got {version}")
        self.version = version
        self.header = MessageHeader()
        self.account_keys: List[PublicKey] = []
        self.recent_blockhash = recent_blockhash
        self.instructions: List[CompiledInstruction] = []
        self.address_table_lookups: List[AddressTableLookup] = []
        self._account_key_index: Dict[bytes, int] = {}

    def add_account_key(self, public_key: PublicKey) -> int:
        """Return the index of ``public_key``, appending it if unseen"""
        key = PublicKey(public_key)
        index = self._account_key_index.get(bytes(key))
        if index is not None:
            return index

        index = len(self.account_keys)
        if index > MAX_ACCOUNT_INDEX:
            raise ConstructionError(
                f"Account index exceeds u8 limit: {index}", {"account": key.to_base58()}
            )
        self.account_keys.append(key)
        self._account_key_index[bytes(key)] = index
        return index

    def add_instruction(self, instruction: TransactionInstruction) -> 'VersionedMessage':
        if instruction is None:
            raise ConstructionError("Instruction cannot be None")
        program_id_index = self.add_account_key(instruction.program_id)
        accounts = [self.add_account_key(meta.public_key) for meta in instruction.keys]
        self.instructions.append(CompiledInstruction(program_id_index, accounts, instruction.data))
        return self

    def add_instructions(self, instructions: Iterable[TransactionInstruction]) -> 'VersionedMessage':
        for instruction in instructions:
            self.add_instruction(instruction)
        return self

    def add_address_table_lookup(self, lookup: AddressTableLookup) -> 'VersionedMessage':
        if lookup is None:
            raise ConstructionError("Lookup table cannot be None")
        self.address_table_lookups.append(lookup)
        return self

    def set_recent_blockhash(self, recent_blockhash: Union[str, bytes]) -> 'VersionedMessage':
        if recent_blockhash is None:
            raise ConstructionError("Recent blockhash cannot be None")
        if isinstance(recent_blockhash, (bytes, bytearray)):
            recent_blockhash = encode_blockhash(bytes(recent_blockhash))
        self.recent_blockhash = recent_blockhash
        return self

    @property
    def fee_payer(self) -> Optional[PublicKey]:
        return self.account_keys[0] if self.account_keys else None

    def serialize(self) -> bytes:
        if self.recent_blockhash is None:
            raise ConstructionError("Recent blockhash required")
        if not self.instructions:
            raise ConstructionError("No instructions provided")

        parts = [
            self.header.serialize(),
            serialize_account_keys(self.account_keys),
            decode_blockhash(self.recent_blockhash),
            encode_length(len(self.instructions)),
        ]
        parts.extend(instruction.serialize() for instruction in self.instructions)
        parts.append(encode_length(len(self.address_table_lookups)))
        parts.extend(lookup.serialize() for lookup in self.address_table_lookups)

        serialized = b''.join(parts)
        logger.debug(
            "Compiled v%d message: %d accounts, %d instructions, %d lookups, %d bytes",
            self.version, len(self.account_keys), len(self.instructions),
            len(self.address_table_lookups), len(serialized),
        )
        return serialized

    @classmethod
    def deserialize(cls, data: bytes, version: int = 0) -> 'VersionedMessage':
        reader = ByteReader(data)
        message = cls._read(reader, version)
        reader.expect_end()
        return message

    @classmethod
    def _read(cls, reader: ByteReader, version: int) -> 'VersionedMessage':
        message = cls(version=version)
        message.header = MessageHeader.deserialize(reader)
        for key in read_account_keys(reader):
            message.add_account_key(key)
        message.recent_blockhash = encode_blockhash(reader.read(BLOCKHASH_LENGTH))
        message.instructions = read_compiled_instructions(reader, len(message.account_keys))
        for _ in range(reader.read_length()):
            message.address_table_lookups.append(AddressTableLookup.deserialize(reader))
        return message


class VersionedTransaction:
    """Versioned transaction: a v0 message plus its ordered signatures"""

    def __init__(self, message: VersionedMessage, signatures: Optional[List[bytes]] = None):
        if message is None:
            raise ConstructionError("Message cannot be None")
        self.message = message
        self.signatures: List[bytes] = list(signatures or [])

    def add_address_table_lookup(self, lookup: AddressTableLookup) -> 'VersionedTransaction':
        self.message.add_address_table_lookup(lookup)
        return self

    def add_signature(self, signature: Union[bytes, str]) -> None:
        if isinstance(signature, str):
            signature = base58.b58decode(signature)
        if len(signature) != SIGNATURE_LENGTH:
            raise ConstructionError(f"Invalid signature length: {len(signature)}")
        self.signatures.append(bytes(signature))

    def sign(self, signers: Union[Keypair, Sequence[Keypair]]) -> None:
        """Sign the message with every signer, in order.

        Sets the header's required signature count to the number of signers.
        Placing the fee payer at account index 0 is left to the caller.
        """
        signers = as_signer_list(signers)
        self.message.header.num_required_signatures = len(signers)

        payload = self.message.serialize()
        self.signatures = [signer.sign(payload) for signer in signers]
        logger.debug("Signed v%d transaction with %d signers", self.message.version, len(signers))

    @property
    def signature(self) -> Optional[str]:
        """First signature as base58 text, the transaction id"""
        if not self.signatures:
            return None
        return base58.b58encode(self.signatures[0]).decode('ascii')

    def verify_signatures(self) -> bool:
        num_required = self.message.header.num_required_signatures
        if len(self.signatures) != num_required or num_required > len(self.message.account_keys):
            return False
        payload = self.message.serialize()
        return all(
            verify_signature(key, payload, signature)
            for key, signature in zip(self.message.account_keys, self.signatures)
        )

    def serialize(self) -> bytes:
        """Serialize as version prefix, signatures, message bytes"""
        if not self.signatures:
            raise ConstructionError("Transaction has not been signed")
        parts = [bytes([VERSION_PREFIX_MASK | self.message.version])]
        parts.extend(self.signatures)
        parts.append(self.message.serialize())
        return b''.join(parts)

    def to_base64(self) -> str:
        return base64.b64encode(self.serialize()).decode('ascii')

    @classmethod
    def deserialize(cls, data: bytes, num_signatures: Optional[int] = None) -> 'VersionedTransaction':
        """Parse versioned transaction bytes.

        The wire form carries no signature count. Unless ``num_signatures`` is
        given, the signature region is located by finding the first count n
        for which the header after n signatures declares n required
        signatures and the remaining bytes parse as a complete message.
        """
        data = bytes(data)
        if not data:
            raise SerializationError("Empty transaction data", 0)
        prefix = data[0]
        if not prefix & VERSION_PREFIX_MASK:
            raise SerializationError("Missing versioned transaction prefix", 0)
        version = prefix & 0x7f

        if num_signatures is not None:
            return cls._read(data, version, num_signatures)

        count = 0
        while 1 + count * SIGNATURE_LENGTH < len(data):
            if data[1 + count * SIGNATURE_LENGTH] == count:
                try:
                    return cls._read(data, version, count)
                except SerializationError:
                    # not a valid split, try the next count
                    pass
            count += 1
        raise SerializationError("Unable to locate the signature region", 1)

    @classmethod
    def _read(cls, data: bytes, version: int, num_signatures: int) -> 'VersionedTransaction':
        reader = ByteReader(data)
        reader.read(1)
        signatures = [reader.read(SIGNATURE_LENGTH) for _ in range(num_signatures)]
        message = VersionedMessage._read(reader, version)
        reader.expect_end()
        if message.header.num_required_signatures != num_signatures:
            raise SerializationError(
                f"Header requires {message.header.num_required_signatures} signatures, found {num_signatures}",
                1,
            )
        return cls(message, signatures)
