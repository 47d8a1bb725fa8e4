"""Account address value type"""

import hashlib
from typing import List, Tuple, Union

import base58
from nacl.bindings import crypto_core_ed25519_is_valid_point

from .constants import PUBLIC_KEY_LENGTH
from .errors import ConstructionError

MAX_SEED_LENGTH = 32
PDA_MARKER = b'ProgramDerivedAddress'


class PublicKey:
    """32-byte account address.

    Accepts raw bytes, base58 text or another PublicKey. Equality and hashing
    are defined on the raw bytes, so two keys built from different inputs that
    decode to the same address are the same key.
    """

    __slots__ = ('_key',)

    def __init__(self, value: Union[str, bytes, bytearray, 'PublicKey']):
        if isinstance(value, PublicKey):
            key = value._key
        elif isinstance(value, str):
            try:
                key = base58.b58decode(value)
            except ValueError as e:
                raise ConstructionError(f"Invalid base58 public key: {value!r}") from e
        elif isinstance(value, (bytes, bytearray)):
            key = bytes(value)
        else:
            raise ConstructionError(f"Unsupported public key input: {type(value).__name__}")

        if len(key) != PUBLIC_KEY_LENGTH:
            raise ConstructionError(
                f"Invalid public key length: expected {PUBLIC_KEY_LENGTH}, got {len(key)}"
            )
        self._key = key

    def __bytes__(self) -> bytes:
        return self._key

    def __eq__(self, other) -> bool:
        if isinstance(other, PublicKey):
            return self._key == other._key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return self.to_base58()

    def __repr__(self) -> str:
        return f"PublicKey({self.to_base58()!r})"

    def to_base58(self) -> str:
        return base58.b58encode(self._key).decode('ascii')

    @classmethod
    def create_program_address(cls, seeds: List[bytes], program_id: 'PublicKey') -> 'PublicKey':
        """Derive a program address from seeds; the result must be off the ed25519 curve"""
        buffer = bytearray()
        for seed in seeds:
            if len(seed) > MAX_SEED_LENGTH:
                raise ConstructionError(f"Max seed length exceeded: {len(seed)}")
            buffer.extend(seed)
        buffer.extend(bytes(program_id))
        buffer.extend(PDA_MARKER)

        digest = hashlib.sha256(bytes(buffer)).digest()
        if crypto_core_ed25519_is_valid_point(digest):
            raise ConstructionError("Invalid seeds, address must fall off the curve")
        return cls(digest)

    @classmethod
    def find_program_address(cls, seeds: List[bytes], program_id: 'PublicKey') -> Tuple['PublicKey', int]:
        """Find the first valid program address, searching bump seeds from 255 down"""
        for nonce in range(255, -1, -1):
            try:
                address = cls.create_program_address(list(seeds) + [bytes([nonce])], program_id)
            except ConstructionError:
                continue
            return address, nonce
        raise ConstructionError("Unable to find a viable program address nonce")
