"""Byte-level helpers shared by the message and transaction decoders"""

import base58

from .constants import BLOCKHASH_LENGTH
from .errors import ConstructionError, SerializationError
from .shortvec import decode_length


class ByteReader:
    """Cursor over a byte buffer that refuses to read past its end"""

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def read(self, size: int) -> bytes:
        if size > self.remaining:
            raise SerializationError(
                f"Unexpected end of data: needed {size} bytes, {self.remaining} left",
                self.offset,
            )
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def read_u8(self) -> int:
        return self.read(1)[0]

    def read_length(self) -> int:
        value, size = decode_length(self.data, self.offset)
        self.offset += size
        return value

    def expect_end(self) -> None:
        if self.remaining:
            raise SerializationError(f"{self.remaining} trailing bytes after message", self.offset)


def decode_blockhash(blockhash: str) -> bytes:
    """Decode base58 blockhash text into its raw 32-byte wire form"""
    try:
        raw = base58.b58decode(blockhash)
    except ValueError as e:
        raise ConstructionError(f"Invalid base58 blockhash: {blockhash!r}") from e
    if len(raw) != BLOCKHASH_LENGTH:
        raise ConstructionError(
            f"Invalid blockhash length: expected {BLOCKHASH_LENGTH}, got {len(raw)}"
        )
    return raw


def encode_blockhash(raw: bytes) -> str:
    return base58.b58encode(raw).decode('ascii')
