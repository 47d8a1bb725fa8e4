"""Compact-length (shortvec) integer encoding used for every list prefix"""

from typing import Tuple

from .errors import SerializationError


def encode_length(length: int) -> bytes:
    """Encode a non-negative integer as 7-bit groups with a continuation bit"""
    if length < 0:
        raise ValueError(f"Length must be non-negative, got {length}")

    result = []
    while length > 0x7f:
        result.append((length & 0x7f) | 0x80)
        length >>= 7
    result.append(length)
    return bytes(result)


def decode_length(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Decode a compact-length integer starting at ``offset``.

    Returns:
        Tuple of (value, number of bytes consumed)
    """
    value = 0
    size = 0
    while True:
        if offset + size >= len(data):
            raise SerializationError("Unexpected end of data while decoding length", offset + size)
        elem = data[offset + size]
        value |= (elem & 0x7f) << (7 * size)
        size += 1
        if elem & 0x80 == 0:
            return value, size
