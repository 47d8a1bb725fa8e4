"""Address lookup table references for versioned messages"""

from typing import Iterable, List

from .constants import MAX_ACCOUNT_INDEX, PUBLIC_KEY_LENGTH
from .errors import ConstructionError
from .publickey import PublicKey
from .shortvec import encode_length
from .utils import ByteReader


def _validate_indexes(indexes: Iterable[int], kind: str) -> List[int]:
    if indexes is None:
        raise ConstructionError(f"{kind.capitalize()} indexes cannot be None")
    result = []
    for index in indexes:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= MAX_ACCOUNT_INDEX:
            raise ConstructionError(
                f"{kind.capitalize()} index must be between 0 and {MAX_ACCOUNT_INDEX}",
                {"index": index},
            )
        result.append(index)
    return result


class AddressTableLookup:
    """Reference to an on-chain address lookup table.

    The indexes point into the lookup table account's own address list and
    are resolved by the network at execution time, never against the
    message's account keys.
    """

    def __init__(self, account_key: PublicKey, writable_indexes: Iterable[int], readonly_indexes: Iterable[int]):
        if account_key is None:
            raise ConstructionError("Lookup table address cannot be None")
        self.account_key = PublicKey(account_key)
        self.writable_indexes = _validate_indexes(writable_indexes, 'writable')
        self.readonly_indexes = _validate_indexes(readonly_indexes, 'readonly')

    @property
    def serialized_size(self) -> int:
        return (
            PUBLIC_KEY_LENGTH
            + len(encode_length(len(self.writable_indexes)))
            + len(self.writable_indexes)
            + len(encode_length(len(self.readonly_indexes)))
            + len(self.readonly_indexes)
        )

    def serialize(self) -> bytes:
        return b''.join([
            bytes(self.account_key),
            encode_length(len(self.writable_indexes)),
            bytes(self.writable_indexes),
            encode_length(len(self.readonly_indexes)),
            bytes(self.readonly_indexes),
        ])

    @classmethod
    def deserialize(cls, reader: ByteReader) -> 'AddressTableLookup':
        account_key = PublicKey(reader.read(PUBLIC_KEY_LENGTH))
        writable = list(reader.read(reader.read_length()))
        readonly = list(reader.read(reader.read_length()))
        return cls(account_key, writable, readonly)

    def __eq__(self, other) -> bool:
        if not isinstance(other, AddressTableLookup):
            return NotImplemented
        return (
            self.account_key == other.account_key
            and self.writable_indexes == other.writable_indexes
            and self.readonly_indexes == other.readonly_indexes
        )

    def __repr__(self) -> str:
        return (
            f"AddressTableLookup({self.account_key.to_base58()!r}, "
            f"writable={self.writable_indexes}, readonly={self.readonly_indexes})"
        )
