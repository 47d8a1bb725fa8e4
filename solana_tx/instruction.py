"""Instruction descriptor"""

from dataclasses import dataclass
from typing import Sequence, Tuple

from .account import AccountMeta
from .errors import ConstructionError
from .publickey import PublicKey


@dataclass(frozen=True, init=False)
class TransactionInstruction:
    """A single call into a program: target program, accounts and opaque data"""
    program_id: PublicKey
    keys: Tuple[AccountMeta, ...]
    data: bytes = b''

    def __init__(self, program_id: PublicKey, keys: Sequence[AccountMeta], data: bytes = b''):
        if program_id is None:
            raise ConstructionError("Instruction program id is required")
        if keys is None:
            raise ConstructionError("Instruction account list is required")

        object.__setattr__(self, 'program_id', PublicKey(program_id))
        object.__setattr__(self, 'keys', tuple(keys))
        object.__setattr__(self, 'data', bytes(data))
