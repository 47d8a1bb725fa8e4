"""Compute budget program instructions"""

import struct

from ..instruction import TransactionInstruction
from ..publickey import PublicKey


class ComputeBudgetProgram:
    PROGRAM_ID = PublicKey('ComputeBudget111111111111111111111111111111')

    SET_COMPUTE_UNIT_LIMIT = 2
    SET_COMPUTE_UNIT_PRICE = 3

    @classmethod
    def set_compute_unit_limit(cls, units: int) -> TransactionInstruction:
        data = struct.pack('<BI', cls.SET_COMPUTE_UNIT_LIMIT, units)
        return TransactionInstruction(cls.PROGRAM_ID, [], data)

    @classmethod
    def set_compute_unit_price(cls, micro_lamports: int) -> TransactionInstruction:
        """Priority fee in micro-lamports per compute unit"""
        data = struct.pack('<BQ', cls.SET_COMPUTE_UNIT_PRICE, micro_lamports)
        return TransactionInstruction(cls.PROGRAM_ID, [], data)
