"""Instruction factories for native programs"""

from .compute_budget import ComputeBudgetProgram
from .memo import MemoProgram
from .system import SYSVAR_RECENT_BLOCKHASHES, SYSVAR_RENT, SystemProgram

__all__ = [
    'ComputeBudgetProgram',
    'MemoProgram',
    'SystemProgram',
    'SYSVAR_RECENT_BLOCKHASHES',
    'SYSVAR_RENT',
]
