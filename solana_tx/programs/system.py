"""System program instructions"""

import struct

from ..account import AccountMeta
from ..errors import ConstructionError
from ..instruction import TransactionInstruction
from ..publickey import PublicKey

SYSVAR_RENT = PublicKey('SysvarRent111111111111111111111111111111111')
SYSVAR_RECENT_BLOCKHASHES = PublicKey('SysvarRecentB1ockHashes11111111111111111111')


class SystemProgram:
    """Factories for the native system program"""

    PROGRAM_ID = PublicKey('11111111111111111111111111111111')

    CREATE_ACCOUNT = 0
    ASSIGN = 1
    TRANSFER = 2

    @classmethod
    def transfer(cls, from_public_key: PublicKey, to_public_key: PublicKey, lamports: int) -> TransactionInstruction:
        """Move lamports between two accounts"""
        if lamports < 0:
            raise ConstructionError("Lamports must be non-negative")

        keys = [
            AccountMeta(from_public_key, is_signer=True, is_writable=True),
            AccountMeta(to_public_key, is_signer=False, is_writable=True),
        ]
        data = struct.pack('<IQ', cls.TRANSFER, lamports)
        return TransactionInstruction(cls.PROGRAM_ID, keys, data)

    @classmethod
    def create_account(
        cls,
        from_public_key: PublicKey,
        new_account_public_key: PublicKey,
        lamports: int,
        space: int,
        program_id: PublicKey,
    ) -> TransactionInstruction:
        """Create a new account owned by ``program_id``"""
        if lamports < 0 or space < 0:
            raise ConstructionError("Lamports and space must be non-negative")

        keys = [
            AccountMeta(from_public_key, is_signer=True, is_writable=True),
            AccountMeta(new_account_public_key, is_signer=True, is_writable=True),
        ]
        data = struct.pack('<IQQ', cls.CREATE_ACCOUNT, lamports, space) + bytes(PublicKey(program_id))
        return TransactionInstruction(cls.PROGRAM_ID, keys, data)

    @classmethod
    def assign(cls, owner: PublicKey, new_owner: PublicKey) -> TransactionInstruction:
        keys = [AccountMeta(owner, is_signer=True, is_writable=True)]
        data = struct.pack('<I', cls.ASSIGN) + bytes(PublicKey(new_owner))
        return TransactionInstruction(cls.PROGRAM_ID, keys, data)
