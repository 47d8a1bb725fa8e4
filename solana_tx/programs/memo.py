"""Memo program instructions"""

from ..account import AccountMeta
from ..instruction import TransactionInstruction
from ..publickey import PublicKey


class MemoProgram:
    PROGRAM_ID = PublicKey('Memo1UhkJRfHyvLMcVucJwxXeuD728EqVDDwQDxFMNo')
    PROGRAM_ID_V2 = PublicKey('MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr')

    @classmethod
    def write_utf8(cls, account: PublicKey, memo: str) -> TransactionInstruction:
        """Attach a UTF-8 memo signed by ``account``"""
        keys = [AccountMeta(account, is_signer=True, is_writable=False)]
        return TransactionInstruction(cls.PROGRAM_ID, keys, memo.encode('utf-8'))
