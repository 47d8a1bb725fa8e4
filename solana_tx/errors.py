"""Error types raised by the transaction SDK"""

from typing import Optional


class SolanaTxError(Exception):
    """Base exception for all SDK errors"""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConstructionError(SolanaTxError, ValueError):
    """Transaction or message cannot be built from the given inputs"""
    pass


class AccountIndexError(SolanaTxError, RuntimeError):
    """An instruction references an address missing from the account table.

    Raised only when an internal invariant is broken; correct use of the
    public API never produces it.
    """

    def __init__(self, address: str):
        super().__init__(f"Unable to find account index for {address}", {"address": address})
        self.address = address


class SerializationError(SolanaTxError, ValueError):
    """Byte input is truncated or malformed"""

    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message, {"offset": offset} if offset is not None else None)
        self.offset = offset


class RpcError(SolanaTxError):
    """RPC Error"""

    def __init__(self, code: int, message: str):
        super().__init__(f"RPC Error {code}: {message}", {"code": code})
        self.code = code
        self.rpc_message = message
