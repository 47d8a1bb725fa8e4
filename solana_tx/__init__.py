"""Transaction construction, signing and wire serialization SDK"""

import logging

from .account import AccountKeysList, AccountMeta, Ordering
from .client import Cluster, RpcClient
from .errors import (
    AccountIndexError,
    ConstructionError,
    RpcError,
    SerializationError,
    SolanaTxError,
)
from .instruction import TransactionInstruction
from .keypair import Keypair
from .lookup import AddressTableLookup
from .message import CompiledInstruction, Message, MessageHeader
from .publickey import PublicKey
from .transaction import Transaction, TransactionBuilder, VersionedTransactionBuilder
from .versioned import VersionedMessage, VersionedTransaction

__version__ = '0.1.0'

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'AccountIndexError',
    'AccountKeysList',
    'AccountMeta',
    'AddressTableLookup',
    'Cluster',
    'CompiledInstruction',
    'ConstructionError',
    'Keypair',
    'Message',
    'MessageHeader',
    'Ordering',
    'PublicKey',
    'RpcClient',
    'RpcError',
    'SerializationError',
    'SolanaTxError',
    'Transaction',
    'TransactionBuilder',
    'TransactionInstruction',
    'VersionedMessage',
    'VersionedTransaction',
    'VersionedTransactionBuilder',
]
