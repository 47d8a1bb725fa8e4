"""RPC boundary for submitting serialized transactions"""

import logging
from enum import Enum
from typing import Any, Dict, Optional, Union

import httpx

from .errors import RpcError
from .transaction import Transaction
from .versioned import VersionedTransaction

logger = logging.getLogger(__name__)


class Cluster(Enum):
    """Public RPC endpoints"""
    DEVNET = 'https://api.devnet.solana.com'
    TESTNET = 'https://api.testnet.solana.com'
    MAINNET = 'https://api.mainnet-beta.solana.com'
    LOCALNET = 'http://127.0.0.1:8899'


class RpcClient:
    """Minimal JSON-RPC client: fetch a blockhash, submit transactions"""

    def __init__(
        self,
        rpc_url: Union[str, Cluster],
        timeout: int = 30,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.rpc_url = rpc_url.value if isinstance(rpc_url, Cluster) else rpc_url
        self.timeout = timeout
        self._transport = transport
        self._request_id = 1

    def _call(self, method: str, params: Optional[Any] = None) -> Any:
        """Make an RPC call"""
        request = {
            'jsonrpc': '2.0',
            'id': self._request_id,
            'method': method,
        }
        if params is not None:
            request['params'] = params
        self._request_id += 1

        logger.debug("RPC %s -> %s", method, self.rpc_url)
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.post(self.rpc_url, json=request)
            response.raise_for_status()

            result = response.json()

            if 'error' in result:
                error = result['error']
                raise RpcError(error['code'], error['message'])

            return result.get('result')

    def get_latest_blockhash(self, commitment: str = 'finalized') -> str:
        """Get latest blockhash as base58 text"""
        result = self._call('getLatestBlockhash', [{'commitment': commitment}])
        return result['value']['blockhash']

    def send_transaction(
        self,
        transaction: Union[Transaction, VersionedTransaction],
        skip_preflight: bool = False,
    ) -> str:
        """Send a signed transaction; returns its first signature"""
        config: Dict[str, Any] = {'encoding': 'base64', 'skipPreflight': skip_preflight}
        return self._call('sendTransaction', [transaction.to_base64(), config])
