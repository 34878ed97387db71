"""
web3.py implementation of the ChainLookup port.

Reads ERC20 metadata, TokenManager wiring and ITS token ids over JSON-RPC.
Every transport or decoding problem is re-raised as LookupFailure so the
validator can report it without aborting the batch.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional

import requests
from eth_utils import to_bytes, to_checksum_address, to_hex
from web3 import Web3
from web3.exceptions import Web3Exception

from its_registry.core import config
from its_registry.core.lookup_ports import ManagerInfo, TokenMetadata
from its_registry.core.registry_exceptions import LookupFailure

logger = logging.getLogger(__name__)

ERC20_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "name",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "type": "function",
    },
]

ITS_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "sender", "type": "address"},
            {"internalType": "bytes32", "name": "salt", "type": "bytes32"},
        ],
        "name": "interchainTokenId",
        "outputs": [{"internalType": "bytes32", "name": "tokenId", "type": "bytes32"}],
        "stateMutability": "pure",
        "type": "function",
    },
]

TOKEN_MANAGER_ABI = [
    {
        "inputs": [],
        "name": "tokenAddress",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "implementationType",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

# Errors a JSON-RPC read can surface: node/ABI errors, HTTP transport, bad hex/address
_RPC_ERRORS = (Web3Exception, requests.RequestException, ValueError, TypeError, OverflowError)


def _default_web3_factory(endpoint: str, timeout: float) -> Web3:
    return Web3(Web3.HTTPProvider(endpoint, request_kwargs={"timeout": timeout}))


class Web3ChainLookup:
    """ChainLookup backed by one HTTP Web3 client per endpoint."""

    def __init__(
        self,
        *,
        its_address: str | None = None,
        timeout: float | None = None,
        web3_factory: Optional[Callable[[str, float], Web3]] = None,
    ) -> None:
        self.its_address = its_address or config.ITS_CONTRACT_ADDRESS
        self.timeout = timeout or config.get_rpc_timeout()
        self._web3_factory = web3_factory or _default_web3_factory
        self._clients: Dict[str, Web3] = {}
        self._lock = threading.Lock()

    def _w3(self, endpoint: str) -> Web3:
        with self._lock:
            client = self._clients.get(endpoint)
            if client is None:
                client = self._web3_factory(endpoint, self.timeout)
                self._clients[endpoint] = client
            return client

    def _call(self, description: str, endpoint: str, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except _RPC_ERRORS as exc:
            logger.warning(
                "RPC call failed: %s",
                description,
                extra={"endpoint": endpoint, "error_type": type(exc).__name__},
            )
            raise LookupFailure(
                f"{description} failed: {exc}",
                details={"endpoint": endpoint, "error_type": type(exc).__name__},
            ) from exc

    def has_contract_code(self, endpoint: str, address: str) -> bool:
        w3 = self._w3(endpoint)
        code = self._call(
            f"getCode({address})",
            endpoint,
            lambda: w3.eth.get_code(to_checksum_address(address)),
        )
        return len(code) > 0

    def read_token_metadata(self, endpoint: str, address: str) -> TokenMetadata:
        w3 = self._w3(endpoint)

        def _read() -> TokenMetadata:
            contract = w3.eth.contract(address=to_checksum_address(address), abi=ERC20_ABI)
            return TokenMetadata(
                name=contract.functions.name().call(),
                symbol=contract.functions.symbol().call(),
                decimals=int(contract.functions.decimals().call()),
            )

        return self._call(f"ERC20 metadata read at {address}", endpoint, _read)

    def read_manager_info(self, endpoint: str, address: str) -> ManagerInfo:
        w3 = self._w3(endpoint)

        def _read() -> ManagerInfo:
            contract = w3.eth.contract(address=to_checksum_address(address), abi=TOKEN_MANAGER_ABI)
            return ManagerInfo(
                managed_token_address=contract.functions.tokenAddress().call(),
                implementation_type=int(contract.functions.implementationType().call()),
            )

        return self._call(f"Token manager read at {address}", endpoint, _read)

    def recompute_token_id(self, endpoint: str, deployer: str, salt: str) -> str:
        w3 = self._w3(endpoint)

        def _read() -> str:
            contract = w3.eth.contract(address=to_checksum_address(self.its_address), abi=ITS_ABI)
            token_id = contract.functions.interchainTokenId(
                to_checksum_address(deployer), to_bytes(hexstr=salt)
            ).call()
            return to_hex(token_id)

        return self._call(f"interchainTokenId({deployer}, {salt})", endpoint, _read)
