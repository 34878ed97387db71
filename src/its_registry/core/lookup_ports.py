"""
Lookup Port Interfaces - Decoupling the validator from RPC and HTTP clients.

The record validator only depends on these protocols. Production wiring
uses the web3 and CoinGecko adapters; tests pass fixture-serving doubles.

Every method either returns a value or raises LookupFailure. A port never
reports a mismatch itself, it only reports what it observed.

Usage:
    validator = RecordValidator(
        chain_directory=ChainDirectory.from_yaml(path),
        chain_lookup=Web3ChainLookup(),
        metadata_lookup=CoinGeckoClient(),
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TokenMetadata:
    """ERC20 metadata as reported by the token contract."""

    name: str
    symbol: str
    decimals: int


@dataclass(frozen=True)
class ManagerInfo:
    """Wiring reported by a TokenManager contract."""

    managed_token_address: str
    implementation_type: int


@dataclass(frozen=True)
class ExternalMetadata:
    """Third-party metadata for a token (CoinGecko coin entry)."""

    external_id: str
    symbol: str
    name: str | None = None


@runtime_checkable
class EndpointResolver(Protocol):
    """Maps an Axelar chain id to an RPC endpoint."""

    def resolve(self, chain_id: str) -> str | None:
        """Return the endpoint URL, or None if the chain is unknown."""
        ...


@runtime_checkable
class ChainLookup(Protocol):
    """On-chain reads against a single RPC endpoint per call."""

    def has_contract_code(self, endpoint: str, address: str) -> bool:
        """True if the address holds deployed bytecode."""
        ...

    def read_token_metadata(self, endpoint: str, address: str) -> TokenMetadata:
        """Read name/symbol/decimals from an ERC20-like contract."""
        ...

    def read_manager_info(self, endpoint: str, address: str) -> ManagerInfo:
        """Read tokenAddress()/implementationType() from a TokenManager."""
        ...

    def recompute_token_id(self, endpoint: str, deployer: str, salt: str) -> str:
        """Ask the chain's ITS contract for interchainTokenId(deployer, salt)."""
        ...


@runtime_checkable
class MetadataLookup(Protocol):
    """Third-party token metadata service."""

    def fetch_external_metadata(self, external_id: str) -> ExternalMetadata | None:
        """Return metadata, or None if the id does not exist."""
        ...


@runtime_checkable
class IconLookup(Protocol):
    """Fetches token icon resources."""

    def fetch_content_type(self, url: str) -> str:
        """Return the Content-Type of a successfully fetched URL."""
        ...
