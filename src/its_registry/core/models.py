"""
Token registry data model.

Records arrive as camelCase JSON objects keyed by tokenId; ``from_dict``
turns them into immutable dataclasses and rejects structurally broken
input with RecordFormatError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from its_registry.core.registry_exceptions import RecordFormatError


def _require_str(data: Mapping[str, Any], key: str, where: str) -> str:
    if key not in data:
        raise RecordFormatError(f"Missing field '{key}' in {where}")
    value = data[key]
    if not isinstance(value, str):
        raise RecordFormatError(
            f"Field '{key}' in {where} must be a string, got {type(value).__name__}"
        )
    return value


def _optional_str(data: Mapping[str, Any], key: str, where: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise RecordFormatError(
            f"Field '{key}' in {where} must be a string, got {type(value).__name__}"
        )
    return value


def _informational_str(data: Mapping[str, Any], key: str) -> str | None:
    # Never validated; a non-string value is dropped rather than rejected
    value = data.get(key)
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class ChainEntry:
    axelar_chain_id: str
    name: str
    symbol: str
    token_address: str
    token_manager: str
    token_manager_type: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "chain entry") -> "ChainEntry":
        if not isinstance(data, Mapping):
            raise RecordFormatError(f"{where} must be an object")
        return cls(
            axelar_chain_id=_require_str(data, "axelarChainId", where),
            name=_require_str(data, "name", where),
            symbol=_require_str(data, "symbol", where),
            token_address=_require_str(data, "tokenAddress", where),
            token_manager=_require_str(data, "tokenManager", where),
            token_manager_type=_require_str(data, "tokenManagerType", where),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "axelarChainId": self.axelar_chain_id,
            "name": self.name,
            "symbol": self.symbol,
            "tokenAddress": self.token_address,
            "tokenManager": self.token_manager,
            "tokenManagerType": self.token_manager_type,
        }


@dataclass(frozen=True)
class IconUrls:
    svg: str | None = None


@dataclass(frozen=True)
class TokenRecord:
    token_id: str
    deployer: str
    deploy_salt: str
    pretty_symbol: str
    decimals: int
    origin_axelar_chain_id: str
    chains: tuple[ChainEntry, ...]
    coin_gecko_id: str | None = None
    icon_urls: IconUrls = field(default_factory=IconUrls)
    # Informational only, never validated
    original_minter: str | None = None
    token_type: str | None = None
    deployment_message_id: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], token_id: str | None = None) -> "TokenRecord":
        """
        Parse a raw registry record.

        Args:
            data: The JSON object for one token
            token_id: Registry key the record was stored under, used in messages

        Raises:
            RecordFormatError: If required fields are missing or mistyped
        """
        where = f"token {token_id}" if token_id else "token record"
        if not isinstance(data, Mapping):
            raise RecordFormatError(f"{where} must be an object", token_id=token_id)

        try:
            decimals = data.get("decimals")
            if "decimals" not in data:
                raise RecordFormatError(f"Missing field 'decimals' in {where}")
            if isinstance(decimals, bool) or not isinstance(decimals, int):
                raise RecordFormatError(f"Field 'decimals' in {where} must be an integer, got {decimals!r}")

            raw_chains = data.get("chains")
            if not isinstance(raw_chains, list) or not raw_chains:
                raise RecordFormatError(f"Field 'chains' in {where} must be a non-empty list")
            chains = tuple(
                ChainEntry.from_dict(entry, where=f"{where} chains[{index}]")
                for index, entry in enumerate(raw_chains)
            )

            raw_icons = data.get("iconUrls") or {}
            if not isinstance(raw_icons, Mapping):
                raise RecordFormatError(f"Field 'iconUrls' in {where} must be an object")

            return cls(
                token_id=_require_str(data, "tokenId", where),
                deployer=_require_str(data, "deployer", where),
                deploy_salt=_require_str(data, "deploySalt", where),
                pretty_symbol=_require_str(data, "prettySymbol", where),
                decimals=decimals,
                origin_axelar_chain_id=_require_str(data, "originAxelarChainId", where),
                chains=chains,
                coin_gecko_id=_optional_str(data, "coinGeckoId", where) or None,
                icon_urls=IconUrls(svg=_optional_str(raw_icons, "svg", f"{where} iconUrls") or None),
                original_minter=_informational_str(data, "originalMinter"),
                token_type=_informational_str(data, "tokenType"),
                deployment_message_id=_informational_str(data, "deploymentMessageId"),
            )
        except RecordFormatError as exc:
            if exc.token_id is None:
                exc.token_id = token_id
            raise

    @property
    def origin_entries(self) -> list[ChainEntry]:
        return [entry for entry in self.chains if entry.axelar_chain_id == self.origin_axelar_chain_id]

    def is_origin(self, entry: ChainEntry) -> bool:
        return entry.axelar_chain_id == self.origin_axelar_chain_id
