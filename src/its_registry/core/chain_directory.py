"""
Chain directory: Axelar chain id -> JSON-RPC endpoint.

The static table ships as ``config/chains.yaml``. Axelar's published
mainnet config can be layered on top for chains missing from the table,
and ``ITS_RPC_<CHAIN_ID>`` environment variables win over both.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import requests
import yaml

from its_registry.core import config
from its_registry.core.registry_exceptions import ChainDirectoryError

logger = logging.getLogger(__name__)


def _env_key(chain_id: str) -> str:
    return config.RPC_OVERRIDE_PREFIX + chain_id.upper().replace("-", "_")


class ChainDirectory:
    """Immutable chain id -> endpoint mapping."""

    def __init__(self, endpoints: Mapping[str, str]) -> None:
        self._endpoints: Dict[str, str] = {
            chain_id: url for chain_id, url in endpoints.items() if url
        }

    def resolve(self, chain_id: str) -> Optional[str]:
        override = os.getenv(_env_key(chain_id), "").strip()
        if override:
            return override
        return self._endpoints.get(chain_id)

    def __contains__(self, chain_id: object) -> bool:
        return isinstance(chain_id, str) and self.resolve(chain_id) is not None

    def __len__(self) -> int:
        return len(self._endpoints)

    @property
    def chain_ids(self) -> list[str]:
        return sorted(self._endpoints)

    def merged_with(self, other: "ChainDirectory") -> "ChainDirectory":
        """Return a directory where entries of ``self`` take precedence."""
        combined = dict(other._endpoints)
        combined.update(self._endpoints)
        return ChainDirectory(combined)

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> "ChainDirectory":
        """
        Load the static chain table.

        Accepts either ``{chains: {id: {rpc: url}}}`` or a flat ``{id: url}``
        mapping.

        Raises:
            ChainDirectoryError: If the file is missing or malformed
        """
        path = Path(path) if path else config.CHAINS_FILE
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ChainDirectoryError(f"Cannot read chain table {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ChainDirectoryError(f"Chain table {path} must contain a mapping")

        chains = data.get("chains", data)
        if not isinstance(chains, dict):
            raise ChainDirectoryError(f"'chains' in {path} must be a mapping")

        endpoints: Dict[str, str] = {}
        for chain_id, entry in chains.items():
            if isinstance(entry, str):
                endpoints[str(chain_id)] = entry
            elif isinstance(entry, dict) and isinstance(entry.get("rpc"), str):
                endpoints[str(chain_id)] = entry["rpc"]
            else:
                raise ChainDirectoryError(f"Chain '{chain_id}' in {path} has no rpc url")

        logger.debug("Loaded chain table", extra={"path": str(path), "chains": len(endpoints)})
        return cls(endpoints)

    @classmethod
    def from_axelar_config(
        cls,
        url: str | None = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: float | None = None,
    ) -> "ChainDirectory":
        """
        Build a directory from Axelar's published network config.

        Each chain's first ``config.rpc`` entry is used.

        Raises:
            ChainDirectoryError: If the config cannot be fetched or parsed
        """
        url = url or config.CHAIN_CONFIGS_URL
        http = session or requests.Session()
        try:
            response = http.get(url, timeout=timeout or config.get_http_timeout())
            response.raise_for_status()
            payload: Any = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise ChainDirectoryError(f"Error fetching chain configs from {url}: {exc}") from exc

        chains = payload.get("chains") if isinstance(payload, dict) else None
        if not isinstance(chains, dict):
            raise ChainDirectoryError(f"Chain config at {url} has no 'chains' mapping")

        endpoints: Dict[str, str] = {}
        for chain_id, entry in chains.items():
            try:
                rpc = entry["config"]["rpc"][0]
            except (KeyError, IndexError, TypeError):
                logger.debug("Skipping chain without rpc", extra={"chain_id": chain_id})
                continue
            if isinstance(rpc, str) and rpc:
                endpoints[chain_id] = rpc

        logger.info("Loaded remote chain configs", extra={"url": url, "chains": len(endpoints)})
        return cls(endpoints)
