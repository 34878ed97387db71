"""
ITS Registry Validator Configuration

All settings come from environment variables with mainnet defaults.

SECURITY NOTICE:
- The CoinGecko API key MUST be provided via ITS_COINGECKO_API_KEY
- Never commit API keys to version control
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_float_env(env_var: str, default: float) -> float:
    """Read a positive float from the environment."""
    raw = os.getenv(env_var, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{env_var} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{env_var} must be positive, got {value}")
    return value


# Interchain Token Service proxy; same address on every supported EVM chain
ITS_CONTRACT_ADDRESS = os.getenv(
    "ITS_CONTRACT_ADDRESS", "0xB5FB4BE02232B1bBA4dC8f81dc24C26980dE9e3C"
)

COINGECKO_API_URL = os.getenv("ITS_COINGECKO_API_URL", "https://api.coingecko.com/api/v3").rstrip("/")
COINGECKO_API_KEY = os.getenv("ITS_COINGECKO_API_KEY", "").strip()

CHAIN_CONFIGS_URL = os.getenv(
    "ITS_CHAIN_CONFIGS_URL",
    "https://axelar-mainnet.s3.us-east-2.amazonaws.com/configs/mainnet-config-1.x.json",
)
CHAINS_FILE = Path(
    os.getenv("ITS_CHAINS_FILE", str(Path(__file__).resolve().parent.parent / "config" / "chains.yaml"))
)
# Per-chain override, e.g. ITS_RPC_ETHEREUM=https://...
RPC_OVERRIDE_PREFIX = "ITS_RPC_"

DEFAULT_RPC_TIMEOUT = 15.0
DEFAULT_HTTP_TIMEOUT = 10.0


# Read on use; invalid values raise ConfigurationError
def get_rpc_timeout() -> float:
    return _get_float_env("ITS_RPC_TIMEOUT", DEFAULT_RPC_TIMEOUT)


def get_http_timeout() -> float:
    return _get_float_env("ITS_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)


TOKENS_FILE = os.getenv("ITS_TOKENS_FILE", "new_tokens.json")
ERROR_LOG_PATH = os.getenv("ITS_ERROR_LOG", "validation_errors.txt")
LOG_LEVEL = os.getenv("ITS_LOG_LEVEL", "WARNING").upper()


@dataclass(frozen=True)
class ValidatorSettings:
    """Per-run toggles for the record validator."""

    # A record without coinGeckoId is reported unless this is disabled
    require_coingecko_id: bool = True
    check_icons: bool = True


if not COINGECKO_API_KEY:
    logger.debug(
        "ITS_COINGECKO_API_KEY not set, CoinGecko requests will be unauthenticated",
        extra={"event": "config.coingecko_key_missing"},
    )
