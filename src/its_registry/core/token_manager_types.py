"""
Token manager implementation types.

The integer value of each member is what a TokenManager contract returns
from implementationType(). The ordering is a protocol constant shared with
the on-chain contracts: reordering or inserting members silently breaks
every manager-type check, so treat any change here as a version bump.
"""

from __future__ import annotations

from enum import IntEnum

TOKEN_MANAGER_TYPES_VERSION = 1

UNKNOWN_TYPE_NAME = "Unknown"


class TokenManagerType(IntEnum):
    NATIVE_INTERCHAIN_TOKEN = 0
    MINT_BURN_FROM = 1
    LOCK_UNLOCK = 2
    LOCK_UNLOCK_FEE = 3
    MINT_BURN = 4
    GATEWAY = 5

    @property
    def registry_name(self) -> str:
        """Name as written in registry records, e.g. ``mintBurn``."""
        return _REGISTRY_NAMES[self]

    @classmethod
    def from_registry_name(cls, name: str) -> "TokenManagerType":
        try:
            return _BY_REGISTRY_NAME[name]
        except KeyError:
            raise ValueError(f"Unknown token manager type: {name!r}") from None


_REGISTRY_NAMES = {
    TokenManagerType.NATIVE_INTERCHAIN_TOKEN: "nativeInterchainToken",
    TokenManagerType.MINT_BURN_FROM: "mintBurnFrom",
    TokenManagerType.LOCK_UNLOCK: "lockUnlock",
    TokenManagerType.LOCK_UNLOCK_FEE: "lockUnlockFee",
    TokenManagerType.MINT_BURN: "mintBurn",
    TokenManagerType.GATEWAY: "gateway",
}
_BY_REGISTRY_NAME = {name: member for member, name in _REGISTRY_NAMES.items()}

REGISTRY_NAMES = tuple(_REGISTRY_NAMES[member] for member in TokenManagerType)


def code_of(name: str) -> int:
    """Return the on-chain code for a registry manager type name.

    Raises:
        ValueError: If the name is not one of the six manager types
    """
    return int(TokenManagerType.from_registry_name(name))


def name_of(code: int) -> str:
    """Return the registry name for an on-chain code, or ``Unknown``."""
    try:
        return TokenManagerType(code).registry_name
    except ValueError:
        return UNKNOWN_TYPE_NAME


def is_known_type(name: str) -> bool:
    return name in _BY_REGISTRY_NAME
