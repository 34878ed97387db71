"""
Tests for the token manager type table
"""

import pytest
from hypothesis import given, strategies as st

from its_registry.core.token_manager_types import (
    REGISTRY_NAMES,
    UNKNOWN_TYPE_NAME,
    TokenManagerType,
    code_of,
    is_known_type,
    name_of,
)


@pytest.mark.parametrize(
    "name,code",
    [
        ("nativeInterchainToken", 0),
        ("mintBurnFrom", 1),
        ("lockUnlock", 2),
        ("lockUnlockFee", 3),
        ("mintBurn", 4),
        ("gateway", 5),
    ],
)
def test_codes_match_contract_enum(name, code):
    assert code_of(name) == code
    assert name_of(code) == name
    assert TokenManagerType(code).registry_name == name


def test_registry_names_in_code_order():
    assert REGISTRY_NAMES == (
        "nativeInterchainToken",
        "mintBurnFrom",
        "lockUnlock",
        "lockUnlockFee",
        "mintBurn",
        "gateway",
    )


@pytest.mark.parametrize("name", ["MintBurn", "mint_burn", "burnMint", ""])
def test_unknown_names_are_rejected(name):
    assert not is_known_type(name)
    with pytest.raises(ValueError):
        code_of(name)


@given(st.integers().filter(lambda code: not 0 <= code <= 5))
def test_out_of_range_codes_are_unknown(code):
    assert name_of(code) == UNKNOWN_TYPE_NAME


@given(st.sampled_from(REGISTRY_NAMES))
def test_name_code_round_trip(name):
    assert name_of(code_of(name)) == name
