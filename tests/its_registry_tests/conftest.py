import sys
from pathlib import Path

import pytest

# Make the shared lookup doubles importable as `fakes`
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fakes import (  # noqa: E402
    ENDPOINTS,
    FixtureMetadataLookup,
    healthy_chain_lookup,
    sample_record,
)
from its_registry.core.chain_directory import ChainDirectory  # noqa: E402
from its_registry.core.config import ValidatorSettings  # noqa: E402
from its_registry.core.record_validator import RecordValidator  # noqa: E402


@pytest.fixture(autouse=True)
def _no_rpc_overrides(monkeypatch):
    """Keep ITS_RPC_* variables from the developer shell out of the tests."""
    for chain_id in ENDPOINTS:
        monkeypatch.delenv(f"ITS_RPC_{chain_id.upper()}", raising=False)


@pytest.fixture
def chain_directory():
    return ChainDirectory(ENDPOINTS)


@pytest.fixture
def chain_lookup():
    return healthy_chain_lookup()


@pytest.fixture
def metadata_lookup():
    return FixtureMetadataLookup()


@pytest.fixture
def record_data():
    return sample_record()


@pytest.fixture
def validator(chain_directory, chain_lookup, metadata_lookup):
    """RecordValidator wired to fixture lookups; icon checks are off unless a test adds them."""
    return RecordValidator(
        chain_directory=chain_directory,
        chain_lookup=chain_lookup,
        metadata_lookup=metadata_lookup,
        settings=ValidatorSettings(),
    )
