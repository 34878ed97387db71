"""
Tests for environment-driven settings
"""

import pytest

from its_registry.core import config
from its_registry.core.config import ConfigurationError


def test_timeout_defaults(monkeypatch):
    monkeypatch.delenv("ITS_RPC_TIMEOUT", raising=False)
    monkeypatch.delenv("ITS_HTTP_TIMEOUT", raising=False)

    assert config.get_rpc_timeout() == config.DEFAULT_RPC_TIMEOUT
    assert config.get_http_timeout() == config.DEFAULT_HTTP_TIMEOUT


def test_timeout_read_on_each_call(monkeypatch):
    monkeypatch.setenv("ITS_RPC_TIMEOUT", "2.5")
    assert config.get_rpc_timeout() == 2.5


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_invalid_timeout(monkeypatch, raw):
    monkeypatch.setenv("ITS_HTTP_TIMEOUT", raw)
    with pytest.raises(ConfigurationError, match="ITS_HTTP_TIMEOUT"):
        config.get_http_timeout()
