import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from fakes import (
    BASE_ENDPOINT,
    BASE_TOKEN,
    ETH_ENDPOINT,
    MANAGER,
    TOKEN_ID,
    FixtureIconLookup,
    FixtureMetadataLookup,
    healthy_chain_lookup,
    sample_record,
)
from its_registry.cli import main as cli_main
from its_registry.cli.main import cli
from its_registry.core.lookup_ports import ManagerInfo


class FixtureCoinGecko(FixtureMetadataLookup, FixtureIconLookup):
    """Stands in for CoinGeckoClient, which serves both metadata and icons."""

    def __init__(self):
        FixtureMetadataLookup.__init__(self)
        self.icons = {"https://icons.test/cfg.svg": "image/svg+xml"}

    def fetch_content_type(self, url):
        return self.icons[url]


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """Drop handlers bound to the runner's captured streams."""
    yield
    logging.getLogger("its_registry").handlers = []


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "chains.yaml").write_text(
        f"chains:\n  ethereum:\n    rpc: {ETH_ENDPOINT}\n  base:\n    rpc: {BASE_ENDPOINT}\n"
    )
    (tmp_path / "new_tokens.json").write_text(json.dumps({TOKEN_ID: sample_record()}))
    return tmp_path


@pytest.fixture
def chain_lookup(monkeypatch):
    lookup = healthy_chain_lookup()
    monkeypatch.setattr(cli_main, "Web3ChainLookup", lambda: lookup)
    monkeypatch.setattr(cli_main, "CoinGeckoClient", FixtureCoinGecko)
    return lookup


def _invoke(workspace: Path, *extra: str, json_output: bool = True):
    args = ["--log-level", "ERROR"]
    if json_output:
        args.append("--json-output")
    args += [
        "validate",
        str(workspace / "new_tokens.json"),
        "--chains",
        str(workspace / "chains.yaml"),
        "--error-log",
        str(workspace / "validation_errors.txt"),
        *extra,
    ]
    return CliRunner().invoke(cli, args, obj={})


def test_validate_valid_registry(workspace, chain_lookup):
    result = _invoke(workspace)

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["success"] is True
    assert payload["total_records"] == 1
    assert not (workspace / "validation_errors.txt").exists()


def test_validate_reports_findings_and_writes_error_log(workspace, chain_lookup):
    chain_lookup.managers[(BASE_ENDPOINT, MANAGER)] = ManagerInfo(
        managed_token_address=BASE_TOKEN, implementation_type=2
    )

    result = _invoke(workspace)

    assert result.exit_code == 1, result.output
    payload = json.loads(result.stdout)
    assert payload["success"] is False
    assert payload["findings"]["by_kind"] == {"OnChainMismatch": 1}
    lines = (workspace / "validation_errors.txt").read_text().splitlines()
    assert len(lines) == 1
    assert "expected 'mintBurn', got 'lockUnlock'" in lines[0]


def test_validate_console_output(workspace, chain_lookup):
    registry = {TOKEN_ID: sample_record()}
    registry[TOKEN_ID]["chains"][1]["symbol"] = "axlCFG"
    (workspace / "new_tokens.json").write_text(json.dumps(registry))

    result = _invoke(workspace, json_output=False)

    assert result.exit_code == 1
    assert "Token symbol mismatch on chain base" in result.output
    assert "1 validation error(s)" in result.output
    assert "Token symbol mismatch on chain base" in (workspace / "validation_errors.txt").read_text()


def test_validate_with_worker_pool(workspace, chain_lookup):
    second_id = "0x" + "5".ljust(64, "0")
    registry = {TOKEN_ID: sample_record(), second_id: sample_record(second_id)}
    (workspace / "new_tokens.json").write_text(json.dumps(registry))

    result = _invoke(workspace, "--workers", "4")

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    # Second record reuses the first one's salt, so only its recomputed id differs
    assert [detail["token_id"] for detail in payload["finding_details"]] == [second_id]


def test_validate_skip_icons(workspace, chain_lookup, monkeypatch):
    class BrokenIcons(FixtureCoinGecko):
        def fetch_content_type(self, url):
            raise AssertionError("icon fetched despite --skip-icons")

    monkeypatch.setattr(cli_main, "CoinGeckoClient", BrokenIcons)

    result = _invoke(workspace, "--skip-icons")

    assert result.exit_code == 0, result.output


def test_validate_allow_missing_coingecko(workspace, chain_lookup):
    registry = {TOKEN_ID: sample_record()}
    del registry[TOKEN_ID]["coinGeckoId"]
    (workspace / "new_tokens.json").write_text(json.dumps(registry))

    assert _invoke(workspace).exit_code == 1
    assert _invoke(workspace, "--allow-missing-coingecko").exit_code == 0


def test_validate_malformed_document_is_fatal(workspace, chain_lookup, caplog):
    (workspace / "new_tokens.json").write_text(json.dumps([sample_record()]))

    result = _invoke(workspace)

    assert result.exit_code == 2
    assert "keyed by tokenId" in result.output
    errors = [record for record in caplog.records if record.levelname == "ERROR"]
    assert errors[-1].error_type == "RecordFormatError"
    assert errors[-1].recoverable is False


def test_validate_invalid_timeout_is_fatal(workspace, monkeypatch):
    monkeypatch.setenv("ITS_RPC_TIMEOUT", "abc")
    monkeypatch.setattr(cli_main, "CoinGeckoClient", FixtureCoinGecko)

    result = _invoke(workspace)

    assert result.exit_code == 2
    assert "ITS_RPC_TIMEOUT" in result.output


def test_validate_success_removes_stale_error_log(workspace, chain_lookup):
    (workspace / "validation_errors.txt").write_text("Token name mismatch on chain base\n")

    result = _invoke(workspace)

    assert result.exit_code == 0, result.output
    assert not (workspace / "validation_errors.txt").exists()


def test_validate_missing_tokens_file_is_fatal(workspace, chain_lookup):
    (workspace / "new_tokens.json").unlink()

    result = _invoke(workspace)

    assert result.exit_code == 2
    assert chain_lookup.calls == []


def test_chains_json_output(workspace):
    result = CliRunner().invoke(
        cli,
        ["--log-level", "ERROR", "--json-output", "chains", "--chains", str(workspace / "chains.yaml")],
        obj={},
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"base": BASE_ENDPOINT, "ethereum": ETH_ENDPOINT}


def test_chains_table(workspace):
    result = CliRunner().invoke(cli, ["chains", "--chains", str(workspace / "chains.yaml")], obj={})

    assert result.exit_code == 0, result.output
    assert "ethereum" in result.output
    assert ETH_ENDPOINT in result.output
    assert "2 chain(s)" in result.output
