#!/usr/bin/env python3
"""ITS Registry CLI - validate new interchain token records."""

from __future__ import annotations

import json
import logging
import sys

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from its_registry.core import config
from its_registry.core.batch_validator import BatchValidator
from its_registry.core.chain_directory import ChainDirectory
from its_registry.core.coingecko import CoinGeckoClient
from its_registry.core.error_reporter import EXIT_FATAL, EXIT_INVALID, EXIT_OK, ErrorReporter
from its_registry.core.logging_config import setup_logging
from its_registry.core.record_validator import RecordValidator
from its_registry.core.registry_exceptions import ChainDirectoryError, RecordFormatError, get_error_context
from its_registry.core.registry_loader import load_registry
from its_registry.core.web3_lookup import Web3ChainLookup

logger = logging.getLogger(__name__)
console = Console()


def _handle_cli_error(exc: Exception, exit_code: int = EXIT_FATAL) -> None:
    """Centralized CLI error handler."""
    logger.error("CLI error: %s", exc, exc_info=True, extra=get_error_context(exc))
    console.print(f"[bold red]Error:[/] {escape(str(exc))}")
    sys.exit(exit_code)


def _load_chain_directory(chains_file: str | None, remote: bool) -> ChainDirectory:
    directory = ChainDirectory.from_yaml(chains_file)
    if remote:
        # Static table entries win over the published config
        directory = directory.merged_with(ChainDirectory.from_axelar_config())
    return directory


@click.group()
@click.option("--log-level", default=config.LOG_LEVEL, show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
@click.option("--json-logs", is_flag=True, help="Emit structured JSON logs on stderr")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also write JSON logs here")
@click.option("--json-output", is_flag=True, help="Print machine-readable JSON results")
@click.pass_context
def cli(ctx: click.Context, log_level: str, json_logs: bool, log_file: str | None, json_output: bool):
    """ITS token registry validator."""
    setup_logging(level=log_level, json_format=json_logs, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json_output


@cli.command("validate")
@click.argument("tokens_file", type=click.Path(dir_okay=False), default=config.TOKENS_FILE)
@click.option("--chains", "chains_file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="YAML chain table (defaults to the bundled mainnet table)")
@click.option("--remote-chains/--no-remote-chains", default=False, show_default=True,
              help="Fill gaps in the chain table from Axelar's published config")
@click.option("--error-log", type=click.Path(dir_okay=False), default=config.ERROR_LOG_PATH, show_default=True)
@click.option("--workers", type=click.IntRange(min=1), default=1, show_default=True,
              help="Validate records on a thread pool")
@click.option("--skip-icons", is_flag=True, help="Do not fetch iconUrls.svg")
@click.option("--allow-missing-coingecko", is_flag=True, help="Accept records without coinGeckoId")
@click.pass_context
def validate(
    ctx: click.Context,
    tokens_file: str,
    chains_file: str | None,
    remote_chains: bool,
    error_log: str,
    workers: int,
    skip_icons: bool,
    allow_missing_coingecko: bool,
):
    """Validate TOKENS_FILE (tokenId -> record JSON) against chain state and CoinGecko."""
    try:
        records = load_registry(tokens_file)
        directory = _load_chain_directory(chains_file, remote_chains)
        coingecko = CoinGeckoClient()
        chain_lookup = Web3ChainLookup()
    except (RecordFormatError, ChainDirectoryError, config.ConfigurationError) as exc:
        _handle_cli_error(exc)
        return

    settings = config.ValidatorSettings(
        require_coingecko_id=not allow_missing_coingecko,
        check_icons=not skip_icons,
    )
    validator = BatchValidator(
        RecordValidator(
            chain_directory=directory,
            chain_lookup=chain_lookup,
            metadata_lookup=coingecko,
            icon_lookup=coingecko,
            settings=settings,
        ),
        max_workers=workers,
    )

    if ctx.obj.get("json_output"):
        report = validator.validate_batch(records)
        click.echo(json.dumps(report.to_dict(), indent=2))
        reporter = ErrorReporter(error_log)
        if report.success:
            reporter.clear_error_log()
        else:
            reporter.write_error_log(report)
        sys.exit(EXIT_OK if report.success else EXIT_INVALID)

    with console.status(f"[bold cyan]Validating {len(records)} token(s)..."):
        report = validator.validate_batch(records)
    sys.exit(ErrorReporter(error_log, console=console).report(report))


@cli.command("chains")
@click.option("--chains", "chains_file", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option("--remote-chains/--no-remote-chains", default=False, show_default=True)
@click.pass_context
def list_chains(ctx: click.Context, chains_file: str | None, remote_chains: bool):
    """List the chain ids the validator can resolve."""
    try:
        directory = _load_chain_directory(chains_file, remote_chains)
    except (ChainDirectoryError, config.ConfigurationError) as exc:
        _handle_cli_error(exc)
        return

    rows = [(chain_id, directory.resolve(chain_id) or "") for chain_id in directory.chain_ids]
    if ctx.obj.get("json_output"):
        click.echo(json.dumps(dict(rows), indent=2))
        return

    table = Table(title="Chain Directory", caption=f"{len(directory)} chain(s)", box=box.ROUNDED)
    table.add_column("Axelar Chain ID", style="cyan")
    table.add_column("RPC Endpoint", style="green")
    for chain_id, endpoint in rows:
        table.add_row(chain_id, endpoint)
    console.print(table)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
