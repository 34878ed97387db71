"""
Error reporting for a finished validation run.

Prints the findings, persists them to the error log (one per line) and
maps the outcome to a process exit status.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from its_registry.core.findings import ValidationReport

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_FATAL = 2


class ErrorReporter:
    """Turns a ValidationReport into console output, an error log and an exit code."""

    def __init__(self, error_log_path: Path | str, console: Console | None = None):
        self.error_log_path = Path(error_log_path)
        self.console = console or Console(stderr=True)

    def write_error_log(self, report: ValidationReport) -> Path:
        self.error_log_path.parent.mkdir(parents=True, exist_ok=True)
        with self.error_log_path.open("w", encoding="utf-8") as handle:
            handle.write("\n".join(report.messages()))
            handle.write("\n")
        return self.error_log_path

    def clear_error_log(self) -> None:
        """Remove an error log left behind by an earlier failed run."""
        self.error_log_path.unlink(missing_ok=True)

    def report(self, report: ValidationReport) -> int:
        """Emit the report and return the exit status."""
        if report.success:
            self.clear_error_log()
            self.console.print(
                f"[bold green]All {report.total_records} token(s) validated successfully[/]"
            )
            return EXIT_OK

        for finding in report.findings:
            self.console.print(f"[red]✗[/] {escape(finding.message)}", highlight=False)

        path = self.write_error_log(report)
        logger.error(
            "Validation failed",
            extra={
                "findings": len(report.findings),
                "invalid_records": len(report.invalid_token_ids),
                "error_log": str(path),
            },
        )
        self.console.print(
            f"[bold red]{len(report.findings)} validation error(s)[/] across "
            f"{len(report.invalid_token_ids)} of {report.total_records} token(s); written to {path}"
        )
        return EXIT_INVALID
