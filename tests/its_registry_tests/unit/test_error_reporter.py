"""
Tests for console reporting, the error log and exit codes
"""

import io

from rich.console import Console

from its_registry.core.error_reporter import EXIT_INVALID, EXIT_OK, ErrorReporter
from its_registry.core.findings import ErrorKind, ValidationFinding, ValidationReport


def make_console():
    return Console(file=io.StringIO(), width=300, color_system=None)


def test_success_report(tmp_path):
    console = make_console()
    error_log = tmp_path / "validation_errors.txt"

    code = ErrorReporter(error_log, console=console).report(ValidationReport(total_records=2))

    assert code == EXIT_OK
    assert "All 2 token(s) validated successfully" in console.file.getvalue()
    assert not error_log.exists()


def test_failure_report_writes_one_message_per_line(tmp_path):
    console = make_console()
    error_log = tmp_path / "logs" / "validation_errors.txt"
    report = ValidationReport(
        total_records=3,
        findings=[
            ValidationFinding(ErrorKind.MISSING_CONTRACT, "0x01", "Token address 0xaa does not exist on chain base"),
            ValidationFinding(ErrorKind.ON_CHAIN_MISMATCH, "0x02", "Token name mismatch on chain [base]"),
        ],
    )

    code = ErrorReporter(error_log, console=console).report(report)

    assert code == EXIT_INVALID
    assert error_log.read_text(encoding="utf-8") == (
        "Token address 0xaa does not exist on chain base\n"
        "Token name mismatch on chain [base]\n"
    )
    output = console.file.getvalue()
    # Square brackets in messages are printed literally, not as markup
    assert "Token name mismatch on chain [base]" in output
    assert "2 validation error(s)" in output
    assert "2 of 3 token(s)" in output


def test_error_log_is_overwritten(tmp_path):
    error_log = tmp_path / "validation_errors.txt"
    error_log.write_text("stale line\n")
    report = ValidationReport(
        total_records=1,
        findings=[ValidationFinding(ErrorKind.FORMAT_ERROR, "0x01", "Invalid deploySalt 0x1")],
    )

    ErrorReporter(error_log, console=make_console()).write_error_log(report)

    assert error_log.read_text(encoding="utf-8") == "Invalid deploySalt 0x1\n"


def test_success_removes_stale_error_log(tmp_path):
    error_log = tmp_path / "validation_errors.txt"
    error_log.write_text("Token name mismatch on chain base\n")

    code = ErrorReporter(error_log, console=make_console()).report(ValidationReport(total_records=1))

    assert code == EXIT_OK
    assert not error_log.exists()
