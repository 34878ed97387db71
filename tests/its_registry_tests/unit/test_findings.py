"""
Tests for findings and the validation report
"""

from its_registry.core.findings import ErrorKind, ValidationFinding, ValidationReport


def finding(token_id, kind=ErrorKind.ON_CHAIN_MISMATCH, message="bad", chain_id=None):
    return ValidationFinding(kind=kind, token_id=token_id, message=message, chain_id=chain_id)


def test_finding_renders_as_message():
    item = finding("0x01", message="Token name mismatch on chain base")
    assert str(item) == "Token name mismatch on chain base"
    assert item.to_dict() == {
        "kind": "OnChainMismatch",
        "token_id": "0x01",
        "chain_id": None,
        "message": "Token name mismatch on chain base",
    }


def test_empty_report_is_success():
    report = ValidationReport(total_records=3)

    assert report.success
    assert report.valid_records == 3
    assert report.invalid_token_ids == []


def test_invalid_token_ids_are_unique_and_ordered():
    report = ValidationReport(
        total_records=4,
        findings=[finding("0x02"), finding("0x01"), finding("0x02")],
    )

    assert not report.success
    assert report.invalid_token_ids == ["0x02", "0x01"]
    assert report.valid_records == 2


def test_counts_by_kind_sorted():
    report = ValidationReport(
        total_records=1,
        findings=[
            finding("0x01", ErrorKind.MISSING_CONTRACT),
            finding("0x01", ErrorKind.FORMAT_ERROR),
            finding("0x01", ErrorKind.MISSING_CONTRACT),
        ],
    )

    assert report.counts_by_kind() == {"FormatError": 1, "MissingContract": 2}
    assert list(report.to_dict()["findings"]["by_kind"]) == ["FormatError", "MissingContract"]


def test_messages_keep_order():
    report = ValidationReport(
        total_records=1,
        findings=[finding("0x01", message="first"), finding("0x01", message="second")],
    )
    assert report.messages() == ["first", "second"]
