"""
Validation findings and the batch report.

A finding is a data-level result, not an exception: validators collect
them so that every violation of a record is reported in a single run.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum


class ErrorKind(Enum):
    STRUCTURAL_MISMATCH = "StructuralMismatch"
    FORMAT_ERROR = "FormatError"
    ON_CHAIN_MISMATCH = "OnChainMismatch"
    MISSING_CONTRACT = "MissingContract"
    EXTERNAL_METADATA_MISMATCH = "ExternalMetadataMismatch"
    EXTERNAL_METADATA_NOT_FOUND = "ExternalMetadataNotFound"
    LOOKUP_FAILURE = "LookupFailure"
    CONFIGURATION_ERROR = "ConfigurationError"


@dataclass(frozen=True)
class ValidationFinding:
    """One failed check for one token record."""

    kind: ErrorKind
    token_id: str
    message: str
    chain_id: str | None = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "token_id": self.token_id,
            "chain_id": self.chain_id,
            "message": self.message,
        }


@dataclass
class ValidationReport:
    """Aggregated outcome of a batch run"""

    total_records: int
    findings: list[ValidationFinding] = field(default_factory=list)
    validation_time: float = 0.0

    @property
    def success(self) -> bool:
        return not self.findings

    @property
    def invalid_token_ids(self) -> list[str]:
        seen: dict[str, None] = {}
        for finding in self.findings:
            seen.setdefault(finding.token_id, None)
        return list(seen)

    @property
    def valid_records(self) -> int:
        return self.total_records - len(self.invalid_token_ids)

    def counts_by_kind(self) -> dict[str, int]:
        counts = Counter(finding.kind.value for finding in self.findings)
        return dict(sorted(counts.items()))

    def messages(self) -> list[str]:
        return [finding.message for finding in self.findings]

    def to_dict(self) -> dict:
        """Convert report to dictionary"""
        return {
            "success": self.success,
            "total_records": self.total_records,
            "valid_records": self.valid_records,
            "validation_time": self.validation_time,
            "findings": {
                "total": len(self.findings),
                "by_kind": self.counts_by_kind(),
            },
            "finding_details": [finding.to_dict() for finding in self.findings],
        }
