"""
Batch validation over a registry document (tokenId -> record).

Findings are concatenated in mapping order. With ``max_workers > 1``
records are validated on a thread pool; ``Executor.map`` yields results in
submission order, so the output matches the sequential run exactly.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Mapping

from its_registry.core.findings import ErrorKind, ValidationFinding, ValidationReport
from its_registry.core.models import TokenRecord
from its_registry.core.record_validator import RecordValidator
from its_registry.core.registry_exceptions import RecordFormatError

logger = logging.getLogger(__name__)


class BatchValidator:
    """Runs a RecordValidator over every record of a registry."""

    def __init__(self, record_validator: RecordValidator, max_workers: int = 1):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.record_validator = record_validator
        self.max_workers = max_workers

    def validate_record(self, token_id: str, raw: TokenRecord | Mapping[str, Any]) -> list[ValidationFinding]:
        """Validate one raw or parsed record; a malformed record yields one finding."""
        if isinstance(raw, TokenRecord):
            record = raw
        else:
            try:
                record = TokenRecord.from_dict(raw, token_id=token_id)
            except RecordFormatError as exc:
                logger.warning("Malformed token record", extra={"token_id": token_id, "error": exc.message})
                return [
                    ValidationFinding(
                        kind=ErrorKind.FORMAT_ERROR,
                        token_id=token_id,
                        message=f"Malformed record for token {token_id}: {exc.message}",
                    )
                ]
        return self.record_validator.validate(token_id, record)

    def validate_all(self, records: Mapping[str, Any]) -> list[ValidationFinding]:
        """
        Validate every record and concatenate the findings.

        Returns:
            All findings in mapping iteration order; empty if the batch is valid
        """
        items = list(records.items())
        if self.max_workers == 1 or len(items) < 2:
            per_record = [self.validate_record(token_id, raw) for token_id, raw in items]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                per_record = list(executor.map(lambda item: self.validate_record(*item), items))

        return [finding for findings in per_record for finding in findings]

    def validate_batch(self, records: Mapping[str, Any]) -> ValidationReport:
        """Validate every record and wrap the result in a ValidationReport."""
        start_time = time.time()
        logger.info(
            "Registry validation starting",
            extra={"total_records": len(records), "workers": self.max_workers},
        )
        findings = self.validate_all(records)
        report = ValidationReport(
            total_records=len(records),
            findings=findings,
            validation_time=time.time() - start_time,
        )
        logger.info(
            "Registry validation finished",
            extra={
                "total_records": report.total_records,
                "findings": len(report.findings),
                "validation_time": report.validation_time,
            },
        )
        return report
