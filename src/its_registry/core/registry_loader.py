"""
Registry document loading.

A malformed top-level document is the only input problem that aborts a
run; per-record problems are left to the batch validator.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from its_registry.core.registry_exceptions import RecordFormatError


def parse_registry(payload: Any, source: str = "registry") -> dict[str, Any]:
    """Check the top-level shape: an object keyed by string tokenIds."""
    if not isinstance(payload, dict):
        raise RecordFormatError(f"{source} must be a JSON object keyed by tokenId")
    for key in payload:
        if not isinstance(key, str):
            raise RecordFormatError(f"{source} has a non-string key: {key!r}")
    return payload


def load_registry(path: Path | str) -> dict[str, Any]:
    """
    Load new token records from a JSON file.

    Raises:
        RecordFormatError: If the file cannot be read or is not a JSON object
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except OSError as exc:
        raise RecordFormatError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RecordFormatError(f"Invalid JSON in {path}: {exc}") from exc
    return parse_registry(payload, source=str(path))
