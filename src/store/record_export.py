"""Snapshot export to analysis-friendly files.

This module writes cleaned records as CSV, JSONL, or Parquet with
exactly the nine business columns and no transient helper fields.
"""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

from core.constants import NULL_TEXT_MARKER, SUPPORTED_EXPORT_EXTENSIONS
from core.errors import ScrublineStoreError
from core.logging_config import get_logger
from core.record_fields import BUSINESS_FIELDS
from core.types import LayoffRecord
from store.parquet_mirror import write_parquet_file
from store.record_payload import write_layoff_records_jsonl

_LOGGER = get_logger(__name__)


def export_records(records: list[LayoffRecord], output_path: str) -> Path:
    """Write records to a file chosen by extension.

    Args:
        records: Records to export.
        output_path: Destination ``.csv``, ``.jsonl``, or ``.parquet`` path.

    Returns:
        Resolved output path.

    Raises:
        ScrublineStoreError: If the extension is unsupported or write fails.
    """
    destination = Path(output_path).expanduser().resolve()
    suffix = destination.suffix.lower()
    if suffix not in SUPPORTED_EXPORT_EXTENSIONS:
        raise ScrublineStoreError(
            f"Unsupported export extension '{suffix}' for {destination}. "
            f"Supported extensions: {SUPPORTED_EXPORT_EXTENSIONS}."
        )
    destination.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".csv":
        _write_csv(destination, records)
    elif suffix == ".jsonl":
        _write_jsonl(destination, records)
    else:
        write_parquet_file(destination, records)
    _LOGGER.info("records_exported", output_path=str(destination), record_count=len(records))
    return destination


def _write_csv(destination: Path, records: list[LayoffRecord]) -> None:
    try:
        with destination.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow(BUSINESS_FIELDS)
            for record in records:
                writer.writerow([_csv_cell(getattr(record, name)) for name in BUSINESS_FIELDS])
    except OSError as error:
        raise ScrublineStoreError(
            f"Failed to write CSV export at {destination}: {error}."
        ) from error


def _write_jsonl(destination: Path, records: list[LayoffRecord]) -> None:
    try:
        write_layoff_records_jsonl(destination, records, mark_typed_date=False)
    except OSError as error:
        raise ScrublineStoreError(
            f"Failed to write JSONL export at {destination}: {error}."
        ) from error


def _csv_cell(value: object) -> str:
    if value is None:
        return NULL_TEXT_MARKER
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
