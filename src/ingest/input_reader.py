"""Source table readers for cleaning runs.

This module loads layoff rows from CSV, JSONL, or Parquet files.
It validates the nine-field schema and coerces cells into typed
records before any cleaning stage runs.
"""

from __future__ import annotations

import csv
import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Mapping

import pyarrow.parquet as pq

from core.constants import NULL_TEXT_MARKER, SUPPORTED_INPUT_EXTENSIONS
from core.errors import SchemaMismatchError, ScrublineIngestError
from core.record_fields import INTEGER_FIELDS, REQUIRED_FIELDS
from core.types import LayoffRecord

_NULLABLE_WHEN_EMPTY = INTEGER_FIELDS + ("percentage_laid_off", "date")


def read_layoff_records(source_uri: str) -> list[LayoffRecord]:
    """Load layoff records from a local table file.

    Args:
        source_uri: Path to a ``.csv``, ``.jsonl``, or ``.parquet`` file.

    Returns:
        Records in file order.

    Raises:
        SchemaMismatchError: If a required column or company value is missing.
        ScrublineIngestError: If the file is missing, unsupported, or unparsable.
    """
    source_path = Path(source_uri).expanduser()
    if not source_path.is_file():
        raise ScrublineIngestError(
            f"Failed to read source at {source_path}: file does not exist. "
            "Provide an existing CSV, JSONL, or Parquet file."
        )
    suffix = source_path.suffix.lower()
    if suffix == ".csv":
        return _read_csv_records(source_path)
    if suffix == ".jsonl":
        return _read_jsonl_records(source_path)
    if suffix == ".parquet":
        return _read_parquet_records(source_path)
    raise ScrublineIngestError(
        f"Unsupported source extension '{suffix}' for {source_path}. "
        f"Supported extensions: {SUPPORTED_INPUT_EXTENSIONS}."
    )


def _read_csv_records(file_path: Path) -> list[LayoffRecord]:
    """Read records from a CSV file with a header row.

    Args:
        file_path: Path to CSV file.

    Returns:
        Parsed records.
    """
    try:
        with file_path.open(newline="", encoding="utf-8-sig") as handle:
            reader = csv.DictReader(handle)
            _check_columns(file_path, reader.fieldnames or [])
            return [
                _record_from_row(row, f"{file_path}:{line_number}")
                for line_number, row in enumerate(reader, 2)
            ]
    except UnicodeDecodeError as error:
        raise _encoding_error(file_path, error) from error


def _read_jsonl_records(file_path: Path) -> list[LayoffRecord]:
    """Read records from JSON lines, one object per row.

    Args:
        file_path: Path to JSONL file.

    Returns:
        Parsed records.

    Raises:
        ScrublineIngestError: If the file is not UTF-8 or a line is not a
            JSON object.
    """
    try:
        lines = file_path.read_text(encoding="utf-8").splitlines()
    except UnicodeDecodeError as error:
        raise _encoding_error(file_path, error) from error
    records: list[LayoffRecord] = []
    for line_number, line in enumerate(lines, 1):
        if not line.strip():
            continue
        context = f"{file_path}:{line_number}"
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as error:
            raise ScrublineIngestError(
                f"Failed to parse JSONL record at {context}: {error.msg}. "
                "Fix the JSON syntax and retry."
            ) from error
        if not isinstance(payload, dict):
            raise ScrublineIngestError(f"Invalid JSONL record at {context}: expected JSON object.")
        _check_columns(Path(context), list(payload))
        records.append(_record_from_row(payload, context))
    return records


def _read_parquet_records(file_path: Path) -> list[LayoffRecord]:
    """Read records from a Parquet file through pyarrow.

    Args:
        file_path: Path to Parquet file.

    Returns:
        Parsed records.
    """
    try:
        table = pq.read_table(file_path)
    except (OSError, ValueError) as error:
        raise ScrublineIngestError(
            f"Failed to read Parquet source at {file_path}: {error}."
        ) from error
    _check_columns(file_path, table.column_names)
    return [
        _record_from_row(row, f"{file_path}:row {row_index}")
        for row_index, row in enumerate(table.select(list(REQUIRED_FIELDS)).to_pylist(), 1)
    ]


def _encoding_error(file_path: Path, error: UnicodeDecodeError) -> ScrublineIngestError:
    return ScrublineIngestError(
        f"Failed to decode source at {file_path}: {error.reason} at byte {error.start}. "
        "Re-save the file as UTF-8 and retry."
    )


def _check_columns(source: Path, columns: list[str]) -> None:
    missing = [name for name in REQUIRED_FIELDS if name not in columns]
    if missing:
        raise SchemaMismatchError(
            f"Source {source} is missing required columns: {', '.join(missing)}. "
            f"Expected columns: {', '.join(REQUIRED_FIELDS)}."
        )


def _record_from_row(row: Mapping[str, Any], context: str) -> LayoffRecord:
    """Coerce one raw row into a typed record.

    Args:
        row: Column name to raw cell value.
        context: Source location for error messages.

    Returns:
        Typed record.

    Raises:
        SchemaMismatchError: If company is null.
        ScrublineIngestError: If an integer cell is invalid.
    """
    values = {name: _null_cell(name, row.get(name)) for name in REQUIRED_FIELDS}
    if values["company"] is None:
        raise SchemaMismatchError(
            f"Row at {context} has no value for required field 'company'."
        )
    for name in INTEGER_FIELDS:
        values[name] = _parse_count(values[name], name, context)
    return LayoffRecord(
        company=str(values["company"]),
        location=_optional_text(values["location"]),
        industry=_optional_text(values["industry"]),
        total_laid_off=values["total_laid_off"],
        percentage_laid_off=_optional_text(values["percentage_laid_off"]),
        date=_date_cell(values["date"]),
        stage=_optional_text(values["stage"]),
        country=_optional_text(values["country"]),
        funds_raised_millions=values["funds_raised_millions"],
    )


def _null_cell(name: str, value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        if value == NULL_TEXT_MARKER:
            return None
        if name in _NULLABLE_WHEN_EMPTY and not value.strip():
            return None
    return value


def _parse_count(value: Any, name: str, context: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ScrublineIngestError(f"Invalid {name} at {context}: expected integer, got boolean.")
    if isinstance(value, float):
        if not value.is_integer():
            raise ScrublineIngestError(
                f"Invalid {name} at {context}: expected integer, got {value}."
            )
        value = int(value)
    try:
        count = int(value)
    except (TypeError, ValueError) as error:
        raise ScrublineIngestError(
            f"Invalid {name} at {context}: expected integer, got '{value}'."
        ) from error
    if count < 0:
        raise ScrublineIngestError(f"Invalid {name} at {context}: expected >= 0, got {count}.")
    return count


def _optional_text(value: Any) -> str | None:
    return None if value is None else str(value)


def _date_cell(value: Any) -> date | str | None:
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    return str(value)
