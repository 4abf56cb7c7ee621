"""Columnar persistence helpers.

This module converts layoff records into Arrow tables and writes
Parquet mirrors next to the JSONL snapshot payload.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from core.constants import PARQUET_FILE_NAME
from core.errors import ScrublineStoreError
from core.record_fields import BUSINESS_FIELDS
from core.types import LayoffRecord

_TEXT_FIELDS = ("company", "location", "industry", "percentage_laid_off", "stage", "country")


def build_arrow_table(records: list[LayoffRecord]) -> pa.Table:
    """Build an Arrow table with the nine business columns.

    The ``date`` column is ``date32`` when every value is parsed, and
    text otherwise, as in a raw staging snapshot. Parsed dates in a
    text column are written in ISO form.

    Args:
        records: Records to convert.

    Returns:
        Arrow table in business field order.
    """
    columns: dict[str, pa.Array] = {}
    for name in BUSINESS_FIELDS:
        values = [getattr(record, name) for record in records]
        column_type = _column_type(name, values)
        if name == "date" and column_type == pa.string():
            values = [_date_text(value) for value in values]
        columns[name] = pa.array(values, type=column_type)
    return pa.table(columns)


def write_parquet_mirror(version_dir: Path, records: list[LayoffRecord]) -> Path:
    """Write snapshot records to a Parquet file.

    Args:
        version_dir: Snapshot version directory.
        records: Snapshot records.

    Returns:
        Written Parquet path.

    Raises:
        ScrublineStoreError: If Parquet write fails.
    """
    parquet_path = version_dir / PARQUET_FILE_NAME
    write_parquet_file(parquet_path, records)
    return parquet_path


def write_parquet_file(parquet_path: Path, records: list[LayoffRecord]) -> None:
    """Write records to a Parquet file at an explicit path.

    Args:
        parquet_path: Destination file.
        records: Records to write.

    Raises:
        ScrublineStoreError: If Parquet write fails.
    """
    try:
        pq.write_table(build_arrow_table(records), parquet_path)
    except (OSError, pa.ArrowException) as error:
        raise ScrublineStoreError(
            f"Failed to write Parquet file at {parquet_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error


def _column_type(name: str, values: list[object]) -> pa.DataType:
    if name in _TEXT_FIELDS:
        return pa.string()
    if name == "date":
        if all(value is None or isinstance(value, date) for value in values):
            return pa.date32()
        return pa.string()
    return pa.int64()


def _date_text(value: object) -> object:
    return value.isoformat() if isinstance(value, date) else value
