"""Unit tests for record export."""

from __future__ import annotations

import csv
import json
from datetime import date
from pathlib import Path

import pyarrow.parquet as pq
import pytest

from core.errors import ScrublineStoreError
from core.record_fields import BUSINESS_FIELDS
from core.types import LayoffRecord
from ingest.input_reader import read_layoff_records
from store.record_export import export_records


def _records() -> list[LayoffRecord]:
    return [
        LayoffRecord(
            company="Carvana",
            location="Phoenix",
            industry="Transportation",
            total_laid_off=2500,
            percentage_laid_off="0.12",
            date=date(2022, 5, 10),
            stage="Post-IPO",
            country="United States",
            funds_raised_millions=None,
        )
    ]


def test_export_records_writes_csv_with_business_header(tmp_path: Path) -> None:
    """CSV export should contain exactly the nine business columns."""
    output = export_records(_records(), str(tmp_path / "out" / "clean.csv"))

    with output.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))

    assert tuple(rows[0]) == BUSINESS_FIELDS
    assert rows[1][5] == "2022-05-10" and rows[1][8] == "NULL"


def test_export_records_csv_reloads_nulls(tmp_path: Path) -> None:
    """Exported CSV should read back with nulls preserved."""
    output = export_records(_records(), str(tmp_path / "clean.csv"))

    reloaded = read_layoff_records(str(output))

    assert reloaded[0].funds_raised_millions is None
    assert reloaded[0].total_laid_off == 2500


def test_export_records_writes_jsonl_without_markers(tmp_path: Path) -> None:
    """JSONL export should hold ISO dates and no helper keys."""
    output = export_records(_records(), str(tmp_path / "clean.jsonl"))

    payload = json.loads(output.read_text(encoding="utf-8").splitlines()[0])

    assert set(payload) == set(BUSINESS_FIELDS)
    assert payload["date"] == "2022-05-10"


def test_export_records_writes_parquet(tmp_path: Path) -> None:
    """Parquet export should keep typed dates."""
    output = export_records(_records(), str(tmp_path / "clean.parquet"))

    table = pq.read_table(output)

    assert table.column_names == list(BUSINESS_FIELDS)
    assert table.column("date").to_pylist() == [date(2022, 5, 10)]


def test_export_records_rejects_unknown_extension(tmp_path: Path) -> None:
    """Unsupported extensions should raise store errors."""
    with pytest.raises(ScrublineStoreError):
        export_records(_records(), str(tmp_path / "clean.xlsx"))
