"""Shared JSON serialization for LayoffRecord payloads.

This module centralizes LayoffRecord JSON encoding so snapshot
persistence and JSONL export agree on one row shape.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

from core.record_fields import BUSINESS_FIELDS
from core.types import LayoffRecord

_TYPED_DATE_KEY = "date_is_typed"


def layoff_record_to_payload(
    record: LayoffRecord,
    mark_typed_date: bool = True,
) -> dict[str, object]:
    """Serialize LayoffRecord into JSON-safe payload.

    Parsed dates are written as ISO text. When ``mark_typed_date`` is set,
    a marker keeps them distinguishable from raw date text on reload.

    Args:
        record: Record instance.
        mark_typed_date: Whether to include the typed-date marker.

    Returns:
        Dictionary payload for JSON encoding.
    """
    payload: dict[str, object] = {name: getattr(record, name) for name in BUSINESS_FIELDS}
    if isinstance(record.date, date):
        payload["date"] = record.date.isoformat()
        if mark_typed_date:
            payload[_TYPED_DATE_KEY] = True
    return payload


def layoff_record_from_payload(payload: dict[str, Any]) -> LayoffRecord:
    """Deserialize JSON payload into LayoffRecord.

    Args:
        payload: Serialized record payload.

    Returns:
        Parsed LayoffRecord.
    """
    raw_date = payload.get("date")
    event_date: date | str | None = None if raw_date is None else str(raw_date)
    if event_date is not None and payload.get(_TYPED_DATE_KEY):
        event_date = date.fromisoformat(event_date)
    return LayoffRecord(
        company=str(payload["company"]),
        location=_optional_text(payload.get("location")),
        industry=_optional_text(payload.get("industry")),
        total_laid_off=_optional_int(payload.get("total_laid_off")),
        percentage_laid_off=_optional_text(payload.get("percentage_laid_off")),
        date=event_date,
        stage=_optional_text(payload.get("stage")),
        country=_optional_text(payload.get("country")),
        funds_raised_millions=_optional_int(payload.get("funds_raised_millions")),
    )


def write_layoff_records_jsonl(
    records_path: Path,
    records: list[LayoffRecord],
    mark_typed_date: bool = True,
) -> None:
    """Write LayoffRecord list to JSONL file.

    Args:
        records_path: Output JSONL file path.
        records: Records to serialize.
        mark_typed_date: Whether to include the typed-date marker.
    """
    lines = [
        json.dumps(layoff_record_to_payload(record, mark_typed_date), sort_keys=True)
        for record in records
    ]
    records_path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")


def read_layoff_records_jsonl(records_path: Path) -> list[LayoffRecord]:
    """Read LayoffRecord list from JSONL file.

    Args:
        records_path: Input JSONL file path.

    Returns:
        Parsed records.

    Raises:
        ValueError: If JSONL rows are invalid.
    """
    parsed_records: list[LayoffRecord] = []
    for line_number, line in enumerate(records_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        payload = _parse_payload_line(line, line_number)
        parsed_records.append(layoff_record_from_payload(payload))
    return parsed_records


def _parse_payload_line(line: str, line_number: int) -> dict[str, Any]:
    """Parse and validate one JSONL payload row.

    Args:
        line: Raw JSONL line.
        line_number: One-based line number.

    Returns:
        Parsed payload dictionary.

    Raises:
        ValueError: If JSON row is invalid.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise ValueError(f"Invalid JSON at line {line_number}: {error.msg}") from error
    if not isinstance(payload, dict) or "company" not in payload:
        raise ValueError(f"Invalid payload at line {line_number}: expected record object")
    return payload


def _optional_text(value: object) -> str | None:
    return None if value is None else str(value)


def _optional_int(value: object) -> int | None:
    return None if value is None else int(str(value))
