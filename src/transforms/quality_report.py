"""Read-only quality report over cleaned records.

This module computes acceptance statistics in a single pass: counts,
distinct categorical values, date range, per-column nulls, and the
largest layoff events. It never mutates records.
"""

from __future__ import annotations

import heapq
from datetime import date
from typing import Iterable

from core.constants import DEFAULT_REPORT_TOP_N
from core.record_fields import BUSINESS_FIELDS, CATEGORICAL_FIELDS
from core.types import LayoffRecord, QualityReport


def build_quality_report(
    records: Iterable[LayoffRecord],
    top_n: int = DEFAULT_REPORT_TOP_N,
) -> QualityReport:
    """Summarize records for acceptance checks.

    Memory use is bounded by the distinct categorical values plus
    ``top_n`` records.

    Args:
        records: Records to summarize.
        top_n: Number of largest layoff events to keep.

    Returns:
        Quality report for the records.
    """
    record_count = 0
    distinct_values: dict[str, set[str]] = {name: set() for name in CATEGORICAL_FIELDS}
    null_counts = dict.fromkeys(BUSINESS_FIELDS, 0)
    earliest: date | None = None
    latest: date | None = None
    largest: list[tuple[int, int, LayoffRecord]] = []
    for index, record in enumerate(records):
        record_count += 1
        for name in BUSINESS_FIELDS:
            value = getattr(record, name)
            if value is None:
                null_counts[name] += 1
            elif name in distinct_values:
                distinct_values[name].add(value)
        if isinstance(record.date, date):
            earliest = record.date if earliest is None else min(earliest, record.date)
            latest = record.date if latest is None else max(latest, record.date)
        if top_n > 0 and record.total_laid_off is not None:
            _push_bounded(largest, (record.total_laid_off, -index, record), top_n)
    return QualityReport(
        record_count=record_count,
        distinct_counts={name: len(values) for name, values in distinct_values.items()},
        earliest_date=earliest,
        latest_date=latest,
        null_counts=null_counts,
        largest_layoffs=tuple(entry[2] for entry in sorted(largest, reverse=True)),
    )


def render_quality_report(report: QualityReport) -> str:
    """Render a report into stable multi-line text for CLI output."""
    lines = [f"total_records={report.record_count}"]
    for name, count in report.distinct_counts.items():
        lines.append(f"unique_{name}={count}")
    lines.append(f"earliest_date={_format_date(report.earliest_date)}")
    lines.append(f"latest_date={_format_date(report.latest_date)}")
    for name, count in report.null_counts.items():
        lines.append(f"null_{name}={count}")
    for record in report.largest_layoffs:
        lines.append(
            f"{record.company}\t{record.total_laid_off}\t"
            f"{record.industry or '-'}\t{record.country or '-'}\t{_format_date(record.date)}"
        )
    return "\n".join(lines)


def _push_bounded(
    heap: list[tuple[int, int, LayoffRecord]],
    entry: tuple[int, int, LayoffRecord],
    limit: int,
) -> None:
    if len(heap) < limit:
        heapq.heappush(heap, entry)
    elif entry[:2] > heap[0][:2]:
        heapq.heapreplace(heap, entry)


def _format_date(value: object) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return "-" if value is None else str(value)
