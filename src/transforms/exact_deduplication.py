"""Exact duplicate detection transform.

This module ranks records inside classes of field-wise identical rows
and keeps only the first occurrence. It is the first cleaning stage.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from core.types import BusinessKey, LayoffRecord, RankedRecord


def rank_duplicates(records: Iterable[LayoffRecord]) -> list[RankedRecord]:
    """Assign each record its position within its duplicate class.

    Two records share a class when all nine business fields are equal,
    with ``None`` equal to ``None``. Ranks start at 1 and follow input
    order, so the first occurrence of every class has ``row_num == 1``.

    Args:
        records: Records to rank.

    Returns:
        Ranked records in input order.
    """
    seen_counts: Counter[BusinessKey] = Counter()
    ranked: list[RankedRecord] = []
    for record in records:
        key = record.business_key()
        seen_counts[key] += 1
        ranked.append(RankedRecord(record=record, row_num=seen_counts[key]))
    return ranked


def remove_exact_duplicates(records: Iterable[LayoffRecord]) -> list[LayoffRecord]:
    """Remove later occurrences of field-wise identical records.

    Members of a duplicate class are identical, so which one survives is
    not observable; the surviving records keep their relative order.

    Args:
        records: Records to evaluate.

    Returns:
        Ordered records with duplicates removed.
    """
    return [ranked.record for ranked in rank_duplicates(records) if ranked.row_num == 1]


def find_duplicates(records: Iterable[LayoffRecord]) -> list[RankedRecord]:
    """Return ranked records that would be discarded as duplicates.

    Args:
        records: Records to inspect.

    Returns:
        Ranked records with ``row_num > 1``.
    """
    return [ranked for ranked in rank_duplicates(records) if ranked.row_num > 1]
