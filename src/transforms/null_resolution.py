"""Null handling transforms.

This module deletes records without any layoff magnitude and fills
missing industries, first from sibling records of the same company and
then from manually supplied overrides.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import replace
from typing import Iterable, Sequence

from core.constants import SUPPORTED_IMPUTATION_POLICIES
from core.errors import ScrublineTransformError
from core.types import IndustryOverride, LayoffRecord


def remove_unusable_records(records: Iterable[LayoffRecord]) -> list[LayoffRecord]:
    """Drop records where both layoff magnitude fields are null.

    Args:
        records: Records to filter.

    Returns:
        Records with a known total or percentage, in input order.
    """
    return [
        record
        for record in records
        if record.total_laid_off is not None or record.percentage_laid_off is not None
    ]


def blank_industry_to_null(records: Iterable[LayoffRecord]) -> list[LayoffRecord]:
    """Convert blank industry strings to ``None``."""
    blanked: list[LayoffRecord] = []
    for record in records:
        if record.industry is not None and not record.industry.strip():
            blanked.append(replace(record, industry=None))
        else:
            blanked.append(record)
    return blanked


def build_industry_lookup(
    records: Sequence[LayoffRecord],
    policy: str,
) -> dict[str, str]:
    """Map each company to one representative known industry.

    Policies resolve companies whose sibling rows disagree:
    ``most_frequent`` picks the most common value and breaks ties by the
    lexicographically smallest, ``lexicographic`` picks the smallest, and
    ``first_seen`` picks the first non-null value in input order.

    Args:
        records: Records to scan.
        policy: Tie-break policy name.

    Returns:
        Company to industry mapping for companies with a known industry.

    Raises:
        ScrublineTransformError: If the policy is not supported.
    """
    _validate_policy(policy)
    observed: defaultdict[str, Counter[str]] = defaultdict(Counter)
    first_seen: dict[str, str] = {}
    for record in records:
        if _is_missing(record.industry):
            continue
        industry = str(record.industry)
        observed[record.company][industry] += 1
        first_seen.setdefault(record.company, industry)
    if policy == "first_seen":
        return first_seen
    if policy == "lexicographic":
        return {company: min(counts) for company, counts in observed.items()}
    return {
        company: min(counts, key=lambda value: (-counts[value], value))
        for company, counts in observed.items()
    }


def impute_missing_industry(
    records: Sequence[LayoffRecord],
    policy: str,
) -> list[LayoffRecord]:
    """Fill null or blank industries from same-company siblings.

    The lookup is built from the full input before any value is
    assigned, so imputed values never feed further imputation. Records
    whose company has no sibling with a known industry stay null.

    Args:
        records: Records to impute.
        policy: Tie-break policy name.

    Returns:
        Records in input order with industries filled where possible.
    """
    lookup = build_industry_lookup(records, policy)
    imputed: list[LayoffRecord] = []
    for record in records:
        if _is_missing(record.industry) and record.company in lookup:
            imputed.append(replace(record, industry=lookup[record.company]))
        else:
            imputed.append(record)
    return imputed


def apply_industry_overrides(
    records: Iterable[LayoffRecord],
    overrides: Sequence[IndustryOverride],
) -> list[LayoffRecord]:
    """Patch still-missing industries from manual overrides.

    The first matching override in file order wins. Records that already
    carry an industry are never changed.

    Args:
        records: Records to patch.
        overrides: Manual company to industry overrides.

    Returns:
        Patched records in input order.
    """
    patched: list[LayoffRecord] = []
    for record in records:
        override = _find_override(record, overrides) if _is_missing(record.industry) else None
        patched.append(record if override is None else replace(record, industry=override.industry))
    return patched


def count_missing_industry(records: Iterable[LayoffRecord]) -> int:
    """Count records with a null or blank industry."""
    return sum(1 for record in records if _is_missing(record.industry))


def _find_override(
    record: LayoffRecord,
    overrides: Sequence[IndustryOverride],
) -> IndustryOverride | None:
    for override in overrides:
        if override.matches(record.company):
            return override
    return None


def _is_missing(industry: str | None) -> bool:
    return industry is None or not industry.strip()


def _validate_policy(policy: str) -> None:
    if policy not in SUPPORTED_IMPUTATION_POLICIES:
        raise ScrublineTransformError(
            f"Unsupported imputation policy '{policy}'. "
            f"Supported policies: {', '.join(SUPPORTED_IMPUTATION_POLICIES)}."
        )
