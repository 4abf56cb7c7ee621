"""Unit tests for null handling transforms."""

from __future__ import annotations

import pytest

from core.errors import ScrublineTransformError
from core.types import IndustryOverride, LayoffRecord
from transforms.null_resolution import (
    apply_industry_overrides,
    blank_industry_to_null,
    build_industry_lookup,
    count_missing_industry,
    impute_missing_industry,
    remove_unusable_records,
)


def test_remove_unusable_records_drops_rows_without_any_magnitude() -> None:
    """Rows with both magnitude fields null should be removed."""
    unusable = LayoffRecord(company="Juul", total_laid_off=None, percentage_laid_off=None)
    total_only = LayoffRecord(company="Acme", total_laid_off=50, percentage_laid_off=None)
    percentage_only = LayoffRecord(company="Gemini", percentage_laid_off="0.1")

    kept = remove_unusable_records([unusable, total_only, percentage_only])

    assert kept == [total_only, percentage_only]


def test_blank_industry_to_null_converts_whitespace_values() -> None:
    """Blank industries should become null while others are unchanged."""
    records = [
        LayoffRecord(company="A", industry=""),
        LayoffRecord(company="B", industry="  "),
        LayoffRecord(company="C", industry="Travel"),
    ]

    converted = blank_industry_to_null(records)

    assert [record.industry for record in converted] == [None, None, "Travel"]


def test_impute_missing_industry_copies_sibling_value() -> None:
    """A null industry should be filled from the same company."""
    records = [
        LayoffRecord(company="Airbnb", industry=None, total_laid_off=30),
        LayoffRecord(company="Airbnb", industry="Travel", total_laid_off=1900),
    ]

    imputed = impute_missing_industry(records, "most_frequent")

    assert [record.industry for record in imputed] == ["Travel", "Travel"]


def test_impute_missing_industry_fills_blank_values() -> None:
    """Blank industries should be treated like nulls."""
    records = [
        LayoffRecord(company="Airbnb", industry=""),
        LayoffRecord(company="Airbnb", industry="Travel"),
    ]

    imputed = impute_missing_industry(records, "first_seen")

    assert imputed[0].industry == "Travel"


def test_impute_missing_industry_leaves_companies_without_siblings() -> None:
    """Companies with no known industry should stay null."""
    records = [LayoffRecord(company="Bally's Interactive", industry=None, total_laid_off=1)]

    imputed = impute_missing_industry(records, "most_frequent")

    assert imputed[0].industry is None


def test_impute_missing_industry_never_reduces_known_values() -> None:
    """Missing industry count should not grow after imputation."""
    records = [
        LayoffRecord(company="A", industry=None),
        LayoffRecord(company="A", industry="Retail"),
        LayoffRecord(company="B", industry=None),
        LayoffRecord(company="C", industry="Food"),
    ]

    imputed = impute_missing_industry(records, "lexicographic")

    assert count_missing_industry(imputed) <= count_missing_industry(records)
    assert [record.industry for record in imputed if record.company != "A"] == [None, "Food"]


def test_impute_missing_industry_does_not_overwrite_known_values() -> None:
    """Records with an industry should keep it even when siblings differ."""
    records = [
        LayoffRecord(company="A", industry="Retail"),
        LayoffRecord(company="A", industry="Food"),
        LayoffRecord(company="A", industry="Food"),
    ]

    imputed = impute_missing_industry(records, "most_frequent")

    assert imputed == records


@pytest.mark.parametrize(
    ("policy", "expected"),
    [
        ("most_frequent", "Food"),
        ("lexicographic", "Education"),
        ("first_seen", "Retail"),
    ],
)
def test_build_industry_lookup_resolves_conflicts_by_policy(policy: str, expected: str) -> None:
    """Conflicting siblings should resolve deterministically per policy."""
    records = [
        LayoffRecord(company="A", industry="Retail"),
        LayoffRecord(company="A", industry="Food"),
        LayoffRecord(company="A", industry=None),
        LayoffRecord(company="A", industry="Food"),
        LayoffRecord(company="A", industry="Education"),
    ]

    lookup = build_industry_lookup(records, policy)

    assert lookup == {"A": expected}


def test_build_industry_lookup_breaks_frequency_ties_lexicographically() -> None:
    """Equal counts under most_frequent should pick the smallest value."""
    records = [
        LayoffRecord(company="A", industry="Retail"),
        LayoffRecord(company="A", industry="Food"),
    ]

    assert build_industry_lookup(records, "most_frequent") == {"A": "Food"}


def test_build_industry_lookup_rejects_unknown_policy() -> None:
    """Unsupported policy names should raise a transform error."""
    with pytest.raises(ScrublineTransformError):
        build_industry_lookup([], "random")


def test_apply_industry_overrides_patches_only_missing_values() -> None:
    """Overrides should fill nulls and leave known industries alone."""
    records = [
        LayoffRecord(company="Bally's Interactive", industry=None),
        LayoffRecord(company="Ballyhoo", industry="Media"),
        LayoffRecord(company="Zulu", industry=None),
    ]
    overrides = (IndustryOverride(industry="Other", company_prefix="Bally"),)

    patched = apply_industry_overrides(records, overrides)

    assert [record.industry for record in patched] == ["Other", "Media", None]


def test_apply_industry_overrides_uses_first_match() -> None:
    """The first matching override in order should win."""
    records = [LayoffRecord(company="Bally's Interactive")]
    overrides = (
        IndustryOverride(industry="Gaming", company="Bally's Interactive"),
        IndustryOverride(industry="Other", company_prefix="Bally"),
    )

    patched = apply_industry_overrides(records, overrides)

    assert patched[0].industry == "Gaming"
