"""Unit tests for in-memory cleaning orchestration."""

from __future__ import annotations

from datetime import date
from itertools import combinations

import pytest

from core.errors import MalformedDateError
from core.types import IndustryOverride, LayoffRecord
from ingest.input_reader import read_layoff_records
from ingest.pipeline import clean_records
from tests.fixture_paths import raw_fixture


def _sample_records() -> list[LayoffRecord]:
    return read_layoff_records(raw_fixture("layoffs_sample.csv"))


def test_clean_records_collapses_duplicate_crypto_rows() -> None:
    """Identical padded rows should yield one trimmed Crypto record."""
    records = [
        _padded_acme(),
        _padded_acme(),
    ]

    result = clean_records(records, "most_frequent")

    assert result.records == (
        LayoffRecord(company="Acme", industry="Crypto", total_laid_off=100, date=date(2020, 3, 11)),
    )


def test_clean_records_imputes_airbnb_industry() -> None:
    """Airbnb rows should share the Travel industry after cleaning."""
    result = clean_records(_sample_records(), "most_frequent")

    airbnb = [record for record in result.records if record.company == "Airbnb"]
    assert [record.industry for record in airbnb] == ["Travel", "Travel"]


def test_clean_records_drops_only_unusable_rows() -> None:
    """Rows without magnitudes should be removed while partial rows stay."""
    result = clean_records(_sample_records(), "most_frequent")

    juul = [record for record in result.records if record.company == "Juul"]
    assert [record.total_laid_off for record in juul] == [400]
    assert all(
        record.total_laid_off is not None or record.percentage_laid_off is not None
        for record in result.records
    )


def test_clean_records_reports_stage_counts() -> None:
    """Stage results should record row counts in order."""
    result = clean_records(_sample_records(), "most_frequent")

    assert [(stage.name, stage.input_count, stage.output_count) for stage in result.stages] == [
        ("exact_deduplication", 12, 11),
        ("field_normalization", 11, 11),
        ("remove_unusable_records", 11, 10),
        ("blank_industry_to_null", 10, 10),
        ("industry_imputation:most_frequent", 10, 10),
    ]
    assert result.stages[-1].changed_count == 2


def test_clean_records_applies_overrides_last() -> None:
    """Overrides should fill companies imputation could not resolve."""
    overrides = (IndustryOverride(industry="Other", company_prefix="Bally"),)

    result = clean_records(_sample_records(), "most_frequent", overrides)

    assert result.recipe_steps[-1] == "industry_overrides"
    assert all(record.industry is not None for record in result.records)


def test_clean_records_leaves_unresolved_industry_without_overrides() -> None:
    """A company without siblings should keep a null industry."""
    result = clean_records(_sample_records(), "most_frequent")

    bally = [record for record in result.records if record.company.startswith("Bally")]
    assert bally[0].industry is None


def test_clean_records_output_satisfies_invariants() -> None:
    """Output should be duplicate-free, canonical, and typed."""
    result = clean_records(_sample_records(), "most_frequent")

    assert all(left != right for left, right in combinations(result.records, 2))
    assert all(isinstance(record.date, date) for record in result.records)
    assert {record.country for record in result.records} == {"Australia", "United States"}
    industries = {record.industry for record in result.records}
    variants = {value for value in industries if value and value.startswith("Crypto")}
    assert variants <= {"Crypto"}


def test_clean_records_is_stable_on_cleaned_output() -> None:
    """Cleaning an already clean snapshot should change nothing."""
    first = clean_records(_sample_records(), "most_frequent")

    second = clean_records(first.records, "most_frequent")

    assert second.records == first.records


def test_clean_records_raises_for_malformed_date() -> None:
    """A bad date should abort the run with a date error."""
    records = read_layoff_records(raw_fixture("layoffs_bad_date.csv"))

    with pytest.raises(MalformedDateError):
        clean_records(records, "most_frequent")


def _padded_acme() -> LayoffRecord:
    return LayoffRecord(
        company="Acme ",
        industry="Cryptocurrency",
        total_laid_off=100,
        date="03/11/2020",
    )
