"""Shared typed models.

This module defines immutable data models used by ingest, transforms,
store, and SDK layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Mapping

from core.constants import DEFAULT_IMPUTATION_POLICY

BusinessKey = tuple[object, ...]


@dataclass(frozen=True)
class LayoffRecord:
    """One company layoff event.

    Attributes:
        company: Company name.
        location: Headquarters location.
        industry: Industry category, ``None`` when unknown.
        total_laid_off: Number of employees laid off.
        percentage_laid_off: Decimal text fraction of workforce laid off.
        date: Event date; raw text before normalization, ``date`` after.
        stage: Funding stage label.
        country: Country name.
        funds_raised_millions: Funds raised in millions of dollars.
    """

    company: str
    location: str | None = None
    industry: str | None = None
    total_laid_off: int | None = None
    percentage_laid_off: str | None = None
    date: date | str | None = None
    stage: str | None = None
    country: str | None = None
    funds_raised_millions: int | None = None

    def business_key(self) -> BusinessKey:
        """Return the nine-field tuple used for duplicate detection.

        ``None`` compares equal to ``None`` inside the tuple, matching
        partition semantics of a window function over all columns.
        """
        return (
            self.company,
            self.location,
            self.industry,
            self.total_laid_off,
            self.percentage_laid_off,
            self.date,
            self.stage,
            self.country,
            self.funds_raised_millions,
        )


@dataclass(frozen=True)
class RankedRecord:
    """Record paired with its rank inside its duplicate class.

    Attributes:
        record: Ranked record.
        row_num: One-based position among identical records.
    """

    record: LayoffRecord
    row_num: int


@dataclass(frozen=True)
class IndustryOverride:
    """Manually supplied industry for companies without known siblings.

    Exactly one of ``company`` and ``company_prefix`` is set.

    Attributes:
        industry: Industry value to assign.
        company: Exact company name to match.
        company_prefix: Company name prefix to match.
    """

    industry: str
    company: str | None = None
    company_prefix: str | None = None

    def matches(self, company: str) -> bool:
        """Return whether this override applies to a company name."""
        if self.company is not None:
            return company == self.company
        return self.company_prefix is not None and company.startswith(self.company_prefix)


@dataclass(frozen=True)
class CleaningOptions:
    """Clean command options.

    Attributes:
        dataset_name: Dataset name to create/update.
        source_uri: Input CSV, JSONL, or Parquet file.
        overrides_path: Optional YAML file with manual industry overrides.
        imputation_policy: Tie-break policy for conflicting sibling industries.
    """

    dataset_name: str
    source_uri: str
    overrides_path: str | None = None
    imputation_policy: str = DEFAULT_IMPUTATION_POLICY


@dataclass(frozen=True)
class StageResult:
    """Row counts observed around one cleaning stage.

    Attributes:
        name: Stage name recorded in the snapshot recipe.
        input_count: Records entering the stage.
        output_count: Records leaving the stage.
        changed_count: Records whose values changed in place.
    """

    name: str
    input_count: int
    output_count: int
    changed_count: int = 0


@dataclass(frozen=True)
class CleaningResult:
    """In-memory outcome of a full pipeline pass.

    Attributes:
        records: Final cleaned records.
        stages: Ordered per-stage row counts.
    """

    records: tuple[LayoffRecord, ...]
    stages: tuple[StageResult, ...]

    @property
    def recipe_steps(self) -> tuple[str, ...]:
        """Return ordered stage names."""
        return tuple(stage.name for stage in self.stages)


@dataclass(frozen=True)
class SnapshotManifest:
    """Immutable snapshot metadata for versioning.

    Attributes:
        dataset_name: Logical dataset identifier.
        version_id: Immutable snapshot id.
        created_at: UTC creation timestamp.
        parent_version: Previous version id when derived.
        recipe_steps: Ordered stages used to create snapshot.
        record_count: Number of records in snapshot.
    """

    dataset_name: str
    version_id: str
    created_at: datetime
    parent_version: str | None
    recipe_steps: tuple[str, ...]
    record_count: int


@dataclass(frozen=True)
class SnapshotWriteRequest:
    """Request payload for snapshot persistence.

    Attributes:
        dataset_name: Logical dataset identifier.
        records: Records to persist.
        recipe_steps: Ordered list of stage names.
        parent_version: Optional parent version id.
    """

    dataset_name: str
    records: tuple[LayoffRecord, ...]
    recipe_steps: tuple[str, ...]
    parent_version: str | None = None


@dataclass(frozen=True)
class CleaningRun:
    """Persisted outcome of one clean command.

    Attributes:
        staging_version: Version id of the raw staging snapshot.
        cleaned_version: Version id of the cleaned snapshot.
        stages: Ordered per-stage row counts.
    """

    staging_version: str
    cleaned_version: str
    stages: tuple[StageResult, ...]


@dataclass(frozen=True)
class QualityReport:
    """Read-only summary of a cleaned snapshot.

    Attributes:
        record_count: Total records.
        distinct_counts: Distinct non-null values per categorical column.
        earliest_date: Minimum event date, if any.
        latest_date: Maximum event date, if any.
        null_counts: Null value count per business column.
        largest_layoffs: Records with the highest ``total_laid_off``.
    """

    record_count: int
    distinct_counts: Mapping[str, int]
    earliest_date: date | None
    latest_date: date | None
    null_counts: Mapping[str, int]
    largest_layoffs: tuple[LayoffRecord, ...] = field(default_factory=tuple)

