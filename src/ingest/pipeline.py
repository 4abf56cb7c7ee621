"""Cleaning orchestration for layoff datasets.

This module runs the ordered cleaning stages over explicit snapshots
and persists a raw staging version plus a cleaned child version.
"""

from __future__ import annotations

from typing import Callable, Sequence

from core.config import ScrublineConfig
from core.logging_config import get_logger
from core.overrides import load_industry_overrides
from core.types import (
    CleaningOptions,
    CleaningResult,
    CleaningRun,
    IndustryOverride,
    LayoffRecord,
    SnapshotManifest,
    SnapshotWriteRequest,
    StageResult,
)
from ingest.input_reader import read_layoff_records
from store.snapshot_store import SnapshotStore
from transforms.exact_deduplication import remove_exact_duplicates
from transforms.field_normalization import normalize_records
from transforms.null_resolution import (
    apply_industry_overrides,
    blank_industry_to_null,
    count_missing_industry,
    impute_missing_industry,
    remove_unusable_records,
)

_LOGGER = get_logger(__name__)

STAGING_RECIPE_STEP = "staging_copy"

Stage = tuple[str, Callable[[Sequence[LayoffRecord]], list[LayoffRecord]]]


class CleaningPipelineRunner:
    """Runner for one clean command against the snapshot store."""

    def __init__(self, options: CleaningOptions, config: ScrublineConfig) -> None:
        self._options = options
        self._config = config
        self._store = SnapshotStore(config)

    def run(self) -> CleaningRun:
        """Load, stage, clean, and persist a dataset.

        The cleaned snapshot is written only after every stage succeeds,
        so a failing stage leaves the staging snapshot as the latest
        version.
        """
        overrides = self._load_overrides()
        source_records = read_layoff_records(self._options.source_uri)
        staging = self._create_snapshot(
            tuple(source_records), (STAGING_RECIPE_STEP,), parent_version=None
        )
        result = clean_records(source_records, self._options.imputation_policy, overrides)
        cleaned = self._create_snapshot(
            result.records,
            staging.recipe_steps + result.recipe_steps,
            parent_version=staging.version_id,
        )
        _log_clean_completion(self._options, len(source_records), result, cleaned.version_id)
        return CleaningRun(
            staging_version=staging.version_id,
            cleaned_version=cleaned.version_id,
            stages=result.stages,
        )

    def _load_overrides(self) -> tuple[IndustryOverride, ...]:
        if not self._options.overrides_path:
            return ()
        return load_industry_overrides(self._options.overrides_path)

    def _create_snapshot(
        self,
        records: tuple[LayoffRecord, ...],
        recipe_steps: tuple[str, ...],
        parent_version: str | None,
    ) -> SnapshotManifest:
        write_request = SnapshotWriteRequest(
            dataset_name=self._options.dataset_name,
            records=records,
            recipe_steps=recipe_steps,
            parent_version=parent_version,
        )
        return self._store.create_snapshot(write_request)


def clean_dataset(options: CleaningOptions, config: ScrublineConfig) -> CleaningRun:
    """Run the cleaning pipeline and persist staging and cleaned snapshots.

    Args:
        options: Clean request options.
        config: Runtime configuration.

    Returns:
        Version ids and per-stage row counts.

    Raises:
        ScrublineIngestError: If the source cannot be loaded.
        MalformedDateError: If a date value fails strict parsing.
        ScrublineOverrideError: If the overrides file is invalid.
        ScrublineStoreError: If snapshot persistence fails.
    """
    runner = CleaningPipelineRunner(options, config)
    return runner.run()


def clean_records(
    records: Sequence[LayoffRecord],
    imputation_policy: str,
    overrides: Sequence[IndustryOverride] = (),
) -> CleaningResult:
    """Run every cleaning stage in memory.

    Each stage receives the complete output of the previous stage and
    returns a new list; input records are never mutated.

    Args:
        records: Raw input records.
        imputation_policy: Tie-break policy for sibling imputation.
        overrides: Optional manual industry overrides.

    Returns:
        Final records and per-stage row counts.
    """
    stages = _build_stages(imputation_policy, overrides)
    snapshot: list[LayoffRecord] = list(records)
    results: list[StageResult] = []
    for name, stage_fn in stages:
        output = stage_fn(snapshot)
        stage_result = _build_stage_result(name, snapshot, output)
        results.append(stage_result)
        _log_stage(stage_result, output)
        snapshot = output
    return CleaningResult(records=tuple(snapshot), stages=tuple(results))


def _build_stages(
    imputation_policy: str,
    overrides: Sequence[IndustryOverride],
) -> tuple[Stage, ...]:
    """Build the ordered stage list for one run."""
    stages: list[Stage] = [
        ("exact_deduplication", remove_exact_duplicates),
        ("field_normalization", normalize_records),
        ("remove_unusable_records", remove_unusable_records),
        ("blank_industry_to_null", blank_industry_to_null),
        (
            f"industry_imputation:{imputation_policy}",
            lambda snapshot: impute_missing_industry(snapshot, imputation_policy),
        ),
    ]
    if overrides:
        stages.append(
            ("industry_overrides", lambda snapshot: apply_industry_overrides(snapshot, overrides))
        )
    return tuple(stages)


def _build_stage_result(
    name: str,
    before: Sequence[LayoffRecord],
    after: Sequence[LayoffRecord],
) -> StageResult:
    """Count rows and in-place changes for one stage."""
    changed_count = 0
    if len(before) == len(after):
        changed_count = sum(1 for old, new in zip(before, after) if old != new)
    return StageResult(
        name=name,
        input_count=len(before),
        output_count=len(after),
        changed_count=changed_count,
    )


def _log_stage(stage_result: StageResult, output: Sequence[LayoffRecord]) -> None:
    _LOGGER.info(
        "stage_completed",
        stage=stage_result.name,
        input_count=stage_result.input_count,
        output_count=stage_result.output_count,
        changed_count=stage_result.changed_count,
        missing_industry=count_missing_industry(output),
    )


def _log_clean_completion(
    options: CleaningOptions,
    input_count: int,
    result: CleaningResult,
    version_id: str,
) -> None:
    """Log pipeline completion with contextual metadata."""
    _LOGGER.info(
        "clean_completed",
        dataset_name=options.dataset_name,
        source_uri=options.source_uri,
        input_count=input_count,
        output_count=len(result.records),
        version_id=version_id,
        imputation_policy=options.imputation_policy,
        overrides_path=options.overrides_path,
    )
