"""Python SDK for dataset operations.

This module exposes high-level APIs for cleaning, loading, reporting,
and exporting versioned layoff datasets backed by the snapshot store.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import ScrublineConfig
from core.constants import DEFAULT_REPORT_TOP_N
from core.types import (
    CleaningOptions,
    CleaningRun,
    LayoffRecord,
    QualityReport,
    SnapshotManifest,
)
from ingest.pipeline import clean_dataset
from store.record_export import export_records
from store.snapshot_store import SnapshotStore
from transforms.quality_report import build_quality_report


class ScrublineClient:
    """Primary SDK entry point for cleaning workflows."""

    def __init__(self, config: ScrublineConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or ScrublineConfig.from_env()
        self._store = SnapshotStore(self._config)

    @property
    def config(self) -> ScrublineConfig:
        """Return the runtime configuration."""
        return self._config

    def clean(self, options: CleaningOptions) -> CleaningRun:
        """Clean a source file into a versioned dataset.

        Args:
            options: Clean options.

        Returns:
            Staging and cleaned version ids with stage counts.

        Raises:
            ScrublineIngestError: If the source cannot be loaded.
            ScrublineTransformError: If a cleaning stage fails.
            ScrublineStoreError: If snapshot persistence fails.
        """
        return clean_dataset(options, self._config)

    def dataset(self, dataset_name: str) -> "Dataset":
        """Get dataset handle by name.

        Args:
            dataset_name: Dataset identifier.

        Returns:
            Dataset handle.
        """
        return Dataset(dataset_name, self._store, self._config.report_top_n)

    def with_data_root(self, data_root: str) -> "ScrublineClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        return ScrublineClient(replace(self._config, data_root=resolved_root))


class Dataset:
    """SDK dataset handle for versioned records."""

    def __init__(
        self,
        dataset_name: str,
        store: SnapshotStore,
        report_top_n: int = DEFAULT_REPORT_TOP_N,
    ) -> None:
        self._dataset_name = dataset_name
        self._store = store
        self._report_top_n = report_top_n

    @property
    def name(self) -> str:
        """Return dataset identifier."""
        return self._dataset_name

    def list_versions(self) -> list[SnapshotManifest]:
        """List all dataset versions.

        Returns:
            Ordered list of snapshot manifests.
        """
        return self._store.list_versions(self._dataset_name)

    def load_records(
        self,
        version_id: str | None = None,
    ) -> tuple[SnapshotManifest, list[LayoffRecord]]:
        """Load records for latest or target version.

        Args:
            version_id: Optional specific snapshot id.

        Returns:
            Pair of manifest and records.
        """
        return self._store.load_records(self._dataset_name, version_id)

    def report(
        self,
        version_id: str | None = None,
        top_n: int | None = None,
    ) -> QualityReport:
        """Summarize a version for acceptance checks.

        Args:
            version_id: Optional specific snapshot id.
            top_n: Number of largest layoff events to include; the
                configured ``report_top_n`` when omitted.

        Returns:
            Quality report of the version.
        """
        _, records = self.load_records(version_id)
        limit = self._report_top_n if top_n is None else top_n
        return build_quality_report(records, top_n=limit)

    def export(self, output_path: str, version_id: str | None = None) -> Path:
        """Export a version to CSV, JSONL, or Parquet.

        Args:
            output_path: Destination file path.
            version_id: Optional specific snapshot id.

        Returns:
            Written file path.
        """
        _, records = self.load_records(version_id)
        return export_records(records, output_path)
