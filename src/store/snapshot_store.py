"""Snapshot store and metadata catalog.

This module persists immutable dataset versions with lineage metadata.
It provides create, list, and load operations for the SDK.
"""

from __future__ import annotations

import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, cast

from core.config import ScrublineConfig
from core.constants import (
    CATALOG_FILE_NAME,
    DATASETS_DIR_NAME,
    RECORDS_FILE_NAME,
    STAGING_TMP_PREFIX,
    VERSIONS_DIR_NAME,
)
from core.errors import ScrublineStoreError
from core.logging_config import get_logger
from core.types import LayoffRecord, SnapshotManifest, SnapshotWriteRequest
from store.catalog_io import (
    build_version_id,
    manifest_from_dict,
    read_catalog_file,
    update_catalog,
    write_manifest_file,
)
from store.parquet_mirror import write_parquet_mirror
from store.record_payload import read_layoff_records_jsonl, write_layoff_records_jsonl

_LOGGER = get_logger(__name__)


class SnapshotStore:
    """Immutable snapshot store implementation.

    This class owns dataset directories, version manifests,
    and catalog updates. Versions become visible all at once.
    """

    def __init__(self, config: ScrublineConfig) -> None:
        """Initialize snapshot store from config.

        Args:
            config: Runtime configuration.
        """
        self._config = config
        self._datasets_root = config.data_root / DATASETS_DIR_NAME
        self._datasets_root.mkdir(parents=True, exist_ok=True)

    def create_snapshot(self, request: SnapshotWriteRequest) -> SnapshotManifest:
        """Create a new immutable dataset snapshot.

        Files are written into a hidden pending directory which is renamed
        into place only after every file is complete.

        Args:
            request: Snapshot write request payload.

        Returns:
            Persisted snapshot manifest.

        Raises:
            ScrublineStoreError: If persistence fails.
        """
        dataset_root = self._dataset_root(request.dataset_name)
        version_id = build_version_id(request.dataset_name, request.records)
        versions_root = dataset_root / VERSIONS_DIR_NAME
        version_dir = versions_root / version_id
        pending_dir = versions_root / f"{STAGING_TMP_PREFIX}{version_id}"
        manifest = SnapshotManifest(
            dataset_name=request.dataset_name,
            version_id=version_id,
            created_at=datetime.now(timezone.utc),
            parent_version=request.parent_version,
            recipe_steps=request.recipe_steps,
            record_count=len(request.records),
        )
        try:
            pending_dir.mkdir(parents=True, exist_ok=False)
            records = list(request.records)
            write_layoff_records_jsonl(pending_dir / RECORDS_FILE_NAME, records)
            write_parquet_mirror(pending_dir, records)
            write_manifest_file(pending_dir, manifest)
            pending_dir.rename(version_dir)
        except OSError as error:
            shutil.rmtree(pending_dir, ignore_errors=True)
            raise ScrublineStoreError(
                f"Failed to persist snapshot {version_id} at {version_dir}: {error}. "
                "Check write permissions and available disk space."
            ) from error
        except ScrublineStoreError:
            shutil.rmtree(pending_dir, ignore_errors=True)
            raise
        except Exception as error:
            shutil.rmtree(pending_dir, ignore_errors=True)
            raise ScrublineStoreError(
                f"Failed to persist snapshot {version_id}: {error}. "
                "No version was written; fix the record payload and retry."
            ) from error
        update_catalog(dataset_root / CATALOG_FILE_NAME, manifest)
        _LOGGER.info(
            "snapshot_created",
            dataset_name=request.dataset_name,
            version_id=version_id,
            record_count=manifest.record_count,
            parent_version=manifest.parent_version,
            recipe_steps=list(manifest.recipe_steps),
        )
        return manifest

    def list_versions(self, dataset_name: str) -> list[SnapshotManifest]:
        """List manifests for a dataset sorted by creation time.

        Args:
            dataset_name: Dataset identifier.

        Returns:
            Ordered manifest list.

        Raises:
            ScrublineStoreError: If dataset catalog does not exist.
        """
        catalog_path = self._dataset_root(dataset_name) / CATALOG_FILE_NAME
        catalog = read_catalog_file(catalog_path)
        version_payloads = cast(list[dict[str, Any]], catalog["versions"])
        versions = [manifest_from_dict(item) for item in version_payloads]
        return sorted(versions, key=lambda item: item.created_at)

    def load_records(
        self,
        dataset_name: str,
        version_id: str | None = None,
    ) -> tuple[SnapshotManifest, list[LayoffRecord]]:
        """Load records for a dataset snapshot.

        Args:
            dataset_name: Dataset identifier.
            version_id: Optional snapshot version; latest when omitted.

        Returns:
            Pair of manifest and loaded records.

        Raises:
            ScrublineStoreError: If dataset/version is missing or unreadable.
        """
        manifest = self._resolve_manifest(dataset_name, version_id)
        records_path = self._version_dir(dataset_name, manifest.version_id) / RECORDS_FILE_NAME
        if not records_path.exists():
            raise ScrublineStoreError(
                f"Failed to load snapshot {manifest.version_id}: missing {RECORDS_FILE_NAME}."
            )
        try:
            records = read_layoff_records_jsonl(records_path)
        except ValueError as error:
            raise ScrublineStoreError(
                f"Failed to parse snapshot payload at {records_path}: {error}. "
                "Recreate the dataset snapshot."
            ) from error
        return manifest, records

    def _dataset_root(self, dataset_name: str) -> Path:
        """Return dataset root path and ensure base directories.

        Args:
            dataset_name: Dataset identifier.

        Returns:
            Dataset root path.
        """
        dataset_root = self._datasets_root / dataset_name
        (dataset_root / VERSIONS_DIR_NAME).mkdir(parents=True, exist_ok=True)
        return dataset_root

    def _resolve_manifest(self, dataset_name: str, version_id: str | None) -> SnapshotManifest:
        """Resolve a target manifest.

        Args:
            dataset_name: Dataset identifier.
            version_id: Optional version id.

        Returns:
            Resolved snapshot manifest.

        Raises:
            ScrublineStoreError: If catalog or target version is missing.
        """
        manifests = self.list_versions(dataset_name)
        if not manifests:
            raise ScrublineStoreError(
                f"No versions exist for dataset '{dataset_name}'. "
                "Run clean before reading snapshots."
            )
        if version_id is None:
            return manifests[-1]
        for manifest in manifests:
            if manifest.version_id == version_id:
                return manifest
        raise ScrublineStoreError(
            f"Version '{version_id}' not found for dataset '{dataset_name}'. "
            "Use list_versions to discover valid version ids."
        )

    def _version_dir(self, dataset_name: str, version_id: str) -> Path:
        """Return snapshot version directory.

        Raises:
            ScrublineStoreError: If version directory is missing.
        """
        version_dir = self._dataset_root(dataset_name) / VERSIONS_DIR_NAME / version_id
        if not version_dir.exists():
            raise ScrublineStoreError(
                f"Missing snapshot directory for {dataset_name}:{version_id} at {version_dir}. "
                "Recreate the snapshot before loading or exporting."
            )
        return version_dir
