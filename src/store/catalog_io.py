"""Catalog and manifest persistence helpers.

This module isolates JSON catalog IO and version id generation.
It keeps snapshot store orchestration focused on business flow.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, cast

from core.constants import HASH_ALGORITHM, MANIFEST_FILE_NAME
from core.errors import ScrublineStoreError
from core.types import LayoffRecord, SnapshotManifest
from store.record_payload import layoff_record_to_payload


def build_version_id(dataset_name: str, records: tuple[LayoffRecord, ...]) -> str:
    """Build a version id from dataset name, timestamp, and content digest.

    Args:
        dataset_name: Dataset identifier.
        records: Snapshot records.

    Returns:
        Version id string.
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    hasher = hashlib.new(HASH_ALGORITHM)
    for record in records:
        hasher.update(json.dumps(layoff_record_to_payload(record), sort_keys=True).encode("utf-8"))
        hasher.update(b"\n")
    return f"{dataset_name}-{timestamp}-{hasher.hexdigest()[:10]}"


def write_manifest_file(version_dir: Path, manifest: SnapshotManifest) -> None:
    """Write per-version manifest file.

    Args:
        version_dir: Snapshot version directory.
        manifest: Manifest payload.
    """
    manifest_path = version_dir / MANIFEST_FILE_NAME
    manifest_path.write_text(
        json.dumps(_manifest_to_dict(manifest), indent=2) + "\n", encoding="utf-8"
    )


def update_catalog(catalog_path: Path, manifest: SnapshotManifest) -> None:
    """Append manifest entry to dataset catalog.

    The catalog is replaced through a rename so readers see either the
    previous or the updated version list.

    Args:
        catalog_path: Catalog JSON path.
        manifest: Manifest to append.
    """
    if catalog_path.exists():
        catalog = read_catalog_file(catalog_path)
    else:
        catalog = {"latest_version": None, "versions": []}
    versions = cast(list[dict[str, Any]], catalog["versions"])
    versions.append(_manifest_to_dict(manifest))
    catalog["latest_version"] = manifest.version_id
    pending_path = catalog_path.with_suffix(".json.tmp")
    pending_path.write_text(json.dumps(catalog, indent=2) + "\n", encoding="utf-8")
    pending_path.replace(catalog_path)


def read_catalog_file(catalog_path: Path) -> dict[str, Any]:
    """Read and validate dataset catalog payload.

    Args:
        catalog_path: Catalog JSON path.

    Returns:
        Parsed catalog object.

    Raises:
        ScrublineStoreError: If catalog is missing or invalid.
    """
    if not catalog_path.exists():
        raise ScrublineStoreError(
            f"Dataset catalog not found at {catalog_path}. "
            "Run clean before requesting versions."
        )
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise ScrublineStoreError(
            f"Failed to parse dataset catalog at {catalog_path}: {error.msg}. "
            "Recreate the dataset catalog from source snapshots."
        ) from error
    if not isinstance(payload, dict) or not isinstance(payload.get("versions"), list):
        raise ScrublineStoreError(
            f"Failed to parse dataset catalog at {catalog_path}: "
            "expected an object with a 'versions' list. Recreate the catalog."
        )
    return payload


def manifest_from_dict(payload: dict[str, Any]) -> SnapshotManifest:
    """Deserialize manifest payload from dictionary.

    Args:
        payload: Manifest dictionary.

    Returns:
        Typed snapshot manifest.

    Raises:
        ScrublineStoreError: If a field is missing or has the wrong type.
    """
    try:
        version_id = payload["version_id"]
        recipe_steps = payload["recipe_steps"]
        record_count = payload["record_count"]
        parent_version = payload["parent_version"]
        created_at = datetime.fromisoformat(str(payload["created_at"]))
        dataset_name = str(payload["dataset_name"])
    except (KeyError, TypeError, ValueError) as error:
        raise ScrublineStoreError(
            f"Invalid manifest entry {payload!r}: {error}. Recreate the dataset catalog."
        ) from error
    steps_valid = isinstance(recipe_steps, list) and all(
        isinstance(step, str) for step in recipe_steps
    )
    if not steps_valid:
        raise ScrublineStoreError(
            f"Invalid manifest {version_id}: recipe_steps must be a list of strings."
        )
    if isinstance(record_count, bool) or not isinstance(record_count, int) or record_count < 0:
        raise ScrublineStoreError(
            f"Invalid manifest {version_id}: record_count must be a non-negative integer."
        )
    if parent_version is not None and not isinstance(parent_version, str):
        raise ScrublineStoreError(
            f"Invalid manifest {version_id}: parent_version must be a string or null."
        )
    return SnapshotManifest(
        dataset_name=dataset_name,
        version_id=str(version_id),
        created_at=created_at,
        parent_version=parent_version or None,
        recipe_steps=tuple(recipe_steps),
        record_count=record_count,
    )


def _manifest_to_dict(manifest: SnapshotManifest) -> dict[str, Any]:
    manifest_dict = asdict(manifest)
    manifest_dict["created_at"] = manifest.created_at.isoformat()
    manifest_dict["recipe_steps"] = list(manifest.recipe_steps)
    return manifest_dict
