"""Unit tests for snapshot store persistence."""

from __future__ import annotations

import json
from datetime import date

import pyarrow.parquet as pq
import pytest

from core.config import ScrublineConfig
from core.errors import ScrublineStoreError
from core.types import LayoffRecord, SnapshotWriteRequest
from store.snapshot_store import SnapshotStore


def _cleaned_record() -> LayoffRecord:
    return LayoffRecord(
        company="Airbnb",
        location="SF Bay Area",
        industry="Travel",
        total_laid_off=1900,
        percentage_laid_off="0.25",
        date=date(2020, 5, 5),
        stage="Private Equity",
        country="United States",
        funds_raised_millions=None,
    )


def _request(*records: LayoffRecord, parent_version: str | None = None) -> SnapshotWriteRequest:
    return SnapshotWriteRequest(
        dataset_name="demo",
        records=records,
        recipe_steps=("step",),
        parent_version=parent_version,
    )


def test_create_snapshot_persists_manifest(config: ScrublineConfig) -> None:
    """Store should create an immutable version with metadata."""
    store = SnapshotStore(config)

    manifest = store.create_snapshot(_request(_cleaned_record()))

    assert manifest.dataset_name == "demo" and manifest.record_count == 1


def test_load_records_round_trips_typed_dates(config: ScrublineConfig) -> None:
    """Parsed dates should reload as dates, raw text as text."""
    store = SnapshotStore(config)
    raw = LayoffRecord(company="Acme ", date="03/11/2020")
    store.create_snapshot(_request(_cleaned_record(), raw))

    _, records = store.load_records("demo")

    assert records == [_cleaned_record(), raw]


def test_create_snapshot_writes_parquet_mirror(config: ScrublineConfig) -> None:
    """Each version should carry a Parquet copy with business columns only."""
    store = SnapshotStore(config)
    manifest = store.create_snapshot(_request(_cleaned_record()))
    version_dir = config.data_root / "datasets" / "demo" / "versions" / manifest.version_id

    table = pq.read_table(version_dir / "records.parquet")

    assert "row_num" not in table.column_names
    assert table.column("date").to_pylist() == [date(2020, 5, 5)]


def test_create_snapshot_leaves_no_pending_directories(config: ScrublineConfig) -> None:
    """Only the renamed version directory should remain after a write."""
    store = SnapshotStore(config)
    manifest = store.create_snapshot(_request(_cleaned_record()))
    versions_root = config.data_root / "datasets" / "demo" / "versions"

    assert [path.name for path in versions_root.iterdir()] == [manifest.version_id]


def test_create_snapshot_writes_mixed_dates_as_text(config: ScrublineConfig) -> None:
    """Mixed parsed and raw dates should mirror as one text column."""
    store = SnapshotStore(config)
    raw = LayoffRecord(company="Acme ", date="03/11/2020")
    manifest = store.create_snapshot(_request(_cleaned_record(), raw))
    version_dir = config.data_root / "datasets" / "demo" / "versions" / manifest.version_id

    table = pq.read_table(version_dir / "records.parquet")

    assert table.column("date").to_pylist() == ["2020-05-05", "03/11/2020"]


def test_create_snapshot_removes_pending_directory_on_failure(
    config: ScrublineConfig,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A failed write should raise a store error and leave no version behind."""
    store = SnapshotStore(config)

    def _fail_mirror(*_args: object) -> None:
        raise RuntimeError("mirror exploded")

    monkeypatch.setattr("store.snapshot_store.write_parquet_mirror", _fail_mirror)

    with pytest.raises(ScrublineStoreError, match="mirror exploded"):
        store.create_snapshot(_request(_cleaned_record()))
    versions_root = config.data_root / "datasets" / "demo" / "versions"
    assert list(versions_root.iterdir()) == []
    assert not (config.data_root / "datasets" / "demo" / "catalog.json").exists()


def test_list_versions_tracks_lineage(config: ScrublineConfig) -> None:
    """Child versions should point to their parent in the catalog."""
    store = SnapshotStore(config)
    parent = store.create_snapshot(_request(_cleaned_record()))
    child = store.create_snapshot(_request(_cleaned_record(), parent_version=parent.version_id))

    versions = store.list_versions("demo")

    assert [item.version_id for item in versions] == [parent.version_id, child.version_id]
    assert versions[-1].parent_version == parent.version_id
    catalog = json.loads((config.data_root / "datasets" / "demo" / "catalog.json").read_text())
    assert catalog["latest_version"] == child.version_id


def test_load_records_reads_specific_version(config: ScrublineConfig) -> None:
    """An explicit version id should select that snapshot."""
    store = SnapshotStore(config)
    first = store.create_snapshot(_request(LayoffRecord(company="First")))
    store.create_snapshot(_request(LayoffRecord(company="Second")))

    manifest, records = store.load_records("demo", first.version_id)

    assert manifest.version_id == first.version_id and records[0].company == "First"


def test_load_records_raises_for_unknown_version(config: ScrublineConfig) -> None:
    """Unknown version ids should raise store errors."""
    store = SnapshotStore(config)
    store.create_snapshot(_request(_cleaned_record()))

    with pytest.raises(ScrublineStoreError):
        store.load_records("demo", "missing-version")


def test_load_records_raises_for_unknown_dataset(config: ScrublineConfig) -> None:
    """Loading should fail when dataset catalog is missing."""
    store = SnapshotStore(config)

    with pytest.raises(ScrublineStoreError):
        store.load_records("missing")


@pytest.mark.parametrize(
    ("field", "value"),
    [("record_count", "12"), ("record_count", True), ("recipe_steps", "step")],
)
def test_list_versions_rejects_mistyped_manifest_fields(
    config: ScrublineConfig,
    field: str,
    value: object,
) -> None:
    """Catalog entries with wrong field types should raise store errors."""
    store = SnapshotStore(config)
    store.create_snapshot(_request(_cleaned_record()))
    catalog_path = config.data_root / "datasets" / "demo" / "catalog.json"
    catalog = json.loads(catalog_path.read_text())
    catalog["versions"][0][field] = value
    catalog_path.write_text(json.dumps(catalog))

    with pytest.raises(ScrublineStoreError, match=field):
        store.list_versions("demo")
