"""Public SDK surface for Scrubline.

This module provides a stable import path for library users.
It re-exports the primary client, typed models, and pure stages.
"""

from __future__ import annotations

from core.config import ScrublineConfig
from core.errors import MalformedDateError, SchemaMismatchError, ScrublineError
from core.overrides import load_industry_overrides
from core.types import CleaningOptions, CleaningRun, LayoffRecord, QualityReport
from ingest.input_reader import read_layoff_records
from ingest.pipeline import clean_records
from store.dataset_sdk import Dataset, ScrublineClient
from transforms.quality_report import build_quality_report

__all__ = [
    "CleaningOptions",
    "CleaningRun",
    "Dataset",
    "LayoffRecord",
    "MalformedDateError",
    "QualityReport",
    "SchemaMismatchError",
    "ScrublineClient",
    "ScrublineConfig",
    "ScrublineError",
    "build_quality_report",
    "clean_records",
    "load_industry_overrides",
    "read_layoff_records",
]
