"""Core constants used across Scrubline modules.

This module centralizes file layout names and cleaning vocabulary.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".scrubline")
DATASETS_DIR_NAME = "datasets"
VERSIONS_DIR_NAME = "versions"
CATALOG_FILE_NAME = "catalog.json"
MANIFEST_FILE_NAME = "manifest.json"
RECORDS_FILE_NAME = "records.jsonl"
PARQUET_FILE_NAME = "records.parquet"
STAGING_TMP_PREFIX = ".staging-"
HASH_ALGORITHM = "sha256"
SUPPORTED_INPUT_EXTENSIONS = (".csv", ".jsonl", ".parquet")
SUPPORTED_EXPORT_EXTENSIONS = (".csv", ".jsonl", ".parquet")
NULL_TEXT_MARKER = "NULL"
SOURCE_DATE_FORMAT = "%m/%d/%Y"
SOURCE_DATE_PATTERN = r"\d{2}/\d{2}/\d{4}"
CRYPTO_INDUSTRY_PREFIX = "Crypto"
CRYPTO_CANONICAL_INDUSTRY = "Crypto"
UNITED_STATES_PREFIX = "United States"
COUNTRY_TRAILING_PUNCTUATION = "."
DEFAULT_IMPUTATION_POLICY = "most_frequent"
SUPPORTED_IMPUTATION_POLICIES = ("most_frequent", "lexicographic", "first_seen")
DEFAULT_REPORT_TOP_N = 10
OVERRIDES_SCHEMA_VERSION = 1
