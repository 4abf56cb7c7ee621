"""Manual industry override files.

This module loads and validates the YAML mapping of companies to
industries applied after automated imputation. Overrides are
externally researched data, so the schema is strict.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.constants import OVERRIDES_SCHEMA_VERSION
from core.errors import ScrublineOverrideError
from core.types import IndustryOverride

_ROOT_KEYS = frozenset({"version", "industry_overrides"})
_ENTRY_KEYS = frozenset({"company", "company_prefix", "industry"})


def load_industry_overrides(overrides_path: str) -> tuple[IndustryOverride, ...]:
    """Load and validate a YAML overrides file from disk.

    Args:
        overrides_path: File path to YAML overrides.

    Returns:
        Overrides in file order.

    Raises:
        ScrublineOverrideError: If file is missing, unparsable, or invalid.
    """
    payload = _load_yaml_payload(overrides_path)
    root_mapping = _expect_mapping(payload, "overrides root")
    unknown_keys = sorted(set(root_mapping) - _ROOT_KEYS)
    if unknown_keys:
        raise ScrublineOverrideError(
            f"Unsupported overrides keys: {', '.join(unknown_keys)}. "
            "Allowed keys are 'version' and 'industry_overrides'."
        )
    _validate_version(root_mapping)
    raw_entries = _expect_sequence(
        root_mapping.get("industry_overrides", []), "overrides field 'industry_overrides'"
    )
    return tuple(
        _parse_entry(raw_entry, index) for index, raw_entry in enumerate(raw_entries, 1)
    )


def _load_yaml_payload(overrides_path: str) -> object:
    overrides_file = Path(overrides_path).expanduser().resolve()
    if not overrides_file.exists():
        raise ScrublineOverrideError(
            f"Overrides file does not exist at {overrides_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(overrides_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise ScrublineOverrideError(
            f"Failed to read overrides at {overrides_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise ScrublineOverrideError(
            f"Failed to parse YAML overrides at {overrides_file}: {error}. Fix YAML syntax."
        ) from error
    if payload is None:
        raise ScrublineOverrideError(
            f"Overrides file at {overrides_file} is empty. "
            "Define 'version' and 'industry_overrides'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise ScrublineOverrideError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise ScrublineOverrideError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise ScrublineOverrideError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _validate_version(root_mapping: Mapping[str, object]) -> None:
    raw_version = root_mapping.get("version")
    if raw_version != OVERRIDES_SCHEMA_VERSION or isinstance(raw_version, bool):
        raise ScrublineOverrideError(
            f"Overrides field 'version' must be {OVERRIDES_SCHEMA_VERSION}, got {raw_version!r}."
        )


def _parse_entry(raw_entry: object, index: int) -> IndustryOverride:
    context = f"industry_overrides[{index}]"
    entry = _expect_mapping(raw_entry, context)
    unknown_keys = sorted(set(entry) - _ENTRY_KEYS)
    if unknown_keys:
        raise ScrublineOverrideError(f"Unsupported keys in {context}: {', '.join(unknown_keys)}.")
    industry = _expect_text(entry.get("industry"), f"{context}.industry")
    company = entry.get("company")
    company_prefix = entry.get("company_prefix")
    if (company is None) == (company_prefix is None):
        raise ScrublineOverrideError(
            f"Invalid {context}: set exactly one of 'company' or 'company_prefix'."
        )
    if company is not None:
        return IndustryOverride(
            industry=industry,
            company=_expect_text(company, f"{context}.company"),
        )
    return IndustryOverride(
        industry=industry,
        company_prefix=_expect_text(company_prefix, f"{context}.company_prefix"),
    )


def _expect_text(value: object, context: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    raise ScrublineOverrideError(f"Invalid {context}: expected non-empty string.")
