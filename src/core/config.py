"""Runtime configuration model for Scrubline.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_DATA_ROOT,
    DEFAULT_IMPUTATION_POLICY,
    DEFAULT_REPORT_TOP_N,
    SUPPORTED_IMPUTATION_POLICIES,
)
from core.errors import ScrublineConfigError


@dataclass(frozen=True)
class ScrublineConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for catalogs and snapshots.
        imputation_policy: Default tie-break policy for industry imputation.
        report_top_n: Number of largest layoff events listed in reports.
    """

    data_root: Path
    imputation_policy: str
    report_top_n: int

    @classmethod
    def from_env(cls) -> "ScrublineConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ScrublineConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("SCRUBLINE_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        policy_value = os.getenv("SCRUBLINE_IMPUTATION_POLICY", DEFAULT_IMPUTATION_POLICY)
        top_n_value = os.getenv("SCRUBLINE_REPORT_TOP_N", str(DEFAULT_REPORT_TOP_N))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            imputation_policy=_parse_imputation_policy(policy_value),
            report_top_n=_parse_report_top_n(top_n_value),
        )


def _parse_imputation_policy(raw_value: str) -> str:
    """Validate the imputation policy environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Normalized policy name.

    Raises:
        ScrublineConfigError: If the policy is not supported.
    """
    policy = raw_value.strip().lower()
    if policy not in SUPPORTED_IMPUTATION_POLICIES:
        raise ScrublineConfigError(
            "Invalid SCRUBLINE_IMPUTATION_POLICY value: "
            f"expected one of {', '.join(SUPPORTED_IMPUTATION_POLICIES)}, got '{raw_value}'."
        )
    return policy


def _parse_report_top_n(raw_value: str) -> int:
    """Parse the report size environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed non-negative integer.

    Raises:
        ScrublineConfigError: If value is not a non-negative integer.
    """
    try:
        top_n = int(raw_value)
    except ValueError as error:
        raise ScrublineConfigError(
            "Invalid SCRUBLINE_REPORT_TOP_N value: "
            f"expected integer, got '{raw_value}'. "
            "Set SCRUBLINE_REPORT_TOP_N to a numeric value."
        ) from error
    if top_n < 0:
        raise ScrublineConfigError(
            f"Invalid SCRUBLINE_REPORT_TOP_N value: expected >= 0, got {top_n}."
        )
    return top_n
