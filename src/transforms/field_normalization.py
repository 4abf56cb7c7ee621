"""Field canonicalization transform.

This module trims company names, collapses crypto industry variants,
drops trailing periods from United States country names, and parses
strict ``MM/DD/YYYY`` date text into calendar dates.
"""

from __future__ import annotations

import re
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable

from core.constants import (
    COUNTRY_TRAILING_PUNCTUATION,
    CRYPTO_CANONICAL_INDUSTRY,
    CRYPTO_INDUSTRY_PREFIX,
    SOURCE_DATE_FORMAT,
    SOURCE_DATE_PATTERN,
    UNITED_STATES_PREFIX,
)
from core.errors import MalformedDateError
from core.types import LayoffRecord

_DATE_PATTERN = re.compile(SOURCE_DATE_PATTERN)


def normalize_records(records: Iterable[LayoffRecord]) -> list[LayoffRecord]:
    """Normalize every record field by field.

    Already-normalized records pass through unchanged, so the stage is
    safe to rerun on its own output.

    Args:
        records: Records to normalize.

    Returns:
        Normalized records in input order.

    Raises:
        MalformedDateError: If any date text fails strict parsing.
    """
    return [normalize_record(record) for record in records]


def normalize_record(record: LayoffRecord) -> LayoffRecord:
    """Apply company, industry, country, and date rules in order.

    Args:
        record: Record to normalize.

    Returns:
        Record with canonical field values.

    Raises:
        MalformedDateError: If date text fails strict parsing.
    """
    normalized = replace(
        record,
        company=normalize_company(record.company),
        industry=normalize_industry(record.industry),
        country=normalize_country(record.country),
        date=parse_event_date(record.date),
    )
    return record if normalized == record else normalized


def normalize_company(company: str) -> str:
    """Strip leading and trailing whitespace from a company name."""
    return company.strip()


def normalize_industry(industry: str | None) -> str | None:
    """Collapse every ``Crypto*`` variant into the canonical value.

    The match is a case-sensitive prefix test on the stripped value, so
    new variants such as ``Crypto Assets`` also normalize.
    """
    if industry is None:
        return None
    if industry.strip().startswith(CRYPTO_INDUSTRY_PREFIX):
        return CRYPTO_CANONICAL_INDUSTRY
    return industry


def normalize_country(country: str | None) -> str | None:
    """Remove trailing periods from ``United States`` country variants.

    Other countries are left untouched.
    """
    if country is None or not country.startswith(UNITED_STATES_PREFIX):
        return country
    return country.rstrip(COUNTRY_TRAILING_PUNCTUATION)


def parse_event_date(value: date | str | None) -> date | None:
    """Parse strict ``MM/DD/YYYY`` text into a calendar date.

    Args:
        value: Raw date text, an already parsed date, or ``None``.
            Datetimes are truncated to their calendar day.

    Returns:
        Parsed date, or ``None`` when the value is null.

    Raises:
        MalformedDateError: If text does not match the exact format or
            names an impossible calendar day.
    """
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    if not _DATE_PATTERN.fullmatch(value):
        raise MalformedDateError(
            f"Invalid date text '{value}': expected MM/DD/YYYY with two-digit month "
            "and day. Fix the source value before cleaning."
        )
    try:
        return datetime.strptime(value, SOURCE_DATE_FORMAT).date()
    except ValueError as error:
        raise MalformedDateError(
            f"Invalid date text '{value}': {error}. Fix the source value before cleaning."
        ) from error
