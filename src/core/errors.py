"""Scrubline exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class ScrublineError(Exception):
    """Base exception for all Scrubline failures."""


class ScrublineConfigError(ScrublineError):
    """Raised for invalid runtime configuration."""


class ScrublineIngestError(ScrublineError):
    """Raised for source parsing and load failures."""


class SchemaMismatchError(ScrublineIngestError):
    """Raised when input rows are missing a required field."""


class ScrublineTransformError(ScrublineError):
    """Raised for cleaning stage failures."""


class MalformedDateError(ScrublineTransformError):
    """Raised when date text does not match the strict MM/DD/YYYY format."""


class ScrublineOverrideError(ScrublineError):
    """Raised for invalid manual override files."""


class ScrublineStoreError(ScrublineError):
    """Raised for snapshot store and export failures."""
