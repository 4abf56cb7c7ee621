"""Storage and versioning layer.

This module persists immutable dataset snapshots and catalogs.
It powers dataset loading, reporting, and export for the SDK.
"""
