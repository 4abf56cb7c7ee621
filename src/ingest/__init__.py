"""Dataset loading and cleaning orchestration.

This module reads raw layoff tables and runs the cleaning stages.
It prepares immutable snapshot records for the store layer.
"""
