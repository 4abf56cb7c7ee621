"""Column vocabulary for layoff records.

Readers, writers, and the quality report share these names so the
nine business fields are declared in exactly one order.
"""

from __future__ import annotations

BUSINESS_FIELDS = (
    "company",
    "location",
    "industry",
    "total_laid_off",
    "percentage_laid_off",
    "date",
    "stage",
    "country",
    "funds_raised_millions",
)
REQUIRED_FIELDS = BUSINESS_FIELDS
NON_NULL_FIELDS = ("company",)
INTEGER_FIELDS = ("total_laid_off", "funds_raised_millions")
CATEGORICAL_FIELDS = ("company", "location", "industry", "stage", "country")
