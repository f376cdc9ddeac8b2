"""
Data Models Package

This package contains the Pydantic models used by the ledger.
Everything held in memory or written to storage conforms to these schemas.
"""

from ledger.models.record import (
    COMMENT_PLACEHOLDER,
    RawRecord,
    Record,
    Statistics,
    day_key,
    format_amount,
    year_month_key,
)
from ledger.models.preferences import ButtonPosition

__all__ = [
    # Record models
    "COMMENT_PLACEHOLDER",
    "RawRecord",
    "Record",
    "Statistics",
    "day_key",
    "format_amount",
    "year_month_key",
    # Preference models
    "ButtonPosition",
]
