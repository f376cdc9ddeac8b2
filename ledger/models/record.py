"""
Core Data Models for the Personal Ledger

These models define the schemas for every entry flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Keep identity fields immutable once a record exists
3. Be convertible to the row shape the durable store keeps

DESIGN DECISION: A record's identity (id, timestamp, income/expense flag)
is frozen. Only the amount and the comment can be edited.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


# Label shown in place of an empty comment
COMMENT_PLACEHOLDER = "Record"

YEAR_MONTH_FORMAT = "%Y-%m"
DAY_FORMAT = "%d"
DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_CENT = Decimal("0.01")


def year_month_key(moment: datetime) -> str:
    """Derive the month key ("YYYY-MM") used to group records."""
    return moment.strftime(YEAR_MONTH_FORMAT)


def day_key(moment: datetime) -> str:
    """Derive the day key ("DD") stored alongside the month key."""
    return moment.strftime(DAY_FORMAT)


def format_amount(value: Decimal) -> str:
    """Fixed-point, two fraction digits, no currency symbol or grouping."""
    value = Decimal(value)
    with localcontext() as ctx:
        # Room for every integer digit plus the two cents digits
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return str(value.quantize(_CENT, rounding=ROUND_HALF_UP))


# =============================================================================
# RECORD
# =============================================================================

class Record(BaseModel):
    """
    One income or expense entry held in memory.

    The id is handed out by the owning RecordStore and is only meaningful
    while the batch it belongs to is loaded. The timestamp is the durable key.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(
        ...,
        ge=0,
        frozen=True,
        description="Process-local identifier, never persisted"
    )
    timestamp: datetime = Field(
        ...,
        frozen=True,
        description="Creation instant, unique across all records"
    )
    is_income: bool = Field(
        ...,
        frozen=True,
        description="True for income, False for expense"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount"
    )
    comment: str = Field(
        default="",
        description="Free text, may be empty"
    )

    @property
    def year_month(self) -> str:
        return year_month_key(self.timestamp)

    @property
    def day(self) -> str:
        return day_key(self.timestamp)

    @property
    def display_comment(self) -> str:
        """Comment as shown in a list row."""
        return self.comment or COMMENT_PLACEHOLDER

    @property
    def signed_amount(self) -> str:
        """Amount prefixed with "+" for income and "-" for expense."""
        sign = "+" if self.is_income else "-"
        return f"{sign}{format_amount(self.amount)}"

    @property
    def display_timestamp(self) -> str:
        return self.timestamp.strftime(TIMESTAMP_FORMAT)

    @classmethod
    def from_raw(cls, record_id: int, raw: "RawRecord") -> "Record":
        """Build an in-memory record from a durable row."""
        return cls(
            id=record_id,
            timestamp=raw.timestamp,
            is_income=raw.is_income,
            amount=raw.amount,
            comment=raw.comment,
        )


# =============================================================================
# DURABLE ROW SHAPE
# =============================================================================

class RawRecord(BaseModel):
    """
    A record as the durable store keeps it.

    The month and day keys are derived at insert time so the store can
    answer "everything from today" without parsing timestamps.
    """

    year_month: str = Field(..., description="Month key, YYYY-MM")
    day: str = Field(..., description="Day key, DD")
    timestamp: datetime
    is_income: bool
    amount: Decimal = Field(..., ge=0)
    comment: str = ""

    @classmethod
    def from_record(cls, record: Record) -> "RawRecord":
        return cls(
            year_month=record.year_month,
            day=record.day,
            timestamp=record.timestamp,
            is_income=record.is_income,
            amount=record.amount,
            comment=record.comment,
        )


# =============================================================================
# STATISTICS
# =============================================================================

class Statistics(NamedTuple):
    """Formatted income and expense totals for a group of records."""
    income: str
    expense: str

    @classmethod
    def of(cls, records: Iterable[Record]) -> "Statistics":
        income = Decimal("0")
        expense = Decimal("0")
        for record in records:
            if record.is_income:
                income += record.amount
            else:
                expense += record.amount
        return cls(income=format_amount(income), expense=format_amount(expense))
