"""ORM tables for the local ledger database."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Integer, LargeBinary, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class Base(DeclarativeBase):
    pass


class DecimalText(TypeDecorator):
    """Exact decimal stored as text; SQLite has no native decimal type."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


# ---------------------------
# Core: ledger_records
# ---------------------------


class RecordRow(Base):
    __tablename__ = "ledger_records"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Month and day keys are denormalized so "today" is a plain equality lookup.
    year_month: Mapped[str] = mapped_column(String(7), nullable=False, index=True)
    day: Mapped[str] = mapped_column(String(2), nullable=False, index=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False, unique=True)
    is_income: Mapped[bool] = mapped_column(Boolean, nullable=False)
    amount: Mapped[Decimal] = mapped_column(DecimalText, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")


# ---------------------------
# UI: ledger_preferences
# ---------------------------


class PreferenceRow(Base):
    __tablename__ = "ledger_preferences"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
