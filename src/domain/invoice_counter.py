"""Invoice Counter Domain Entity

Per-year sequence backing invoice numbers.
"""

from sqlmodel import Field, Column
from sqlalchemy import BigInteger, CheckConstraint, Integer
from src.domain.base import BaseModel

INVOICE_NUMBER_PREFIX = "INV"


class InvoiceCounter(BaseModel, table=True):
    """
    Invoice Counter - Last invoice sequence issued for a year

    Domain Rules:
    - One row per year
    - last_value only moves through an atomic increment-and-return
    - First allocation of a year starts from 0 and returns 1
    """

    __tablename__ = "invoice_counters"
    __table_args__ = (
        CheckConstraint('last_value >= 0', name='invoice_counter_non_negative'),
    )

    year: int = Field(
        sa_column=Column(Integer, primary_key=True, autoincrement=False),
        description="Calendar year"
    )

    last_value: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Last sequence number handed out for the year"
    )


def format_invoice_number(year: int, sequence: int) -> str:
    """INV-{year}-{sequence:04d}, e.g. INV-2025-0007."""
    if sequence <= 0:
        raise ValueError(f"Invoice sequence must be positive, got {sequence}")
    return f"{INVOICE_NUMBER_PREFIX}-{year}-{sequence:04d}"
