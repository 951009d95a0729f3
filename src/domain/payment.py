"""Payment Domain Entity

Immutable append-only record of money received against an invoice.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Date, DateTime, UniqueConstraint
from src.domain.base import BaseModel, IdType, utc_now
from src.domain.money import money_sum, subtract


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    CASH = "CASH"
    CARD = "CARD"
    WIRE = "WIRE"
    ACH = "ACH"
    CHECK = "CHECK"
    OTHER = "OTHER"


class Payment(BaseModel, table=True):
    """
    Payment - Money received against one invoice

    Domain Rules:
    - Payments are immutable (no update or delete)
    - (invoice_id, idempotency_key) is unique; a retry with the same key
      returns the original payment
    - amount > 0 and never more than the invoice balance at recording time
    - Only the payment recorder creates payments
    """

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint('amount > 0', name='payment_amount_positive'),
        UniqueConstraint('invoice_id', 'idempotency_key', name='uq_payments_invoice_idempotency_key'),
        Index('ix_payments_invoice_created', 'invoice_id', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique payment identifier (auto-increment)"
    )

    invoice_id: int = Field(
        sa_column=Column(IdType, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(19, 2), nullable=False),
        description="Amount paid (must be > 0)"
    )

    payment_method: PaymentMethod = Field(
        description="How the payment was made"
    )

    payment_date: date = Field(
        default_factory=lambda: utc_now().date(),
        sa_column=Column(Date, nullable=False),
        description="Date the money was received"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Free-form notes"
    )

    idempotency_key: str = Field(
        sa_column=Column(String(36), nullable=False),
        description="Client-supplied UUID preventing duplicate payments on retry"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Payment timestamp (immutable)"
    )


def total_paid(payments: Iterable[Payment]) -> Decimal:
    return money_sum(payment.amount for payment in payments)


def compute_balance(total: Decimal, payments: Iterable[Payment]) -> Decimal:
    """Balance is always derived: invoice total minus everything paid so far."""
    return subtract(total, total_paid(payments))
