"""Invoice Domain Entity

The invoice aggregate: status state machine, line-item-derived totals and
edit-ability rules.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Integer, Numeric, String, Date, DateTime, Text
from src.domain.base import BaseModel, IdType, utc_now
from src.domain.errors import ConflictError, DomainValidationError, InvalidStateError
from src.domain.line_item import LineItem, compute_subtotal
from src.domain.money import (
    MAX_MONEY,
    ZERO,
    has_cent_precision,
    subtract,
    to_money,
    within_money_range,
)


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"


class Invoice(BaseModel, table=True):
    """
    Invoice - Customer invoice and its monetary state

    Domain Rules:
    - invoice_number is unique and assigned once, at creation
    - Status transitions: DRAFT -> SENT -> PAID, never backwards
    - total = round(subtotal - discount), never negative
    - Line items, discount and due date are editable only in DRAFT
    - version increments on every persisted mutation
    - Balance is not stored; it is total minus the sum of payments
    """

    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint('discount >= 0', name='invoice_discount_non_negative'),
        CheckConstraint('total >= 0', name='invoice_total_non_negative'),
        Index('ix_invoices_customer_id', 'customer_id'),
        Index('ix_invoices_status', 'status'),
        Index('ix_invoices_invoice_number', 'invoice_number', unique=True),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice identifier (auto-increment)"
    )

    customer_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Customer ID (owned by the customer service)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(32), nullable=False),
        description="Unique invoice number (e.g., INV-2025-0001)"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status (DRAFT, SENT, PAID)"
    )

    subtotal: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(19, 2), nullable=False),
        description="Sum of line item amounts"
    )

    discount: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(19, 2), nullable=False),
        description="Flat discount subtracted from the subtotal"
    )

    total: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(19, 2), nullable=False),
        description="Amount due (subtotal - discount)"
    )

    due_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Payment due date"
    )

    issued_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Date the invoice was sent"
    )

    paid_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="Timestamp of the payment that settled the invoice"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-form notes"
    )

    version: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Optimistic concurrency version"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp"
    )

    @property
    def is_draft(self) -> bool:
        return self.status == InvoiceStatus.DRAFT

    def ensure_version(self, expected_version: Optional[int]) -> None:
        """Reject a write prepared against an older copy of the invoice."""
        if expected_version is not None and expected_version != self.version:
            raise ConflictError(
                f"Invoice {self.invoice_number} was modified concurrently "
                f"(expected version {expected_version}, current {self.version})",
                details={"expected_version": expected_version, "current_version": self.version},
            )

    def ensure_editable(self) -> None:
        if self.status != InvoiceStatus.DRAFT:
            raise InvalidStateError(
                f"Invoice {self.invoice_number} is {self.status.value}; "
                f"only DRAFT invoices can be edited"
            )

    def replace_line_items(
        self,
        items: Sequence[LineItem],
        discount: Optional[Decimal] = None,
        reject_discount_over_subtotal: bool = False,
    ) -> None:
        """
        Recompute subtotal and total from a new set of line items

        ``discount`` replaces the current discount when given.
        """
        self.ensure_editable()
        if not items:
            raise DomainValidationError(
                "An invoice needs at least one line item",
                details={"line_items": "must not be empty"},
            )
        subtotal = compute_subtotal(items)
        if not within_money_range(subtotal):
            raise DomainValidationError(
                f"Subtotal {subtotal} is too large",
                details={"line_items": f"subtotal must not exceed {MAX_MONEY}"},
            )
        self.subtotal = subtotal
        self.apply_discount(
            self.discount if discount is None else discount,
            reject_discount_over_subtotal,
        )

    def apply_discount(
        self, discount: Decimal, reject_over_subtotal: bool = False
    ) -> None:
        """
        Set the discount and recompute the total

        A discount larger than the subtotal clamps the total at zero unless
        ``reject_over_subtotal`` is set, in which case it is a validation error.
        """
        self.ensure_editable()
        if discount is None:
            discount = ZERO
        if not within_money_range(discount):
            raise DomainValidationError(
                "Discount is out of range",
                details={"discount": f"must not exceed {MAX_MONEY}"},
            )
        if discount < 0:
            raise DomainValidationError(
                "Discount must not be negative",
                details={"discount": "must be >= 0"},
            )
        if not has_cent_precision(discount):
            raise DomainValidationError(
                "Discount must have at most two decimal places",
                details={"discount": "at most 2 decimal places"},
            )
        if reject_over_subtotal and discount > self.subtotal:
            raise DomainValidationError(
                f"Discount {discount} exceeds subtotal {self.subtotal}",
                details={"discount": "must not exceed subtotal"},
            )

        self.discount = to_money(discount)
        self.total = max(subtract(self.subtotal, self.discount), ZERO)

    def change_due_date(self, due_date: date) -> None:
        self.ensure_editable()
        self.due_date = due_date

    def change_notes(self, notes: Optional[str]) -> None:
        self.ensure_editable()
        self.notes = notes

    def send(self, line_item_count: int, today: date) -> None:
        """
        DRAFT -> SENT. Sending twice is an error.

        A zero-total invoice stays SENT: only a payment moves an invoice to
        PAID, and payment amounts must be positive.
        """
        if self.status != InvoiceStatus.DRAFT:
            raise InvalidStateError(
                f"Invoice {self.invoice_number} is {self.status.value}; "
                f"only DRAFT invoices can be sent"
            )
        if line_item_count <= 0:
            raise InvalidStateError(
                f"Invoice {self.invoice_number} has no line items and cannot be sent"
            )
        self.status = InvoiceStatus.SENT
        self.issued_date = today

    def ensure_accepts_payment(self) -> None:
        if self.status == InvoiceStatus.DRAFT:
            raise InvalidStateError(
                f"Invoice {self.invoice_number} is DRAFT; send it before recording payments"
            )
        if self.status == InvoiceStatus.PAID:
            raise InvalidStateError(
                f"Invoice {self.invoice_number} is already PAID"
            )

    def settle_if_zero(self, balance_after: Decimal, now: datetime) -> bool:
        """SENT -> PAID when a payment brings the balance to exactly zero."""
        if balance_after == ZERO and self.status == InvoiceStatus.SENT:
            self.status = InvoiceStatus.PAID
            self.paid_at = now
            return True
        return False
