"""Line Item Domain Entity

One billable row of an invoice, plus the ledger rules that turn a list of
rows into an invoice subtotal.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String, DateTime
from src.domain.base import BaseModel, IdType, utc_now
from src.domain.errors import DomainValidationError
from src.domain.money import MAX_MONEY, money_sum, multiply

# Largest value a NUMERIC(18, 4) column holds
MAX_QUANTITY = Decimal("99999999999999.9999")


@dataclass(frozen=True)
class LineItemDraft:
    """Caller-supplied line item before it is priced and persisted"""
    description: str
    quantity: Decimal
    unit_price: Decimal


class LineItem(BaseModel, table=True):
    """
    Line Item - Billable row owned by exactly one invoice

    Domain Rules:
    - amount = round(quantity * unit_price), half-to-even to the cent
    - quantity > 0, unit_price >= 0
    - Created or replaced only while the parent invoice is DRAFT
    - Deleted with the parent invoice or when the list is replaced
    """

    __tablename__ = "line_items"
    __table_args__ = (
        CheckConstraint('quantity > 0', name='line_item_quantity_positive'),
        CheckConstraint('unit_price >= 0', name='line_item_unit_price_non_negative'),
        Index('ix_line_items_invoice_id', 'invoice_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique line item identifier (auto-increment)"
    )

    invoice_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    position: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Zero-based display order within the invoice"
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Line item description"
    )

    quantity: Decimal = Field(
        sa_column=Column(Numeric(18, 4), nullable=False),
        description="Quantity (must be > 0)"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(19, 2), nullable=False),
        description="Price per unit (must be >= 0)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(19, 2), nullable=False),
        description="Line amount (quantity * unit_price, rounded to the cent)"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Line item creation timestamp"
    )


def _validated_decimal(value, field_name: str, index: int, limit: Decimal) -> Decimal:
    if isinstance(value, float):
        raise DomainValidationError(
            f"Line item {index}: {field_name} must be a decimal, not a float",
            details={f"line_items[{index}].{field_name}": "float not allowed"},
        )
    try:
        number = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise DomainValidationError(
            f"Line item {index}: {field_name} is not a number",
            details={f"line_items[{index}].{field_name}": "not a number"},
        )
    if not number.is_finite() or abs(number) > limit:
        raise DomainValidationError(
            f"Line item {index}: {field_name} is out of range",
            details={f"line_items[{index}].{field_name}": f"must not exceed {limit}"},
        )
    return number


def build_line_items(drafts: Sequence[LineItemDraft]) -> List[LineItem]:
    """
    Validate and price caller-supplied line items

    Raises:
        DomainValidationError: empty list, blank description,
            quantity <= 0, unit_price < 0 or a value too large to store
    """
    if not drafts:
        raise DomainValidationError(
            "An invoice needs at least one line item",
            details={"line_items": "must not be empty"},
        )

    items: List[LineItem] = []
    for index, draft in enumerate(drafts):
        description = (draft.description or "").strip()
        if not description:
            raise DomainValidationError(
                f"Line item {index}: description is required",
                details={f"line_items[{index}].description": "must not be blank"},
            )

        quantity = _validated_decimal(draft.quantity, "quantity", index, MAX_QUANTITY)
        unit_price = _validated_decimal(draft.unit_price, "unit_price", index, MAX_MONEY)

        if quantity <= 0:
            raise DomainValidationError(
                f"Line item {index}: quantity must be greater than 0",
                details={f"line_items[{index}].quantity": "must be > 0"},
            )
        if unit_price < 0:
            raise DomainValidationError(
                f"Line item {index}: unit price must not be negative",
                details={f"line_items[{index}].unit_price": "must be >= 0"},
            )
        if quantity * unit_price > MAX_MONEY:
            raise DomainValidationError(
                f"Line item {index}: amount is out of range",
                details={f"line_items[{index}]": f"quantity * unit_price must not exceed {MAX_MONEY}"},
            )

        items.append(
            LineItem(
                position=index,
                description=description,
                quantity=quantity,
                unit_price=unit_price,
                amount=multiply(quantity, unit_price),
            )
        )
    return items


def compute_subtotal(items: Sequence[LineItem]) -> Decimal:
    """Decimal sum of the line amounts, rounded to the cent."""
    return money_sum(item.amount for item in items)
