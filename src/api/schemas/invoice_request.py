"""Request schemas for Invoice and Payment API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field, field_validator
from src.domain.payment import PaymentMethod


def _cent_precision(v: Decimal) -> Decimal:
    try:
        rounded = v.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValueError("Value is out of range")
    if v != rounded:
        raise ValueError("Must have at most two decimal places")
    return v


class LineItemRequestSchema(BaseModel):
    description: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Line item description"
    )

    quantity: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=4,
        description="Quantity (must be > 0)"
    )

    unit_price: Decimal = Field(
        ...,
        ge=0,
        max_digits=19,
        decimal_places=2,
        description="Price per unit (must be >= 0)"
    )


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating an invoice

    Used for POST /invoices endpoint.
    """

    customer_id: str = Field(
        ...,
        min_length=1,
        description="Customer identifier (required, non-empty)"
    )

    line_items: List[LineItemRequestSchema] = Field(
        ...,
        min_length=1,
        description="At least one line item"
    )

    discount: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=19,
        decimal_places=2,
        description="Flat discount (>= 0)"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Due date (defaults to payment terms from today)"
    )

    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Free-form notes"
    )

    @field_validator('discount')
    @classmethod
    def validate_discount(cls, v):
        return _cent_precision(v)

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cust_42",
                "line_items": [
                    {"description": "Consulting", "quantity": "2", "unit_price": "500.00"}
                ],
                "discount": "0.00",
                "due_date": "2025-02-28",
                "notes": "Thank you for your business"
            }
        }


class UpdateInvoiceRequestSchema(BaseModel):
    """
    Request schema for editing a DRAFT invoice

    Used for PUT /invoices/{invoice_id}. Omitted fields are unchanged.
    """

    line_items: Optional[List[LineItemRequestSchema]] = Field(
        default=None,
        description="Replacement line items"
    )

    discount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        max_digits=19,
        decimal_places=2,
        description="Flat discount (>= 0)"
    )

    due_date: Optional[date] = None

    notes: Optional[str] = Field(default=None, max_length=1000)

    version: Optional[int] = Field(
        default=None,
        ge=1,
        description="Invoice version the client last saw (optimistic concurrency)"
    )

    @field_validator('discount')
    @classmethod
    def validate_discount(cls, v):
        if v is None:
            return v
        return _cent_precision(v)


class SendInvoiceRequestSchema(BaseModel):
    version: Optional[int] = Field(
        default=None,
        ge=1,
        description="Invoice version the client last saw (optimistic concurrency)"
    )


class RecordPaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /payments endpoint.
    """

    invoice_id: int = Field(
        ...,
        ge=1,
        description="Invoice being paid"
    )

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=19,
        decimal_places=2,
        description="Amount paid (must be > 0)"
    )

    payment_method: PaymentMethod = Field(
        ...,
        description="CASH, CARD, WIRE, ACH, CHECK or OTHER"
    )

    payment_date: Optional[date] = None

    notes: Optional[str] = Field(default=None, max_length=500)

    idempotency_key: UUID = Field(
        ...,
        description="Client-generated UUID; resend the same key when retrying"
    )

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        """Ensure amount is positive and has cent precision"""
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return _cent_precision(v)

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": 1,
                "amount": "400.00",
                "payment_method": "WIRE",
                "notes": "First instalment",
                "idempotency_key": "6f1c1f0e-3c55-4d8e-9a59-0b1a0c2f6a11"
            }
        }
