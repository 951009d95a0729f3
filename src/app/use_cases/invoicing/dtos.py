"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field
from src.domain.invoice import InvoiceStatus
from src.domain.payment import PaymentMethod


class LineItemInputDTO(BaseModel):
    """Caller-supplied line item. Quantity and price rules live in the domain."""

    description: str = Field(..., description="Line item description")
    quantity: Decimal = Field(..., description="Quantity (must be > 0)")
    unit_price: Decimal = Field(..., description="Price per unit (must be >= 0)")


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case.
    """

    customer_id: str = Field(..., description="Customer identifier")
    line_items: List[LineItemInputDTO] = Field(..., description="At least one line item")
    discount: Decimal = Field(default=Decimal("0.00"), description="Flat discount (>= 0)")
    due_date: Optional[date] = Field(default=None, description="Due date (defaults to payment terms)")
    notes: Optional[str] = Field(default=None, description="Free-form notes")


class UpdateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for editing a DRAFT invoice

    Omitted fields are left unchanged.
    """

    invoice_id: int
    line_items: Optional[List[LineItemInputDTO]] = Field(
        default=None, description="Replacement line items"
    )
    discount: Optional[Decimal] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    expected_version: Optional[int] = Field(
        default=None, description="Version the caller last saw; stale versions fail with CONFLICT"
    )


class SendInvoiceCommandDTO(BaseModel):
    invoice_id: int
    expected_version: Optional[int] = None


class RecordPaymentCommandDTO(BaseModel):
    """
    Command DTO for recording a payment

    Used as input to RecordPayment use case.
    """

    invoice_id: int = Field(..., description="Invoice being paid")
    amount: Decimal = Field(..., description="Amount paid (> 0, at most 2 decimals)")
    payment_method: PaymentMethod = Field(..., description="Payment method")
    payment_date: Optional[date] = Field(default=None, description="Defaults to today (UTC)")
    notes: Optional[str] = Field(default=None, description="Free-form notes")
    idempotency_key: UUID = Field(..., description="Client-generated UUID, reused on retry")

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


class ListInvoicesQueryDTO(BaseModel):
    status: Optional[InvoiceStatus] = None
    customer_id: Optional[str] = None
    page: int = Field(default=0, ge=0, description="Zero-based page number")
    size: int = Field(default=10, ge=1, description="Page size")


class LineItemDTO(BaseModel):
    id: int
    position: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal


class InvoiceSummaryDTO(BaseModel):
    """Invoice row with its derived balance, without line items"""

    id: int
    customer_id: str
    invoice_number: str
    status: str
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    amount_paid: Decimal
    balance: Decimal
    due_date: Optional[date] = None
    issued_date: Optional[date] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None
    version: int
    created_at: datetime
    updated_at: datetime


class InvoiceResponseDTO(InvoiceSummaryDTO):
    """
    Response DTO for a single invoice

    balance = total - amount_paid, computed on read.
    """

    line_items: List[LineItemDTO] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "id": 1,
                "customer_id": "cust_42",
                "invoice_number": "INV-2025-0001",
                "status": "SENT",
                "subtotal": "1000.00",
                "discount": "0.00",
                "total": "1000.00",
                "amount_paid": "400.00",
                "balance": "600.00",
                "due_date": "2025-02-28",
                "issued_date": "2025-01-29",
                "version": 3,
                "line_items": [
                    {"id": 1, "position": 0, "description": "Consulting",
                     "quantity": "2.0000", "unit_price": "500.00", "amount": "1000.00"}
                ],
                "created_at": "2025-01-29T10:00:00Z",
                "updated_at": "2025-01-30T09:15:00Z"
            }
        }


class PaginationDTO(BaseModel):
    page: int
    size: int
    total: int
    total_pages: int


class InvoiceListResponseDTO(BaseModel):
    data: List[InvoiceSummaryDTO]
    pagination: PaginationDTO


class PaymentResponseDTO(BaseModel):
    """Response DTO for a recorded payment"""

    id: int
    invoice_id: int
    amount: Decimal
    payment_method: str
    payment_date: date
    notes: Optional[str] = None
    idempotency_key: str
    created_at: datetime


class RecordPaymentResponseDTO(PaymentResponseDTO):
    """
    Response DTO for RecordPayment

    replayed is True when the idempotency key matched an existing payment
    and nothing was written.
    """

    balance_after: Decimal
    invoice_status: str
    replayed: bool = False
