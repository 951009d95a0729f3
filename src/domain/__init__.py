from .base import BaseModel
from .errors import (
    ErrorCode,
    DomainError,
    NotFoundError,
    DomainValidationError,
    InvalidStateError,
    OverpaymentError,
    ConflictError,
)
from .line_item import LineItem, LineItemDraft, build_line_items, compute_subtotal
from .invoice import Invoice, InvoiceStatus
from .payment import Payment, PaymentMethod, compute_balance, total_paid
from .invoice_counter import InvoiceCounter, format_invoice_number

__all__ = [
    "BaseModel",
    "ErrorCode",
    "DomainError",
    "NotFoundError",
    "DomainValidationError",
    "InvalidStateError",
    "OverpaymentError",
    "ConflictError",
    "LineItem",
    "LineItemDraft",
    "build_line_items",
    "compute_subtotal",
    "Invoice",
    "InvoiceStatus",
    "Payment",
    "PaymentMethod",
    "compute_balance",
    "total_paid",
    "InvoiceCounter",
    "format_invoice_number",
]
