from .invoice_repository import InvoiceRepository
from .line_item_repository import LineItemRepository
from .payment_repository import PaymentRepository

__all__ = [
    "InvoiceRepository",
    "LineItemRepository",
    "PaymentRepository",
]
