from .invoice_repository import SqlAlchemyInvoiceRepository
from .line_item_repository import SqlAlchemyLineItemRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .invoice_number_allocator import SqlAlchemyInvoiceNumberAllocator

__all__ = [
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyLineItemRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyInvoiceNumberAllocator",
]
