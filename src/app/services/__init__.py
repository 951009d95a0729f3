from .unit_of_work import UnitOfWork
from .customer_directory import CustomerDirectory, CustomerDirectoryUnavailable
from .invoice_number_allocator import InvoiceNumberAllocator

__all__ = [
    "UnitOfWork",
    "CustomerDirectory",
    "CustomerDirectoryUnavailable",
    "InvoiceNumberAllocator",
]
