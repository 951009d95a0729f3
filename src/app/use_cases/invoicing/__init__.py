"""Invoicing use cases"""
from .create_invoice import CreateInvoice
from .update_invoice import UpdateInvoice
from .send_invoice import SendInvoice
from .record_payment import RecordPayment
from .get_invoice import GetInvoice
from .list_invoices import ListInvoices
from .list_payments import ListPayments
from .get_payment import GetPayment
from .dtos import (
    LineItemInputDTO,
    CreateInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
    SendInvoiceCommandDTO,
    RecordPaymentCommandDTO,
    ListInvoicesQueryDTO,
    LineItemDTO,
    InvoiceSummaryDTO,
    InvoiceResponseDTO,
    PaginationDTO,
    InvoiceListResponseDTO,
    PaymentResponseDTO,
    RecordPaymentResponseDTO,
)

__all__ = [
    "CreateInvoice",
    "UpdateInvoice",
    "SendInvoice",
    "RecordPayment",
    "GetInvoice",
    "ListInvoices",
    "ListPayments",
    "GetPayment",
    "LineItemInputDTO",
    "CreateInvoiceCommandDTO",
    "UpdateInvoiceCommandDTO",
    "SendInvoiceCommandDTO",
    "RecordPaymentCommandDTO",
    "ListInvoicesQueryDTO",
    "LineItemDTO",
    "InvoiceSummaryDTO",
    "InvoiceResponseDTO",
    "PaginationDTO",
    "InvoiceListResponseDTO",
    "PaymentResponseDTO",
    "RecordPaymentResponseDTO",
]
