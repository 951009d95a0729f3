"""Entity -> DTO conversion shared by the invoicing use cases"""

from decimal import Decimal
from typing import List, Sequence
from libs.result import Error
from src.domain.errors import DomainError
from src.domain.invoice import Invoice
from src.domain.line_item import LineItem, LineItemDraft
from src.domain.payment import Payment, compute_balance, total_paid
from .dtos import (
    InvoiceResponseDTO,
    InvoiceSummaryDTO,
    LineItemDTO,
    LineItemInputDTO,
    PaymentResponseDTO,
    RecordPaymentResponseDTO,
)


def to_drafts(items: Sequence[LineItemInputDTO]) -> List[LineItemDraft]:
    return [
        LineItemDraft(
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )
        for item in items
    ]


def domain_error(e: DomainError) -> Error:
    return Error(code=e.code.value, message=e.message, details=dict(e.details))


def _summary_fields(invoice: Invoice, payments: Sequence[Payment]) -> dict:
    return dict(
        id=invoice.id,
        customer_id=invoice.customer_id,
        invoice_number=invoice.invoice_number,
        status=invoice.status.value,
        subtotal=invoice.subtotal,
        discount=invoice.discount,
        total=invoice.total,
        amount_paid=total_paid(payments),
        balance=compute_balance(invoice.total, payments),
        due_date=invoice.due_date,
        issued_date=invoice.issued_date,
        paid_at=invoice.paid_at,
        notes=invoice.notes,
        version=invoice.version,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
    )


def to_invoice_summary(invoice: Invoice, payments: Sequence[Payment]) -> InvoiceSummaryDTO:
    return InvoiceSummaryDTO(**_summary_fields(invoice, payments))


def to_invoice_dto(
    invoice: Invoice, line_items: Sequence[LineItem], payments: Sequence[Payment]
) -> InvoiceResponseDTO:
    return InvoiceResponseDTO(
        **_summary_fields(invoice, payments),
        line_items=[
            LineItemDTO(
                id=item.id,
                position=item.position,
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                amount=item.amount,
            )
            for item in line_items
        ],
    )


def _payment_fields(payment: Payment) -> dict:
    return dict(
        id=payment.id,
        invoice_id=payment.invoice_id,
        amount=payment.amount,
        payment_method=payment.payment_method.value,
        payment_date=payment.payment_date,
        notes=payment.notes,
        idempotency_key=payment.idempotency_key,
        created_at=payment.created_at,
    )


def to_payment_dto(payment: Payment) -> PaymentResponseDTO:
    return PaymentResponseDTO(**_payment_fields(payment))


def to_record_payment_dto(
    payment: Payment, balance_after: Decimal, invoice_status: str, replayed: bool
) -> RecordPaymentResponseDTO:
    return RecordPaymentResponseDTO(
        **_payment_fields(payment),
        balance_after=balance_after,
        invoice_status=invoice_status,
        replayed=replayed,
    )
