"""List Invoices Use Case

Paginated invoice listing with balances computed on read.
"""

import math
from libs.result import Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from .dtos import InvoiceListResponseDTO, ListInvoicesQueryDTO, PaginationDTO
from .mappers import to_invoice_summary


class ListInvoices:
    """
    List Invoices Use Case

    Filters by status and/or customer, newest first. Page numbers are
    zero-based and page size is capped at ``max_page_size``.
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
        max_page_size: int = 100,
    ):
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.max_page_size = max_page_size

    async def execute(self, query: ListInvoicesQueryDTO) -> Result[InvoiceListResponseDTO]:
        size = min(query.size, self.max_page_size)

        total = await self.invoice_repo.count(status=query.status, customer_id=query.customer_id)
        invoices = await self.invoice_repo.find(
            status=query.status,
            customer_id=query.customer_id,
            limit=size,
            offset=query.page * size,
        )

        payments_by_invoice = await self.payment_repo.list_by_invoice_ids(
            [invoice.id for invoice in invoices]
        )

        return Return.ok(
            InvoiceListResponseDTO(
                data=[
                    to_invoice_summary(invoice, payments_by_invoice.get(invoice.id, []))
                    for invoice in invoices
                ],
                pagination=PaginationDTO(
                    page=query.page,
                    size=size,
                    total=total,
                    total_pages=math.ceil(total / size) if total else 0,
                ),
            )
        )
