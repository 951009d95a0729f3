"""Get Invoice Use Case

Retrieves one invoice with its line items and balance computed on read.
"""

from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.line_item_repository import LineItemRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.errors import ErrorCode
from .dtos import InvoiceResponseDTO
from .mappers import to_invoice_dto


class GetInvoice:
    """
    Get Invoice Use Case

    Read-only. The balance is recomputed from the invoice total and its
    payment history on every read; it is never stored.
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        line_item_repo: LineItemRepository,
        payment_repo: PaymentRepository,
    ):
        self.invoice_repo = invoice_repo
        self.line_item_repo = line_item_repo
        self.payment_repo = payment_repo

    async def execute(self, invoice_id: int) -> Result[InvoiceResponseDTO]:
        """
        Execute get invoice operation

        Args:
            invoice_id: Invoice ID

        Returns:
            Result[InvoiceResponseDTO]: Invoice with line items and balance

        Errors:
            NOT_FOUND: Invoice does not exist
        """
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            return Return.err(
                Error(
                    code=ErrorCode.NOT_FOUND.value,
                    message=f"Invoice {invoice_id} not found",
                )
            )

        line_items = await self.line_item_repo.get_by_invoice_id(invoice_id)
        payments = await self.payment_repo.list_by_invoice_id(invoice_id)
        return Return.ok(to_invoice_dto(invoice, line_items, payments))
