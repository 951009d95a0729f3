"""List Payments Use Case

Payment history of one invoice, oldest first.
"""

from typing import List
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.errors import ErrorCode
from .dtos import PaymentResponseDTO
from .mappers import to_payment_dto


class ListPayments:
    """
    List Payments Use Case

    Ordering is by creation time ascending (ties broken by id). Replaying the
    list in order reconstructs the balance history.
    """

    def __init__(self, invoice_repo: InvoiceRepository, payment_repo: PaymentRepository):
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo

    async def execute(self, invoice_id: int) -> Result[List[PaymentResponseDTO]]:
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            return Return.err(
                Error(
                    code=ErrorCode.NOT_FOUND.value,
                    message=f"Invoice {invoice_id} not found",
                )
            )

        payments = await self.payment_repo.list_by_invoice_id(invoice_id)
        return Return.ok([to_payment_dto(payment) for payment in payments])
