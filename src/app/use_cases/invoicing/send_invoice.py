"""SendInvoice Use Case

Moves an invoice from DRAFT to SENT.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.line_item_repository import LineItemRepository
from src.domain.base import utc_now
from src.domain.errors import DomainError, ErrorCode, NotFoundError
from .dtos import SendInvoiceCommandDTO, InvoiceResponseDTO
from .mappers import domain_error, to_invoice_dto

logger = logging.getLogger(__name__)


class SendInvoice:
    """
    Use Case: Send an invoice (DRAFT -> SENT)

    Business Rules:
    1. Only DRAFT invoices can be sent; a second send fails with INVALID_STATE
    2. The invoice must have at least one line item
    3. issued_date is set to today (UTC)
    4. The write is version-checked and bumps the version

    DRAFT invoices never carry payments, so the returned balance equals the total.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        line_item_repo: LineItemRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.line_item_repo = line_item_repo

    async def execute(self, command: SendInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if not invoice:
                raise NotFoundError(f"Invoice {command.invoice_id} not found")

            invoice.ensure_version(command.expected_version)
            loaded_version = invoice.version

            line_item_count = await self.line_item_repo.count_by_invoice_id(invoice.id)
            invoice.send(line_item_count, utc_now().date())

            sent_invoice = await self.invoice_repo.update(invoice, loaded_version)
            line_items = await self.line_item_repo.get_by_invoice_id(sent_invoice.id)

            await self.uow.commit()

            logger.info(f"Sent invoice {sent_invoice.invoice_number}, total={sent_invoice.total}")
            return Return.ok(to_invoice_dto(sent_invoice, line_items, []))

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(domain_error(e))

        except Exception as e:
            logger.exception(f"Failed to send invoice {command.invoice_id}")
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR.value,
                    message="Failed to send invoice",
                    reason=str(e),
                )
            )
