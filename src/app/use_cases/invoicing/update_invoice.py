"""UpdateInvoice Use Case

Edits a DRAFT invoice: replaces line items, changes discount, due date or
notes, and recomputes totals.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.line_item_repository import LineItemRepository
from src.domain.errors import DomainError, ErrorCode, NotFoundError
from src.domain.line_item import build_line_items
from .dtos import UpdateInvoiceCommandDTO, InvoiceResponseDTO
from .mappers import domain_error, to_drafts, to_invoice_dto

logger = logging.getLogger(__name__)


class UpdateInvoice:
    """
    Use Case: Edit a DRAFT invoice

    Business Rules:
    1. Only DRAFT invoices are editable (INVALID_STATE otherwise)
    2. Replacement line items follow the same rules as on creation
    3. Totals are recomputed on any line item or discount change
    4. A stale expected_version fails with CONFLICT
    5. The write is version-checked and bumps the version
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        line_item_repo: LineItemRepository,
        reject_discount_over_subtotal: bool = False,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.line_item_repo = line_item_repo
        self.reject_discount_over_subtotal = reject_discount_over_subtotal

    async def execute(self, command: UpdateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if not invoice:
                raise NotFoundError(f"Invoice {command.invoice_id} not found")

            invoice.ensure_version(command.expected_version)
            invoice.ensure_editable()
            loaded_version = invoice.version

            new_items = None
            if command.line_items is not None:
                new_items = build_line_items(to_drafts(command.line_items))
                invoice.replace_line_items(
                    new_items, command.discount, self.reject_discount_over_subtotal
                )
            elif command.discount is not None:
                invoice.apply_discount(command.discount, self.reject_discount_over_subtotal)

            if command.due_date is not None:
                invoice.change_due_date(command.due_date)

            if command.notes is not None:
                invoice.change_notes(command.notes)

            # Invoice row first: its version check guards the line item swap
            updated_invoice = await self.invoice_repo.update(invoice, loaded_version)

            if new_items is not None:
                line_items = await self.line_item_repo.replace(updated_invoice.id, new_items)
            else:
                line_items = await self.line_item_repo.get_by_invoice_id(updated_invoice.id)

            await self.uow.commit()

            logger.info(
                f"Updated invoice {updated_invoice.invoice_number} "
                f"(version {updated_invoice.version}, total={updated_invoice.total})"
            )
            return Return.ok(to_invoice_dto(updated_invoice, line_items, []))

        except DomainError as e:
            await self.uow.rollback()
            if e.code == ErrorCode.CONFLICT:
                logger.warning(f"Conflict updating invoice {command.invoice_id}: {e.message}")
            return Return.err(domain_error(e))

        except Exception as e:
            logger.exception(f"Failed to update invoice {command.invoice_id}")
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR.value,
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )
