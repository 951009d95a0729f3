"""CreateInvoice Use Case

Creates a DRAFT invoice with priced line items and a freshly allocated
invoice number.
"""

import logging
from datetime import timedelta
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.customer_directory import CustomerDirectory, CustomerDirectoryUnavailable
from src.app.services.invoice_number_allocator import InvoiceNumberAllocator
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.line_item_repository import LineItemRepository
from src.domain.base import utc_now
from src.domain.errors import DomainError, ErrorCode
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.line_item import build_line_items
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO
from .mappers import domain_error, to_drafts, to_invoice_dto

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create a DRAFT invoice

    Business Rules:
    1. Customer must exist in the customer service
    2. At least one line item; quantity > 0, unit_price >= 0
    3. total = round(subtotal - discount), never negative
    4. Invoice number INV-YYYY-NNNN allocated for the current UTC year
    5. Invoice and line items are written in one transaction

    Flow:
    1. Check customer exists
    2. Price line items and compute totals (before a number is burned)
    3. Allocate invoice number
    4. Insert invoice and line items
    5. Commit transaction
    6. Return invoice with balance = total
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        line_item_repo: LineItemRepository,
        number_allocator: InvoiceNumberAllocator,
        customer_directory: CustomerDirectory,
        payment_terms_days: int = 30,
        reject_discount_over_subtotal: bool = False,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.line_item_repo = line_item_repo
        self.number_allocator = number_allocator
        self.customer_directory = customer_directory
        self.payment_terms_days = payment_terms_days
        self.reject_discount_over_subtotal = reject_discount_over_subtotal

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with customer, line items, discount

        Returns:
            Result[InvoiceResponseDTO]: Success with invoice details or error
        """
        try:
            # Step 1: Customer must exist
            if not await self.customer_directory.exists(command.customer_id):
                return Return.err(
                    Error(
                        code=ErrorCode.NOT_FOUND.value,
                        message=f"Customer {command.customer_id} not found",
                    )
                )

            # Step 2: Price line items and compute totals
            line_items = build_line_items(to_drafts(command.line_items))

            now = utc_now()
            invoice = Invoice(
                customer_id=command.customer_id,
                invoice_number="",
                status=InvoiceStatus.DRAFT,
                due_date=command.due_date or (now.date() + timedelta(days=self.payment_terms_days)),
                notes=command.notes,
                version=1,
                created_at=now,
                updated_at=now,
            )
            invoice.replace_line_items(
                line_items, command.discount, self.reject_discount_over_subtotal
            )

            # Step 3: Allocate invoice number
            invoice.invoice_number = await self.number_allocator.allocate(now.year)

            # Step 4: Persist invoice and its line items
            created_invoice = await self.invoice_repo.create(invoice)
            created_items = await self.line_item_repo.create_many(created_invoice.id, line_items)

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Created invoice {created_invoice.invoice_number} for customer "
                f"{created_invoice.customer_id}, total={created_invoice.total}"
            )

            # Step 6: No payments yet, balance = total
            return Return.ok(to_invoice_dto(created_invoice, created_items, []))

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(domain_error(e))

        except CustomerDirectoryUnavailable as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.UPSTREAM_ERROR.value,
                    message="Customer service unavailable",
                    reason=str(e),
                )
            )

        except Exception as e:
            logger.exception("Failed to create invoice")
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR.value,
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
