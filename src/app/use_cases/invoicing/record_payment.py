"""RecordPayment Use Case

Records a payment against a SENT invoice with idempotency guarantees,
overpayment rejection and the SENT -> PAID transition, all in one
transaction.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.base import utc_now
from src.domain.errors import (
    ConflictError,
    DomainError,
    DomainValidationError,
    ErrorCode,
    NotFoundError,
    OverpaymentError,
)
from src.domain.money import MAX_MONEY, has_cent_precision, subtract, to_money, within_money_range
from src.domain.payment import Payment, compute_balance
from .dtos import RecordPaymentCommandDTO, RecordPaymentResponseDTO
from .mappers import domain_error, to_record_payment_dto

logger = logging.getLogger(__name__)


class RecordPayment:
    """
    Use Case: Record a payment against an invoice

    Business Rules:
    1. Idempotency: same (invoice_id, idempotency_key) returns the original
       payment, writes nothing
    2. Payments only against SENT invoices (DRAFT and PAID fail INVALID_STATE)
    3. amount > 0 with at most two decimal places
    4. amount <= balance (balance = total - sum of payments); exact balance
       settles the invoice
    5. Balance reaching exactly zero moves the invoice to PAID in the same
       transaction as the payment
    6. Invoice row is locked (SELECT FOR UPDATE) and its version is bumped on
       every payment, so concurrent payments serialize. A version conflict or
       a duplicate key race rolls back and retries the whole flow.

    Flow:
    1. Lock invoice
    2. Check idempotency (return existing if found)
    3. Validate invoice status
    4. Compute balance from payment history
    5. Reject overpayment
    6. Version-checked invoice update (status PAID when settled)
    7. Insert payment
    8. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
        max_attempts: int = 3,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.max_attempts = max(1, max_attempts)

    async def execute(self, command: RecordPaymentCommandDTO) -> Result[RecordPaymentResponseDTO]:
        """
        Execute payment recording

        Args:
            command: RecordPaymentCommandDTO with invoice, amount, method, idempotency_key

        Returns:
            Result[RecordPaymentResponseDTO]: Success with payment and resulting
            balance, or error (NOT_FOUND, INVALID_STATE, VALIDATION_ERROR,
            OVERPAYMENT, CONFLICT)
        """
        try:
            self._validate_amount(command)
        except DomainValidationError as e:
            return Return.err(domain_error(e))

        last_conflict: Optional[ConflictError] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return Return.ok(await self._record(command))

            except ConflictError as e:
                await self.uow.rollback()
                last_conflict = e
                logger.warning(
                    f"Conflict recording payment on invoice {command.invoice_id} "
                    f"(attempt {attempt}/{self.max_attempts}): {e.message}"
                )

            except DomainError as e:
                await self.uow.rollback()
                logger.info(
                    f"Payment rejected on invoice {command.invoice_id}: {e.code.value} {e.message}"
                )
                return Return.err(domain_error(e))

            except Exception as e:
                logger.exception(f"Failed to record payment on invoice {command.invoice_id}")
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.INTERNAL_ERROR.value,
                        message="Failed to record payment",
                        reason=str(e),
                    )
                )

        return Return.err(
            Error(
                code=ErrorCode.CONFLICT.value,
                message=f"Invoice {command.invoice_id} is being modified concurrently, retry the request",
                reason=last_conflict.message if last_conflict else None,
            )
        )

    def _validate_amount(self, command: RecordPaymentCommandDTO) -> None:
        if not within_money_range(command.amount):
            raise DomainValidationError(
                "Payment amount is out of range",
                details={"amount": f"must not exceed {MAX_MONEY}"},
            )
        if command.amount <= 0:
            raise DomainValidationError(
                "Payment amount must be greater than 0",
                details={"amount": "must be > 0"},
            )
        if not has_cent_precision(command.amount):
            raise DomainValidationError(
                "Payment amount must have at most two decimal places",
                details={"amount": "at most 2 decimal places"},
            )

    async def _record(self, command: RecordPaymentCommandDTO) -> RecordPaymentResponseDTO:
        idempotency_key = str(command.idempotency_key)
        amount = to_money(command.amount)

        # Step 1: Lock invoice row
        invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
        if not invoice:
            raise NotFoundError(f"Invoice {command.invoice_id} not found")

        # Step 2: Idempotency - return the original payment untouched
        existing = await self.payment_repo.get_by_idempotency_key(invoice.id, idempotency_key)
        if existing:
            if existing.amount != amount:
                logger.warning(
                    f"Idempotency key {idempotency_key} reused on invoice {invoice.invoice_number} "
                    f"with amount {amount}; original amount {existing.amount} kept"
                )
            payments = await self.payment_repo.list_by_invoice_id(invoice.id)
            response = to_record_payment_dto(
                existing,
                balance_after=compute_balance(invoice.total, payments),
                invoice_status=invoice.status.value,
                replayed=True,
            )
            logger.info(f"Replayed payment {existing.id} for key {idempotency_key}")
            # Nothing written, release the row lock
            await self.uow.rollback()
            return response

        # Step 3: Status must be SENT
        invoice.ensure_accepts_payment()

        # Step 4: Balance from the authoritative total and payment history
        payments = await self.payment_repo.list_by_invoice_id(invoice.id)
        balance = compute_balance(invoice.total, payments)

        # Step 5: Strict overpayment check
        if amount > balance:
            raise OverpaymentError(
                f"Payment amount {amount} exceeds outstanding balance {balance}",
                details={"amount": str(amount), "balance": str(balance)},
            )

        balance_after = subtract(balance, amount)

        # Step 6: Version-checked invoice write, PAID when settled
        now = utc_now()
        loaded_version = invoice.version
        became_paid = invoice.settle_if_zero(balance_after, now)
        invoice = await self.invoice_repo.update(invoice, loaded_version)

        # Step 7: Append payment
        payment = Payment(
            invoice_id=invoice.id,
            amount=amount,
            payment_method=command.payment_method,
            payment_date=command.payment_date or now.date(),
            notes=command.notes,
            idempotency_key=idempotency_key,
            created_at=now,
        )
        created_payment = await self.payment_repo.create(payment)

        response = to_record_payment_dto(
            created_payment,
            balance_after=balance_after,
            invoice_status=invoice.status.value,
            replayed=False,
        )

        # Step 8: Commit payment and invoice together
        await self.uow.commit()

        logger.info(
            f"Recorded payment {created_payment.id} of {amount} on invoice "
            f"{invoice.invoice_number}, balance {balance_after}"
        )
        if became_paid:
            logger.info(f"Invoice {invoice.invoice_number} is now PAID")

        return response
