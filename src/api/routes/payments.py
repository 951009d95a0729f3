"""Payment API Routes

FastAPI routes for recording and reading payments.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.invoice_request import RecordPaymentRequestSchema
from src.app.use_cases.invoicing.dtos import (
    PaymentResponseDTO,
    RecordPaymentCommandDTO,
    RecordPaymentResponseDTO,
)
from src.app.use_cases.invoicing.get_payment import GetPayment
from src.app.use_cases.invoicing.record_payment import RecordPayment
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post(
    "",
    response_model=RecordPaymentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"description": "Replay of an already recorded idempotency key"},
        400: {
            "description": "Overpayment, invoice not payable or validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "OVERPAYMENT",
                            "message": "Payment of 700.00 exceeds outstanding balance 600.00"
                        }
                    }
                }
            }
        },
        404: {"description": "Invoice not found"},
        409: {"description": "Invoice kept changing concurrently; retry with the same key"},
    }
)
async def record_payment(
    request: RecordPaymentRequestSchema,
    response: Response,
    session: AsyncSession = Depends(get_session)
):
    """
    Record a payment against a SENT invoice with idempotency guarantee.

    Repeating a request with the same `idempotency_key` for the same invoice
    returns the original payment (HTTP 200, `replayed: true`) without
    recording it twice. A payment that brings the balance to zero moves the
    invoice to PAID.

    **Returns:**
    - 201: Payment recorded
    - 200: Idempotent replay
    - 400: OVERPAYMENT, INVALID_STATE or VALIDATION_ERROR
    - 404: Invoice not found
    - 409: Concurrent modification could not be resolved
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = RecordPayment(
        uow=uow,
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
        max_attempts=ApplicationConfig.PAYMENT_MAX_RETRIES,
    )

    command = RecordPaymentCommandDTO(
        invoice_id=request.invoice_id,
        amount=request.amount,
        payment_method=request.payment_method,
        payment_date=request.payment_date,
        notes=request.notes,
        idempotency_key=request.idempotency_key,
    )

    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    if result.value.replayed:
        response.status_code = status.HTTP_200_OK

    return result.value


@router.get(
    "/{payment_id}",
    response_model=PaymentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Payment not found"}}
)
async def get_payment(
    payment_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Fetch a single payment by id."""
    result = await GetPayment(SqlAlchemyPaymentRepository(session)).execute(payment_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
