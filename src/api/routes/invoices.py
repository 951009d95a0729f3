"""Invoice API Routes

FastAPI routes for the invoice lifecycle: create, edit, send, read.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.invoice_request import (
    CreateInvoiceRequestSchema,
    SendInvoiceRequestSchema,
    UpdateInvoiceRequestSchema,
)
from src.app.services.customer_directory import CustomerDirectory
from src.app.use_cases.invoicing.dtos import (
    CreateInvoiceCommandDTO,
    InvoiceListResponseDTO,
    InvoiceResponseDTO,
    LineItemInputDTO,
    ListInvoicesQueryDTO,
    PaymentResponseDTO,
    SendInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
)
from src.app.use_cases.invoicing.create_invoice import CreateInvoice
from src.app.use_cases.invoicing.get_invoice import GetInvoice
from src.app.use_cases.invoicing.list_invoices import ListInvoices
from src.app.use_cases.invoicing.list_payments import ListPayments
from src.app.use_cases.invoicing.send_invoice import SendInvoice
from src.app.use_cases.invoicing.update_invoice import UpdateInvoice
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.line_item_repository import SqlAlchemyLineItemRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.repositories.invoice_number_allocator import SqlAlchemyInvoiceNumberAllocator
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_customer_directory, get_session
from src.domain.invoice import InvoiceStatus
from src.api.error import ClientError

router = APIRouter(prefix="/invoices", tags=["Invoices"])

NOT_FOUND_EXAMPLE = {
    "description": "Invoice not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "NOT_FOUND",
                    "message": "Invoice 123 not found"
                }
            }
        }
    }
}

CONFLICT_EXAMPLE = {
    "description": "Invoice was modified concurrently",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "CONFLICT",
                    "message": "Invoice 1 was modified concurrently (expected version 2)"
                }
            }
        }
    }
}

INVALID_STATE_EXAMPLE = {
    "description": "Invoice is not in the required status",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INVALID_STATE",
                    "message": "Invoice 1 is SENT; only DRAFT invoices can be edited"
                }
            }
        }
    }
}


def _line_items(items) -> Optional[List[LineItemInputDTO]]:
    if items is None:
        return None
    return [
        LineItemInputDTO(
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )
        for item in items
    ]


@router.get(
    "",
    response_model=InvoiceListResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_invoices(
    status_filter: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    customer_id: Optional[str] = Query(default=None),
    page: int = Query(default=0, ge=0, description="Zero-based page number"),
    size: int = Query(default=ApplicationConfig.DEFAULT_PAGE_SIZE, ge=1),
    session: AsyncSession = Depends(get_session)
):
    """
    List invoices, newest first.

    **Query parameters:**
    - `status` (optional): DRAFT, SENT or PAID
    - `customer_id` (optional): Restrict to one customer
    - `page` (optional): Zero-based page number (default 0)
    - `size` (optional): Page size, capped at the configured maximum
    """
    invoice_repo = SqlAlchemyInvoiceRepository(session)
    payment_repo = SqlAlchemyPaymentRepository(session)

    use_case = ListInvoices(
        invoice_repo, payment_repo, max_page_size=ApplicationConfig.MAX_PAGE_SIZE
    )
    result = await use_case.execute(
        ListInvoicesQueryDTO(
            status=status_filter, customer_id=customer_id, page=page, size=size
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {
            "description": "Customer not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "NOT_FOUND",
                            "message": "Customer cust_42 not found"
                        }
                    }
                }
            }
        },
        502: {"description": "Customer service unavailable"},
    }
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
    customer_directory: CustomerDirectory = Depends(get_customer_directory)
):
    """
    Create a DRAFT invoice with its line items.

    The invoice number (`INV-<year>-<seq>`) is allocated in the same
    transaction; numbers are sequential per calendar year.

    **Returns:**
    - 201: Invoice created
    - 400: Validation error
    - 404: Customer does not exist
    - 502: Customer service unavailable
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = CreateInvoice(
        uow=uow,
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        line_item_repo=SqlAlchemyLineItemRepository(session),
        number_allocator=SqlAlchemyInvoiceNumberAllocator(session),
        customer_directory=customer_directory,
        payment_terms_days=ApplicationConfig.DEFAULT_PAYMENT_TERMS_DAYS,
        reject_discount_over_subtotal=ApplicationConfig.REJECT_DISCOUNT_OVER_SUBTOTAL,
    )

    command = CreateInvoiceCommandDTO(
        customer_id=request.customer_id,
        line_items=_line_items(request.line_items),
        discount=request.discount,
        due_date=request.due_date,
        notes=request.notes,
    )

    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_EXAMPLE}
)
async def get_invoice(
    invoice_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Fetch one invoice with line items, amount paid and balance."""
    use_case = GetInvoice(
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyLineItemRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: INVALID_STATE_EXAMPLE,
        404: NOT_FOUND_EXAMPLE,
        409: CONFLICT_EXAMPLE,
    }
)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Edit a DRAFT invoice.

    Omitted fields are left unchanged. Supplying `line_items` replaces all
    existing lines. Pass `version` to reject the edit if someone else changed
    the invoice first.
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = UpdateInvoice(
        uow=uow,
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        line_item_repo=SqlAlchemyLineItemRepository(session),
        reject_discount_over_subtotal=ApplicationConfig.REJECT_DISCOUNT_OVER_SUBTOTAL,
    )

    command = UpdateInvoiceCommandDTO(
        invoice_id=invoice_id,
        line_items=_line_items(request.line_items),
        discount=request.discount,
        due_date=request.due_date,
        notes=request.notes,
        expected_version=request.version,
    )

    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{invoice_id}/send",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: INVALID_STATE_EXAMPLE,
        404: NOT_FOUND_EXAMPLE,
        409: CONFLICT_EXAMPLE,
    }
)
async def send_invoice(
    invoice_id: int,
    request: Optional[SendInvoiceRequestSchema] = None,
    session: AsyncSession = Depends(get_session)
):
    """
    Move a DRAFT invoice to SENT and stamp its issued date.

    Sending an invoice twice fails with INVALID_STATE.
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = SendInvoice(
        uow=uow,
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        line_item_repo=SqlAlchemyLineItemRepository(session),
    )

    command = SendInvoiceCommandDTO(
        invoice_id=invoice_id,
        expected_version=request.version if request else None,
    )

    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{invoice_id}/payments",
    response_model=List[PaymentResponseDTO],
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_EXAMPLE}
)
async def list_invoice_payments(
    invoice_id: int,
    session: AsyncSession = Depends(get_session)
):
    """List the payments recorded against an invoice, oldest first."""
    use_case = ListPayments(
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
