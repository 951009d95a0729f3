"""Use case wiring shared by the integration tests"""

import os
from decimal import Decimal
from uuid import uuid4

import pytest

from src.adapter.repositories.invoice_number_allocator import SqlAlchemyInvoiceNumberAllocator
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.line_item_repository import SqlAlchemyLineItemRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.invoicing import (
    CreateInvoice,
    CreateInvoiceCommandDTO,
    GetInvoice,
    LineItemInputDTO,
    RecordPayment,
    RecordPaymentCommandDTO,
    SendInvoice,
    SendInvoiceCommandDTO,
    UpdateInvoice,
)
from src.domain.payment import PaymentMethod

# Tests that queue many writers on a row lock need PostgreSQL; set
# TEST_DB_URI (postgresql+asyncpg://...) to run them.
requires_postgres = pytest.mark.skipif(
    not os.environ.get("TEST_DB_URI", "").startswith("postgresql"),
    reason="requires PostgreSQL (set TEST_DB_URI)",
)


class InvoicingService:
    """Builds use cases over one session the way the API routes do"""

    def __init__(self, session, customer_directory):
        self.session = session
        self.customer_directory = customer_directory
        self.uow = SqlAlchemyUnitOfWork(session)
        self.invoice_repo = SqlAlchemyInvoiceRepository(session)
        self.line_item_repo = SqlAlchemyLineItemRepository(session)
        self.payment_repo = SqlAlchemyPaymentRepository(session)

    async def create(self, *prices, customer_id="cust_42", discount="0.00", quantity="1"):
        use_case = CreateInvoice(
            uow=self.uow,
            invoice_repo=self.invoice_repo,
            line_item_repo=self.line_item_repo,
            number_allocator=SqlAlchemyInvoiceNumberAllocator(self.session),
            customer_directory=self.customer_directory,
        )
        return await use_case.execute(
            CreateInvoiceCommandDTO(
                customer_id=customer_id,
                line_items=[
                    LineItemInputDTO(description=f"Line {i}", quantity=Decimal(quantity), unit_price=Decimal(price))
                    for i, price in enumerate(prices or ("1000.00",))
                ],
                discount=Decimal(discount),
            )
        )

    def updater(self) -> UpdateInvoice:
        return UpdateInvoice(self.uow, self.invoice_repo, self.line_item_repo)

    async def send(self, invoice_id, expected_version=None):
        use_case = SendInvoice(self.uow, self.invoice_repo, self.line_item_repo)
        return await use_case.execute(
            SendInvoiceCommandDTO(invoice_id=invoice_id, expected_version=expected_version)
        )

    async def pay(self, invoice_id, amount, idempotency_key=None, max_attempts=3):
        use_case = RecordPayment(self.uow, self.invoice_repo, self.payment_repo, max_attempts=max_attempts)
        return await use_case.execute(
            RecordPaymentCommandDTO(
                invoice_id=invoice_id,
                amount=Decimal(amount),
                payment_method=PaymentMethod.WIRE,
                idempotency_key=idempotency_key or uuid4(),
            )
        )

    async def get(self, invoice_id):
        use_case = GetInvoice(self.invoice_repo, self.line_item_repo, self.payment_repo)
        return await use_case.execute(invoice_id)

    async def sent_invoice(self, *prices):
        created = await self.create(*prices)
        sent = await self.send(created.value.id)
        return sent.value
