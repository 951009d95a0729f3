"""Unit tests for CreateInvoice use case

Tests cover:
- Successful creation with totals and invoice number
- Unknown customer and unavailable customer service
- Line item and discount validation before a number is allocated
- Rollback on repository failure
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.customer_directory import CustomerDirectoryUnavailable
from src.app.use_cases.invoicing.create_invoice import CreateInvoice
from src.app.use_cases.invoicing.dtos import CreateInvoiceCommandDTO, LineItemInputDTO
from src.domain.invoice import InvoiceStatus


@pytest.fixture
def mock_invoice_repo():
    repo = MagicMock()

    async def create(invoice):
        invoice.id = 1
        return invoice

    repo.create = AsyncMock(side_effect=create)
    return repo


@pytest.fixture
def mock_line_item_repo():
    repo = MagicMock()

    async def create_many(invoice_id, items):
        for index, item in enumerate(items, start=1):
            item.id = index
            item.invoice_id = invoice_id
        return list(items)

    repo.create_many = AsyncMock(side_effect=create_many)
    return repo


@pytest.fixture
def mock_allocator():
    allocator = MagicMock()
    allocator.allocate = AsyncMock(return_value="INV-2025-0001")
    return allocator


@pytest.fixture
def mock_customer_directory():
    directory = MagicMock()
    directory.exists = AsyncMock(return_value=True)
    return directory


@pytest.fixture
def create_use_case(mock_uow, mock_invoice_repo, mock_line_item_repo, mock_allocator, mock_customer_directory):
    return CreateInvoice(
        uow=mock_uow,
        invoice_repo=mock_invoice_repo,
        line_item_repo=mock_line_item_repo,
        number_allocator=mock_allocator,
        customer_directory=mock_customer_directory,
        payment_terms_days=14,
    )


@pytest.fixture
def sample_command():
    return CreateInvoiceCommandDTO(
        customer_id="cust_42",
        line_items=[
            LineItemInputDTO(description="Consulting", quantity=Decimal("2"), unit_price=Decimal("500.00")),
            LineItemInputDTO(description="Travel", quantity=Decimal("1"), unit_price=Decimal("120.50")),
        ],
        discount=Decimal("20.50"),
    )


@pytest.mark.asyncio
class TestCreateInvoiceSuccess:
    async def test_creates_draft_invoice_with_totals(
        self, create_use_case, mock_uow, mock_invoice_repo, mock_line_item_repo, mock_allocator, sample_command
    ):
        """
        Given: An existing customer and two valid line items
        When: CreateInvoice is executed
        Then: A DRAFT invoice at version 1 is stored with derived totals
        """
        # Act
        result = await create_use_case.execute(sample_command)

        # Assert
        assert result.is_ok()
        invoice = result.value
        assert invoice.id == 1
        assert invoice.invoice_number == "INV-2025-0001"
        assert invoice.status == "DRAFT"
        assert invoice.version == 1
        assert invoice.subtotal == Decimal("1120.50")
        assert invoice.discount == Decimal("20.50")
        assert invoice.total == Decimal("1100.00")
        assert invoice.amount_paid == Decimal("0.00")
        assert invoice.balance == Decimal("1100.00")
        assert [item.amount for item in invoice.line_items] == [Decimal("1000.00"), Decimal("120.50")]

        mock_allocator.allocate.assert_called_once_with(datetime.now(timezone.utc).year)
        mock_invoice_repo.create.assert_called_once()
        mock_line_item_repo.create_many.assert_called_once()
        assert mock_line_item_repo.create_many.call_args.args[0] == 1
        mock_uow.commit.assert_called_once()

    async def test_due_date_defaults_to_payment_terms(self, create_use_case, mock_invoice_repo, sample_command):
        result = await create_use_case.execute(sample_command)

        created = mock_invoice_repo.create.call_args.args[0]
        assert created.due_date == datetime.now(timezone.utc).date() + timedelta(days=14)
        assert result.value.due_date == created.due_date

    async def test_discount_over_subtotal_clamps_to_zero(self, create_use_case):
        command = CreateInvoiceCommandDTO(
            customer_id="cust_42",
            line_items=[LineItemInputDTO(description="Widget", quantity=Decimal("1"), unit_price=Decimal("10.00"))],
            discount=Decimal("25.00"),
        )

        result = await create_use_case.execute(command)

        assert result.is_ok()
        assert result.value.total == Decimal("0.00")
        assert result.value.status == InvoiceStatus.DRAFT.value


@pytest.mark.asyncio
class TestCreateInvoiceErrors:
    async def test_unknown_customer(
        self, create_use_case, mock_customer_directory, mock_allocator, mock_uow, sample_command
    ):
        mock_customer_directory.exists = AsyncMock(return_value=False)

        result = await create_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "NOT_FOUND"
        mock_allocator.allocate.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_customer_service_unavailable(
        self, create_use_case, mock_customer_directory, mock_uow, sample_command
    ):
        mock_customer_directory.exists = AsyncMock(
            side_effect=CustomerDirectoryUnavailable("connection refused")
        )

        result = await create_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "UPSTREAM_ERROR"
        mock_uow.rollback.assert_called_once()

    async def test_invalid_line_item_rejected_before_allocation(
        self, create_use_case, mock_allocator, mock_invoice_repo
    ):
        command = CreateInvoiceCommandDTO(
            customer_id="cust_42",
            line_items=[LineItemInputDTO(description="Widget", quantity=Decimal("0"), unit_price=Decimal("10.00"))],
        )

        result = await create_use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert "line_items[0].quantity" in result.error.details
        mock_allocator.allocate.assert_not_called()
        mock_invoice_repo.create.assert_not_called()

    async def test_empty_line_items_rejected(self, create_use_case):
        command = CreateInvoiceCommandDTO(customer_id="cust_42", line_items=[])

        result = await create_use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"

    async def test_discount_over_subtotal_rejected_when_configured(
        self, mock_uow, mock_invoice_repo, mock_line_item_repo, mock_allocator, mock_customer_directory
    ):
        use_case = CreateInvoice(
            uow=mock_uow,
            invoice_repo=mock_invoice_repo,
            line_item_repo=mock_line_item_repo,
            number_allocator=mock_allocator,
            customer_directory=mock_customer_directory,
            reject_discount_over_subtotal=True,
        )
        command = CreateInvoiceCommandDTO(
            customer_id="cust_42",
            line_items=[LineItemInputDTO(description="Widget", quantity=Decimal("1"), unit_price=Decimal("10.00"))],
            discount=Decimal("25.00"),
        )

        result = await use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.details == {"discount": "must not exceed subtotal"}

    async def test_repository_failure_rolls_back(
        self, create_use_case, mock_invoice_repo, mock_uow, sample_command
    ):
        mock_invoice_repo.create = AsyncMock(side_effect=RuntimeError("db down"))

        result = await create_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "INTERNAL_ERROR"
        assert result.error.reason == "db down"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()
