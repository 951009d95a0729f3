"""Unit tests for RecordPayment use case

Tests cover:
- Partial and settling payments
- Overpayment and status rules
- Idempotent replay
- Retry on version conflicts
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

from src.app.use_cases.invoicing.dtos import RecordPaymentCommandDTO
from src.app.use_cases.invoicing.record_payment import RecordPayment
from src.domain.errors import ConflictError
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.payment import Payment, PaymentMethod

IDEMPOTENCY_KEY = UUID("6f1c1f0e-3c55-4d8e-9a59-0b1a0c2f6a11")


def make_invoice(status=InvoiceStatus.SENT, total="1000.00", version=2):
    return Invoice(
        id=1,
        customer_id="cust_42",
        invoice_number="INV-2025-0001",
        status=status,
        subtotal=Decimal(total),
        discount=Decimal("0.00"),
        total=Decimal(total),
        version=version,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


def make_payment(amount, key="11111111-1111-1111-1111-111111111111", payment_id=5):
    return Payment(
        id=payment_id,
        invoice_id=1,
        amount=Decimal(amount),
        payment_method=PaymentMethod.CARD,
        payment_date=date(2025, 2, 1),
        idempotency_key=key,
        created_at=datetime.now(timezone.utc),
    )


def command(amount="400.00", key=IDEMPOTENCY_KEY):
    return RecordPaymentCommandDTO(
        invoice_id=1,
        amount=Decimal(amount),
        payment_method=PaymentMethod.WIRE,
        idempotency_key=key,
    )


async def bump_version(invoice, expected_version):
    invoice.version = expected_version + 1
    return invoice


async def assign_id(payment):
    payment.id = 10
    return payment


@pytest.fixture
def mock_invoice_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(side_effect=lambda invoice_id, for_update=False: make_invoice())
    repo.update = AsyncMock(side_effect=bump_version)
    return repo


@pytest.fixture
def mock_payment_repo():
    repo = MagicMock()
    repo.get_by_idempotency_key = AsyncMock(return_value=None)
    repo.list_by_invoice_id = AsyncMock(return_value=[])
    repo.create = AsyncMock(side_effect=assign_id)
    return repo


@pytest.fixture
def record_use_case(mock_uow, mock_invoice_repo, mock_payment_repo):
    return RecordPayment(mock_uow, mock_invoice_repo, mock_payment_repo, max_attempts=3)


@pytest.mark.asyncio
class TestRecordPaymentSuccess:
    async def test_partial_payment(
        self, record_use_case, mock_invoice_repo, mock_payment_repo, mock_uow
    ):
        """
        Given: A SENT invoice with total 1000.00 and no payments
        When: 400.00 is paid
        Then: Payment stored, balance 600.00, invoice stays SENT, version bumped
        """
        result = await record_use_case.execute(command("400.00"))

        assert result.is_ok()
        response = result.value
        assert response.id == 10
        assert response.amount == Decimal("400.00")
        assert response.payment_method == "WIRE"
        assert response.payment_date == datetime.now(timezone.utc).date()
        assert response.idempotency_key == str(IDEMPOTENCY_KEY)
        assert response.balance_after == Decimal("600.00")
        assert response.invoice_status == "SENT"
        assert response.replayed is False

        mock_invoice_repo.get_by_id.assert_called_once_with(1, for_update=True)
        mock_payment_repo.get_by_idempotency_key.assert_called_once_with(1, str(IDEMPOTENCY_KEY))
        assert mock_invoice_repo.update.call_args.args[1] == 2
        mock_payment_repo.create.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_exact_balance_marks_invoice_paid(
        self, record_use_case, mock_invoice_repo, mock_payment_repo
    ):
        mock_payment_repo.list_by_invoice_id = AsyncMock(return_value=[make_payment("600.00")])

        result = await record_use_case.execute(command("400.00"))

        assert result.is_ok()
        assert result.value.balance_after == Decimal("0.00")
        assert result.value.invoice_status == "PAID"

        updated = mock_invoice_repo.update.call_args.args[0]
        assert updated.status == InvoiceStatus.PAID
        assert updated.paid_at is not None

    async def test_amount_is_stored_at_cent_precision(self, record_use_case, mock_payment_repo):
        result = await record_use_case.execute(command("12.5"))

        assert result.is_ok()
        stored = mock_payment_repo.create.call_args.args[0]
        assert stored.amount == Decimal("12.50")
        assert str(stored.amount) == "12.50"


@pytest.mark.asyncio
class TestRecordPaymentRules:
    async def test_overpayment_rejected(self, record_use_case, mock_payment_repo, mock_uow):
        mock_payment_repo.list_by_invoice_id = AsyncMock(return_value=[make_payment("600.00")])

        result = await record_use_case.execute(command("400.01"))

        assert result.is_err()
        assert result.error.code == "OVERPAYMENT"
        assert result.error.details == {"amount": "400.01", "balance": "400.00"}
        mock_payment_repo.create.assert_not_called()
        mock_uow.commit.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_draft_invoice_rejects_payment(self, record_use_case, mock_invoice_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(status=InvoiceStatus.DRAFT))

        result = await record_use_case.execute(command())

        assert result.is_err()
        assert result.error.code == "INVALID_STATE"

    async def test_paid_invoice_rejects_payment(self, record_use_case, mock_invoice_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(status=InvoiceStatus.PAID))

        result = await record_use_case.execute(command())

        assert result.is_err()
        assert result.error.code == "INVALID_STATE"

    async def test_invoice_not_found(self, record_use_case, mock_invoice_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=None)

        result = await record_use_case.execute(command())

        assert result.is_err()
        assert result.error.code == "NOT_FOUND"

    @pytest.mark.parametrize("amount", ["0", "-5.00", "1.001", "1e30"])
    async def test_invalid_amount_rejected_without_touching_storage(
        self, record_use_case, mock_invoice_repo, amount
    ):
        result = await record_use_case.execute(command(amount))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        mock_invoice_repo.get_by_id.assert_not_called()


@pytest.mark.asyncio
class TestRecordPaymentIdempotency:
    async def test_replay_returns_original_payment(
        self, record_use_case, mock_invoice_repo, mock_payment_repo, mock_uow
    ):
        original = make_payment("400.00", key=str(IDEMPOTENCY_KEY), payment_id=7)
        mock_payment_repo.get_by_idempotency_key = AsyncMock(return_value=original)
        mock_payment_repo.list_by_invoice_id = AsyncMock(return_value=[original])

        result = await record_use_case.execute(command("400.00"))

        assert result.is_ok()
        assert result.value.id == 7
        assert result.value.replayed is True
        assert result.value.balance_after == Decimal("600.00")
        mock_invoice_repo.update.assert_not_called()
        mock_payment_repo.create.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_replay_on_paid_invoice_returns_original(
        self, record_use_case, mock_invoice_repo, mock_payment_repo, mock_uow
    ):
        original = make_payment("1000.00", key=str(IDEMPOTENCY_KEY), payment_id=7)
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(status=InvoiceStatus.PAID))
        mock_payment_repo.get_by_idempotency_key = AsyncMock(return_value=original)
        mock_payment_repo.list_by_invoice_id = AsyncMock(return_value=[original])

        result = await record_use_case.execute(command("1000.00"))

        assert result.is_ok()
        assert result.value.id == 7
        assert result.value.replayed is True
        assert result.value.invoice_status == "PAID"
        assert result.value.balance_after == Decimal("0.00")
        mock_payment_repo.create.assert_not_called()

    async def test_fresh_key_on_paid_invoice_is_invalid_state(
        self, record_use_case, mock_invoice_repo, mock_payment_repo
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(status=InvoiceStatus.PAID))
        mock_payment_repo.get_by_idempotency_key = AsyncMock(return_value=None)

        result = await record_use_case.execute(command("10.00"))

        assert result.is_err()
        assert result.error.code == "INVALID_STATE"
        mock_payment_repo.create.assert_not_called()

    async def test_replay_with_different_amount_keeps_original(
        self, record_use_case, mock_payment_repo
    ):
        original = make_payment("400.00", key=str(IDEMPOTENCY_KEY), payment_id=7)
        mock_payment_repo.get_by_idempotency_key = AsyncMock(return_value=original)
        mock_payment_repo.list_by_invoice_id = AsyncMock(return_value=[original])

        result = await record_use_case.execute(command("999.00"))

        assert result.is_ok()
        assert result.value.amount == Decimal("400.00")
        mock_payment_repo.create.assert_not_called()

    async def test_duplicate_key_race_replays_on_retry(
        self, record_use_case, mock_payment_repo, mock_uow
    ):
        """A concurrent insert of the same key surfaces as a replay, not an error"""
        winner = make_payment("400.00", key=str(IDEMPOTENCY_KEY), payment_id=8)
        mock_payment_repo.get_by_idempotency_key = AsyncMock(side_effect=[None, winner])
        mock_payment_repo.create = AsyncMock(side_effect=ConflictError("duplicate idempotency key"))
        mock_payment_repo.list_by_invoice_id = AsyncMock(side_effect=[[], [winner]])

        result = await record_use_case.execute(command("400.00"))

        assert result.is_ok()
        assert result.value.id == 8
        assert result.value.replayed is True
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestRecordPaymentRetry:
    async def test_retries_after_version_conflict(
        self, record_use_case, mock_invoice_repo, mock_uow
    ):
        mock_invoice_repo.update = AsyncMock(
            side_effect=[ConflictError("Invoice 1 was modified concurrently"), make_invoice(version=3)]
        )

        result = await record_use_case.execute(command("100.00"))

        assert result.is_ok()
        assert mock_invoice_repo.get_by_id.call_count == 2
        assert mock_invoice_repo.update.call_count == 2
        mock_uow.commit.assert_called_once()

    async def test_retry_rechecks_balance(
        self, record_use_case, mock_invoice_repo, mock_payment_repo, mock_uow
    ):
        """The second attempt sees the competing payment and rejects the overpayment"""
        mock_invoice_repo.update = AsyncMock(side_effect=ConflictError("Invoice 1 was modified concurrently"))
        mock_payment_repo.list_by_invoice_id = AsyncMock(
            side_effect=[[], [make_payment("700.00")]]
        )

        result = await record_use_case.execute(command("400.00"))

        assert result.is_err()
        assert result.error.code == "OVERPAYMENT"
        mock_payment_repo.create.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_gives_up_after_max_attempts(
        self, record_use_case, mock_invoice_repo, mock_uow
    ):
        mock_invoice_repo.update = AsyncMock(side_effect=ConflictError("Invoice 1 was modified concurrently"))

        result = await record_use_case.execute(command("100.00"))

        assert result.is_err()
        assert result.error.code == "CONFLICT"
        assert mock_invoice_repo.get_by_id.call_count == 3
        assert mock_uow.rollback.call_count == 3
        mock_uow.commit.assert_not_called()

    async def test_unexpected_error_is_internal(self, record_use_case, mock_payment_repo, mock_uow):
        mock_payment_repo.create = AsyncMock(side_effect=RuntimeError("disk full"))

        result = await record_use_case.execute(command("100.00"))

        assert result.is_err()
        assert result.error.code == "INTERNAL_ERROR"
        mock_uow.rollback.assert_called_once()
