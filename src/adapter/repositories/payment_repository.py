"""SQLAlchemy implementation of PaymentRepository

Provides persistence for Payment entities with idempotency enforcement
via the unique (invoice_id, idempotency_key) constraint.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.errors import ConflictError
from src.domain.payment import Payment


class SqlAlchemyPaymentRepository(PaymentRepository):
    """
    SQLAlchemy implementation of PaymentRepository

    Features:
    - Idempotency enforcement via unique (invoice_id, idempotency_key)
    - Immutable append-only payments
    - Deterministic history order (created_at, then id)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment

        Args:
            payment: Payment entity to persist

        Returns:
            Created Payment with generated ID

        Raises:
            ConflictError: If the idempotency key was already used for the
                invoice by a concurrent writer
        """
        self.session.add(payment)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(
                f"Payment with idempotency key {payment.idempotency_key} "
                f"already recorded for invoice {payment.invoice_id}",
                details={"idempotency_key": payment.idempotency_key},
            ) from e
        await self.session.refresh(payment)
        return payment

    async def get_by_id(self, payment_id: int) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.id == payment_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_idempotency_key(self, invoice_id: int, idempotency_key: str) -> Optional[Payment]:
        """
        Retrieve payment by (invoice_id, idempotency_key)

        Used to check if the payment was already recorded (idempotency check).

        Args:
            invoice_id: Invoice ID
            idempotency_key: Client-supplied key

        Returns:
            Payment if found, None otherwise
        """
        stmt = select(Payment).where(
            Payment.invoice_id == invoice_id,
            Payment.idempotency_key == idempotency_key,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_invoice_id(self, invoice_id: int) -> List[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.invoice_id == invoice_id)
            .order_by(Payment.created_at.asc(), Payment.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_invoice_ids(self, invoice_ids: Sequence[int]) -> Dict[int, List[Payment]]:
        grouped: Dict[int, List[Payment]] = {invoice_id: [] for invoice_id in invoice_ids}
        if not invoice_ids:
            return grouped

        stmt = (
            select(Payment)
            .where(Payment.invoice_id.in_(list(invoice_ids)))
            .order_by(Payment.created_at.asc(), Payment.id.asc())
        )
        result = await self.session.execute(stmt)

        by_invoice = defaultdict(list)
        for payment in result.scalars().all():
            by_invoice[payment.invoice_id].append(payment)
        grouped.update(by_invoice)
        return grouped
