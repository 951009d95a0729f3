"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from sqlalchemy import update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.base import utc_now
from src.domain.errors import ConflictError
from src.domain.invoice import Invoice, InvoiceStatus


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE (ignored by SQLite)
    - Optimistic version check on every update
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID
        """
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID with optional row-level locking

        Args:
            invoice_id: Invoice ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        statement = select(Invoice).where(Invoice.id == invoice_id)

        if for_update:
            statement = statement.with_for_update()

        # populate_existing so a locked read never returns a stale identity-map copy
        statement = statement.execution_options(populate_existing=True)

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    def _filtered(self, statement, status: Optional[InvoiceStatus], customer_id: Optional[str]):
        if status:
            statement = statement.where(Invoice.status == status)
        if customer_id:
            statement = statement.where(Invoice.customer_id == customer_id)
        return statement

    async def find(
        self,
        status: Optional[InvoiceStatus] = None,
        customer_id: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> List[Invoice]:
        """
        List invoices, newest first

        Args:
            status: Optional filter by status
            customer_id: Optional filter by customer
            limit: Maximum number of invoices to return
            offset: Offset for pagination

        Returns:
            List of invoices
        """
        statement = self._filtered(select(Invoice), status, customer_id)
        statement = statement.order_by(Invoice.created_at.desc(), Invoice.id.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count(
        self,
        status: Optional[InvoiceStatus] = None,
        customer_id: Optional[str] = None,
    ) -> int:
        statement = self._filtered(
            select(func.count()).select_from(Invoice), status, customer_id
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def update(self, invoice: Invoice, expected_version: int) -> Invoice:
        """
        Persist invoice changes with an optimistic version check

        Issues ``UPDATE ... WHERE id = :id AND version = :expected_version``
        and bumps the version. Zero matched rows means another writer got
        there first.

        Args:
            invoice: Invoice entity with updated values
            expected_version: Version the caller loaded

        Returns:
            Updated Invoice, refreshed from the database

        Raises:
            ConflictError: The stored version has moved on
        """
        statement = (
            update(Invoice)
            .where(Invoice.id == invoice.id)
            .where(Invoice.version == expected_version)
            .values(
                status=invoice.status,
                subtotal=invoice.subtotal,
                discount=invoice.discount,
                total=invoice.total,
                due_date=invoice.due_date,
                issued_date=invoice.issued_date,
                paid_at=invoice.paid_at,
                notes=invoice.notes,
                version=expected_version + 1,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)

        if result.rowcount != 1:
            raise ConflictError(
                f"Invoice {invoice.id} was modified concurrently "
                f"(expected version {expected_version})",
                details={"invoice_id": invoice.id, "expected_version": expected_version},
            )

        # Reload so the in-memory entity carries the new version and is clean
        await self.session.refresh(invoice)
        return invoice
