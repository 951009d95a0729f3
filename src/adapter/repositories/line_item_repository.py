"""SQLAlchemy Line Item Repository Implementation

Implements line item persistence using SQLAlchemy async session.
"""

from typing import List
from sqlalchemy import delete
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.line_item_repository import LineItemRepository
from src.domain.line_item import LineItem


class SqlAlchemyLineItemRepository(LineItemRepository):
    """
    SQLAlchemy implementation of LineItemRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_many(self, invoice_id: int, items: List[LineItem]) -> List[LineItem]:
        """
        Attach line items to an invoice and persist them

        Args:
            invoice_id: Owning invoice ID
            items: Priced line items (not yet persisted)

        Returns:
            Created line items with generated IDs
        """
        for item in items:
            item.invoice_id = invoice_id
        self.session.add_all(items)
        await self.session.flush()
        for item in items:
            await self.session.refresh(item)
        return sorted(items, key=lambda item: item.position)

    async def get_by_invoice_id(self, invoice_id: int) -> List[LineItem]:
        """
        Retrieve all line items for an invoice

        Args:
            invoice_id: Invoice ID

        Returns:
            List of LineItem rows in position order
        """
        statement = (
            select(LineItem)
            .where(LineItem.invoice_id == invoice_id)
            .order_by(LineItem.position, LineItem.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def replace(self, invoice_id: int, items: List[LineItem]) -> List[LineItem]:
        """
        Delete the invoice's current line items and persist ``items``

        Args:
            invoice_id: Owning invoice ID
            items: New priced line items

        Returns:
            Created line items
        """
        await self.session.execute(
            delete(LineItem)
            .where(LineItem.invoice_id == invoice_id)
            .execution_options(synchronize_session=False)
        )
        return await self.create_many(invoice_id, items)

    async def count_by_invoice_id(self, invoice_id: int) -> int:
        statement = (
            select(func.count())
            .select_from(LineItem)
            .where(LineItem.invoice_id == invoice_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()
