"""Line Item Repository Interface

Defines the contract for line item persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.line_item import LineItem


class LineItemRepository(ABC):
    """Repository interface for LineItem persistence"""

    @abstractmethod
    async def create_many(self, invoice_id: int, items: List[LineItem]) -> List[LineItem]:
        """
        Attach line items to an invoice and persist them

        Args:
            invoice_id: Owning invoice ID
            items: Priced line items (not yet persisted)

        Returns:
            Created line items with generated IDs, in position order
        """
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[LineItem]:
        """
        Retrieve all line items of an invoice in position order

        Args:
            invoice_id: Invoice ID

        Returns:
            List of line items (empty if none)
        """
        pass

    @abstractmethod
    async def replace(self, invoice_id: int, items: List[LineItem]) -> List[LineItem]:
        """
        Delete every existing line item of the invoice and persist ``items``

        Args:
            invoice_id: Owning invoice ID
            items: New priced line items

        Returns:
            Created line items
        """
        pass

    @abstractmethod
    async def count_by_invoice_id(self, invoice_id: int) -> int:
        """Number of line items currently attached to the invoice"""
        pass
