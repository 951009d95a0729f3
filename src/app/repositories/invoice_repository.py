"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from src.domain.invoice import Invoice, InvoiceStatus


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Writes are version-checked: ``update`` only succeeds against the version
    the caller loaded.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID with optional row-level locking

        Args:
            invoice_id: Invoice ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def count(
        self,
        status: Optional[InvoiceStatus] = None,
        customer_id: Optional[str] = None,
    ) -> int:
        """Count invoices matching the same filters as ``find``"""
        pass

    @abstractmethod
    async def update(self, invoice: Invoice, expected_version: int) -> Invoice:
        """
        Persist invoice changes if nobody else has written since ``expected_version``

        The stored version becomes ``expected_version + 1``.

        Args:
            invoice: Invoice entity with updated values
            expected_version: Version the caller loaded

        Returns:
            Updated Invoice

        Raises:
            ConflictError: The stored version has moved on
        """
        pass
