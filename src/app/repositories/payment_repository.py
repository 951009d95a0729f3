"""Payment Repository Interface

Defines the contract for payment persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence
from src.domain.payment import Payment


class PaymentRepository(ABC):
    """
    Repository interface for Payment persistence

    Payments are immutable and append-only.
    Idempotency is enforced via unique (invoice_id, idempotency_key).
    """

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment

        Args:
            payment: Payment entity to persist

        Returns:
            Created Payment with generated ID

        Raises:
            ConflictError: If (invoice_id, idempotency_key) already exists
        """
        pass

    @abstractmethod
    async def get_by_id(self, payment_id: int) -> Optional[Payment]:
        """
        Retrieve payment by ID

        Args:
            payment_id: Payment ID

        Returns:
            Payment if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, invoice_id: int, idempotency_key: str) -> Optional[Payment]:
        """
        Retrieve the payment recorded for an invoice under an idempotency key

        Args:
            invoice_id: Invoice ID
            idempotency_key: Client-supplied key

        Returns:
            Payment if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_invoice_id(self, invoice_id: int) -> List[Payment]:
        """
        Payment history of an invoice, oldest first

        Args:
            invoice_id: Invoice ID

        Returns:
            Payments ordered by created_at, then id
        """
        pass

    @abstractmethod
    async def list_by_invoice_ids(self, invoice_ids: Sequence[int]) -> Dict[int, List[Payment]]:
        """
        Payment histories for several invoices at once

        Args:
            invoice_ids: Invoice IDs

        Returns:
            Mapping of invoice ID to its payments, oldest first. Invoices
            without payments map to an empty list.
        """
        pass
