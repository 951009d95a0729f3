"""Invoice Number Allocator Interface

Hands out unique, year-scoped, strictly increasing invoice numbers.
"""

from abc import ABC, abstractmethod


class InvoiceNumberAllocator(ABC):
    """
    Abstract invoice number allocator

    Contract:
    - Numbers are INV-{year}-{seq:04d}
    - No two callers ever receive the same number, even concurrently
    - Gaps are allowed (an aborted transaction may burn a number on
      databases that do not roll the increment back)
    """

    @abstractmethod
    async def allocate(self, year: int) -> str:
        """
        Allocate the next invoice number for ``year``

        Args:
            year: Calendar year the invoice is created in

        Returns:
            Formatted invoice number
        """
        pass
