"""Customer Directory Interface

Lookup into the external customer service. The invoicing core only ever
asks whether a customer id exists.
"""

from abc import ABC, abstractmethod


class CustomerDirectoryUnavailable(Exception):
    """The customer service could not answer the lookup"""


class CustomerDirectory(ABC):
    """
    Abstract customer lookup

    Implementations:
    - HTTP call to the customer service
    - Static id set (local runs and tests)
    """

    @abstractmethod
    async def exists(self, customer_id: str) -> bool:
        """
        Check whether a customer exists

        Args:
            customer_id: Customer identifier

        Returns:
            True if the customer exists, False otherwise

        Raises:
            CustomerDirectoryUnavailable: lookup failed for infrastructure reasons
        """
        pass
