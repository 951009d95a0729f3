"""Customer Directory Implementations

Answers "does this customer exist?" for invoice creation.
"""

import logging
from typing import Iterable, Optional
from urllib.parse import quote
import httpx
from src.app.services.customer_directory import CustomerDirectory, CustomerDirectoryUnavailable

logger = logging.getLogger(__name__)


class HttpCustomerDirectory(CustomerDirectory):
    """
    Customer directory backed by the customer service REST API

    GET {base_url}/customers/{id}: 200 means the customer exists, 404 means
    it does not. Anything else is an infrastructure failure.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP customer directory

        Args:
            base_url: Customer service base URL (e.g. http://customers:8080/api)
            timeout: Request timeout in seconds
            api_key: Optional key sent as X-API-Key
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_key = api_key
        self.transport = transport

    async def exists(self, customer_id: str) -> bool:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key

        url = f"{self.base_url}/customers/{quote(customer_id, safe='')}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Customer lookup for {customer_id} failed: {e}")
            raise CustomerDirectoryUnavailable(f"Customer service unreachable: {e}") from e

        if response.status_code == 200:
            return True
        if response.status_code == 404:
            logger.info(f"Customer {customer_id} not found in customer service")
            return False

        logger.error(
            f"Customer lookup for {customer_id} returned unexpected status {response.status_code}"
        )
        raise CustomerDirectoryUnavailable(
            f"Customer service returned HTTP {response.status_code}"
        )


class StaticCustomerDirectory(CustomerDirectory):
    """
    Customer directory over a fixed set of ids

    Useful for local development and tests.
    """

    def __init__(self, customer_ids: Iterable[str]):
        self.customer_ids = set(customer_ids)

    async def exists(self, customer_id: str) -> bool:
        return customer_id in self.customer_ids


def create_customer_directory(
    base_url: Optional[str] = None,
    timeout: float = 5.0,
    api_key: Optional[str] = None,
    static_ids: Optional[Iterable[str]] = None,
) -> CustomerDirectory:
    """
    Factory function to create the configured customer directory

    Args:
        base_url: Customer service URL. Takes precedence when set.
        timeout: HTTP timeout in seconds
        api_key: Optional API key for the customer service
        static_ids: Fixed customer ids used when no URL is configured

    Returns:
        Configured CustomerDirectory
    """
    if base_url:
        return HttpCustomerDirectory(base_url, timeout=timeout, api_key=api_key)

    logger.warning("CUSTOMER_SERVICE_URL not set, using static customer directory")
    return StaticCustomerDirectory(static_ids or [])
