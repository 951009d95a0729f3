"""Unit of Work Interface

Transaction boundary for a single use case invocation.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    Abstract unit of work

    Every mutating use case runs in exactly one unit of work: it either
    commits all of its writes or rolls all of them back.
    """

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
