"""Unit of Work Interface

A single transaction boundary shared by every repository of a use case.
Repositories only flush; the use case decides when to commit or roll back.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
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
