from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """Transaction boundary of one command"""

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
