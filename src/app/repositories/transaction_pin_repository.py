"""Transaction PIN Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.transaction_pin import TransactionPin


class TransactionPinRepository(ABC):

    @abstractmethod
    async def get(self, actor_id: str) -> Optional[TransactionPin]:
        pass

    @abstractmethod
    async def save(self, pin: TransactionPin) -> TransactionPin:
        """Insert or update the PIN record of one actor"""
        pass
