"""Point Card Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional
from src.domain.point_card import PointCard


class PointCardRepository(ABC):
    """Repository interface for PointCard persistence"""

    @abstractmethod
    async def get_by_id(self, card_id: str, for_update: bool = False) -> Optional[PointCard]:
        pass

    @abstractmethod
    async def get_by_card_number(self, card_number: str) -> Optional[PointCard]:
        pass

    @abstractmethod
    async def create(self, card: PointCard) -> PointCard:
        """
        Persist a new card

        Raises:
            IntegrityError: If the card number is already taken
        """
        pass

    @abstractmethod
    async def apply_changes(
        self,
        card: PointCard,
        changes: Dict[str, int],
        used_at: Optional[datetime] = None,
    ) -> PointCard:
        """
        Apply signed counter changes with a conditional update

        Args:
            card: Card as read in this unit of work
            changes: Field name -> signed delta (current_balance, total_spent, ...)
            used_at: Stamped into last_used_at when given

        Returns:
            Card with the new values and version

        Raises:
            ConcurrencyConflict: If the version moved or the balance no longer covers a decrement
        """
        pass
