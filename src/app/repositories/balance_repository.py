"""Balance Repository Interface

Defines the contract for balance persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from src.domain.actor import ActorRef
from src.domain.balance import Balance


class BalanceRepository(ABC):
    """
    Repository interface for Balance persistence

    Reads intended for modification may lock the row (SELECT FOR UPDATE) and
    every write is a compare-and-set on the version column, so concurrent
    writers cannot overwrite each other even without row locks.
    """

    @abstractmethod
    async def get(self, ref: ActorRef, for_update: bool = False) -> Optional[Balance]:
        """
        Retrieve balance of one actor role

        Args:
            ref: Role-scoped actor address
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Balance if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, balance: Balance) -> Balance:
        """
        Create a new balance record

        Raises:
            IntegrityError: If a record for (actor_id, role) already exists
        """
        pass

    @abstractmethod
    async def apply_changes(self, balance: Balance, changes: Dict[str, int]) -> Balance:
        """
        Apply signed field changes with a conditional update

        The update only matches when the stored version still equals
        ``balance.version`` and every decremented field still covers its
        decrement.

        Args:
            balance: Balance as read in this unit of work
            changes: Field name -> signed delta

        Returns:
            Balance with the new values and version

        Raises:
            ConcurrencyConflict: If no row matched the condition
        """
        pass

    @abstractmethod
    async def list_by_actor(self, actor_id: str) -> List[Balance]:
        pass

    @abstractmethod
    async def get_all(self) -> List[Balance]:
        """All balance records (reconciliation audit)"""
        pass
