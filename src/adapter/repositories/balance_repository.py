"""SQLAlchemy implementation of BalanceRepository

Provides persistence for Balance entities. Every write is a conditional
UPDATE on (id, version) plus the decrement preconditions, so a lost race
changes zero rows instead of overwriting a concurrent writer.
"""

from typing import Dict, List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.errors import ConcurrencyConflict
from src.app.repositories.balance_repository import BalanceRepository
from src.domain.actor import ActorRef
from src.domain.balance import Balance
from src.domain.base import utc_now


class SqlAlchemyBalanceRepository(BalanceRepository):
    """
    SQLAlchemy implementation of BalanceRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE (where the database supports it)
    - Optimistic compare-and-set on the version column
    - Guarded decrements (WHERE field >= amount)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, ref: ActorRef, for_update: bool = False) -> Optional[Balance]:
        """
        Retrieve balance with optional row-level locking

        Args:
            ref: Role-scoped actor address
            for_update: If True, locks the row with SELECT FOR UPDATE (prevents concurrent modifications)

        Returns:
            Balance if found, None otherwise
        """
        stmt = (
            select(Balance)
            .where(Balance.actor_id == ref.actor_id, Balance.role == ref.role)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, balance: Balance) -> Balance:
        self.session.add(balance)
        await self.session.flush()
        await self.session.refresh(balance)
        return balance

    async def apply_changes(self, balance: Balance, changes: Dict[str, int]) -> Balance:
        """
        Conditional update of the balance counters

        Raises:
            ConcurrencyConflict: If the version moved or a decrement is no longer covered
        """
        stmt = update(Balance).where(
            Balance.id == balance.id,
            Balance.version == balance.version,
        )
        values = {
            "version": Balance.version + 1,
            "updated_at": utc_now(),
        }
        for name, delta in changes.items():
            column = getattr(Balance, name)
            values[name] = column + delta
            if delta < 0:
                stmt = stmt.where(column >= -delta)

        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            raise ConcurrencyConflict(f"balance {balance.ref} changed concurrently")

        await self.session.refresh(balance)
        return balance

    async def list_by_actor(self, actor_id: str) -> List[Balance]:
        stmt = select(Balance).where(Balance.actor_id == actor_id).order_by(Balance.role)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_all(self) -> List[Balance]:
        """
        Get all balances for reconciliation

        Returns:
            List of all Balance entities
        """
        stmt = select(Balance).order_by(Balance.actor_id, Balance.role)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
