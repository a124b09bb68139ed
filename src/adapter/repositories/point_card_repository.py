"""SQLAlchemy implementation of PointCardRepository"""

from datetime import datetime
from typing import Dict, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.errors import ConcurrencyConflict
from src.app.repositories.point_card_repository import PointCardRepository
from src.domain.point_card import PointCard


class SqlAlchemyPointCardRepository(PointCardRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, card_id: str, for_update: bool = False) -> Optional[PointCard]:
        stmt = (
            select(PointCard)
            .where(PointCard.card_id == card_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_card_number(self, card_number: str) -> Optional[PointCard]:
        stmt = select(PointCard).where(PointCard.card_number == card_number)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, card: PointCard) -> PointCard:
        self.session.add(card)
        await self.session.flush()
        await self.session.refresh(card)
        return card

    async def apply_changes(
        self,
        card: PointCard,
        changes: Dict[str, int],
        used_at: Optional[datetime] = None,
    ) -> PointCard:
        """
        Conditional update of the card counters

        Raises:
            ConcurrencyConflict: If the version moved or the balance no longer covers a decrement
        """
        stmt = update(PointCard).where(
            PointCard.card_id == card.card_id,
            PointCard.version == card.version,
        )
        values = {"version": PointCard.version + 1}
        if used_at is not None:
            values["last_used_at"] = used_at
        for name, delta in changes.items():
            column = getattr(PointCard, name)
            values[name] = column + delta
            if delta < 0:
                stmt = stmt.where(column >= -delta)

        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            raise ConcurrencyConflict(f"point card {card.card_id} changed concurrently")

        await self.session.refresh(card)
        return card
