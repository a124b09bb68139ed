"""SQLAlchemy implementation of TransactionPinRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.transaction_pin_repository import TransactionPinRepository
from src.domain.transaction_pin import TransactionPin


class SqlAlchemyTransactionPinRepository(TransactionPinRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, actor_id: str) -> Optional[TransactionPin]:
        stmt = (
            select(TransactionPin)
            .where(TransactionPin.actor_id == actor_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, pin: TransactionPin) -> TransactionPin:
        self.session.add(pin)
        await self.session.flush()
        return pin
