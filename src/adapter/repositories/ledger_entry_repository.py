"""SQLAlchemy implementation of LedgerEntryRepository

Provides append-only persistence for LedgerEntry entities with idempotency
enforcement via unique constraint on correlation_id.
"""

from typing import List, Optional, Tuple
from sqlalchemy import and_, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.ledger_entry_repository import (
    LedgerEntryFilter,
    LedgerEntryRepository,
    decode_cursor,
    encode_cursor,
)
from src.domain.actor import ActorRef
from src.domain.ledger_entry import LedgerEntry


class SqlAlchemyLedgerEntryRepository(LedgerEntryRepository):
    """
    SQLAlchemy implementation of LedgerEntryRepository

    Features:
    - Idempotency enforcement via unique correlation_id constraint
    - Immutable append-only entries (no update or delete methods)
    - Keyset pagination on (occurred_at, id)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Append a new ledger entry

        Raises:
            IntegrityError: If correlation_id already exists (duplicate command)
        """
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_by_id(self, entry_id: str) -> Optional[LedgerEntry]:
        stmt = select(LedgerEntry).where(LedgerEntry.id == entry_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_correlation_id(self, correlation_id: str) -> Optional[LedgerEntry]:
        stmt = select(LedgerEntry).where(LedgerEntry.correlation_id == correlation_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_actor(
        self,
        actor_id: str,
        entry_filter: LedgerEntryFilter,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[LedgerEntry], Optional[str]]:
        """
        One page of an actor's entries, newest first

        Fetches one extra row to know whether another page exists.
        """
        if entry_filter.role is not None:
            touches_actor = or_(
                and_(LedgerEntry.source_actor_id == actor_id, LedgerEntry.source_role == entry_filter.role),
                and_(LedgerEntry.target_actor_id == actor_id, LedgerEntry.target_role == entry_filter.role),
            )
        else:
            touches_actor = or_(
                LedgerEntry.source_actor_id == actor_id,
                LedgerEntry.target_actor_id == actor_id,
            )

        stmt = select(LedgerEntry).where(touches_actor)

        if entry_filter.entry_types:
            stmt = stmt.where(LedgerEntry.entry_type.in_(entry_filter.entry_types))
        if entry_filter.since is not None:
            stmt = stmt.where(LedgerEntry.occurred_at >= entry_filter.since)
        if entry_filter.until is not None:
            stmt = stmt.where(LedgerEntry.occurred_at < entry_filter.until)

        if cursor:
            cursor_at, cursor_id = decode_cursor(cursor)
            stmt = stmt.where(
                or_(
                    LedgerEntry.occurred_at < cursor_at,
                    and_(LedgerEntry.occurred_at == cursor_at, LedgerEntry.id < cursor_id),
                )
            )

        stmt = stmt.order_by(LedgerEntry.occurred_at.desc(), LedgerEntry.id.desc()).limit(limit + 1)

        result = await self.session.execute(stmt)
        entries = list(result.scalars().all())

        next_cursor = None
        if len(entries) > limit:
            entries = entries[:limit]
            next_cursor = encode_cursor(entries[-1])
        return entries, next_cursor

    async def list_for_ref(self, ref: ActorRef) -> List[LedgerEntry]:
        stmt = (
            select(LedgerEntry)
            .where(
                or_(
                    and_(LedgerEntry.source_actor_id == ref.actor_id, LedgerEntry.source_role == ref.role),
                    and_(LedgerEntry.target_actor_id == ref.actor_id, LedgerEntry.target_role == ref.role),
                )
            )
            .order_by(LedgerEntry.occurred_at.asc(), LedgerEntry.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
