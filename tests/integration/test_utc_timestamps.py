"""Integration tests for timestamp storage"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import StatementError

from src.adapter.repositories import SqlAlchemyLedgerEntryRepository
from src.app.use_cases.sales.dtos import SellCommandDTO
from src.domain.actor import ActorRole
from src.domain.ledger_entry import EntryType, LedgerEntry


def transfer(occurred_at: datetime) -> LedgerEntry:
    return LedgerEntry(
        entry_type=EntryType.ALLOCATION,
        amount=5,
        source_actor_id="org_admin",
        source_role=ActorRole.ORGANIZER,
        target_actor_id="manager_1",
        target_role=ActorRole.SELLER_MANAGER,
        occurred_at=occurred_at,
    )


@pytest.mark.asyncio
class TestUtcTimestamps:

    async def test_committed_rows_read_back_in_utc(self, ledger, session_factory, chain):
        sale = await ledger.sell(chain.seller, SellCommandDTO(customer_id="customer_1", amount=10, cash_received=10))

        async with session_factory() as session:
            stored = await SqlAlchemyLedgerEntryRepository(session).get_by_id(sale.value.entry_id)

        assert stored.occurred_at.tzinfo is not None
        assert stored.occurred_at.utcoffset() == timedelta(0)

        balance = await ledger.balance("seller_1", ActorRole.SELLER)
        assert balance.updated_at.utcoffset() == timedelta(0)

    async def test_offset_timestamps_are_stored_as_utc(self, session_factory):
        local = datetime(2024, 6, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))

        async with session_factory() as session:
            entry = await SqlAlchemyLedgerEntryRepository(session).append(transfer(local))
            await session.commit()
            entry_id = entry.id

        async with session_factory() as session:
            stored = await SqlAlchemyLedgerEntryRepository(session).get_by_id(entry_id)

        assert stored.occurred_at == datetime(2024, 6, 1, 12, 30, tzinfo=timezone.utc)

    async def test_naive_timestamps_are_rejected(self, session_factory):
        async with session_factory() as session:
            session.add(transfer(datetime(2024, 6, 1, 12, 30)))

            with pytest.raises(StatementError):
                await session.commit()
