"""Integration tests for point cards"""

from datetime import timedelta

import pytest
import pytest_asyncio

from src.adapter.repositories import SqlAlchemyPointCardRepository
from src.app.use_cases.cards.dtos import IssueCardCommandDTO, SpendCardCommandDTO, TopUpCardCommandDTO
from src.domain.actor import ActorRole
from src.domain.base import utc_now
from src.domain.merchant_transaction import PaymentStatus


@pytest_asyncio.fixture
async def card(ledger, chain):
    result = await ledger.issue_card(
        chain.seller, IssueCardCommandDTO(amount=50, cash_received=50, correlation_id="card:issue:1")
    )
    assert result.is_ok()
    return result.value


@pytest.mark.asyncio
class TestIssueCard:

    async def test_issue_loads_card_from_inventory(self, ledger, chain, card):
        assert card.current_balance == 50
        assert card.initial_balance == 50
        assert card.card_number.startswith("CARD-")
        seller = await ledger.balance("seller_1", ActorRole.SELLER)
        assert seller.available_points == 50
        assert seller.pending_collection == 50

    async def test_replayed_issue_returns_same_card(self, ledger, chain, card):
        result = await ledger.issue_card(
            chain.seller, IssueCardCommandDTO(amount=50, cash_received=50, correlation_id="card:issue:1")
        )

        assert result.value.card_id == card.card_id
        assert await ledger.available("seller_1", ActorRole.SELLER) == 50

    async def test_issue_beyond_inventory(self, ledger, chain, card):
        result = await ledger.issue_card(chain.seller, IssueCardCommandDTO(amount=60, cash_received=60))

        assert result.error.code == "INSUFFICIENT_INVENTORY"

    async def test_card_balance_by_number(self, ledger, card):
        result = await ledger.card_balance(card.card_number)

        assert result.value.card_id == card.card_id
        assert result.value.current_balance == 50


@pytest.mark.asyncio
class TestSpendCard:

    async def test_spend_pays_merchant(self, ledger, chain, card):
        result = await ledger.spend_card(card.card_id, SpendCardCommandDTO(merchant_id="stall_1", amount=30))

        assert result.is_ok()
        assert result.value.status == PaymentStatus.COMPLETED
        assert result.value.card_id == card.card_id
        assert (await ledger.card(card.card_id)).current_balance == 20
        assert await ledger.available("stall_1", ActorRole.MERCHANT) == 30

    async def test_overspend_is_rejected(self, ledger, chain, card):
        await ledger.spend_card(card.card_id, SpendCardCommandDTO(merchant_id="stall_1", amount=30))

        result = await ledger.spend_card(card.card_id, SpendCardCommandDTO(merchant_id="stall_1", amount=30))

        assert result.error.code == "INSUFFICIENT_BALANCE"
        assert (await ledger.card(card.card_id)).current_balance == 20
        assert await ledger.available("stall_1", ActorRole.MERCHANT) == 30

    async def test_top_up_then_spend(self, ledger, chain, card):
        topped = await ledger.top_up_card(chain.seller, card.card_id, TopUpCardCommandDTO(amount=10, cash_received=10))

        assert topped.value.current_balance == 60
        assert topped.value.total_topped_up == 10

        result = await ledger.spend_card(card.card_id, SpendCardCommandDTO(merchant_id="stall_1", amount=60))
        assert result.is_ok()

    async def test_deactivated_card_cannot_spend(self, ledger, session_factory, card):
        async with session_factory() as session:
            stored = await SqlAlchemyPointCardRepository(session).get_by_id(card.card_id)
            stored.is_active = False
            session.add(stored)
            await session.commit()

        result = await ledger.spend_card(card.card_id, SpendCardCommandDTO(merchant_id="stall_1", amount=5))

        assert result.error.code == "INVALID_STATE"
        assert result.error.reason == "card_inactive"

    async def test_expired_card_cannot_spend(self, ledger, session_factory, card):
        async with session_factory() as session:
            stored = await SqlAlchemyPointCardRepository(session).get_by_id(card.card_id)
            stored.expires_at = utc_now() - timedelta(minutes=1)
            session.add(stored)
            await session.commit()

        result = await ledger.spend_card(card.card_id, SpendCardCommandDTO(merchant_id="stall_1", amount=5))

        assert result.error.code == "INVALID_STATE"
        assert result.error.reason == "card_expired"
        assert (await ledger.card(card.card_id)).current_balance == 50
        assert await ledger.available("stall_1", ActorRole.MERCHANT) == 0

    async def test_unknown_card(self, ledger, chain):
        result = await ledger.spend_card("no-such-card", SpendCardCommandDTO(merchant_id="stall_1", amount=5))

        assert result.error.code == "NOT_FOUND"
