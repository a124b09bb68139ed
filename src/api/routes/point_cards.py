"""Point Card API Routes"""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyActorRepository,
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyMerchantTransactionRepository,
    SqlAlchemyPointCardRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.use_cases.cards.dtos import (
    CardBalanceDTO,
    IssueCardCommandDTO,
    SpendCardCommandDTO,
    TopUpCardCommandDTO,
)
from src.app.use_cases.cards.get_card_balance import GetCardBalance
from src.app.use_cases.cards.issue_card import IssueCard
from src.app.use_cases.cards.spend_card import SpendCard
from src.app.use_cases.cards.top_up_card import TopUpCard
from src.app.use_cases.merchant.dtos import MerchantTransactionDTO
from src.depends import build_poster, get_identity, get_optional_identity, get_session
from src.domain.actor import Identity

router = APIRouter(prefix="/point-cards", tags=["Point Cards"])


@router.post("", response_model=CardBalanceDTO, status_code=status.HTTP_201_CREATED)
async def issue_card(
    command: IssueCardCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Sell a new bearer point card.

    The loaded points come out of the caller's inventory and the cash taken
    is added to the caller's cash on hand.
    """
    use_case = IssueCard(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyPointCardRepository(session),
        SqlAlchemyLedgerEntryRepository(session),
        build_poster(session),
        max_per_transaction=ApplicationConfig.CARD_MAX_PER_TRANSACTION,
    )
    result = await use_case.execute(identity, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{card_id}/top-up", response_model=CardBalanceDTO)
async def top_up_card(
    card_id: str,
    command: TopUpCardCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    use_case = TopUpCard(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyPointCardRepository(session),
        SqlAlchemyLedgerEntryRepository(session),
        build_poster(session),
        max_per_transaction=ApplicationConfig.CARD_MAX_PER_TRANSACTION,
    )
    result = await use_case.execute(identity, card_id, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{card_id}/spend", response_model=MerchantTransactionDTO, status_code=status.HTTP_201_CREATED)
async def spend_card(
    card_id: str,
    command: SpendCardCommandDTO,
    identity: Optional[Identity] = Depends(get_optional_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Pay a merchant straight from a card.

    Holding the card id is enough to spend it; the `X-Actor-Id` header is
    optional here. The payment is recorded as a completed transaction.
    """
    use_case = SpendCard(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyPointCardRepository(session),
        SqlAlchemyMerchantTransactionRepository(session),
        SqlAlchemyActorRepository(session),
        SqlAlchemyLedgerEntryRepository(session),
        build_poster(session),
    )
    result = await use_case.execute(card_id, command, identity=identity)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/{card_id}/balance", response_model=CardBalanceDTO)
async def get_card_balance(card_id: str, session: AsyncSession = Depends(get_session)):
    """Card balance by card id or printed card number. No identity needed."""
    result = await GetCardBalance(SqlAlchemyPointCardRepository(session)).execute(card_id)
    if result.is_err():
        raise ClientError(result.error)
    return result.value
