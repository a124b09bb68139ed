"""TopUpCard Use Case"""

from typing import Optional
from libs.result import Result
from src.app.errors import NotFound
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.repositories.point_card_repository import PointCardRepository
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase, replay_entry
from src.app.use_cases.sales.sell_points import inventory_shortfall
from src.domain.actor import ActorRole, Identity
from src.domain.base import utc_now
from src.domain.ledger_entry import EntryType, LedgerEntry
from .dtos import CardBalanceDTO, TopUpCardCommandDTO
from .funding import check_funding, load_usable_card


class TopUpCard(TransactionalUseCase):
    """
    Use Case: Add points to an active, unexpired card

    Funded from the seller's inventory against cash, like a sale.
    """

    name = "top_up_card"

    def __init__(
        self,
        uow: UnitOfWork,
        card_repo: PointCardRepository,
        entry_repo: LedgerEntryRepository,
        poster: LedgerPoster,
        max_per_transaction: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.card_repo = card_repo
        self.entry_repo = entry_repo
        self.poster = poster
        self.max_per_transaction = max_per_transaction

    async def execute(
        self, identity: Identity, card_id: str, command: TopUpCardCommandDTO
    ) -> Result[CardBalanceDTO]:
        async def operation() -> CardBalanceDTO:
            now = utc_now()

            existing = await replay_entry(self.entry_repo, command.correlation_id, EntryType.CARD_TOP_UP)
            if existing:
                card = await self.card_repo.get_by_id(existing.target_actor_id)
                if not card:
                    raise NotFound(f"point card {existing.target_actor_id} not found")
                return CardBalanceDTO.from_entity(card, now)

            check_funding(
                identity,
                command.seller_role,
                command.amount,
                command.cash_received,
                self.max_per_transaction,
            )
            card = await load_usable_card(self.card_repo, card_id, now)

            await self.poster.post(
                LedgerEntry(
                    entry_type=EntryType.CARD_TOP_UP,
                    amount=command.amount,
                    source_actor_id=identity.actor_id,
                    source_role=command.seller_role,
                    target_actor_id=card.card_id,
                    target_role=ActorRole.POINT_CARD,
                    occurred_at=now,
                    correlation_id=command.correlation_id,
                    reference_type="point_card",
                    reference_id=card.card_id,
                ),
                on_shortfall=inventory_shortfall,
            )
            return CardBalanceDTO.from_entity(card, now)

        return await self.run(operation)
