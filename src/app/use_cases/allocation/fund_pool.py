"""FundPool Use Case

Issues points from the platform treasury into an organizer's pool.
"""

from libs.result import Result
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.use_cases.base import TransactionalUseCase, replay_entry
from src.app.use_cases.ledger.dtos import LedgerEntryDTO
from src.domain.actor import ActorRole, Identity, TREASURY_ACTOR_ID
from src.domain.ledger_entry import EntryType, LedgerEntry
from .dtos import FundPoolCommandDTO
from .hierarchy import require_role


class FundPool(TransactionalUseCase):
    """
    Use Case: Fund an organizer pool

    Business Rules:
    1. Caller must hold the organizer role
    2. The treasury is a system actor without a balance
    3. Idempotency: same correlation_id returns the same entry
    """

    name = "fund_pool"

    def __init__(self, uow: UnitOfWork, entry_repo: LedgerEntryRepository, poster: LedgerPoster, **kwargs):
        super().__init__(uow, **kwargs)
        self.entry_repo = entry_repo
        self.poster = poster

    async def execute(self, identity: Identity, command: FundPoolCommandDTO) -> Result[LedgerEntryDTO]:
        async def operation() -> LedgerEntryDTO:
            existing = await replay_entry(self.entry_repo, command.correlation_id, EntryType.ISSUANCE)
            if existing:
                return LedgerEntryDTO.from_entity(existing)

            require_role(identity, ActorRole.ORGANIZER)

            entry = await self.poster.post(
                LedgerEntry(
                    entry_type=EntryType.ISSUANCE,
                    amount=command.amount,
                    source_actor_id=TREASURY_ACTOR_ID,
                    source_role=ActorRole.SYSTEM,
                    target_actor_id=identity.actor_id,
                    target_role=ActorRole.ORGANIZER,
                    correlation_id=command.correlation_id,
                    note=command.note,
                )
            )
            return LedgerEntryDTO.from_entity(entry)

        return await self.run(operation)
