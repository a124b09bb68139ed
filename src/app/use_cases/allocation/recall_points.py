"""RecallPoints Use Case

Pulls points back one level up the hierarchy.
"""

from typing import Optional
from libs.result import Result
from src.app.errors import InsufficientBalance
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase, replay_entry
from src.app.use_cases.ledger.dtos import LedgerEntryDTO
from src.domain.actor import ActorRef, Identity
from src.domain.ledger_entry import EntryType, LedgerEntry
from .dtos import AllocateCommandDTO
from .hierarchy import check_hierarchy_move


def _recall_shortfall(ref: ActorRef, field: str, available: int, required: int) -> InsufficientBalance:
    return InsufficientBalance(
        f"insufficient balance: {ref.actor_id} has {available} points, cannot recall {required}",
        reason=f"{field}={available}, required={required}",
    )


class RecallPoints(TransactionalUseCase):
    """
    Use Case: Recall points from the next level down

    Same hierarchy rules as allocation; the lower-level actor's balance
    must cover the amount.
    """

    name = "recall_points"

    def __init__(
        self,
        uow: UnitOfWork,
        entry_repo: LedgerEntryRepository,
        actor_repo: ActorRepository,
        poster: LedgerPoster,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.entry_repo = entry_repo
        self.actor_repo = actor_repo
        self.poster = poster

    async def execute(self, identity: Identity, command: AllocateCommandDTO) -> Result[LedgerEntryDTO]:
        async def operation() -> LedgerEntryDTO:
            existing = await replay_entry(self.entry_repo, command.correlation_id, EntryType.RECALL)
            if existing:
                return LedgerEntryDTO.from_entity(existing)

            await check_hierarchy_move(identity, command, self.actor_repo)

            entry = await self.poster.post(
                LedgerEntry(
                    entry_type=EntryType.RECALL,
                    amount=command.amount,
                    source_actor_id=command.to_actor_id,
                    source_role=command.to_role,
                    target_actor_id=identity.actor_id,
                    target_role=command.from_role,
                    correlation_id=command.correlation_id,
                    note=command.note,
                ),
                on_shortfall=_recall_shortfall,
            )
            return LedgerEntryDTO.from_entity(entry)

        return await self.run(operation)
