"""AllocatePoints Use Case

Moves points one level down the hierarchy
(organizer -> seller_manager -> seller).
"""

from typing import Optional
from libs.result import Result
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase, replay_entry
from src.app.use_cases.ledger.dtos import LedgerEntryDTO
from src.domain.actor import Identity
from src.domain.ledger_entry import EntryType, LedgerEntry
from .dtos import AllocateCommandDTO
from .hierarchy import check_hierarchy_move


class AllocatePoints(TransactionalUseCase):
    """
    Use Case: Allocate points to the next level down

    Business Rules:
    1. Caller is the allocating (higher-level) actor
    2. Roles exactly one hierarchy level apart, same organization
    3. Caller balance must cover the amount (INSUFFICIENT_BALANCE)
    4. Optional per-allocation cap
    5. Idempotency: same correlation_id returns the same entry

    Flow:
    1. Check idempotency (return existing if found)
    2. Validate hierarchy, recipient and cap
    3. Post allocation entry (debit caller, credit recipient)
    4. Commit
    """

    name = "allocate_points"

    def __init__(
        self,
        uow: UnitOfWork,
        entry_repo: LedgerEntryRepository,
        actor_repo: ActorRepository,
        poster: LedgerPoster,
        max_per_transaction: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.entry_repo = entry_repo
        self.actor_repo = actor_repo
        self.poster = poster
        self.max_per_transaction = max_per_transaction

    async def execute(self, identity: Identity, command: AllocateCommandDTO) -> Result[LedgerEntryDTO]:
        """
        Execute allocation

        Args:
            identity: Caller (the allocating actor)
            command: AllocateCommandDTO with recipient, roles and amount

        Returns:
            Result[LedgerEntryDTO]: The allocation entry or error
        """

        async def operation() -> LedgerEntryDTO:
            existing = await replay_entry(self.entry_repo, command.correlation_id, EntryType.ALLOCATION)
            if existing:
                return LedgerEntryDTO.from_entity(existing)

            await check_hierarchy_move(identity, command, self.actor_repo, self.max_per_transaction)

            entry = await self.poster.post(
                LedgerEntry(
                    entry_type=EntryType.ALLOCATION,
                    amount=command.amount,
                    source_actor_id=identity.actor_id,
                    source_role=command.from_role,
                    target_actor_id=command.to_actor_id,
                    target_role=command.to_role,
                    correlation_id=command.correlation_id,
                    note=command.note,
                )
            )
            return LedgerEntryDTO.from_entity(entry)

        return await self.run(operation)
