"""GrantByCohort Use Case

Grants the same amount from the organizer pool to every active customer of a
cohort (identity tag).
"""

import logging
from typing import Optional
from libs.result import Result, Return
from src.app.errors import LedgerError, NotFound
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase, replay_entry
from src.app.use_cases.ledger.dtos import LedgerEntryDTO
from src.domain.actor import ActorRole, Identity
from src.domain.ledger_entry import EntryType, LedgerEntry
from .dtos import CohortGrantResultDTO, GrantByCohortCommandDTO, GrantFailureDTO
from .hierarchy import require_role

logger = logging.getLogger(__name__)


class GrantByCohort(TransactionalUseCase):
    """
    Use Case: Grant points to a cohort

    Business Rules:
    1. Caller must hold the organizer role
    2. Recipients: active customers of the caller's organization whose
       identity_tag is in the list
    3. Best-effort: one unit of work per recipient; failures are reported,
       successes stay committed
    4. Per-recipient idempotency key '<correlation_id>:<actor_id>'
    """

    name = "grant_by_cohort"

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

    async def execute(self, identity: Identity, command: GrantByCohortCommandDTO) -> Result[CohortGrantResultDTO]:
        try:
            require_role(identity, ActorRole.ORGANIZER)
            recipients = await self.actor_repo.list_active_by_identity_tags(
                command.identity_tags,
                ActorRole.CUSTOMER,
                organization_id=identity.organization_id,
            )
            if not recipients:
                raise NotFound(f"no active customers tagged {', '.join(command.identity_tags)}")
        except LedgerError as e:
            return Return.err(e.to_error())

        succeeded: list[LedgerEntryDTO] = []
        failed: list[GrantFailureDTO] = []

        # Plain ids: a rolled back grant expires every loaded profile
        recipient_ids = [recipient.actor_id for recipient in recipients]

        for actor_id in recipient_ids:
            result = await self.run(lambda actor_id=actor_id: self._grant(identity, command, actor_id))
            if result.is_ok():
                succeeded.append(result.value)
            else:
                failed.append(
                    GrantFailureDTO(
                        actor_id=actor_id,
                        code=result.error.code,
                        message=result.error.message,
                    )
                )

        logger.info(
            f"Cohort grant by {identity.actor_id}: {len(succeeded)} succeeded, "
            f"{len(failed)} failed ({command.amount_per_recipient} points each)"
        )

        return Return.ok(
            CohortGrantResultDTO(
                succeeded=succeeded,
                failed=failed,
                total_granted=sum(entry.amount for entry in succeeded),
            )
        )

    async def _grant(
        self,
        identity: Identity,
        command: GrantByCohortCommandDTO,
        actor_id: str,
    ) -> LedgerEntryDTO:
        correlation_id: Optional[str] = None
        if command.correlation_id:
            correlation_id = f"{command.correlation_id}:{actor_id}"

        existing = await replay_entry(self.entry_repo, correlation_id, EntryType.ALLOCATION)
        if existing:
            return LedgerEntryDTO.from_entity(existing)

        entry = await self.poster.post(
            LedgerEntry(
                entry_type=EntryType.ALLOCATION,
                amount=command.amount_per_recipient,
                source_actor_id=identity.actor_id,
                source_role=ActorRole.ORGANIZER,
                target_actor_id=actor_id,
                target_role=ActorRole.CUSTOMER,
                correlation_id=correlation_id,
                reference_type="cohort_grant",
                reference_id=command.correlation_id,
                note=command.note,
            )
        )
        return LedgerEntryDTO.from_entity(entry)
