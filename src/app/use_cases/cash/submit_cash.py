"""SubmitCash Use Case

Hands collected cash into the reconciliation pool as a pending submission.
"""

import json
from libs.result import Result
from src.app.errors import Forbidden, InsufficientBalance, ValidationFailed
from src.app.repositories.balance_repository import BalanceRepository
from src.app.repositories.cash_submission_repository import CashSubmissionRepository
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase
from src.domain.actor import ActorRef, ActorRole, CASH_HANDLING_ROLES, CASH_POOL_ACTOR_ID, Identity
from src.domain.base import utc_now
from src.domain.cash_submission import CashSubmission, SubmissionStatus
from src.domain.ledger_entry import EntryType, LedgerEntry
from .dtos import CashSubmissionDTO, SubmitCashCommandDTO


class SubmitCash(TransactionalUseCase):
    """
    Use Case: Submit cash for reconciliation

    Business Rules:
    1. Submitter holds the seller or seller_manager role
    2. Amount must not exceed cash on hand: pending_collection minus the
       amount already sitting in the submitter's open submissions
    3. Creates a pending submission and a cash_submission entry (no balance effect)
    4. Idempotency: same correlation_id returns the same submission

    Concurrent submissions of one submitter serialize on the balance version,
    so two hand-offs cannot both spend the same cash on hand.
    """

    name = "submit_cash"

    def __init__(
        self,
        uow: UnitOfWork,
        cash_repo: CashSubmissionRepository,
        balance_repo: BalanceRepository,
        poster: LedgerPoster,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.cash_repo = cash_repo
        self.balance_repo = balance_repo
        self.poster = poster

    async def execute(self, identity: Identity, command: SubmitCashCommandDTO) -> Result[CashSubmissionDTO]:
        async def operation() -> CashSubmissionDTO:
            if command.correlation_id:
                existing = await self.cash_repo.get_by_correlation_id(command.correlation_id)
                if existing:
                    return CashSubmissionDTO.from_entity(existing)

            if command.submitter_role not in CASH_HANDLING_ROLES:
                raise ValidationFailed(f"{command.submitter_role.value} does not handle cash")
            if not identity.has_role(command.submitter_role):
                raise Forbidden(f"{identity.actor_id} does not hold the {command.submitter_role.value} role")

            ref = ActorRef(actor_id=identity.actor_id, role=command.submitter_role)
            balance = await self.balance_repo.get(ref, for_update=True)
            pending = balance.pending_collection if balance else 0
            already_submitted = await self.cash_repo.sum_open_amount(ref)
            on_hand = pending - already_submitted
            if command.amount > on_hand:
                raise InsufficientBalance(
                    f"insufficient cash on hand: you hold {on_hand} unsubmitted cash, "
                    f"cannot submit {command.amount}",
                    reason=f"pending_collection={pending}, open_submissions={already_submitted}",
                )

            # Version bump only: serializes concurrent submissions of this submitter
            await self.balance_repo.apply_changes(balance, {})

            now = utc_now()
            submission = await self.cash_repo.create(
                CashSubmission(
                    submitted_by=identity.actor_id,
                    submitter_role=command.submitter_role,
                    amount=command.amount,
                    status=SubmissionStatus.PENDING,
                    note=command.note,
                    included_context=json.dumps(command.included_context) if command.included_context else None,
                    correlation_id=command.correlation_id,
                    created_at=now,
                )
            )

            await self.poster.post(
                LedgerEntry(
                    entry_type=EntryType.CASH_SUBMISSION,
                    amount=command.amount,
                    source_actor_id=identity.actor_id,
                    source_role=command.submitter_role,
                    target_actor_id=CASH_POOL_ACTOR_ID,
                    target_role=ActorRole.SYSTEM,
                    occurred_at=now,
                    reference_type="cash_submission",
                    reference_id=submission.id,
                    note=command.note,
                )
            )
            return CashSubmissionDTO.from_entity(submission)

        return await self.run(operation)
