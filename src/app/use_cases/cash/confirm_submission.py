"""ConfirmSubmission Use Case

The claiming cashier confirms receipt of the cash with their transaction PIN.
"""

from libs.result import Result
from src.app.errors import AlreadyConfirmed, Forbidden, InvalidState, NotClaimedByYou, NotFound
from src.app.repositories.cash_submission_repository import CashSubmissionRepository
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.pin_verifier import TransactionPinVerifier
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase
from src.domain.actor import ActorRole, Identity
from src.domain.base import utc_now
from src.domain.cash_submission import CashSubmission, SubmissionStatus
from src.domain.ledger_entry import EntryType, LedgerEntry
from .dtos import CashSubmissionDTO, ConfirmSubmissionCommandDTO


def _ensure_confirmable(submission: CashSubmission, clerk_id: str) -> None:
    if submission.status == SubmissionStatus.CONFIRMED:
        raise AlreadyConfirmed(f"submission {submission.id} is already confirmed")
    if submission.status != SubmissionStatus.PENDING:
        raise InvalidState(f"submission {submission.id} is {submission.status.value}")
    if submission.received_by != clerk_id:
        raise NotClaimedByYou(f"claim submission {submission.id} before confirming it")


class ConfirmSubmission(TransactionalUseCase):
    """
    Use Case: Confirm a claimed cash submission

    Business Rules:
    1. Caller must hold the claim (NOT_CLAIMED_BY_YOU)
    2. Caller's own transaction PIN must verify (INVALID_SECOND_FACTOR);
       failed attempts are counted even though the command fails
    3. pending -> confirmed exactly once (ALREADY_CONFIRMED)
    4. cash_claim entry: submitter pending_collection down, cashier
       total_cash_collected up
    """

    name = "confirm_submission"

    def __init__(
        self,
        uow: UnitOfWork,
        cash_repo: CashSubmissionRepository,
        pin_verifier: TransactionPinVerifier,
        poster: LedgerPoster,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.cash_repo = cash_repo
        self.pin_verifier = pin_verifier
        self.poster = poster

    async def execute(
        self,
        identity: Identity,
        submission_id: str,
        command: ConfirmSubmissionCommandDTO,
    ) -> Result[CashSubmissionDTO]:
        async def operation() -> CashSubmissionDTO:
            if not identity.has_role(ActorRole.CASHIER):
                raise Forbidden(f"{identity.actor_id} does not hold the cashier role")

            submission = await self.cash_repo.get_by_id(submission_id)
            if not submission:
                raise NotFound(f"cash submission {submission_id} not found")
            _ensure_confirmable(submission, identity.actor_id)

            now = utc_now()
            await self.pin_verifier.verify(identity.actor_id, command.pin, now)

            if not await self.cash_repo.mark_confirmed(
                submission.id, identity.actor_id, command.confirmation_note, now
            ):
                _ensure_confirmable(submission, identity.actor_id)
                raise AlreadyConfirmed(f"submission {submission.id} is already confirmed")

            await self.poster.post(
                LedgerEntry(
                    entry_type=EntryType.CASH_CLAIM,
                    amount=submission.amount,
                    source_actor_id=submission.submitted_by,
                    source_role=submission.submitter_role,
                    target_actor_id=identity.actor_id,
                    target_role=ActorRole.CASHIER,
                    occurred_at=now,
                    reference_type="cash_submission",
                    reference_id=submission.id,
                    note=command.confirmation_note,
                )
            )
            return CashSubmissionDTO.from_entity(submission)

        return await self.run(operation)
