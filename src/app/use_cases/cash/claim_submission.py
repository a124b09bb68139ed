"""ClaimSubmission Use Case

A cashier takes exclusive responsibility for confirming one submission.
"""

from libs.result import Result
from src.app.errors import AlreadyClaimed, AlreadyConfirmed, Forbidden, InvalidState, NotFound
from src.app.repositories.cash_submission_repository import CashSubmissionRepository
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase
from src.domain.actor import ActorRole, Identity
from src.domain.base import utc_now
from src.domain.cash_submission import CashSubmission, SubmissionStatus
from .dtos import CashSubmissionDTO


def ensure_claimable(submission: CashSubmission, clerk_id: str) -> None:
    """
    Raises:
        AlreadyConfirmed: Submission was confirmed
        InvalidState: Submission was disputed or rejected
        AlreadyClaimed: Another cashier holds the claim
    """
    if submission.status == SubmissionStatus.CONFIRMED:
        raise AlreadyConfirmed(f"submission {submission.id} is already confirmed")
    if submission.status != SubmissionStatus.PENDING:
        raise InvalidState(f"submission {submission.id} is {submission.status.value}")
    if submission.received_by is not None and submission.received_by != clerk_id:
        raise AlreadyClaimed(f"submission {submission.id} was already claimed by another cashier")


class ClaimSubmission(TransactionalUseCase):
    """
    Use Case: Claim a cash submission

    Business Rules:
    1. Caller must hold the cashier role
    2. received_by moves from null to the caller exactly once (compare-and-set);
       under N concurrent claims exactly one wins, the rest get ALREADY_CLAIMED
    3. Re-claiming one's own claim is a no-op
    """

    name = "claim_submission"

    def __init__(self, uow: UnitOfWork, cash_repo: CashSubmissionRepository, **kwargs):
        super().__init__(uow, **kwargs)
        self.cash_repo = cash_repo

    async def execute(self, identity: Identity, submission_id: str) -> Result[CashSubmissionDTO]:
        async def operation() -> CashSubmissionDTO:
            if not identity.has_role(ActorRole.CASHIER):
                raise Forbidden(f"{identity.actor_id} does not hold the cashier role")

            submission = await self.cash_repo.get_by_id(submission_id)
            if not submission:
                raise NotFound(f"cash submission {submission_id} not found")
            if submission.submitted_by == identity.actor_id:
                raise Forbidden("cashiers cannot claim their own submissions")

            ensure_claimable(submission, identity.actor_id)
            if submission.received_by == identity.actor_id:
                return CashSubmissionDTO.from_entity(submission)

            if not await self.cash_repo.claim(submission.id, identity.actor_id, utc_now()):
                ensure_claimable(submission, identity.actor_id)
                if submission.received_by != identity.actor_id:
                    raise AlreadyClaimed(f"submission {submission.id} was already claimed by another cashier")

            return CashSubmissionDTO.from_entity(submission)

        return await self.run(operation)
