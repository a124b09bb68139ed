"""List pending cash submissions"""

from typing import Optional
from libs.result import Result, Return
from src.app.errors import Forbidden, LedgerError
from src.app.repositories.cash_submission_repository import CashSubmissionRepository
from src.domain.actor import ActorRole, CASH_HANDLING_ROLES, Identity
from .dtos import CashSubmissionDTO, CashSubmissionListDTO


class ListPendingSubmissions:
    """
    Pending submissions, oldest first

    Cashiers see the whole pool; sellers and seller managers only their own.
    """

    def __init__(self, cash_repo: CashSubmissionRepository):
        self.cash_repo = cash_repo

    async def execute(
        self,
        identity: Identity,
        unclaimed_only: bool = False,
        submitted_by: Optional[str] = None,
        limit: int = 100,
    ) -> Result[CashSubmissionListDTO]:
        try:
            if not identity.has_role(ActorRole.CASHIER):
                if not any(identity.has_role(role) for role in CASH_HANDLING_ROLES):
                    raise Forbidden(f"{identity.actor_id} may not view cash submissions")
                if submitted_by not in (None, identity.actor_id):
                    raise Forbidden("only cashiers may view other actors' submissions")
                submitted_by = identity.actor_id

            submissions = await self.cash_repo.list_pending(
                unclaimed_only=unclaimed_only,
                submitted_by=submitted_by,
                limit=limit,
            )
            return Return.ok(
                CashSubmissionListDTO(
                    submissions=[CashSubmissionDTO.from_entity(s) for s in submissions],
                    total_amount=sum(s.amount for s in submissions),
                )
            )
        except LedgerError as e:
            return Return.err(e.to_error())
