"""Get Balance Use Case

Retrieves the current balance of one role-scoped actor.
"""

from libs.result import Result, Return
from src.app.errors import LedgerError, NotFound
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.balance_repository import BalanceRepository
from src.domain.actor import ActorRef, Identity
from .access import ensure_can_view
from .dtos import BalanceDTO


class GetBalance:
    """
    Get Balance Use Case

    Read-only. Balances are created lazily on the first credit, so an actor
    that never received points has no record (NOT_FOUND).
    """

    def __init__(self, balance_repo: BalanceRepository, actor_repo: ActorRepository):
        self.balance_repo = balance_repo
        self.actor_repo = actor_repo

    async def execute(self, identity: Identity, ref: ActorRef) -> Result[BalanceDTO]:
        """
        Execute get balance operation

        Args:
            identity: Caller
            ref: Role-scoped actor to read

        Returns:
            Result[BalanceDTO]: Success with balance data or error

        Errors:
            FORBIDDEN: Caller may not view this balance
            NOT_FOUND: No balance record exists
        """
        try:
            await ensure_can_view(identity, ref, self.actor_repo)

            balance = await self.balance_repo.get(ref)
            if not balance:
                raise NotFound(f"no balance found for {ref}")

            return Return.ok(BalanceDTO.from_entity(balance))
        except LedgerError as e:
            return Return.err(e.to_error())
