"""Who may read which balance"""

from src.app.errors import Forbidden
from src.app.repositories.actor_repository import ActorRepository
from src.domain.actor import ActorRef, ActorRole, Identity


async def ensure_can_view(identity: Identity, ref: ActorRef, actor_repo: ActorRepository) -> None:
    """
    Actors see their own role balances; merchant operators see the shared
    merchant balance.

    Raises:
        Forbidden: For anyone else
    """
    if ref.role == ActorRole.MERCHANT:
        merchant = await actor_repo.get_merchant(ref.actor_id)
        if merchant and merchant.operator_role(identity.actor_id) is not None:
            return
    elif ref.actor_id == identity.actor_id and identity.has_role(ref.role):
        return
    raise Forbidden(f"{identity.actor_id} may not view {ref}")
