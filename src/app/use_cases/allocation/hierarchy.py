"""Shared checks of the allocation hierarchy"""

from typing import Optional
from src.app.errors import Forbidden, HierarchyViolation, NotFound, ValidationFailed
from src.app.repositories.actor_repository import ActorRepository
from src.domain.actor import ActorProfile, ActorRole, HIERARCHY_LEVELS, Identity
from .dtos import AllocateCommandDTO


async def check_hierarchy_move(
    identity: Identity,
    command: AllocateCommandDTO,
    actor_repo: ActorRepository,
    max_per_transaction: Optional[int] = None,
) -> ActorProfile:
    """
    Validate a move between the caller and a lower-level actor

    Returns:
        Profile of the lower-level actor

    Raises:
        ValidationFailed: Self transfer or amount above the per-transaction cap
        Forbidden: Caller lacks from_role, or the actors belong to different organizations
        HierarchyViolation: Roles are not exactly one level apart
        NotFound: Lower-level actor unknown, inactive or lacking to_role
    """
    if command.to_actor_id == identity.actor_id:
        raise ValidationFailed("cannot move points to yourself")

    if max_per_transaction is not None and command.amount > max_per_transaction:
        raise ValidationFailed(
            f"amount {command.amount} exceeds the limit of {max_per_transaction} per transaction"
        )

    if not identity.has_role(command.from_role):
        raise Forbidden(f"{identity.actor_id} does not hold the {command.from_role.value} role")

    from_level = HIERARCHY_LEVELS.get(command.from_role)
    to_level = HIERARCHY_LEVELS.get(command.to_role)
    if from_level is None or to_level is None or to_level != from_level + 1:
        raise HierarchyViolation(
            f"{command.from_role.value} cannot move points with {command.to_role.value}: "
            f"roles must be exactly one level apart (organizer -> seller_manager -> seller)"
        )

    profile = await actor_repo.get_profile(command.to_actor_id)
    if not profile or not profile.is_active or command.to_role not in profile.role_list():
        raise NotFound(f"no active {command.to_role.value} {command.to_actor_id}")

    if profile.organization_id != identity.organization_id:
        raise Forbidden(f"{command.to_actor_id} belongs to a different organization")

    return profile


def require_role(identity: Identity, role: ActorRole) -> None:
    if not identity.has_role(role):
        raise Forbidden(f"{identity.actor_id} does not hold the {role.value} role")
