"""Checks shared by card issue and top-up"""

import secrets
import string
from datetime import datetime
from typing import Optional
from src.app.errors import Forbidden, InvalidState, NotFound, ValidationFailed
from src.app.repositories.point_card_repository import PointCardRepository
from src.domain.actor import ActorRole, Identity, SELLING_ROLES
from src.domain.point_card import PointCard

_CARD_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_card_number(now: datetime) -> str:
    """Printed card number, e.g. CARD-20240601-7KQ2M"""
    suffix = "".join(secrets.choice(_CARD_SUFFIX_ALPHABET) for _ in range(5))
    return f"CARD-{now.strftime('%Y%m%d')}-{suffix}"


def check_funding(
    identity: Identity,
    seller_role: ActorRole,
    amount: int,
    cash_received: int,
    max_per_transaction: Optional[int],
) -> None:
    if seller_role not in SELLING_ROLES:
        raise ValidationFailed(f"{seller_role.value} cannot load point cards")
    if not identity.has_role(seller_role):
        raise Forbidden(f"{identity.actor_id} does not hold the {seller_role.value} role")
    if cash_received != amount:
        raise ValidationFailed(
            f"cash received ({cash_received}) must equal the points loaded ({amount})"
        )
    if max_per_transaction is not None and amount > max_per_transaction:
        raise ValidationFailed(f"a single card load is limited to {max_per_transaction} points")


async def load_usable_card(card_repo: PointCardRepository, card_id: str, now: datetime) -> PointCard:
    """
    Raises:
        NotFound: Unknown card
        InvalidState: Card inactive or expired
    """
    card = await card_repo.get_by_id(card_id)
    if not card:
        raise NotFound(f"point card {card_id} not found")
    if not card.is_active:
        raise InvalidState(f"point card {card.card_number} is deactivated", reason="card_inactive")
    if card.is_expired(now):
        raise InvalidState(
            f"point card {card.card_number} expired at {card.expires_at.isoformat()}",
            reason="card_expired",
        )
    return card
