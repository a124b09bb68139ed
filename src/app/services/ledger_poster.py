"""Ledger Poster

The single write path of the ledger: validates an entry, applies the balance
changes it causes (incremental projection) and appends it, all inside the
caller's unit of work. Nothing else in the application mutates balances.
"""

import logging
from typing import Callable, Optional
from src.app.errors import InsufficientBalance, LedgerError, ValidationFailed
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.balance_repository import BalanceRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.repositories.point_card_repository import PointCardRepository
from src.domain.actor import ActorRef, ActorRole, SYSTEM_ACTOR_IDS
from src.domain.balance import Balance
from src.domain.ledger_entry import LedgerEntry
from src.domain.projection import BalanceDelta, entry_effects

logger = logging.getLogger(__name__)

# (ref, field, available, required) -> error to raise
ShortfallHandler = Callable[[ActorRef, str, int, int], LedgerError]


def insufficient_balance(ref: ActorRef, field: str, available: int, required: int) -> LedgerError:
    if field == "pending_collection":
        return InsufficientBalance(
            f"insufficient cash on hand: {ref} holds {available}, {required} required",
            reason=f"pending_collection={available}, required={required}",
        )
    if field == "current_balance":
        return InsufficientBalance(
            f"insufficient card balance: card has {available} points, {required} required",
            reason=f"current_balance={available}, required={required}",
        )
    return InsufficientBalance(
        f"insufficient balance: {ref} has {available} points, {required} required",
        reason=f"{field}={available}, required={required}",
    )


class LedgerPoster:
    """
    Posts ledger entries together with their balance effects

    Flow:
    1. Validate amount and resolve both actors
    2. For every affected balance: lock, check decrements, conditional update
    3. Append the entry

    The caller commits (or rolls back) the unit of work.
    """

    def __init__(
        self,
        entry_repo: LedgerEntryRepository,
        balance_repo: BalanceRepository,
        card_repo: PointCardRepository,
        actor_repo: ActorRepository,
    ):
        self.entry_repo = entry_repo
        self.balance_repo = balance_repo
        self.card_repo = card_repo
        self.actor_repo = actor_repo

    async def post(
        self,
        entry: LedgerEntry,
        on_shortfall: Optional[ShortfallHandler] = None,
    ) -> LedgerEntry:
        """
        Validate and post one entry

        Args:
            entry: Entry to append
            on_shortfall: Builds the error raised when a decrement is not covered

        Returns:
            The appended entry

        Raises:
            ValidationFailed: Non-positive amount or unresolvable actor
            InsufficientBalance: (or the on_shortfall error) when a guarded field would go negative
            ConcurrencyConflict: When a conditional update lost a race
        """
        if entry.amount is None or entry.amount <= 0:
            raise ValidationFailed(f"amount must be a positive integer, got {entry.amount}")

        await self._resolve(entry.source)
        await self._resolve(entry.target)

        shortfall = on_shortfall or insufficient_balance
        for delta in entry_effects(entry):
            if delta.is_card:
                await self._apply_to_card(delta, entry, shortfall)
            else:
                await self._apply_to_balance(delta, shortfall)

        appended = await self.entry_repo.append(entry)
        logger.debug(
            f"Posted {entry.entry_type.value} {entry.amount} "
            f"{entry.source} -> {entry.target} (entry_id={appended.id})"
        )
        return appended

    async def _resolve(self, ref: ActorRef) -> None:
        if ref.role == ActorRole.SYSTEM:
            if ref.actor_id in SYSTEM_ACTOR_IDS:
                return
        elif ref.role == ActorRole.POINT_CARD:
            if await self.card_repo.get_by_id(ref.actor_id):
                return
        elif ref.role == ActorRole.MERCHANT:
            if await self.actor_repo.get_merchant(ref.actor_id):
                return
        else:
            profile = await self.actor_repo.get_profile(ref.actor_id)
            if profile and ref.role in profile.role_list():
                return
        raise ValidationFailed(f"unknown actor {ref}", reason="actor could not be resolved")

    async def _apply_to_balance(self, delta: BalanceDelta, shortfall: ShortfallHandler) -> None:
        balance = await self.balance_repo.get(delta.ref, for_update=True)

        for field, required in delta.decrements().items():
            available = getattr(balance, field) if balance else 0
            if available < required:
                raise shortfall(delta.ref, field, available, required)

        if balance is None:
            balance = await self.balance_repo.create(
                Balance(actor_id=delta.ref.actor_id, role=delta.ref.role)
            )

        await self.balance_repo.apply_changes(balance, delta.changes)

    async def _apply_to_card(
        self,
        delta: BalanceDelta,
        entry: LedgerEntry,
        shortfall: ShortfallHandler,
    ) -> None:
        card = await self.card_repo.get_by_id(delta.ref.actor_id, for_update=True)

        for field, required in delta.decrements().items():
            available = getattr(card, field)
            if available < required:
                raise shortfall(delta.ref, field, available, required)

        used_at = entry.occurred_at if delta.decrements() else None
        await self.card_repo.apply_changes(card, delta.changes, used_at=used_at)
