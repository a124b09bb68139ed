"""Balance projection rules

Pure mapping from a ledger entry to the balance changes it causes. The same
table drives both the incremental projection (applied while posting) and the
eager fold used by the reconciliation audit, so the two cannot disagree.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List
from src.domain.actor import ActorRef, ActorRole
from src.domain.balance import BALANCE_FIELDS
from src.domain.ledger_entry import EntryType, LedgerEntry

_CASH_SALE = {"available_points": -1, "total_sold": 1, "total_revenue": 1, "pending_collection": 1}
_RECEIVE = {"available_points": 1, "total_received": 1}
_MERCHANT_CREDIT = {"available_points": 1, "total_revenue": 1}

_SOURCE_EFFECTS: Dict[EntryType, Dict[str, int]] = {
    EntryType.ISSUANCE: {},
    EntryType.ALLOCATION: {"available_points": -1},
    EntryType.RECALL: {"available_points": -1},
    EntryType.SALE: _CASH_SALE,
    EntryType.MERCHANT_PAYMENT: {"available_points": -1, "total_spent": 1},
    EntryType.REFUND: {"available_points": -1, "total_revenue": -1},
    EntryType.CARD_ISSUE: _CASH_SALE,
    EntryType.CARD_TOP_UP: _CASH_SALE,
    EntryType.CARD_SPEND: {"current_balance": -1, "total_spent": 1},
    EntryType.CASH_SUBMISSION: {},
    EntryType.CASH_CLAIM: {"pending_collection": -1},
}

_TARGET_EFFECTS: Dict[EntryType, Dict[str, int]] = {
    EntryType.ISSUANCE: _RECEIVE,
    EntryType.ALLOCATION: _RECEIVE,
    EntryType.RECALL: {"available_points": 1},
    EntryType.SALE: _RECEIVE,
    EntryType.MERCHANT_PAYMENT: _MERCHANT_CREDIT,
    EntryType.REFUND: {"available_points": 1, "total_spent": -1},
    EntryType.CARD_ISSUE: {"current_balance": 1},
    EntryType.CARD_TOP_UP: {"current_balance": 1, "total_topped_up": 1},
    EntryType.CARD_SPEND: _MERCHANT_CREDIT,
    EntryType.CASH_SUBMISSION: {},
    EntryType.CASH_CLAIM: {"total_cash_collected": 1},
}

# Refunds onto a card restore its balance instead of a customer wallet
_CARD_REFUND_TARGET = {"current_balance": 1, "total_refunded": 1}

# Decrements of these fields are rejected rather than allowed below zero
GUARDED_FIELDS = frozenset({"available_points", "pending_collection", "current_balance"})


@dataclass(frozen=True)
class BalanceDelta:
    ref: ActorRef
    changes: Dict[str, int]

    def decrements(self) -> Dict[str, int]:
        """Guarded fields this delta lowers, with the positive amount required"""
        return {
            name: -value
            for name, value in self.changes.items()
            if value < 0 and name in GUARDED_FIELDS
        }

    @property
    def is_card(self) -> bool:
        return self.ref.role == ActorRole.POINT_CARD


@dataclass
class BalanceProjection:
    available_points: int = 0
    total_received: int = 0
    total_spent: int = 0
    total_sold: int = 0
    total_revenue: int = 0
    pending_collection: int = 0
    total_cash_collected: int = 0
    entry_count: int = field(default=0)


def _scaled(effects: Dict[str, int], amount: int) -> Dict[str, int]:
    return {name: sign * amount for name, sign in effects.items()}


def entry_effects(entry: LedgerEntry) -> List[BalanceDelta]:
    """Balance changes caused by ``entry`` (system actors are never touched)"""
    source_effects = _SOURCE_EFFECTS[entry.entry_type]
    target_effects = _TARGET_EFFECTS[entry.entry_type]
    if entry.entry_type == EntryType.REFUND and entry.target_role == ActorRole.POINT_CARD:
        target_effects = _CARD_REFUND_TARGET

    deltas = []
    if source_effects and entry.source_role != ActorRole.SYSTEM:
        deltas.append(BalanceDelta(entry.source, _scaled(source_effects, entry.amount)))
    if target_effects and entry.target_role != ActorRole.SYSTEM:
        deltas.append(BalanceDelta(entry.target, _scaled(target_effects, entry.amount)))
    return deltas


def project(entries: Iterable[LedgerEntry], ref: ActorRef) -> BalanceProjection:
    """Fold ledger history into the balance of one actor role"""
    projection = BalanceProjection()
    for entry in entries:
        touched = False
        for delta in entry_effects(entry):
            if delta.ref != ref:
                continue
            touched = True
            for name, value in delta.changes.items():
                if name in BALANCE_FIELDS:
                    setattr(projection, name, getattr(projection, name) + value)
        if touched:
            projection.entry_count += 1
    return projection
