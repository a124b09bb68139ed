"""Data Transfer Objects for ledger queries and reconciliation"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.actor import ActorRole
from src.domain.balance import Balance
from src.domain.ledger_entry import EntryType, LedgerEntry


class LedgerEntryDTO(BaseModel):
    """One immutable ledger entry"""

    entry_id: str
    entry_type: EntryType
    amount: int
    source_actor_id: str
    source_role: ActorRole
    target_actor_id: str
    target_role: ActorRole
    occurred_at: datetime
    correlation_id: Optional[str] = None
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def from_entity(cls, entry: LedgerEntry) -> "LedgerEntryDTO":
        return cls(
            entry_id=entry.id,
            entry_type=entry.entry_type,
            amount=entry.amount,
            source_actor_id=entry.source_actor_id,
            source_role=entry.source_role,
            target_actor_id=entry.target_actor_id,
            target_role=entry.target_role,
            occurred_at=entry.occurred_at,
            correlation_id=entry.correlation_id,
            reference_type=entry.reference_type,
            reference_id=entry.reference_id,
            note=entry.note,
        )


class BalanceDTO(BaseModel):
    """
    Current position of one actor role

    Returned by GetBalance.
    """

    actor_id: str
    role: ActorRole
    available_points: int = 0
    total_received: int = 0
    total_spent: int = 0
    total_sold: int = 0
    total_revenue: int = 0
    pending_collection: int = 0
    total_cash_collected: int = 0
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, balance: Balance) -> "BalanceDTO":
        return cls(
            actor_id=balance.actor_id,
            role=balance.role,
            available_points=balance.available_points,
            total_received=balance.total_received,
            total_spent=balance.total_spent,
            total_sold=balance.total_sold,
            total_revenue=balance.total_revenue,
            pending_collection=balance.pending_collection,
            total_cash_collected=balance.total_cash_collected,
            updated_at=balance.updated_at,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "actor_id": "user_seller_1",
                "role": "seller",
                "available_points": 460,
                "total_received": 500,
                "total_spent": 0,
                "total_sold": 40,
                "total_revenue": 40,
                "pending_collection": 40,
                "total_cash_collected": 0,
                "updated_at": "2024-01-01T10:00:00Z",
            }
        }


class LedgerEntryPageDTO(BaseModel):
    """One page of ledger history, newest first"""

    entries: List[LedgerEntryDTO]
    next_cursor: Optional[str] = Field(
        default=None,
        description="Pass back as cursor to fetch the next page; null on the last page"
    )


class BalanceDiscrepancyDTO(BaseModel):
    """A balance whose stored totals disagree with its ledger history"""

    actor_id: str
    role: ActorRole
    recorded_available_points: int
    projected_available_points: int
    recorded_pending_collection: int
    projected_pending_collection: int
    entry_count: int

    @property
    def available_points_difference(self) -> int:
        return self.recorded_available_points - self.projected_available_points

    @property
    def pending_collection_difference(self) -> int:
        return self.recorded_pending_collection - self.projected_pending_collection


class ReconciliationResultDTO(BaseModel):
    total_balances_checked: int
    discrepancies_found: int
    discrepancies: List[BalanceDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
