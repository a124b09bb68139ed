"""Balance Domain Entity

Materialized running totals per role-scoped actor. Updated only in the same
unit of work that appends the ledger entry causing the change.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, CheckConstraint, UniqueConstraint
from src.domain.actor import ActorRef, ActorRole
from src.domain.base import BaseModel, UtcDateTime, generate_uuid, utc_now


BALANCE_FIELDS = (
    "available_points",
    "total_received",
    "total_spent",
    "total_sold",
    "total_revenue",
    "pending_collection",
    "total_cash_collected",
)


class Balance(BaseModel, table=True):
    """
    Balance - Current point and cash position of one actor role

    Domain Rules:
    - One row per (actor_id, role)
    - available_points and pending_collection are never negative
    - version increments on every change (optimistic compare-and-set)
    """

    __tablename__ = "balances"
    __table_args__ = (
        UniqueConstraint('actor_id', 'role', name='uq_balances_actor_role'),
        CheckConstraint('available_points >= 0', name='available_points_non_negative'),
        CheckConstraint('pending_collection >= 0', name='pending_collection_non_negative'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    actor_id: str = Field(index=True)

    role: ActorRole = Field()

    available_points: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Spendable points"
    )

    total_received: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    total_spent: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    total_sold: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    total_revenue: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))

    pending_collection: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Cash collected from customers and still owed upstream"
    )

    total_cash_collected: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Cash confirmed as received (cashier role)"
    )

    version: int = Field(default=1, sa_column=Column(BigInteger, nullable=False, default=1))

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    @property
    def ref(self) -> ActorRef:
        return ActorRef(actor_id=self.actor_id, role=self.role)
