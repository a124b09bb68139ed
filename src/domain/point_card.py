"""Point Card Domain Entity

Anonymous bearer instrument. Possession of the card id is the only credential.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, CheckConstraint, String
from src.domain.actor import ActorRef, ActorRole
from src.domain.base import BaseModel, UtcDateTime, generate_uuid, utc_now


class PointCard(BaseModel, table=True):
    """
    Point Card - Balance-bearing token without an owning identity

    Domain Rules:
    - current_balance = initial_balance - total_spent + total_topped_up + total_refunded
    - current_balance is never negative
    - Spending and top-ups are rejected when inactive or expired
    """

    __tablename__ = "point_cards"
    __table_args__ = (
        CheckConstraint('current_balance >= 0', name='card_balance_non_negative'),
    )

    card_id: str = Field(default_factory=generate_uuid, primary_key=True)

    card_number: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True),
        description="Printed card number"
    )

    initial_balance: int = Field(sa_column=Column(BigInteger, nullable=False))
    current_balance: int = Field(sa_column=Column(BigInteger, nullable=False))
    total_spent: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    total_topped_up: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    total_refunded: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))

    is_active: bool = Field(default=True)

    expires_at: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)

    issued_by: Optional[str] = Field(default=None, description="Seller who issued the card")

    version: int = Field(default=1, sa_column=Column(BigInteger, nullable=False, default=1))

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    last_used_at: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)

    @property
    def ref(self) -> ActorRef:
        return ActorRef(actor_id=self.card_id, role=ActorRole.POINT_CARD)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def is_usable(self, now: datetime) -> bool:
        return self.is_active and not self.is_expired(now)
