"""Transaction PIN Domain Entity

Second-factor credential of an actor, checked when a cashier confirms cash.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String
from src.domain.base import BaseModel, UtcDateTime, utc_now


class TransactionPin(BaseModel, table=True):
    """
    Transaction PIN - bcrypt hash plus lockout counters

    Domain Rules:
    - One PIN per actor
    - Consecutive failures lock the PIN until locked_until
    """

    __tablename__ = "transaction_pins"

    actor_id: str = Field(primary_key=True)

    pin_hash: str = Field(sa_column=Column(String(255), nullable=False))

    failed_attempts: int = Field(default=0)

    locked_until: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)

    last_verified_at: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)

    updated_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    def is_locked(self, now: datetime) -> bool:
        return self.locked_until is not None and self.locked_until > now
