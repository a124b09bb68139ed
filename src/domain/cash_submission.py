"""Cash Submission Domain Entity

Cash physically handed in by a seller or seller manager, waiting in the
reconciliation pool until a cashier claims and confirms it.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, String, Text
from src.domain.actor import ActorRef, ActorRole
from src.domain.base import BaseModel, UtcDateTime, generate_uuid, utc_now


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DISPUTED = "disputed"
    REJECTED = "rejected"


class CashSubmission(BaseModel, table=True):
    """
    Cash Submission - One hand-off of collected cash

    Domain Rules:
    - received_by moves from null to one cashier exactly once (compare-and-set)
    - Only the claiming cashier may confirm
    - Once confirmed the record is immutable
    """

    __tablename__ = "cash_submissions"
    __table_args__ = (
        CheckConstraint('amount > 0', name='cash_submission_amount_positive'),
        Index('ix_cash_submissions_status_created', 'status', 'created_at'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    submitted_by: str = Field(index=True)

    submitter_role: ActorRole = Field()

    amount: int = Field(sa_column=Column(BigInteger, nullable=False))

    status: SubmissionStatus = Field(default=SubmissionStatus.PENDING)

    received_by: Optional[str] = Field(default=None, description="Cashier holding the claim")

    note: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    confirmation_note: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    included_context: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="JSON list of sale/card records covered by this hand-off"
    )

    correlation_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True),
    )

    version: int = Field(default=1, sa_column=Column(BigInteger, nullable=False, default=1))

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    claimed_at: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)
    confirmed_at: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)

    @property
    def submitter_ref(self) -> ActorRef:
        return ActorRef(actor_id=self.submitted_by, role=self.submitter_role)
