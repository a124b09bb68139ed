"""Merchant Transaction Domain Entity

A customer (or point card) to merchant payment and its lifecycle:

    pending --confirm--> completed --refund--> refunded
    pending --cancel---> cancelled

The TRANSITIONS table is the only authority on legal moves.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, String, Text
from src.domain.actor import ActorRef, ActorRole, OperatorRole
from src.domain.base import BaseModel, UtcDateTime, generate_uuid, utc_now


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentAction(str, Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"
    REFUND = "refund"


TRANSITIONS = {
    (PaymentStatus.PENDING, PaymentAction.CONFIRM): PaymentStatus.COMPLETED,
    (PaymentStatus.PENDING, PaymentAction.CANCEL): PaymentStatus.CANCELLED,
    (PaymentStatus.COMPLETED, PaymentAction.REFUND): PaymentStatus.REFUNDED,
}


def next_status(current: PaymentStatus, action: PaymentAction) -> Optional[PaymentStatus]:
    """Target status of ``action`` from ``current``, or None if illegal"""
    return TRANSITIONS.get((current, action))


class MerchantTransaction(BaseModel, table=True):
    """
    Merchant Transaction - Point payment to a merchant

    Domain Rules:
    - Exactly one payer: customer_id or card_id
    - amount is immutable after creation
    - Only one outcome transition from pending; refunded and cancelled are terminal
    - reason_note is required on cancel and refund
    """

    __tablename__ = "merchant_transactions"
    __table_args__ = (
        CheckConstraint('amount > 0', name='merchant_transaction_amount_positive'),
        CheckConstraint(
            '(customer_id IS NULL) != (card_id IS NULL)',
            name='merchant_transaction_single_payer',
        ),
        Index('ix_merchant_transactions_merchant_status', 'merchant_id', 'status'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    merchant_id: str = Field(index=True)

    customer_id: Optional[str] = Field(default=None, index=True)

    card_id: Optional[str] = Field(default=None, index=True)

    amount: int = Field(sa_column=Column(BigInteger, nullable=False))

    status: PaymentStatus = Field(default=PaymentStatus.PENDING)

    initiated_by: Optional[str] = Field(default=None)

    collected_by: Optional[str] = Field(default=None, description="Operator who confirmed")

    collector_role: Optional[OperatorRole] = Field(default=None)

    cancelled_by: Optional[str] = Field(default=None)

    refunded_by: Optional[str] = Field(default=None)

    reason_note: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Reason given on cancel or refund"
    )

    correlation_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True),
    )

    version: int = Field(default=1, sa_column=Column(BigInteger, nullable=False, default=1))

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    completed_at: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)
    cancelled_at: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)
    refunded_at: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)

    @property
    def payer_ref(self) -> ActorRef:
        if self.card_id is not None:
            return ActorRef(actor_id=self.card_id, role=ActorRole.POINT_CARD)
        return ActorRef(actor_id=self.customer_id, role=ActorRole.CUSTOMER)

    @property
    def merchant_ref(self) -> ActorRef:
        return ActorRef(actor_id=self.merchant_id, role=ActorRole.MERCHANT)

    @property
    def is_card_payment(self) -> bool:
        return self.card_id is not None
