"""Ledger Entry Domain Entity

Immutable append-only record of every balance-affecting event.
Each entry names exactly one source and one target balance.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, String, Text
from src.domain.actor import ActorRef, ActorRole
from src.domain.base import BaseModel, UtcDateTime, generate_uuid, utc_now


class EntryType(str, Enum):
    """Ledger entry types"""
    ISSUANCE = "issuance"                  # Treasury funds an organizer pool
    ALLOCATION = "allocation"              # Points moved one hierarchy level down (or cohort grant)
    RECALL = "recall"                      # Points pulled one hierarchy level up
    SALE = "sale"                          # Seller inventory sold to a customer for cash
    MERCHANT_PAYMENT = "merchant_payment"  # Customer pays a merchant
    REFUND = "refund"                      # Merchant returns a completed payment
    CARD_ISSUE = "card_issue"              # Initial load of a new point card
    CARD_TOP_UP = "card_top_up"            # Additional load of a point card
    CARD_SPEND = "card_spend"              # Point card pays a merchant
    CASH_SUBMISSION = "cash_submission"    # Cash handed into the reconciliation pool
    CASH_CLAIM = "cash_claim"              # Cashier confirmed receipt of submitted cash


class LedgerEntry(BaseModel, table=True):
    """
    Ledger Entry - Immutable audit trail of point movements

    Domain Rules:
    - Entries are immutable (append-only); corrections are new entries
    - amount is a positive integer
    - correlation_id is unique when present (idempotent replays)
    - reference_type/reference_id link the entry to its business record
      (e.g. "merchant_transaction", "cash_submission", "point_card")
    """

    __tablename__ = "ledger_entries"
    __table_args__ = (
        CheckConstraint('amount > 0', name='ledger_entry_amount_positive'),
        Index('ix_ledger_entries_source', 'source_actor_id', 'occurred_at'),
        Index('ix_ledger_entries_target', 'target_actor_id', 'occurred_at'),
        Index('ix_ledger_entries_reference', 'reference_type', 'reference_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique entry identifier"
    )

    entry_type: EntryType = Field(
        description="Type of balance-affecting event"
    )

    amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Points moved (must be > 0)"
    )

    source_actor_id: str = Field(description="Actor the points leave")
    source_role: ActorRole = Field(description="Role-scoped balance the points leave")

    target_actor_id: str = Field(description="Actor the points reach")
    target_role: ActorRole = Field(description="Role-scoped balance the points reach")

    occurred_at: datetime = Field(
        default_factory=utc_now,
        sa_type=UtcDateTime,
        description="Entry timestamp (immutable)"
    )

    correlation_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True),
        description="Caller supplied idempotency key"
    )

    reference_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    note: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    metadata_json: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="JSON metadata for audit context"
    )

    @property
    def source(self) -> ActorRef:
        return ActorRef(actor_id=self.source_actor_id, role=self.source_role)

    @property
    def target(self) -> ActorRef:
        return ActorRef(actor_id=self.target_actor_id, role=self.target_role)

    def touches(self, ref: ActorRef) -> bool:
        return ref == self.source or ref == self.target

    class Config:
        json_schema_extra = {
            "example": {
                "id": "7f0c1c5e-3f7a-4d55-9c8e-1f1f4bb8f2a1",
                "entry_type": "sale",
                "amount": 40,
                "source_actor_id": "user_seller_1",
                "source_role": "seller",
                "target_actor_id": "user_customer_9",
                "target_role": "customer",
                "occurred_at": "2024-01-01T00:00:00Z",
                "correlation_id": "sale:device-17:000231",
                "reference_type": None,
                "reference_id": None,
            }
        }
