"""Data Transfer Objects for point card use cases"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.actor import ActorRole
from src.domain.base import as_utc
from src.domain.point_card import PointCard


class IssueCardCommandDTO(BaseModel):
    """
    Command DTO for issuing a new point card

    The funding seller's inventory pays for the initial load, against cash.
    """

    amount: int = Field(..., gt=0, description="Initial load (must be > 0)")
    cash_received: int = Field(..., gt=0)
    seller_role: ActorRole = Field(default=ActorRole.SELLER)
    expires_at: Optional[datetime] = Field(default=None, description="UTC expiry; never expires when null")
    correlation_id: Optional[str] = Field(default=None, max_length=200)

    @field_validator("expires_at")
    @classmethod
    def expires_at_in_utc(cls, v):
        return as_utc(v)


class TopUpCardCommandDTO(BaseModel):
    amount: int = Field(..., gt=0)
    cash_received: int = Field(..., gt=0)
    seller_role: ActorRole = Field(default=ActorRole.SELLER)
    correlation_id: Optional[str] = Field(default=None, max_length=200)


class SpendCardCommandDTO(BaseModel):
    """
    Command DTO for paying a merchant with a card

    Possession of the card id is the credential; no payer identity is checked.
    """

    merchant_id: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    correlation_id: Optional[str] = Field(default=None, max_length=200)

    class Config:
        json_schema_extra = {
            "example": {
                "merchant_id": "stall_12",
                "amount": 15,
                "correlation_id": "card-pay:stall_12:0042",
            }
        }


class CardBalanceDTO(BaseModel):
    card_id: str
    card_number: str
    initial_balance: int
    current_balance: int
    total_spent: int
    total_topped_up: int
    total_refunded: int
    is_active: bool
    is_expired: bool
    expires_at: Optional[datetime] = None
    issued_by: Optional[str] = None
    created_at: datetime
    last_used_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, card: PointCard, now: datetime) -> "CardBalanceDTO":
        return cls(
            card_id=card.card_id,
            card_number=card.card_number,
            initial_balance=card.initial_balance,
            current_balance=card.current_balance,
            total_spent=card.total_spent,
            total_topped_up=card.total_topped_up,
            total_refunded=card.total_refunded,
            is_active=card.is_active,
            is_expired=card.is_expired(now),
            expires_at=card.expires_at,
            issued_by=card.issued_by,
            created_at=card.created_at,
            last_used_at=card.last_used_at,
        )
