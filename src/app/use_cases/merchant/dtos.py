"""Data Transfer Objects for merchant payment use cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.actor import OperatorRole
from src.domain.merchant_transaction import MerchantTransaction, PaymentStatus

MERCHANT_QR_TYPE = "merchant"


class PaymentQrDTO(BaseModel):
    """
    Decoded QR addressing envelope

    The QR codec lives in the client; the engine only receives its fields.
    """

    type: str = Field(..., description="Envelope type; 'merchant' for a merchant stall code")
    version: int = Field(default=1, ge=1)
    org_id: Optional[str] = None
    event_id: Optional[str] = None
    payer_or_merchant_id: str = Field(..., min_length=1)
    timestamp: Optional[datetime] = None


class InitiatePaymentCommandDTO(BaseModel):
    """
    Command DTO for creating a pending merchant payment

    Exactly one payer (customer_id or card_id) and exactly one merchant
    address (merchant_id or qr) must be given.
    """

    merchant_id: Optional[str] = Field(default=None, min_length=1)
    qr: Optional[PaymentQrDTO] = None
    customer_id: Optional[str] = Field(default=None, min_length=1)
    card_id: Optional[str] = Field(default=None, min_length=1)
    amount: int = Field(..., gt=0, description="Points to pay (must be > 0)")
    correlation_id: Optional[str] = Field(default=None, max_length=200)

    class Config:
        json_schema_extra = {
            "example": {
                "merchant_id": "stall_12",
                "customer_id": "user_customer_9",
                "amount": 25,
                "correlation_id": "pay:user_customer_9:0007",
            }
        }


class ConfirmPaymentCommandDTO(BaseModel):
    correlation_id: Optional[str] = Field(default=None, max_length=200)


class ReasonCommandDTO(BaseModel):
    """Command DTO for cancel and refund; the reason is mandatory"""

    reason: str = Field(..., min_length=1, max_length=500)


class MerchantTransactionDTO(BaseModel):
    transaction_id: str
    merchant_id: str
    customer_id: Optional[str] = None
    card_id: Optional[str] = None
    amount: int
    status: PaymentStatus
    initiated_by: Optional[str] = None
    collected_by: Optional[str] = None
    collector_role: Optional[OperatorRole] = None
    cancelled_by: Optional[str] = None
    refunded_by: Optional[str] = None
    reason_note: Optional[str] = None
    correlation_id: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, transaction: MerchantTransaction) -> "MerchantTransactionDTO":
        return cls(
            transaction_id=transaction.id,
            merchant_id=transaction.merchant_id,
            customer_id=transaction.customer_id,
            card_id=transaction.card_id,
            amount=transaction.amount,
            status=transaction.status,
            initiated_by=transaction.initiated_by,
            collected_by=transaction.collected_by,
            collector_role=transaction.collector_role,
            cancelled_by=transaction.cancelled_by,
            refunded_by=transaction.refunded_by,
            reason_note=transaction.reason_note,
            correlation_id=transaction.correlation_id,
            created_at=transaction.created_at,
            completed_at=transaction.completed_at,
            cancelled_at=transaction.cancelled_at,
            refunded_at=transaction.refunded_at,
        )


class MerchantTransactionListDTO(BaseModel):
    transactions: List[MerchantTransactionDTO]
