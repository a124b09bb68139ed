"""Data Transfer Objects for cash reconciliation use cases"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.actor import ActorRole
from src.domain.cash_submission import CashSubmission, SubmissionStatus

PIN_PATTERN = r"^\d{6}$"


class SubmitCashCommandDTO(BaseModel):
    """
    Command DTO for handing collected cash into the reconciliation pool

    Used as input to SubmitCash use case.
    """

    submitter_role: ActorRole = Field(default=ActorRole.SELLER)
    amount: int = Field(..., gt=0, description="Cash handed in (must be > 0)")
    note: Optional[str] = Field(default=None, max_length=500)
    included_context: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Sale or card records covered by this hand-off"
    )
    correlation_id: Optional[str] = Field(default=None, max_length=200)

    class Config:
        json_schema_extra = {
            "example": {
                "submitter_role": "seller",
                "amount": 120,
                "note": "Morning shift",
                "included_context": [{"entry_id": "7f0c1c5e-3f7a-4d55-9c8e-1f1f4bb8f2a1"}],
                "correlation_id": "cash:user_seller_1:2024-06-01:am",
            }
        }


class ConfirmSubmissionCommandDTO(BaseModel):
    pin: str = Field(..., pattern=PIN_PATTERN, description="Confirming cashier's own transaction PIN")
    confirmation_note: Optional[str] = Field(default=None, max_length=500)


class SetTransactionPinCommandDTO(BaseModel):
    pin: str = Field(..., pattern=PIN_PATTERN, description="New 6 digit PIN")
    current_pin: Optional[str] = Field(
        default=None,
        pattern=PIN_PATTERN,
        description="Required when a PIN is already set"
    )


class CashSubmissionDTO(BaseModel):
    submission_id: str
    submitted_by: str
    submitter_role: ActorRole
    amount: int
    status: SubmissionStatus
    received_by: Optional[str] = None
    note: Optional[str] = None
    confirmation_note: Optional[str] = None
    included_context: Optional[List[Dict[str, Any]]] = None
    correlation_id: Optional[str] = None
    created_at: datetime
    claimed_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, submission: CashSubmission) -> "CashSubmissionDTO":
        return cls(
            submission_id=submission.id,
            submitted_by=submission.submitted_by,
            submitter_role=submission.submitter_role,
            amount=submission.amount,
            status=submission.status,
            received_by=submission.received_by,
            note=submission.note,
            confirmation_note=submission.confirmation_note,
            included_context=json.loads(submission.included_context) if submission.included_context else None,
            correlation_id=submission.correlation_id,
            created_at=submission.created_at,
            claimed_at=submission.claimed_at,
            confirmed_at=submission.confirmed_at,
        )


class CashSubmissionListDTO(BaseModel):
    submissions: List[CashSubmissionDTO]
    total_amount: int


class TransactionPinStatusDTO(BaseModel):
    actor_id: str
    is_set: bool
    updated_at: Optional[datetime] = None
