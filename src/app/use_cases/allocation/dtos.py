"""Data Transfer Objects for allocation use cases

Pydantic models for command inputs and response outputs.
"""

from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.actor import ActorRole
from src.app.use_cases.ledger.dtos import LedgerEntryDTO


class FundPoolCommandDTO(BaseModel):
    """
    Command DTO for funding the caller's organizer pool from the treasury

    Used as input to FundPool use case.
    """

    amount: int = Field(..., gt=0, description="Points to issue (must be > 0)")
    note: Optional[str] = Field(default=None, max_length=500)
    correlation_id: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Unique key for idempotent operations"
    )


class AllocateCommandDTO(BaseModel):
    """
    Command DTO for moving points between hierarchy levels

    The caller is always the higher-level actor (from_role). Used by
    AllocatePoints (points flow down) and RecallPoints (points flow up).
    """

    from_role: ActorRole = Field(..., description="Caller's role (the higher level)")
    to_actor_id: str = Field(..., min_length=1, description="Lower-level actor")
    to_role: ActorRole = Field(..., description="Lower-level actor's role")
    amount: int = Field(..., gt=0, description="Points to move (must be > 0)")
    note: Optional[str] = Field(default=None, max_length=500)
    correlation_id: Optional[str] = Field(default=None, max_length=200)

    class Config:
        json_schema_extra = {
            "example": {
                "from_role": "organizer",
                "to_actor_id": "user_manager_2",
                "to_role": "seller_manager",
                "amount": 1000,
                "note": "Weekend stock",
                "correlation_id": "alloc:2024-06-01:manager_2",
            }
        }


class GrantByCohortCommandDTO(BaseModel):
    """Command DTO for granting the same amount to every customer in a cohort"""

    identity_tags: List[str] = Field(..., min_length=1, description="Cohort tags, e.g. ['student']")
    amount_per_recipient: int = Field(..., gt=0)
    note: Optional[str] = Field(default=None, max_length=500)
    correlation_id: Optional[str] = Field(
        default=None,
        max_length=160,
        description="Batch key; each recipient's grant uses '<correlation_id>:<actor_id>'"
    )


class GrantFailureDTO(BaseModel):
    actor_id: str
    code: str
    message: str


class CohortGrantResultDTO(BaseModel):
    """
    Outcome of a cohort grant

    Grants are best-effort: every recipient is posted in its own unit of work.
    """

    succeeded: List[LedgerEntryDTO]
    failed: List[GrantFailureDTO]
    total_granted: int
