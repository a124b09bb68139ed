"""Data Transfer Objects for point-of-sale use cases"""

from typing import Optional
from pydantic import BaseModel, Field
from src.domain.actor import ActorRole


class SellCommandDTO(BaseModel):
    """
    Command DTO for selling points to a customer for cash

    Used as input to SellPoints use case.
    """

    seller_role: ActorRole = Field(
        default=ActorRole.SELLER,
        description="Role whose inventory is sold (seller or seller_manager)"
    )

    customer_id: str = Field(..., min_length=1, description="Buying customer")

    amount: int = Field(..., gt=0, description="Points sold (must be > 0)")

    cash_received: int = Field(..., gt=0, description="Cash taken from the customer (1:1 with points)")

    note: Optional[str] = Field(default=None, max_length=500)

    correlation_id: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Unique key for idempotent operations (e.g., device_id:sequence)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "seller_role": "seller",
                "customer_id": "user_customer_9",
                "amount": 40,
                "cash_received": 40,
                "correlation_id": "sale:device-17:000231",
            }
        }
