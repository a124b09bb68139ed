"""Actor Domain Entities

Actors are anything that can hold a point balance. A person may hold several
roles at once (seller and customer, for example) and every role has its own
independent sub-balance, addressed by ActorRef(actor_id, role).

Identity facts (roles, identity tag, organization) come from the external
identity provider and are mirrored in ActorProfile. Merchant owners and
assistants share a single merchant balance addressed by the merchant id.
"""

import json
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field as PydanticField
from sqlmodel import Field, Column
from sqlalchemy import String, Text
from src.domain.base import BaseModel, UtcDateTime, utc_now


class ActorRole(str, Enum):
    """Role-scoped balance holders"""
    ORGANIZER = "organizer"
    SELLER_MANAGER = "seller_manager"
    SELLER = "seller"
    CUSTOMER = "customer"
    MERCHANT = "merchant"
    POINT_CARD = "point_card"
    CASHIER = "cashier"
    SYSTEM = "system"


# Fixed allocation hierarchy: points flow one level down, recalls one level up
HIERARCHY_LEVELS = {
    ActorRole.ORGANIZER: 0,
    ActorRole.SELLER_MANAGER: 1,
    ActorRole.SELLER: 2,
}

SELLING_ROLES = (ActorRole.SELLER, ActorRole.SELLER_MANAGER)
CASH_HANDLING_ROLES = (ActorRole.SELLER, ActorRole.SELLER_MANAGER)

TREASURY_ACTOR_ID = "platform:treasury"
CASH_POOL_ACTOR_ID = "platform:cash-pool"
SYSTEM_ACTOR_IDS = frozenset({TREASURY_ACTOR_ID, CASH_POOL_ACTOR_ID})


class OperatorRole(str, Enum):
    """Who at a merchant stall performed an action"""
    OWNER = "owner"
    ASSISTANT = "assistant"


class ActorRef(PydanticBaseModel):
    """Address of one role-scoped balance"""

    model_config = ConfigDict(frozen=True)

    actor_id: str = PydanticField(..., min_length=1)
    role: ActorRole

    def __str__(self) -> str:
        return f"{self.actor_id}/{self.role.value}"


class Identity(PydanticBaseModel):
    """
    Scoped identity of the caller, as resolved by the identity provider.

    Roles are always re-read from the provider; nothing here comes from
    client-controlled storage.
    """

    actor_id: str
    roles: List[ActorRole] = PydanticField(default_factory=list)
    identity_tag: Optional[str] = None
    organization_id: Optional[str] = None

    def has_role(self, role: ActorRole) -> bool:
        return role in self.roles


class ActorProfile(BaseModel, table=True):
    """
    ActorProfile - Identity facts mirrored from the identity provider

    Domain Rules:
    - actor_id is the provider's stable user id
    - roles is a comma separated list of ActorRole values
    - Inactive actors are excluded from cohort grants
    """

    __tablename__ = "actor_profiles"

    actor_id: str = Field(
        primary_key=True,
        description="Identity provider user id"
    )

    display_name: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
        description="Name shown in ledger views"
    )

    roles: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
        description="Comma separated ActorRole values"
    )

    identity_tag: Optional[str] = Field(
        default=None,
        index=True,
        description="Cohort tag (e.g. 'student', 'staff')"
    )

    organization_id: Optional[str] = Field(
        default=None,
        index=True,
        description="Organization scope of the actor"
    )

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    def role_list(self) -> List[ActorRole]:
        return [ActorRole(r.strip()) for r in self.roles.split(",") if r.strip()]

    def to_identity(self) -> Identity:
        return Identity(
            actor_id=self.actor_id,
            roles=self.role_list(),
            identity_tag=self.identity_tag,
            organization_id=self.organization_id,
        )


class Merchant(BaseModel, table=True):
    """
    Merchant - A stall that accepts point payments

    Domain Rules:
    - owner_id is the primary operator (only one allowed to refund)
    - assistant_ids may confirm and cancel payments, never refund
    - Owner and assistants share one balance: ActorRef(merchant_id, MERCHANT)
    """

    __tablename__ = "merchants"

    merchant_id: str = Field(primary_key=True)

    name: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
    )

    owner_id: str = Field(index=True)

    assistant_ids: str = Field(
        default="[]",
        sa_column=Column(Text, nullable=False, default="[]"),
        description="JSON list of assistant actor ids"
    )

    organization_id: Optional[str] = Field(default=None, index=True)

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    def assistants(self) -> List[str]:
        return list(json.loads(self.assistant_ids or "[]"))

    def operator_role(self, actor_id: str) -> Optional[OperatorRole]:
        if actor_id == self.owner_id:
            return OperatorRole.OWNER
        if actor_id in self.assistants():
            return OperatorRole.ASSISTANT
        return None

    def balance_ref(self) -> ActorRef:
        return ActorRef(actor_id=self.merchant_id, role=ActorRole.MERCHANT)
