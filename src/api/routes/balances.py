"""Balance and Ledger API Routes

Read access to balances and the append-only ledger.
"""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories import (
    SqlAlchemyActorRepository,
    SqlAlchemyBalanceRepository,
    SqlAlchemyLedgerEntryRepository,
)
from src.api.error import ClientError
from src.app.use_cases.ledger.dtos import BalanceDTO, LedgerEntryPageDTO
from src.app.use_cases.ledger.get_balance import GetBalance
from src.app.use_cases.ledger.list_ledger_entries import ListLedgerEntries
from src.depends import get_identity, get_session
from src.domain.actor import ActorRef, ActorRole, Identity
from src.domain.ledger_entry import EntryType

router = APIRouter(tags=["Ledger"])


@router.get(
    "/balances/{actor_id}/{role}",
    response_model=BalanceDTO,
    responses={
        404: {
            "description": "No balance recorded for this actor and role",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "NOT_FOUND",
                            "message": "no balance for user_seller_1 as seller",
                        }
                    }
                }
            },
        }
    },
)
async def get_balance(
    actor_id: str,
    role: ActorRole,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Get the balance of one actor in one role.

    Actors can read their own balances. Merchant balances are readable by the
    merchant's owner and assistants.

    **Balance fields:**
    - `available_points`: Points the actor can spend, sell or allocate
    - `pending_collection`: Cash on hand not yet confirmed by a cashier
    - `version`: Increases with every change
    """
    use_case = GetBalance(SqlAlchemyBalanceRepository(session), SqlAlchemyActorRepository(session))
    result = await use_case.execute(identity, ActorRef(actor_id=actor_id, role=role))
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/ledger/{actor_id}", response_model=LedgerEntryPageDTO)
async def list_ledger_entries(
    actor_id: str,
    role: Optional[ActorRole] = None,
    entry_type: Optional[List[EntryType]] = Query(default=None),
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    limit: int = Query(default=50, ge=1, le=200),
    cursor: Optional[str] = None,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    List ledger entries touching an actor, newest first.

    **Query parameters:**
    - `role` (optional): Only entries touching the actor in this role
    - `entry_type` (optional, repeatable): Only these entry types
    - `since` / `until` (optional): Creation time window
    - `limit` (optional): Page size, 1 to 200
    - `cursor` (optional): `next_cursor` from the previous page
    """
    use_case = ListLedgerEntries(SqlAlchemyLedgerEntryRepository(session), SqlAlchemyActorRepository(session))
    result = await use_case.execute(
        identity,
        actor_id,
        role=role,
        entry_types=entry_type,
        since=since,
        until=until,
        limit=limit,
        cursor=cursor,
    )
    if result.is_err():
        raise ClientError(result.error)
    return result.value
