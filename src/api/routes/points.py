"""Points Allocation API Routes

Moves points down the organizer, seller manager and seller hierarchy.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories import SqlAlchemyActorRepository, SqlAlchemyLedgerEntryRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.use_cases.allocation.allocate_points import AllocatePoints
from src.app.use_cases.allocation.dtos import (
    AllocateCommandDTO,
    CohortGrantResultDTO,
    FundPoolCommandDTO,
    GrantByCohortCommandDTO,
)
from src.app.use_cases.allocation.fund_pool import FundPool
from src.app.use_cases.allocation.grant_by_cohort import GrantByCohort
from src.app.use_cases.allocation.recall_points import RecallPoints
from src.app.use_cases.ledger.dtos import LedgerEntryDTO
from src.depends import build_poster, get_identity, get_session
from src.domain.actor import Identity

router = APIRouter(prefix="/points", tags=["Points"])

HIERARCHY_ERROR_RESPONSES = {
    402: {
        "description": "Source balance too low",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INSUFFICIENT_BALANCE",
                        "message": "insufficient balance: user_org_1/organizer has 50 points, 100 required",
                    }
                }
            }
        },
    },
    409: {
        "description": "Move skips or reverses a hierarchy level",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "HIERARCHY_VIOLATION",
                        "message": "organizer cannot move points with seller: roles must be exactly one level apart (organizer -> seller_manager -> seller)",
                    }
                }
            }
        },
    },
}


@router.post("/pool", response_model=LedgerEntryDTO, status_code=status.HTTP_201_CREATED)
async def fund_pool(
    command: FundPoolCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Issue new points from the treasury into the caller's organizer pool.

    Only organizers can fund their own pool. Repeating a request with the same
    `correlation_id` returns the original entry.
    """
    use_case = FundPool(SqlAlchemyUnitOfWork(session), SqlAlchemyLedgerEntryRepository(session), build_poster(session))
    result = await use_case.execute(identity, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "/allocate",
    response_model=LedgerEntryDTO,
    status_code=status.HTTP_201_CREATED,
    responses=HIERARCHY_ERROR_RESPONSES,
)
async def allocate_points(
    command: AllocateCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Allocate points one level down the hierarchy.

    **Allowed moves:**
    - organizer to seller manager
    - seller manager to seller

    The recipient must be active, hold the target role and belong to the
    caller's organization.
    """
    use_case = AllocatePoints(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyLedgerEntryRepository(session),
        SqlAlchemyActorRepository(session),
        build_poster(session),
        max_per_transaction=ApplicationConfig.ALLOCATION_MAX_PER_TRANSACTION,
    )
    result = await use_case.execute(identity, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "/recall",
    response_model=LedgerEntryDTO,
    status_code=status.HTTP_201_CREATED,
    responses=HIERARCHY_ERROR_RESPONSES,
)
async def recall_points(
    command: AllocateCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Pull unspent points back up one level.

    The body names the lower actor as `to_actor_id` / `to_role`; points move
    from that actor back to the caller's `from_role` balance.
    """
    use_case = RecallPoints(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyLedgerEntryRepository(session),
        SqlAlchemyActorRepository(session),
        build_poster(session),
    )
    result = await use_case.execute(identity, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/grant-cohort", response_model=CohortGrantResultDTO)
async def grant_by_cohort(
    command: GrantByCohortCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Grant the same amount to every active customer in one or more cohorts.

    Each recipient is posted on its own; failures are reported per recipient
    in `failed` and do not undo the grants that succeeded.
    """
    use_case = GrantByCohort(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyLedgerEntryRepository(session),
        SqlAlchemyActorRepository(session),
        build_poster(session),
    )
    result = await use_case.execute(identity, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value
