"""Point Sales API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories import SqlAlchemyActorRepository, SqlAlchemyLedgerEntryRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.use_cases.ledger.dtos import LedgerEntryDTO
from src.app.use_cases.sales.dtos import SellCommandDTO
from src.app.use_cases.sales.sell_points import SellPoints
from src.depends import build_poster, get_identity, get_session
from src.domain.actor import Identity

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.post(
    "",
    response_model=LedgerEntryDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Seller inventory too low",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_INVENTORY",
                            "message": "insufficient inventory: you have 20 points",
                        }
                    }
                }
            },
        }
    },
)
async def sell_points(
    command: SellCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Sell points to a customer for cash.

    The seller's inventory drops by `amount`, the customer's balance grows by
    `amount` and the seller's cash on hand grows by `cash_received`.

    **Request body:**
    - `seller_role` (optional): `seller` (default) or `seller_manager`
    - `customer_id` (required): Buying customer
    - `amount` (required): Points sold (must be > 0)
    - `cash_received` (required): Cash taken, must equal `amount`
    - `correlation_id` (optional): Retry key, replays return the original entry
    """
    use_case = SellPoints(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyLedgerEntryRepository(session),
        SqlAlchemyActorRepository(session),
        build_poster(session),
        max_per_transaction=ApplicationConfig.SALE_MAX_PER_TRANSACTION,
    )
    result = await use_case.execute(identity, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value
