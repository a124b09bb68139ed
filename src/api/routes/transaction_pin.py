"""Transaction PIN API Routes"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories import SqlAlchemyTransactionPinRepository
from src.adapter.services.pin_hasher import BcryptPinHasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.use_cases.cash.dtos import SetTransactionPinCommandDTO, TransactionPinStatusDTO
from src.app.use_cases.cash.set_transaction_pin import SetTransactionPin
from src.depends import build_pin_verifier, get_identity, get_session
from src.domain.actor import Identity

router = APIRouter(prefix="/transaction-pin", tags=["Cash"])


@router.put("", response_model=TransactionPinStatusDTO)
async def set_transaction_pin(
    command: SetTransactionPinCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Set or change the caller's 6 digit transaction PIN.

    Changing an existing PIN requires `current_pin`.
    """
    use_case = SetTransactionPin(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyTransactionPinRepository(session),
        BcryptPinHasher(ApplicationConfig.PIN_BCRYPT_ROUNDS),
        build_pin_verifier(session),
    )
    result = await use_case.execute(identity, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value
