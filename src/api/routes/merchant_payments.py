"""Merchant Payment API Routes

Two step QR payments: the customer initiates, a merchant operator confirms.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories import (
    SqlAlchemyActorRepository,
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyMerchantTransactionRepository,
    SqlAlchemyPointCardRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.use_cases.merchant.cancel_payment import CancelPayment
from src.app.use_cases.merchant.confirm_payment import ConfirmPayment
from src.app.use_cases.merchant.dtos import (
    ConfirmPaymentCommandDTO,
    InitiatePaymentCommandDTO,
    MerchantTransactionDTO,
    MerchantTransactionListDTO,
    ReasonCommandDTO,
)
from src.app.use_cases.merchant.get_payment import GetPayment, ListPayments
from src.app.use_cases.merchant.initiate_payment import InitiatePayment
from src.app.use_cases.merchant.refund_payment import RefundPayment
from src.depends import build_poster, get_identity, get_session
from src.domain.actor import Identity
from src.domain.merchant_transaction import PaymentStatus

router = APIRouter(prefix="/merchant-payments", tags=["Merchant Payments"])

STATE_CONFLICT_RESPONSE = {
    409: {
        "description": "Transaction is not in a state that allows this action",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INVALID_STATE",
                        "message": "transaction is completed, expected pending",
                    }
                }
            }
        },
    }
}


@router.post("", response_model=MerchantTransactionDTO, status_code=status.HTTP_201_CREATED)
async def initiate_payment(
    command: InitiatePaymentCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Start a pending payment to a merchant.

    The merchant is given either by `merchant_id` or by the scanned merchant
    `qr` payload. Nothing moves until a merchant operator confirms.
    """
    use_case = InitiatePayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyMerchantTransactionRepository(session),
        SqlAlchemyActorRepository(session),
        SqlAlchemyPointCardRepository(session),
    )
    result = await use_case.execute(identity, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("", response_model=MerchantTransactionListDTO)
async def list_payments(
    merchant_id: str,
    status_filter: Optional[PaymentStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=200),
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """List recent transactions of a merchant, newest first (operators only)."""
    use_case = ListPayments(SqlAlchemyMerchantTransactionRepository(session), SqlAlchemyActorRepository(session))
    result = await use_case.execute(identity, merchant_id, status=status_filter, limit=limit)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/{transaction_id}", response_model=MerchantTransactionDTO)
async def get_payment(
    transaction_id: str,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    use_case = GetPayment(SqlAlchemyMerchantTransactionRepository(session), SqlAlchemyActorRepository(session))
    result = await use_case.execute(identity, transaction_id)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "/{transaction_id}/confirm",
    response_model=MerchantTransactionDTO,
    responses=STATE_CONFLICT_RESPONSE,
)
async def confirm_payment(
    transaction_id: str,
    command: Optional[ConfirmPaymentCommandDTO] = None,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Confirm a pending payment and move the points.

    Only the merchant's owner or assistant may confirm. Of two concurrent
    confirmations exactly one succeeds; the other gets `INVALID_STATE`.
    """
    use_case = ConfirmPayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyMerchantTransactionRepository(session),
        SqlAlchemyActorRepository(session),
        SqlAlchemyPointCardRepository(session),
        SqlAlchemyLedgerEntryRepository(session),
        build_poster(session),
    )
    result = await use_case.execute(identity, transaction_id, command or ConfirmPaymentCommandDTO())
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "/{transaction_id}/cancel",
    response_model=MerchantTransactionDTO,
    responses=STATE_CONFLICT_RESPONSE,
)
async def cancel_payment(
    transaction_id: str,
    command: ReasonCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """Cancel a pending payment. No points move."""
    use_case = CancelPayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyMerchantTransactionRepository(session),
        SqlAlchemyActorRepository(session),
    )
    result = await use_case.execute(identity, transaction_id, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "/{transaction_id}/refund",
    response_model=MerchantTransactionDTO,
    responses=STATE_CONFLICT_RESPONSE,
)
async def refund_payment(
    transaction_id: str,
    command: ReasonCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Refund a completed payment.

    Only the merchant owner may refund. The full amount returns from the
    merchant balance to the customer, or to the card that paid.
    """
    use_case = RefundPayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyMerchantTransactionRepository(session),
        SqlAlchemyActorRepository(session),
        build_poster(session),
    )
    result = await use_case.execute(identity, transaction_id, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value
