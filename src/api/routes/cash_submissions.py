"""Cash Reconciliation API Routes

Sellers hand in cash; cashiers claim it and confirm with their PIN.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories import SqlAlchemyBalanceRepository, SqlAlchemyCashSubmissionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.use_cases.cash.claim_submission import ClaimSubmission
from src.app.use_cases.cash.confirm_submission import ConfirmSubmission
from src.app.use_cases.cash.dtos import (
    CashSubmissionDTO,
    CashSubmissionListDTO,
    ConfirmSubmissionCommandDTO,
    SubmitCashCommandDTO,
)
from src.app.use_cases.cash.list_pending_submissions import ListPendingSubmissions
from src.app.use_cases.cash.submit_cash import SubmitCash
from src.depends import build_pin_verifier, build_poster, get_identity, get_session
from src.domain.actor import Identity

router = APIRouter(prefix="/cash-submissions", tags=["Cash"])


@router.post(
    "",
    response_model=CashSubmissionDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Amount exceeds the cash on hand",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_BALANCE",
                            "message": "insufficient cash on hand: 80 available, 120 submitted",
                        }
                    }
                }
            },
        }
    },
)
async def submit_cash(
    command: SubmitCashCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Hand in collected cash.

    The amount may not exceed the cash on hand minus what is already waiting
    in other pending submissions.
    """
    use_case = SubmitCash(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCashSubmissionRepository(session),
        SqlAlchemyBalanceRepository(session),
        build_poster(session),
    )
    result = await use_case.execute(identity, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/pending", response_model=CashSubmissionListDTO)
async def list_pending_submissions(
    unclaimed_only: bool = False,
    submitted_by: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=500),
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """Pending submissions, oldest first. Non-cashiers only see their own."""
    use_case = ListPendingSubmissions(SqlAlchemyCashSubmissionRepository(session))
    result = await use_case.execute(
        identity, unclaimed_only=unclaimed_only, submitted_by=submitted_by, limit=limit
    )
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{submission_id}/claim", response_model=CashSubmissionDTO)
async def claim_submission(
    submission_id: str,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Claim a pending submission before counting it.

    Only one cashier can hold a submission. Losing a race returns
    `ALREADY_CLAIMED`.
    """
    use_case = ClaimSubmission(SqlAlchemyUnitOfWork(session), SqlAlchemyCashSubmissionRepository(session))
    result = await use_case.execute(identity, submission_id)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "/{submission_id}/confirm",
    response_model=CashSubmissionDTO,
    responses={
        403: {
            "description": "Wrong or locked transaction PIN",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_SECOND_FACTOR",
                            "message": "wrong transaction PIN (4 attempts left)",
                        }
                    }
                }
            },
        }
    },
)
async def confirm_submission(
    submission_id: str,
    command: ConfirmSubmissionCommandDTO,
    identity: Identity = Depends(get_identity),
    session: AsyncSession = Depends(get_session),
):
    """
    Confirm a claimed submission with the cashier's transaction PIN.

    Moves the amount from the submitter's cash on hand to the cashier.
    """
    use_case = ConfirmSubmission(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCashSubmissionRepository(session),
        build_pin_verifier(session),
        build_poster(session),
    )
    result = await use_case.execute(identity, submission_id, command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value
