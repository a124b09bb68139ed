"""SQLAlchemy implementation of CashSubmissionRepository"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.cash_submission_repository import CashSubmissionRepository
from src.domain.actor import ActorRef
from src.domain.cash_submission import CashSubmission, SubmissionStatus


class SqlAlchemyCashSubmissionRepository(CashSubmissionRepository):
    """
    SQLAlchemy implementation of CashSubmissionRepository

    Features:
    - Single-winner claim via UPDATE ... WHERE received_by IS NULL
    - Loaded instances are refreshed after every compare-and-set
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, submission: CashSubmission) -> CashSubmission:
        self.session.add(submission)
        await self.session.flush()
        await self.session.refresh(submission)
        return submission

    async def get_by_id(self, submission_id: str) -> Optional[CashSubmission]:
        stmt = (
            select(CashSubmission)
            .where(CashSubmission.id == submission_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_correlation_id(self, correlation_id: str) -> Optional[CashSubmission]:
        stmt = select(CashSubmission).where(CashSubmission.correlation_id == correlation_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def claim(self, submission_id: str, clerk_id: str, claimed_at: datetime) -> bool:
        """
        Claim an unclaimed pending submission

        Returns:
            True if this call won the claim, False otherwise
        """
        stmt = (
            update(CashSubmission)
            .where(
                CashSubmission.id == submission_id,
                CashSubmission.status == SubmissionStatus.PENDING,
                CashSubmission.received_by.is_(None),
            )
            .values(
                received_by=clerk_id,
                claimed_at=claimed_at,
                version=CashSubmission.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.get_by_id(submission_id)
        return result.rowcount == 1

    async def mark_confirmed(
        self,
        submission_id: str,
        clerk_id: str,
        confirmation_note: Optional[str],
        confirmed_at: datetime,
    ) -> bool:
        stmt = (
            update(CashSubmission)
            .where(
                CashSubmission.id == submission_id,
                CashSubmission.status == SubmissionStatus.PENDING,
                CashSubmission.received_by == clerk_id,
            )
            .values(
                status=SubmissionStatus.CONFIRMED,
                confirmation_note=confirmation_note,
                confirmed_at=confirmed_at,
                version=CashSubmission.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.get_by_id(submission_id)
        return result.rowcount == 1

    async def list_pending(
        self,
        unclaimed_only: bool = False,
        submitted_by: Optional[str] = None,
        limit: int = 100,
    ) -> List[CashSubmission]:
        stmt = select(CashSubmission).where(CashSubmission.status == SubmissionStatus.PENDING)
        if unclaimed_only:
            stmt = stmt.where(CashSubmission.received_by.is_(None))
        if submitted_by is not None:
            stmt = stmt.where(CashSubmission.submitted_by == submitted_by)
        stmt = stmt.order_by(CashSubmission.created_at.asc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def sum_open_amount(self, submitter: ActorRef) -> int:
        """
        Sum of a submitter's pending submissions

        Returns:
            Total amount (0 if none)
        """
        stmt = select(func.coalesce(func.sum(CashSubmission.amount), 0)).where(
            CashSubmission.submitted_by == submitter.actor_id,
            CashSubmission.submitter_role == submitter.role,
            CashSubmission.status == SubmissionStatus.PENDING,
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
