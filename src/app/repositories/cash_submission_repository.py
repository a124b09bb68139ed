"""Cash Submission Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.actor import ActorRef
from src.domain.cash_submission import CashSubmission


class CashSubmissionRepository(ABC):
    """
    Repository interface for CashSubmission persistence

    claim and mark_confirmed are compare-and-set updates: exactly one
    concurrent caller can win each of them.
    """

    @abstractmethod
    async def create(self, submission: CashSubmission) -> CashSubmission:
        pass

    @abstractmethod
    async def get_by_id(self, submission_id: str) -> Optional[CashSubmission]:
        pass

    @abstractmethod
    async def get_by_correlation_id(self, correlation_id: str) -> Optional[CashSubmission]:
        pass

    @abstractmethod
    async def claim(self, submission_id: str, clerk_id: str, claimed_at: datetime) -> bool:
        """
        Set received_by from null to ``clerk_id``

        Args:
            submission_id: Submission to claim
            clerk_id: Claiming cashier
            claimed_at: Claim timestamp

        Returns:
            True if this call won the claim, False otherwise
        """
        pass

    @abstractmethod
    async def mark_confirmed(
        self,
        submission_id: str,
        clerk_id: str,
        confirmation_note: Optional[str],
        confirmed_at: datetime,
    ) -> bool:
        """
        Move a pending submission held by ``clerk_id`` to confirmed

        Returns:
            True if this call confirmed it, False otherwise
        """
        pass

    @abstractmethod
    async def list_pending(
        self,
        unclaimed_only: bool = False,
        submitted_by: Optional[str] = None,
        limit: int = 100,
    ) -> List[CashSubmission]:
        """
        Pending submissions, oldest first

        Args:
            unclaimed_only: Only submissions no cashier has claimed yet
            submitted_by: Only submissions of one submitter
            limit: Maximum number of submissions returned
        """
        pass

    @abstractmethod
    async def sum_open_amount(self, submitter: ActorRef) -> int:
        """Total amount of a submitter's pending submissions"""
        pass
