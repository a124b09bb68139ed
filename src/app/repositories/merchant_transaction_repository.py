"""Merchant Transaction Repository Interface

Defines the contract for merchant payment persistence. Status changes are
compare-and-set operations: a transition only happens when the stored status
is still the expected source status.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from src.domain.merchant_transaction import MerchantTransaction, PaymentStatus


class MerchantTransactionRepository(ABC):
    """Repository interface for MerchantTransaction persistence"""

    @abstractmethod
    async def create(self, transaction: MerchantTransaction) -> MerchantTransaction:
        """
        Persist a new merchant transaction

        Raises:
            IntegrityError: If correlation_id already exists
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: str, for_update: bool = False) -> Optional[MerchantTransaction]:
        """
        Retrieve transaction by ID

        Args:
            transaction_id: Transaction ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            MerchantTransaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_correlation_id(self, correlation_id: str) -> Optional[MerchantTransaction]:
        pass

    @abstractmethod
    async def transition(
        self,
        transaction: MerchantTransaction,
        expected: PaymentStatus,
        new_status: PaymentStatus,
        fields: Dict[str, Any],
    ) -> bool:
        """
        Move a transaction from ``expected`` to ``new_status``

        Args:
            transaction: Transaction as read in this unit of work
            expected: Status the stored row must still have
            new_status: Status to write
            fields: Extra columns to stamp (collected_by, cancelled_at, ...)

        Returns:
            True if the row was updated, False if another writer got there first
        """
        pass

    @abstractmethod
    async def list_by_merchant(
        self,
        merchant_id: str,
        status: Optional[PaymentStatus] = None,
        limit: int = 50,
    ) -> List[MerchantTransaction]:
        pass
