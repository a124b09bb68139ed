"""SQLAlchemy implementation of MerchantTransactionRepository

Status transitions are conditional UPDATEs on (id, status, version).
"""

from typing import Any, Dict, List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.merchant_transaction_repository import MerchantTransactionRepository
from src.domain.merchant_transaction import MerchantTransaction, PaymentStatus


class SqlAlchemyMerchantTransactionRepository(MerchantTransactionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: MerchantTransaction) -> MerchantTransaction:
        """
        Create a new merchant transaction

        Raises:
            IntegrityError: If correlation_id already exists
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: str, for_update: bool = False) -> Optional[MerchantTransaction]:
        """
        Retrieve transaction by ID with optional row-level locking

        Args:
            transaction_id: Transaction ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            MerchantTransaction if found, None otherwise
        """
        stmt = (
            select(MerchantTransaction)
            .where(MerchantTransaction.id == transaction_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_correlation_id(self, correlation_id: str) -> Optional[MerchantTransaction]:
        stmt = select(MerchantTransaction).where(MerchantTransaction.correlation_id == correlation_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def transition(
        self,
        transaction: MerchantTransaction,
        expected: PaymentStatus,
        new_status: PaymentStatus,
        fields: Dict[str, Any],
    ) -> bool:
        """
        Compare-and-set the status

        The instance is refreshed afterwards, so on a lost race it shows the
        status the winner left.
        """
        stmt = (
            update(MerchantTransaction)
            .where(
                MerchantTransaction.id == transaction.id,
                MerchantTransaction.status == expected,
                MerchantTransaction.version == transaction.version,
            )
            .values(status=new_status, version=MerchantTransaction.version + 1, **fields)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.refresh(transaction)
        return result.rowcount == 1

    async def list_by_merchant(
        self,
        merchant_id: str,
        status: Optional[PaymentStatus] = None,
        limit: int = 50,
    ) -> List[MerchantTransaction]:
        stmt = select(MerchantTransaction).where(MerchantTransaction.merchant_id == merchant_id)
        if status is not None:
            stmt = stmt.where(MerchantTransaction.status == status)
        stmt = stmt.order_by(MerchantTransaction.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
