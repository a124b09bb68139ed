"""SpendCard Use Case

Pays a merchant directly from a point card. The payment is recorded as an
already completed merchant transaction.
"""

from typing import Optional
from libs.result import Result
from src.app.errors import NotFound, ValidationFailed
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.repositories.merchant_transaction_repository import MerchantTransactionRepository
from src.app.repositories.point_card_repository import PointCardRepository
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase, replay_entry
from src.app.use_cases.merchant.dtos import MerchantTransactionDTO
from src.app.use_cases.merchant.lookup import load_merchant
from src.domain.actor import ActorRole, Identity
from src.domain.base import utc_now
from src.domain.ledger_entry import EntryType, LedgerEntry
from src.domain.merchant_transaction import MerchantTransaction, PaymentStatus
from .dtos import SpendCardCommandDTO
from .funding import load_usable_card


class SpendCard(TransactionalUseCase):
    """
    Use Case: Spend card points at a merchant

    Business Rules:
    1. Capability based: no payer identity check
    2. Card must be active and unexpired (INVALID_STATE)
    3. Card balance must cover the amount (INSUFFICIENT_BALANCE)
    4. Records a completed MerchantTransaction with card_id plus a card_spend entry
    """

    name = "spend_card"

    def __init__(
        self,
        uow: UnitOfWork,
        card_repo: PointCardRepository,
        txn_repo: MerchantTransactionRepository,
        actor_repo: ActorRepository,
        entry_repo: LedgerEntryRepository,
        poster: LedgerPoster,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.card_repo = card_repo
        self.txn_repo = txn_repo
        self.actor_repo = actor_repo
        self.entry_repo = entry_repo
        self.poster = poster

    async def execute(
        self,
        card_id: str,
        command: SpendCardCommandDTO,
        identity: Optional[Identity] = None,
    ) -> Result[MerchantTransactionDTO]:
        """
        Execute card spend

        Args:
            card_id: Card presented at the stall
            command: Merchant and amount
            identity: Caller, if authenticated (recorded only)

        Returns:
            Result[MerchantTransactionDTO]: The completed card transaction or error
        """

        async def operation() -> MerchantTransactionDTO:
            existing = await replay_entry(self.entry_repo, command.correlation_id, EntryType.CARD_SPEND)
            if existing:
                transaction = await self.txn_repo.get_by_id(existing.reference_id)
                if not transaction:
                    raise NotFound(f"merchant transaction {existing.reference_id} not found")
                return MerchantTransactionDTO.from_entity(transaction)

            now = utc_now()
            card = await load_usable_card(self.card_repo, card_id, now)
            merchant = await load_merchant(self.actor_repo, command.merchant_id)
            if not merchant.is_active:
                raise ValidationFailed(f"merchant {merchant.merchant_id} is not accepting payments")

            transaction = await self.txn_repo.create(
                MerchantTransaction(
                    merchant_id=merchant.merchant_id,
                    card_id=card.card_id,
                    amount=command.amount,
                    status=PaymentStatus.COMPLETED,
                    initiated_by=identity.actor_id if identity else None,
                    created_at=now,
                    completed_at=now,
                )
            )

            await self.poster.post(
                LedgerEntry(
                    entry_type=EntryType.CARD_SPEND,
                    amount=command.amount,
                    source_actor_id=card.card_id,
                    source_role=ActorRole.POINT_CARD,
                    target_actor_id=merchant.merchant_id,
                    target_role=ActorRole.MERCHANT,
                    occurred_at=now,
                    correlation_id=command.correlation_id,
                    reference_type="merchant_transaction",
                    reference_id=transaction.id,
                )
            )
            return MerchantTransactionDTO.from_entity(transaction)

        return await self.run(operation)
