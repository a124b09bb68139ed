"""ConfirmPayment Use Case

Completes a pending merchant payment: debits the payer, credits the merchant.
"""

from libs.result import Result
from src.app.errors import InvalidState
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.repositories.merchant_transaction_repository import MerchantTransactionRepository
from src.app.repositories.point_card_repository import PointCardRepository
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase
from src.domain.actor import Identity
from src.domain.base import utc_now
from src.domain.ledger_entry import EntryType, LedgerEntry
from src.domain.merchant_transaction import PaymentAction
from .dtos import ConfirmPaymentCommandDTO, MerchantTransactionDTO
from .lookup import apply_transition, ensure_operator, load_merchant, load_transaction


class ConfirmPayment(TransactionalUseCase):
    """
    Use Case: Confirm merchant payment

    Business Rules:
    1. Confirmer must be the owner or an assistant of the merchant
    2. pending -> completed via compare-and-set; a racing confirm gets INVALID_STATE
    3. Payer balance (customer or card) must cover the amount; otherwise the
       transaction stays pending
    4. Card must be active and unexpired
    5. Appends merchant_payment (customer) or card_spend (card)

    Flow:
    1. Load transaction and merchant, check operator
    2. Replay if the correlation_id already confirmed this transaction
    3. Check card usability
    4. Transition status (compare-and-set)
    5. Post payment entry (debit payer, credit merchant)
    6. Commit
    """

    name = "confirm_payment"

    def __init__(
        self,
        uow: UnitOfWork,
        txn_repo: MerchantTransactionRepository,
        actor_repo: ActorRepository,
        card_repo: PointCardRepository,
        entry_repo: LedgerEntryRepository,
        poster: LedgerPoster,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.txn_repo = txn_repo
        self.actor_repo = actor_repo
        self.card_repo = card_repo
        self.entry_repo = entry_repo
        self.poster = poster

    async def execute(
        self,
        identity: Identity,
        transaction_id: str,
        command: ConfirmPaymentCommandDTO = ConfirmPaymentCommandDTO(),
    ) -> Result[MerchantTransactionDTO]:
        """
        Execute payment confirmation

        Args:
            identity: Caller (merchant owner or assistant)
            transaction_id: Pending transaction to confirm
            command: Optional correlation id

        Returns:
            Result[MerchantTransactionDTO]: The completed transaction or error
        """

        async def operation() -> MerchantTransactionDTO:
            transaction = await load_transaction(self.txn_repo, transaction_id, for_update=True)
            merchant = await load_merchant(self.actor_repo, transaction.merchant_id)
            ensure_operator(merchant, identity.actor_id)

            if command.correlation_id:
                existing = await self.entry_repo.get_by_correlation_id(command.correlation_id)
                if existing and existing.reference_id == transaction.id:
                    return MerchantTransactionDTO.from_entity(transaction)

            now = utc_now()
            if transaction.is_card_payment:
                card = await self.card_repo.get_by_id(transaction.card_id)
                if card is None or not card.is_usable(now):
                    raise InvalidState(
                        f"point card {transaction.card_id} is inactive or expired",
                        reason="card_unusable",
                    )

            await apply_transition(
                self.txn_repo,
                transaction,
                PaymentAction.CONFIRM,
                {
                    "collected_by": identity.actor_id,
                    "collector_role": merchant.operator_role(identity.actor_id),
                    "completed_at": now,
                },
            )

            payer = transaction.payer_ref
            await self.poster.post(
                LedgerEntry(
                    entry_type=EntryType.CARD_SPEND if transaction.is_card_payment else EntryType.MERCHANT_PAYMENT,
                    amount=transaction.amount,
                    source_actor_id=payer.actor_id,
                    source_role=payer.role,
                    target_actor_id=merchant.merchant_id,
                    target_role=transaction.merchant_ref.role,
                    occurred_at=now,
                    correlation_id=command.correlation_id,
                    reference_type="merchant_transaction",
                    reference_id=transaction.id,
                )
            )
            return MerchantTransactionDTO.from_entity(transaction)

        return await self.run(operation)
