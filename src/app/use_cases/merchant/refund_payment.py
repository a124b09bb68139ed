"""RefundPayment Use Case

Reverses a completed merchant payment back to the customer or card.
"""

from libs.result import Result
from src.app.errors import Forbidden, InsufficientBalance
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.merchant_transaction_repository import MerchantTransactionRepository
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase
from src.domain.actor import ActorRef, Identity, OperatorRole
from src.domain.base import utc_now
from src.domain.ledger_entry import EntryType, LedgerEntry
from src.domain.merchant_transaction import PaymentAction
from .dtos import MerchantTransactionDTO, ReasonCommandDTO
from .lookup import apply_transition, load_merchant, load_transaction


def _merchant_shortfall(ref: ActorRef, field: str, available: int, required: int) -> InsufficientBalance:
    return InsufficientBalance(
        f"insufficient merchant balance: {ref.actor_id} has {available} points, refund needs {required}",
        reason=f"{field}={available}, required={required}",
    )


class RefundPayment(TransactionalUseCase):
    """
    Use Case: Refund a completed merchant payment

    Business Rules:
    1. Reason is required
    2. Only the merchant owner may refund (assistants get FORBIDDEN)
    3. completed -> refunded; anything else is INVALID_STATE
    4. Refund entry debits the merchant and credits the original payer
    """

    name = "refund_payment"

    def __init__(
        self,
        uow: UnitOfWork,
        txn_repo: MerchantTransactionRepository,
        actor_repo: ActorRepository,
        poster: LedgerPoster,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.txn_repo = txn_repo
        self.actor_repo = actor_repo
        self.poster = poster

    async def execute(
        self, identity: Identity, transaction_id: str, command: ReasonCommandDTO
    ) -> Result[MerchantTransactionDTO]:
        async def operation() -> MerchantTransactionDTO:
            transaction = await load_transaction(self.txn_repo, transaction_id, for_update=True)
            merchant = await load_merchant(self.actor_repo, transaction.merchant_id)

            if merchant.operator_role(identity.actor_id) != OperatorRole.OWNER:
                raise Forbidden("only the merchant owner can refund payments")

            now = utc_now()
            await apply_transition(
                self.txn_repo,
                transaction,
                PaymentAction.REFUND,
                {
                    "refunded_by": identity.actor_id,
                    "refunded_at": now,
                    "reason_note": command.reason,
                },
            )

            payer = transaction.payer_ref
            await self.poster.post(
                LedgerEntry(
                    entry_type=EntryType.REFUND,
                    amount=transaction.amount,
                    source_actor_id=merchant.merchant_id,
                    source_role=transaction.merchant_ref.role,
                    target_actor_id=payer.actor_id,
                    target_role=payer.role,
                    occurred_at=now,
                    reference_type="merchant_transaction",
                    reference_id=transaction.id,
                    note=command.reason,
                ),
                on_shortfall=_merchant_shortfall,
            )
            return MerchantTransactionDTO.from_entity(transaction)

        return await self.run(operation)
