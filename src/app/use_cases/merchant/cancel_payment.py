"""CancelPayment Use Case"""

from libs.result import Result
from src.app.errors import Forbidden
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.merchant_transaction_repository import MerchantTransactionRepository
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase
from src.domain.actor import Identity
from src.domain.base import utc_now
from src.domain.merchant_transaction import PaymentAction
from .dtos import MerchantTransactionDTO, ReasonCommandDTO
from .lookup import apply_transition, load_merchant, load_transaction


class CancelPayment(TransactionalUseCase):
    """
    Use Case: Cancel a pending merchant payment

    Business Rules:
    1. Reason is required
    2. Caller is a merchant operator or the paying customer
    3. pending -> cancelled; no balance effect
    """

    name = "cancel_payment"

    def __init__(
        self,
        uow: UnitOfWork,
        txn_repo: MerchantTransactionRepository,
        actor_repo: ActorRepository,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.txn_repo = txn_repo
        self.actor_repo = actor_repo

    async def execute(
        self, identity: Identity, transaction_id: str, command: ReasonCommandDTO
    ) -> Result[MerchantTransactionDTO]:
        async def operation() -> MerchantTransactionDTO:
            transaction = await load_transaction(self.txn_repo, transaction_id, for_update=True)
            merchant = await load_merchant(self.actor_repo, transaction.merchant_id)

            is_payer = transaction.customer_id is not None and transaction.customer_id == identity.actor_id
            if merchant.operator_role(identity.actor_id) is None and not is_payer:
                raise Forbidden("only merchant operators or the paying customer can cancel")

            await apply_transition(
                self.txn_repo,
                transaction,
                PaymentAction.CANCEL,
                {
                    "cancelled_by": identity.actor_id,
                    "cancelled_at": utc_now(),
                    "reason_note": command.reason,
                },
            )
            return MerchantTransactionDTO.from_entity(transaction)

        return await self.run(operation)
