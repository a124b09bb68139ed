"""InitiatePayment Use Case

Creates a pending payment from a customer (or point card) to a merchant.
"""

from libs.result import Result
from src.app.errors import Forbidden, NotFound, ValidationFailed
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.merchant_transaction_repository import MerchantTransactionRepository
from src.app.repositories.point_card_repository import PointCardRepository
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase
from src.domain.actor import ActorRole, Identity, Merchant
from src.domain.merchant_transaction import MerchantTransaction, PaymentStatus
from .dtos import InitiatePaymentCommandDTO, MerchantTransactionDTO, MERCHANT_QR_TYPE
from .lookup import ensure_operator, load_merchant


class InitiatePayment(TransactionalUseCase):
    """
    Use Case: Initiate merchant payment

    Business Rules:
    1. Exactly one payer: customer_id or card_id
    2. Customer payments are initiated by the customer themselves
    3. Card payments are initiated by a merchant operator (card presented at the stall)
    4. Merchant must exist and be active
    5. Payer balance is NOT checked here; confirm checks it
    """

    name = "initiate_payment"

    def __init__(
        self,
        uow: UnitOfWork,
        txn_repo: MerchantTransactionRepository,
        actor_repo: ActorRepository,
        card_repo: PointCardRepository,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.txn_repo = txn_repo
        self.actor_repo = actor_repo
        self.card_repo = card_repo

    async def execute(
        self, identity: Identity, command: InitiatePaymentCommandDTO
    ) -> Result[MerchantTransactionDTO]:
        async def operation() -> MerchantTransactionDTO:
            if command.correlation_id:
                existing = await self.txn_repo.get_by_correlation_id(command.correlation_id)
                if existing:
                    return MerchantTransactionDTO.from_entity(existing)

            if (command.customer_id is None) == (command.card_id is None):
                raise ValidationFailed("exactly one of customer_id or card_id is required")

            merchant = await self._resolve_merchant(command)

            if command.customer_id is not None:
                if command.customer_id != identity.actor_id or not identity.has_role(ActorRole.CUSTOMER):
                    raise Forbidden("customers can only initiate payments from their own balance")
            else:
                ensure_operator(merchant, identity.actor_id)
                if not await self.card_repo.get_by_id(command.card_id):
                    raise NotFound(f"point card {command.card_id} not found")

            transaction = await self.txn_repo.create(
                MerchantTransaction(
                    merchant_id=merchant.merchant_id,
                    customer_id=command.customer_id,
                    card_id=command.card_id,
                    amount=command.amount,
                    status=PaymentStatus.PENDING,
                    initiated_by=identity.actor_id,
                    correlation_id=command.correlation_id,
                )
            )
            return MerchantTransactionDTO.from_entity(transaction)

        return await self.run(operation)

    async def _resolve_merchant(self, command: InitiatePaymentCommandDTO) -> Merchant:
        if (command.merchant_id is None) == (command.qr is None):
            raise ValidationFailed("exactly one of merchant_id or qr is required")

        if command.qr is not None:
            if command.qr.type != MERCHANT_QR_TYPE:
                raise ValidationFailed(f"QR code of type '{command.qr.type}' is not a merchant code")
            merchant = await load_merchant(self.actor_repo, command.qr.payer_or_merchant_id)
            if command.qr.org_id and merchant.organization_id and command.qr.org_id != merchant.organization_id:
                raise ValidationFailed("QR code belongs to a different organization")
        else:
            merchant = await load_merchant(self.actor_repo, command.merchant_id)

        if not merchant.is_active:
            raise ValidationFailed(f"merchant {merchant.merchant_id} is not accepting payments")
        return merchant
