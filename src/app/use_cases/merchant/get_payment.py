"""Merchant payment queries"""

from typing import Optional
from libs.result import Result, Return
from src.app.errors import Forbidden, LedgerError
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.merchant_transaction_repository import MerchantTransactionRepository
from src.domain.actor import Identity
from src.domain.merchant_transaction import PaymentStatus
from .dtos import MerchantTransactionDTO, MerchantTransactionListDTO
from .lookup import ensure_operator, load_merchant, load_transaction


class GetPayment:
    """
    Get one merchant transaction

    Visible to the merchant's operators and to the paying customer.
    """

    def __init__(self, txn_repo: MerchantTransactionRepository, actor_repo: ActorRepository):
        self.txn_repo = txn_repo
        self.actor_repo = actor_repo

    async def execute(self, identity: Identity, transaction_id: str) -> Result[MerchantTransactionDTO]:
        try:
            transaction = await load_transaction(self.txn_repo, transaction_id)
            if transaction.customer_id != identity.actor_id:
                merchant = await load_merchant(self.actor_repo, transaction.merchant_id)
                if merchant.operator_role(identity.actor_id) is None:
                    raise Forbidden(f"{identity.actor_id} may not view transaction {transaction_id}")
            return Return.ok(MerchantTransactionDTO.from_entity(transaction))
        except LedgerError as e:
            return Return.err(e.to_error())


class ListPayments:
    """Recent transactions of one merchant, for its operators"""

    def __init__(self, txn_repo: MerchantTransactionRepository, actor_repo: ActorRepository):
        self.txn_repo = txn_repo
        self.actor_repo = actor_repo

    async def execute(
        self,
        identity: Identity,
        merchant_id: str,
        status: Optional[PaymentStatus] = None,
        limit: int = 50,
    ) -> Result[MerchantTransactionListDTO]:
        try:
            merchant = await load_merchant(self.actor_repo, merchant_id)
            ensure_operator(merchant, identity.actor_id)
            transactions = await self.txn_repo.list_by_merchant(merchant_id, status=status, limit=limit)
            return Return.ok(
                MerchantTransactionListDTO(
                    transactions=[MerchantTransactionDTO.from_entity(t) for t in transactions]
                )
            )
        except LedgerError as e:
            return Return.err(e.to_error())
