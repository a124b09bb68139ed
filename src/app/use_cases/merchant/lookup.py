"""Loading helpers shared by the merchant payment use cases"""

from src.app.errors import ConcurrencyConflict, Forbidden, InvalidState, NotFound
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.merchant_transaction_repository import MerchantTransactionRepository
from src.domain.actor import Merchant
from src.domain.merchant_transaction import (
    MerchantTransaction,
    PaymentAction,
    PaymentStatus,
    next_status,
)


async def load_transaction(
    txn_repo: MerchantTransactionRepository,
    transaction_id: str,
    for_update: bool = False,
) -> MerchantTransaction:
    transaction = await txn_repo.get_by_id(transaction_id, for_update=for_update)
    if not transaction:
        raise NotFound(f"merchant transaction {transaction_id} not found")
    return transaction


async def load_merchant(actor_repo: ActorRepository, merchant_id: str) -> Merchant:
    merchant = await actor_repo.get_merchant(merchant_id)
    if not merchant:
        raise NotFound(f"merchant {merchant_id} not found")
    return merchant


def target_status(transaction: MerchantTransaction, action: PaymentAction) -> PaymentStatus:
    """
    Raises:
        InvalidState: If the transition table has no move for this action
    """
    status = next_status(transaction.status, action)
    if status is None:
        raise InvalidState(
            f"cannot {action.value} a {transaction.status.value} transaction",
            reason=f"status={transaction.status.value}",
        )
    return status


async def apply_transition(
    txn_repo: MerchantTransactionRepository,
    transaction: MerchantTransaction,
    action: PaymentAction,
    fields: dict,
) -> None:
    """
    Compare-and-set the status

    A lost race reports the status the winner left. A moved version with an
    unchanged status is retried as a conflict.
    """
    expected = transaction.status
    new_status = target_status(transaction, action)
    if not await txn_repo.transition(transaction, expected, new_status, fields):
        target_status(transaction, action)
        raise ConcurrencyConflict(f"merchant transaction {transaction.id} version moved")


def ensure_operator(merchant: Merchant, actor_id: str) -> None:
    if merchant.operator_role(actor_id) is None:
        raise Forbidden(f"{actor_id} is not an operator of merchant {merchant.merchant_id}")
