from .ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from .balance_repository import SqlAlchemyBalanceRepository
from .merchant_transaction_repository import SqlAlchemyMerchantTransactionRepository
from .point_card_repository import SqlAlchemyPointCardRepository
from .cash_submission_repository import SqlAlchemyCashSubmissionRepository
from .actor_repository import SqlAlchemyActorRepository
from .transaction_pin_repository import SqlAlchemyTransactionPinRepository

__all__ = [
    "SqlAlchemyLedgerEntryRepository",
    "SqlAlchemyBalanceRepository",
    "SqlAlchemyMerchantTransactionRepository",
    "SqlAlchemyPointCardRepository",
    "SqlAlchemyCashSubmissionRepository",
    "SqlAlchemyActorRepository",
    "SqlAlchemyTransactionPinRepository",
]
