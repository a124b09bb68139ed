from .ledger_entry_repository import LedgerEntryRepository, LedgerEntryFilter
from .balance_repository import BalanceRepository
from .merchant_transaction_repository import MerchantTransactionRepository
from .point_card_repository import PointCardRepository
from .cash_submission_repository import CashSubmissionRepository
from .actor_repository import ActorRepository
from .transaction_pin_repository import TransactionPinRepository

__all__ = [
    "LedgerEntryRepository",
    "LedgerEntryFilter",
    "BalanceRepository",
    "MerchantTransactionRepository",
    "PointCardRepository",
    "CashSubmissionRepository",
    "ActorRepository",
    "TransactionPinRepository",
]
