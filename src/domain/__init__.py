from .base import BaseModel, UtcDateTime, as_utc, generate_uuid, utc_now
from .actor import (
    ActorRole,
    ActorRef,
    Identity,
    ActorProfile,
    Merchant,
    OperatorRole,
)
from .ledger_entry import LedgerEntry, EntryType
from .balance import Balance
from .merchant_transaction import MerchantTransaction, PaymentStatus, PaymentAction
from .point_card import PointCard
from .cash_submission import CashSubmission, SubmissionStatus
from .transaction_pin import TransactionPin

__all__ = [
    "BaseModel",
    "UtcDateTime",
    "as_utc",
    "generate_uuid",
    "utc_now",
    "ActorRole",
    "ActorRef",
    "Identity",
    "ActorProfile",
    "Merchant",
    "OperatorRole",
    "LedgerEntry",
    "EntryType",
    "Balance",
    "MerchantTransaction",
    "PaymentStatus",
    "PaymentAction",
    "PointCard",
    "CashSubmission",
    "SubmissionStatus",
    "TransactionPin",
]
