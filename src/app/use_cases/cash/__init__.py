"""Cash reconciliation pool use cases"""
from .submit_cash import SubmitCash
from .claim_submission import ClaimSubmission
from .confirm_submission import ConfirmSubmission
from .list_pending_submissions import ListPendingSubmissions
from .set_transaction_pin import SetTransactionPin
from .dtos import (
    SubmitCashCommandDTO,
    ConfirmSubmissionCommandDTO,
    SetTransactionPinCommandDTO,
    CashSubmissionDTO,
    CashSubmissionListDTO,
    TransactionPinStatusDTO,
)

__all__ = [
    "SubmitCash",
    "ClaimSubmission",
    "ConfirmSubmission",
    "ListPendingSubmissions",
    "SetTransactionPin",
    "SubmitCashCommandDTO",
    "ConfirmSubmissionCommandDTO",
    "SetTransactionPinCommandDTO",
    "CashSubmissionDTO",
    "CashSubmissionListDTO",
    "TransactionPinStatusDTO",
]
