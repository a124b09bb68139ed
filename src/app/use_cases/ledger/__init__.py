"""Ledger queries and reconciliation"""
from .get_balance import GetBalance
from .list_ledger_entries import ListLedgerEntries
from .reconcile_balances import ReconcileBalances
from .dtos import (
    LedgerEntryDTO,
    BalanceDTO,
    LedgerEntryPageDTO,
    BalanceDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "GetBalance",
    "ListLedgerEntries",
    "ReconcileBalances",
    "LedgerEntryDTO",
    "BalanceDTO",
    "LedgerEntryPageDTO",
    "BalanceDiscrepancyDTO",
    "ReconciliationResultDTO",
]
