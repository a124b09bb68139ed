"""Background workers for the points ledger"""
from .balance_reconciler import BalanceReconcilerWorker

__all__ = ["BalanceReconcilerWorker"]
