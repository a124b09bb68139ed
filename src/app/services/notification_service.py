"""Notification Service Interface

Defines the contract for alerting operators about balance discrepancies.
"""

from abc import ABC, abstractmethod
from typing import List
from src.app.use_cases.ledger.dtos import BalanceDiscrepancyDTO


class NotificationService(ABC):
    """
    Abstract notification service for sending alerts

    Implementations can send notifications via:
    - Webhook (HTTP POST)
    - Log output
    """

    @abstractmethod
    async def send_discrepancy_alert(self, discrepancies: List[BalanceDiscrepancyDTO]) -> bool:
        """
        Send alert for balances that disagree with their ledger history

        Args:
            discrepancies: Discrepancies found by the reconciliation audit

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
