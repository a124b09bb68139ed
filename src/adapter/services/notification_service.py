"""Notification Service Implementations

Provides concrete implementations for sending reconciliation alerts.
"""

import logging
from typing import List, Optional
import httpx
from src.app.services.notification_service import NotificationService
from src.app.use_cases.ledger.dtos import BalanceDiscrepancyDTO

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs alerts

    Useful for development and testing, or as a fallback.
    """

    async def send_discrepancy_alert(self, discrepancies: List[BalanceDiscrepancyDTO]) -> bool:
        """
        Log one line per discrepancy

        Returns:
            Always True (logging never fails)
        """
        for item in discrepancies:
            logger.warning(
                f"[BALANCE DISCREPANCY] {item.actor_id}/{item.role.value}: "
                f"available_points recorded={item.recorded_available_points} "
                f"ledger={item.projected_available_points}, "
                f"pending_collection recorded={item.recorded_pending_collection} "
                f"ledger={item.projected_pending_collection}"
            )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that sends alerts via HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST alerts to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_discrepancy_alert(self, discrepancies: List[BalanceDiscrepancyDTO]) -> bool:
        """
        Send discrepancy alert via webhook

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "balance_discrepancy_alert",
            "count": len(discrepancies),
            "discrepancies": [item.model_dump(mode="json") for item in discrepancies],
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for {len(discrepancies)} discrepancies to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send webhook discrepancy notification: {e}")
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_discrepancy_alert(self, discrepancies: List[BalanceDiscrepancyDTO]) -> bool:
        """
        Send alert to all configured services

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_discrepancy_alert(discrepancies):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
