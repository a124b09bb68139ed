"""Unit tests for BalanceReconcilerWorker"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from libs.result import Error, Return
from src.app.use_cases.ledger.dtos import BalanceDiscrepancyDTO, ReconciliationResultDTO
from src.domain.actor import ActorRole
from src.domain.base import utc_now
from src.worker.balance_reconciler import BalanceReconcilerWorker


@pytest.fixture
def mock_session_factory():
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)
    return MagicMock(return_value=session)


@pytest.fixture
def notification_service():
    service = MagicMock()
    service.send_discrepancy_alert = AsyncMock(return_value=True)
    return service


@pytest.fixture
def worker(mock_session_factory, notification_service):
    return BalanceReconcilerWorker(
        notification_service=notification_service,
        session_factory=mock_session_factory,
    )


def reconciliation_result(discrepancies):
    return ReconciliationResultDTO(
        total_balances_checked=3,
        discrepancies_found=len(discrepancies),
        discrepancies=discrepancies,
        reconciliation_time=utc_now(),
        execution_time_ms=12,
    )


@pytest.mark.asyncio
class TestBalanceReconcilerWorker:

    async def test_clean_run_sends_no_alert(self, worker, notification_service):
        with patch("src.worker.balance_reconciler.ReconcileBalances") as use_case_cls:
            use_case_cls.return_value.execute = AsyncMock(return_value=Return.ok(reconciliation_result([])))

            result = await worker.run_once()

        assert result.discrepancies_found == 0
        notification_service.send_discrepancy_alert.assert_not_awaited()

    async def test_discrepancies_are_alerted(self, worker, notification_service):
        discrepancy = BalanceDiscrepancyDTO(
            actor_id="seller_1",
            role=ActorRole.SELLER,
            recorded_available_points=95,
            projected_available_points=80,
            recorded_pending_collection=0,
            projected_pending_collection=0,
            entry_count=2,
        )
        with patch("src.worker.balance_reconciler.ReconcileBalances") as use_case_cls:
            use_case_cls.return_value.execute = AsyncMock(
                return_value=Return.ok(reconciliation_result([discrepancy]))
            )

            result = await worker.run_once()

        assert result.discrepancies_found == 1
        notification_service.send_discrepancy_alert.assert_awaited_once_with([discrepancy])

    async def test_failed_reconciliation_raises(self, worker):
        with patch("src.worker.balance_reconciler.ReconcileBalances") as use_case_cls:
            use_case_cls.return_value.execute = AsyncMock(
                return_value=Return.err(Error(code="TRANSIENT_ERROR", message="Failed to reconcile balances"))
            )

            with pytest.raises(RuntimeError):
                await worker.run_once()

    async def test_disabled_reconciliation_skips(self, worker, mock_session_factory):
        with patch("src.worker.balance_reconciler.ApplicationConfig") as config:
            config.RECONCILIATION_ENABLED = False

            result = await worker.run_once()

        assert result.total_balances_checked == 0
        mock_session_factory.assert_not_called()

    async def test_shutdown_without_own_engine(self, worker):
        await worker.shutdown()
