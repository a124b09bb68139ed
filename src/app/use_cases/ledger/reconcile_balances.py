"""ReconcileBalances Use Case

Audits every stored balance against the fold of its ledger history.
"""

import logging
import time
from libs.result import Result, Return, Error
from src.app.errors import ErrorCode
from src.app.repositories.balance_repository import BalanceRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.domain.base import utc_now
from src.domain.projection import project
from .dtos import BalanceDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileBalances:
    """
    Use Case: Reconcile balances against the ledger

    Business Rules:
    1. Retrieves all balance records
    2. For each balance, folds the entries touching it with the projection rules
    3. Compares available_points and pending_collection with the fold
    4. Records and logs any discrepancies found
    5. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(self, balance_repo: BalanceRepository, entry_repo: LedgerEntryRepository):
        self.balance_repo = balance_repo
        self.entry_repo = entry_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute balance reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = utc_now()

        try:
            logger.info("Starting balance reconciliation")

            balances = await self.balance_repo.get_all()
            total_balances = len(balances)

            logger.info(f"Found {total_balances} balances to reconcile")

            discrepancies: list[BalanceDiscrepancyDTO] = []

            for balance in balances:
                entries = await self.entry_repo.list_for_ref(balance.ref)
                projection = project(entries, balance.ref)

                if (
                    balance.available_points != projection.available_points
                    or balance.pending_collection != projection.pending_collection
                ):
                    discrepancy = BalanceDiscrepancyDTO(
                        actor_id=balance.actor_id,
                        role=balance.role,
                        recorded_available_points=balance.available_points,
                        projected_available_points=projection.available_points,
                        recorded_pending_collection=balance.pending_collection,
                        projected_pending_collection=projection.pending_collection,
                        entry_count=projection.entry_count,
                    )
                    discrepancies.append(discrepancy)

                    logger.warning(
                        f"Discrepancy found for {balance.ref}: "
                        f"available_points={balance.available_points} "
                        f"(ledger {projection.available_points}), "
                        f"pending_collection={balance.pending_collection} "
                        f"(ledger {projection.pending_collection})"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            response = ReconciliationResultDTO(
                total_balances_checked=total_balances,
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {total_balances} balances in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_balances} balances match the ledger "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Balance reconciliation failed: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.TRANSIENT_ERROR.value,
                    message="Failed to reconcile balances",
                    reason=str(e),
                )
            )
