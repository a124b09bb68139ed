"""Unit tests for the TransactionalUseCase retry loop"""

import pytest
from unittest.mock import AsyncMock
from sqlalchemy.exc import IntegrityError

from src.app.errors import ConcurrencyConflict, InvalidSecondFactor, NotFound
from src.app.use_cases.base import TransactionalUseCase


@pytest.fixture
def use_case(mock_uow):
    return TransactionalUseCase(mock_uow, max_attempts=3, backoff_seconds=0)


@pytest.mark.asyncio
class TestTransactionalUseCaseRun:

    async def test_success_commits_once(self, use_case, mock_uow):
        result = await use_case.run(AsyncMock(return_value="done"))

        assert result.is_ok()
        assert result.value == "done"
        mock_uow.commit.assert_awaited_once()
        mock_uow.rollback.assert_not_awaited()

    async def test_ledger_error_rolls_back(self, use_case, mock_uow):
        result = await use_case.run(AsyncMock(side_effect=NotFound("missing")))

        assert result.is_err()
        assert result.error.code == "NOT_FOUND"
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_awaited()

    async def test_second_factor_error_keeps_side_effects(self, use_case, mock_uow):
        result = await use_case.run(AsyncMock(side_effect=InvalidSecondFactor("wrong", reason="pin_mismatch")))

        assert result.error.code == "INVALID_SECOND_FACTOR"
        assert result.error.reason == "pin_mismatch"
        mock_uow.commit.assert_awaited_once()
        mock_uow.rollback.assert_not_awaited()

    async def test_conflict_is_retried_until_it_succeeds(self, use_case, mock_uow):
        operation = AsyncMock(side_effect=[ConcurrencyConflict("moved"), "done"])

        result = await use_case.run(operation)

        assert result.is_ok()
        assert operation.await_count == 2
        assert mock_uow.rollback.await_count == 1

    async def test_unique_key_race_is_retried(self, use_case):
        operation = AsyncMock(side_effect=[IntegrityError("insert", {}, Exception("duplicate")), "done"])

        result = await use_case.run(operation)

        assert result.is_ok()

    async def test_gives_up_with_transient_error(self, use_case, mock_uow):
        operation = AsyncMock(side_effect=ConcurrencyConflict("moved"))

        result = await use_case.run(operation)

        assert result.error.code == "TRANSIENT_ERROR"
        assert operation.await_count == 3
        assert mock_uow.rollback.await_count == 3

    async def test_unexpected_error_is_transient(self, use_case, mock_uow):
        result = await use_case.run(AsyncMock(side_effect=RuntimeError("boom")))

        assert result.error.code == "TRANSIENT_ERROR"
        assert result.error.reason == "boom"
        mock_uow.rollback.assert_awaited_once()
