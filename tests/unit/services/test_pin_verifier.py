"""Unit tests for TransactionPinVerifier"""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

from src.app.errors import InvalidSecondFactor
from src.app.services.pin_hasher import PinHasher
from src.app.services.pin_verifier import TransactionPinVerifier
from src.domain.base import utc_now
from src.domain.transaction_pin import TransactionPin


class PlainHasher(PinHasher):

    def hash(self, pin: str) -> str:
        return f"plain:{pin}"

    def verify(self, pin: str, pin_hash: str) -> bool:
        return pin_hash == f"plain:{pin}"


@pytest.fixture
def pin_record():
    return TransactionPin(actor_id="cashier_1", pin_hash="plain:123456")


@pytest.fixture
def pin_repo(pin_record):
    repo = MagicMock()
    repo.get = AsyncMock(return_value=pin_record)
    repo.save = AsyncMock(side_effect=lambda record: record)
    return repo


@pytest.fixture
def verifier(pin_repo):
    return TransactionPinVerifier(pin_repo, PlainHasher(), max_failed_attempts=3, lock_minutes=60)


@pytest.mark.asyncio
class TestTransactionPinVerifier:

    async def test_correct_pin_resets_counter(self, verifier, pin_record):
        pin_record.failed_attempts = 2
        now = utc_now()

        await verifier.verify("cashier_1", "123456", now)

        assert pin_record.failed_attempts == 0
        assert pin_record.last_verified_at == now

    async def test_wrong_pin_counts_attempt(self, verifier, pin_record, pin_repo):
        with pytest.raises(InvalidSecondFactor) as exc_info:
            await verifier.verify("cashier_1", "000000", utc_now())

        assert exc_info.value.reason == "pin_mismatch"
        assert "2 attempts left" in exc_info.value.message
        assert pin_record.failed_attempts == 1
        pin_repo.save.assert_awaited_once()

    async def test_lockout_after_max_failures(self, verifier, pin_record):
        now = utc_now()
        pin_record.failed_attempts = 2

        with pytest.raises(InvalidSecondFactor) as exc_info:
            await verifier.verify("cashier_1", "000000", now)

        assert exc_info.value.reason == "pin_locked"
        assert pin_record.locked_until == now + timedelta(minutes=60)
        assert pin_record.failed_attempts == 0

    async def test_locked_pin_rejects_even_correct_pin(self, verifier, pin_record, pin_repo):
        now = utc_now()
        pin_record.locked_until = now + timedelta(minutes=5)

        with pytest.raises(InvalidSecondFactor) as exc_info:
            await verifier.verify("cashier_1", "123456", now)

        assert exc_info.value.reason == "pin_locked"
        pin_repo.save.assert_not_awaited()

    async def test_expired_lock_allows_verification(self, verifier, pin_record):
        now = utc_now()
        pin_record.locked_until = now - timedelta(seconds=1)

        await verifier.verify("cashier_1", "123456", now)

        assert pin_record.locked_until is None

    async def test_missing_pin(self, verifier, pin_repo):
        pin_repo.get = AsyncMock(return_value=None)

        with pytest.raises(InvalidSecondFactor) as exc_info:
            await verifier.verify("cashier_1", "123456", utc_now())

        assert exc_info.value.reason == "pin_not_set"
