"""Transaction PIN verification with lockout"""

import logging
from datetime import datetime, timedelta
from src.app.errors import InvalidSecondFactor
from src.app.repositories.transaction_pin_repository import TransactionPinRepository
from src.app.services.pin_hasher import PinHasher

logger = logging.getLogger(__name__)


class TransactionPinVerifier:
    """
    Checks an actor's own transaction PIN

    Consecutive failures lock the PIN for ``lock_minutes``. Failure counters
    are written to the session before InvalidSecondFactor is raised; the error
    keeps side effects so the counters survive the failed command.
    """

    def __init__(
        self,
        pin_repo: TransactionPinRepository,
        hasher: PinHasher,
        max_failed_attempts: int = 5,
        lock_minutes: int = 60,
    ):
        self.pin_repo = pin_repo
        self.hasher = hasher
        self.max_failed_attempts = max_failed_attempts
        self.lock_minutes = lock_minutes

    async def verify(self, actor_id: str, pin: str, now: datetime) -> None:
        """
        Raises:
            InvalidSecondFactor: No PIN set, PIN locked, or wrong PIN
        """
        record = await self.pin_repo.get(actor_id)
        if record is None:
            raise InvalidSecondFactor(
                "transaction PIN not set: set a PIN before confirming cash",
                reason="pin_not_set",
            )

        if record.is_locked(now):
            raise InvalidSecondFactor(
                f"transaction PIN locked until {record.locked_until.isoformat()}",
                reason="pin_locked",
            )

        if not self.hasher.verify(pin, record.pin_hash):
            record.failed_attempts += 1
            record.updated_at = now
            remaining = self.max_failed_attempts - record.failed_attempts
            if remaining <= 0:
                record.failed_attempts = 0
                record.locked_until = now + timedelta(minutes=self.lock_minutes)
                await self.pin_repo.save(record)
                logger.warning(f"Transaction PIN of {actor_id} locked until {record.locked_until}")
                raise InvalidSecondFactor(
                    f"too many wrong PIN attempts: PIN locked for {self.lock_minutes} minutes",
                    reason="pin_locked",
                )
            await self.pin_repo.save(record)
            raise InvalidSecondFactor(
                f"wrong transaction PIN ({remaining} attempts left)",
                reason="pin_mismatch",
            )

        record.failed_attempts = 0
        record.locked_until = None
        record.last_verified_at = now
        record.updated_at = now
        await self.pin_repo.save(record)
