"""Transactional use case base

Runs one command as one unit of work. Typed ledger errors become ``Result``
errors; lost compare-and-sets and unique-key races roll back and re-run the
whole unit of work with exponential backoff.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar
from sqlalchemy.exc import IntegrityError, OperationalError
from config import ApplicationConfig
from libs.result import Result, Return, Error
from src.app.errors import ConcurrencyConflict, ErrorCode, LedgerError, ValidationFailed
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.ledger_entry import EntryType, LedgerEntry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionalUseCase:
    """
    Base for state-changing use cases

    Subclasses implement their command as an async callable and hand it to
    ``run``. The callable must be safe to re-run from scratch: it re-reads
    everything it needs and starts with the idempotency lookup.
    """

    name = "command"

    def __init__(
        self,
        uow: UnitOfWork,
        max_attempts: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
    ):
        self.uow = uow
        self.max_attempts = max_attempts or ApplicationConfig.CONFLICT_MAX_ATTEMPTS
        self.backoff_seconds = (
            ApplicationConfig.CONFLICT_BACKOFF_SECONDS if backoff_seconds is None else backoff_seconds
        )

    async def run(self, operation: Callable[[], Awaitable[T]]) -> Result[T]:
        attempt = 0
        while True:
            attempt += 1
            try:
                value = await operation()
                await self.uow.commit()
                return Return.ok(value)

            except LedgerError as e:
                if e.keeps_side_effects:
                    await self.uow.commit()
                else:
                    await self.uow.rollback()
                logger.info(f"{self.name} rejected: {e.code.value} {e.message}")
                return Return.err(e.to_error())

            except (ConcurrencyConflict, IntegrityError, OperationalError) as e:
                await self.uow.rollback()
                if attempt >= self.max_attempts:
                    logger.warning(f"{self.name} gave up after {attempt} conflicting attempts: {e}")
                    return Return.err(
                        Error(
                            code=ErrorCode.TRANSIENT_ERROR.value,
                            message="concurrent update conflict, retry the command",
                            reason=str(e),
                        )
                    )
                delay = self.backoff_seconds * (2 ** (attempt - 1))
                logger.debug(f"{self.name} conflict on attempt {attempt}, retrying in {delay:.3f}s")
                await asyncio.sleep(delay)

            except Exception as e:
                await self.uow.rollback()
                logger.exception(f"{self.name} failed: {e}")
                return Return.err(
                    Error(
                        code=ErrorCode.TRANSIENT_ERROR.value,
                        message=f"{self.name} failed, retry the command",
                        reason=str(e),
                    )
                )


async def replay_entry(
    entry_repo: LedgerEntryRepository,
    correlation_id: Optional[str],
    entry_type: EntryType,
) -> Optional[LedgerEntry]:
    """
    Entry previously posted under ``correlation_id``, if any

    Raises:
        ValidationFailed: If the key was already used by a different kind of command
    """
    if not correlation_id:
        return None
    existing = await entry_repo.get_by_correlation_id(correlation_id)
    if existing is not None and existing.entry_type != entry_type:
        raise ValidationFailed(
            f"correlation_id {correlation_id} was already used for a {existing.entry_type.value} entry"
        )
    return existing
