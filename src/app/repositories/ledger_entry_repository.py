"""Ledger Entry Repository Interface

Defines the contract for ledger entry persistence operations.
The contract is append-only: there is no update or delete.
"""

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple
from src.domain.actor import ActorRef, ActorRole
from src.domain.base import as_utc
from src.domain.ledger_entry import EntryType, LedgerEntry


@dataclass(frozen=True)
class LedgerEntryFilter:
    """Optional narrowing of an actor's ledger history"""
    role: Optional[ActorRole] = None
    entry_types: Optional[Tuple[EntryType, ...]] = None
    since: Optional[datetime] = None
    until: Optional[datetime] = None


def encode_cursor(entry: LedgerEntry) -> str:
    """Opaque continuation cursor pointing just past ``entry``"""
    raw = f"{entry.occurred_at.isoformat()}|{entry.id}"
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    """
    Decode a continuation cursor

    Raises:
        ValueError: If the cursor is malformed
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        occurred_at, entry_id = raw.split("|", 1)
        return as_utc(datetime.fromisoformat(occurred_at)), entry_id
    except (UnicodeDecodeError, ValueError) as e:
        raise ValueError(f"Malformed cursor: {cursor}") from e


class LedgerEntryRepository(ABC):
    """
    Repository interface for LedgerEntry persistence

    Entries are immutable and append-only for audit trail.
    Idempotency is enforced via unique correlation_id.
    """

    @abstractmethod
    async def append(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Append a new ledger entry

        Args:
            entry: LedgerEntry to persist

        Returns:
            Persisted LedgerEntry

        Raises:
            IntegrityError: If correlation_id already exists (duplicate command)
        """
        pass

    @abstractmethod
    async def get_by_id(self, entry_id: str) -> Optional[LedgerEntry]:
        pass

    @abstractmethod
    async def get_by_correlation_id(self, correlation_id: str) -> Optional[LedgerEntry]:
        """
        Retrieve entry by correlation id

        Used to replay the response of an already applied command.
        """
        pass

    @abstractmethod
    async def list_by_actor(
        self,
        actor_id: str,
        entry_filter: LedgerEntryFilter,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[LedgerEntry], Optional[str]]:
        """
        One page of entries where the actor is source or target

        Ordered by occurred_at descending (ties broken by id descending).

        Args:
            actor_id: Actor identifier
            entry_filter: Role/type/time narrowing
            limit: Page size
            cursor: Continuation cursor returned by the previous page

        Returns:
            (entries, next_cursor); next_cursor is None on the last page
        """
        pass

    @abstractmethod
    async def list_for_ref(self, ref: ActorRef) -> List[LedgerEntry]:
        """All entries touching one role-scoped balance, oldest first"""
        pass
