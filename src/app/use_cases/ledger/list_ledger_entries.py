"""
List Ledger Entries Use Case

Retrieves an actor's ledger history with cursor pagination.
"""
from datetime import datetime
from typing import Optional, Sequence
from libs.result import Result, Return
from src.app.errors import LedgerError, ValidationFailed
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.ledger_entry_repository import (
    LedgerEntryFilter,
    LedgerEntryRepository,
    decode_cursor,
)
from src.domain.actor import ActorRef, ActorRole, Identity
from src.domain.base import as_utc
from src.domain.ledger_entry import EntryType
from .access import ensure_can_view
from .dtos import LedgerEntryDTO, LedgerEntryPageDTO

MAX_PAGE_SIZE = 200


class ListLedgerEntries:
    """
    Use case: View ledger history

    Entries where the actor is source or target, ordered by occurred_at DESC
    (most recent first). Pages are restartable from the returned cursor.
    """

    def __init__(self, entry_repo: LedgerEntryRepository, actor_repo: ActorRepository):
        self.entry_repo = entry_repo
        self.actor_repo = actor_repo

    async def execute(
        self,
        identity: Identity,
        actor_id: str,
        role: Optional[ActorRole] = None,
        entry_types: Optional[Sequence[EntryType]] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[LedgerEntryPageDTO]:
        """
        List entries for an actor

        Args:
            identity: Caller
            actor_id: Actor whose history is listed
            role: Only entries touching this role-scoped balance
            entry_types: Only these entry types
            since: Only entries at or after this time
            until: Only entries before this time
            limit: Page size (1..200)
            cursor: Continuation cursor from the previous page

        Returns:
            Result[LedgerEntryPageDTO]: One page of entries
        """
        try:
            if limit < 1 or limit > MAX_PAGE_SIZE:
                raise ValidationFailed(f"limit must be between 1 and {MAX_PAGE_SIZE}")
            if cursor is not None:
                try:
                    decode_cursor(cursor)
                except ValueError as e:
                    raise ValidationFailed("malformed cursor", reason=str(e))

            await self._ensure_can_view(identity, actor_id, role)

            entry_filter = LedgerEntryFilter(
                role=role,
                entry_types=tuple(entry_types) if entry_types else None,
                since=as_utc(since),
                until=as_utc(until),
            )
            entries, next_cursor = await self.entry_repo.list_by_actor(
                actor_id, entry_filter, limit=limit, cursor=cursor
            )
            return Return.ok(
                LedgerEntryPageDTO(
                    entries=[LedgerEntryDTO.from_entity(entry) for entry in entries],
                    next_cursor=next_cursor,
                )
            )
        except LedgerError as e:
            return Return.err(e.to_error())

    async def _ensure_can_view(self, identity: Identity, actor_id: str, role: Optional[ActorRole]) -> None:
        if role is not None:
            await ensure_can_view(identity, ActorRef(actor_id=actor_id, role=role), self.actor_repo)
            return
        if actor_id == identity.actor_id:
            return
        await ensure_can_view(identity, ActorRef(actor_id=actor_id, role=ActorRole.MERCHANT), self.actor_repo)
