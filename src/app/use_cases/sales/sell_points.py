"""SellPoints Use Case

Transfers points from a seller's inventory to a customer against cash.
"""

import json
from typing import Optional
from libs.result import Result
from src.app.errors import Forbidden, InsufficientInventory, NotFound, ValidationFailed
from src.app.repositories.actor_repository import ActorRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase, replay_entry
from src.app.use_cases.ledger.dtos import LedgerEntryDTO
from src.domain.actor import ActorRef, ActorRole, Identity, SELLING_ROLES
from src.domain.ledger_entry import EntryType, LedgerEntry
from .dtos import SellCommandDTO


def inventory_shortfall(ref: ActorRef, field: str, available: int, required: int) -> InsufficientInventory:
    return InsufficientInventory(
        f"insufficient inventory: you have {available} points",
        reason=f"{field}={available}, required={required}",
    )


class SellPoints(TransactionalUseCase):
    """
    Use Case: Sell points to a customer

    Business Rules:
    1. Idempotency: same correlation_id returns the original sale unchanged
    2. Caller sells from their own seller or seller_manager inventory
    3. Cash received must equal the points sold
    4. Seller inventory must cover the amount (INSUFFICIENT_INVENTORY)
    5. One sale entry: seller inventory down, pending cash up, customer up

    Flow:
    1. Check idempotency (return existing if found)
    2. Validate caller role, cash, cap and customer
    3. Post sale entry
    4. Commit
    """

    name = "sell_points"

    def __init__(
        self,
        uow: UnitOfWork,
        entry_repo: LedgerEntryRepository,
        actor_repo: ActorRepository,
        poster: LedgerPoster,
        max_per_transaction: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.entry_repo = entry_repo
        self.actor_repo = actor_repo
        self.poster = poster
        self.max_per_transaction = max_per_transaction

    async def execute(self, identity: Identity, command: SellCommandDTO) -> Result[LedgerEntryDTO]:
        """
        Execute sale

        Args:
            identity: Caller (the seller)
            command: SellCommandDTO with customer, amount and cash received

        Returns:
            Result[LedgerEntryDTO]: The sale entry or error
        """

        async def operation() -> LedgerEntryDTO:
            existing = await replay_entry(self.entry_repo, command.correlation_id, EntryType.SALE)
            if existing:
                return LedgerEntryDTO.from_entity(existing)

            await self._validate(identity, command)

            entry = await self.poster.post(
                LedgerEntry(
                    entry_type=EntryType.SALE,
                    amount=command.amount,
                    source_actor_id=identity.actor_id,
                    source_role=command.seller_role,
                    target_actor_id=command.customer_id,
                    target_role=ActorRole.CUSTOMER,
                    correlation_id=command.correlation_id,
                    note=command.note,
                    metadata_json=json.dumps({"cash_received": command.cash_received}),
                ),
                on_shortfall=inventory_shortfall,
            )
            return LedgerEntryDTO.from_entity(entry)

        return await self.run(operation)

    async def _validate(self, identity: Identity, command: SellCommandDTO) -> None:
        if command.seller_role not in SELLING_ROLES:
            raise ValidationFailed(f"{command.seller_role.value} cannot sell points")

        if not identity.has_role(command.seller_role):
            raise Forbidden(f"{identity.actor_id} does not hold the {command.seller_role.value} role")

        if command.cash_received != command.amount:
            raise ValidationFailed(
                f"cash received ({command.cash_received}) must equal the points sold ({command.amount})"
            )

        if self.max_per_transaction is not None and command.amount > self.max_per_transaction:
            raise ValidationFailed(
                f"a single sale is limited to {self.max_per_transaction} points"
            )

        if command.customer_id == identity.actor_id:
            raise ValidationFailed("sellers cannot sell points to themselves")

        customer = await self.actor_repo.get_profile(command.customer_id)
        if not customer or not customer.is_active or ActorRole.CUSTOMER not in customer.role_list():
            raise NotFound(f"no active customer {command.customer_id}")
