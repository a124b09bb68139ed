"""SetTransactionPin Use Case

Sets or changes the caller's 6 digit transaction PIN.
"""

from libs.result import Result
from src.app.errors import InvalidSecondFactor
from src.app.repositories.transaction_pin_repository import TransactionPinRepository
from src.app.services.pin_hasher import PinHasher
from src.app.services.pin_verifier import TransactionPinVerifier
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.base import TransactionalUseCase
from src.domain.actor import Identity
from src.domain.base import utc_now
from src.domain.transaction_pin import TransactionPin
from .dtos import SetTransactionPinCommandDTO, TransactionPinStatusDTO


class SetTransactionPin(TransactionalUseCase):
    """
    Use Case: Set transaction PIN

    Business Rules:
    1. First PIN: set directly
    2. Changing a PIN requires the current PIN (lockout rules apply)
    3. Only the bcrypt hash is stored
    """

    name = "set_transaction_pin"

    def __init__(
        self,
        uow: UnitOfWork,
        pin_repo: TransactionPinRepository,
        hasher: PinHasher,
        pin_verifier: TransactionPinVerifier,
        **kwargs,
    ):
        super().__init__(uow, **kwargs)
        self.pin_repo = pin_repo
        self.hasher = hasher
        self.pin_verifier = pin_verifier

    async def execute(
        self, identity: Identity, command: SetTransactionPinCommandDTO
    ) -> Result[TransactionPinStatusDTO]:
        async def operation() -> TransactionPinStatusDTO:
            now = utc_now()
            record = await self.pin_repo.get(identity.actor_id)

            if record is not None:
                if command.current_pin is None:
                    raise InvalidSecondFactor(
                        "current PIN is required to change the transaction PIN",
                        reason="current_pin_missing",
                    )
                await self.pin_verifier.verify(identity.actor_id, command.current_pin, now)
            else:
                record = TransactionPin(actor_id=identity.actor_id, pin_hash="")

            record.pin_hash = self.hasher.hash(command.pin)
            record.failed_attempts = 0
            record.locked_until = None
            record.updated_at = now
            record = await self.pin_repo.save(record)

            return TransactionPinStatusDTO(actor_id=identity.actor_id, is_set=True, updated_at=now)

        return await self.run(operation)
