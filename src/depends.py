from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.repositories import (
    SqlAlchemyActorRepository,
    SqlAlchemyBalanceRepository,
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyPointCardRepository,
    SqlAlchemyTransactionPinRepository,
)
from src.adapter.services.identity_provider import SqlAlchemyIdentityProvider
from src.adapter.services.pin_hasher import BcryptPinHasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.errors import ErrorCode
from src.app.services.ledger_poster import LedgerPoster
from src.app.services.pin_verifier import TransactionPinVerifier
from src.domain.actor import Identity

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_optional_identity(
    x_actor_id: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> Optional[Identity]:
    """Caller resolved from the X-Actor-Id header set by the auth gateway"""
    if not x_actor_id:
        return None
    identity = await SqlAlchemyIdentityProvider(session).resolve(x_actor_id)
    if identity is None:
        raise ClientError(
            Error(
                code=ErrorCode.FORBIDDEN.value,
                message=f"unknown or inactive actor {x_actor_id}",
            )
        )
    return identity


async def get_identity(identity: Optional[Identity] = Depends(get_optional_identity)) -> Identity:
    if identity is None:
        raise ClientError(
            Error(
                code=ErrorCode.FORBIDDEN.value,
                message="X-Actor-Id header is required",
            )
        )
    return identity


def build_poster(session: AsyncSession) -> LedgerPoster:
    return LedgerPoster(
        SqlAlchemyLedgerEntryRepository(session),
        SqlAlchemyBalanceRepository(session),
        SqlAlchemyPointCardRepository(session),
        SqlAlchemyActorRepository(session),
    )


def build_pin_verifier(session: AsyncSession) -> TransactionPinVerifier:
    return TransactionPinVerifier(
        SqlAlchemyTransactionPinRepository(session),
        BcryptPinHasher(ApplicationConfig.PIN_BCRYPT_ROUNDS),
        max_failed_attempts=ApplicationConfig.PIN_MAX_FAILED_ATTEMPTS,
        lock_minutes=ApplicationConfig.PIN_LOCK_MINUTES,
    )
