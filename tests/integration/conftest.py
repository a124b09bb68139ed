import json
from typing import Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401
from src.adapter.repositories import (
    SqlAlchemyActorRepository,
    SqlAlchemyBalanceRepository,
    SqlAlchemyCashSubmissionRepository,
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyMerchantTransactionRepository,
    SqlAlchemyPointCardRepository,
    SqlAlchemyTransactionPinRepository,
)
from src.adapter.services.pin_hasher import BcryptPinHasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.pin_verifier import TransactionPinVerifier
from src.app.use_cases.allocation.allocate_points import AllocatePoints
from src.app.use_cases.allocation.fund_pool import FundPool
from src.app.use_cases.allocation.grant_by_cohort import GrantByCohort
from src.app.use_cases.allocation.recall_points import RecallPoints
from src.app.use_cases.cards.get_card_balance import GetCardBalance
from src.app.use_cases.cards.issue_card import IssueCard
from src.app.use_cases.cards.spend_card import SpendCard
from src.app.use_cases.cards.top_up_card import TopUpCard
from src.app.use_cases.cash.claim_submission import ClaimSubmission
from src.app.use_cases.cash.confirm_submission import ConfirmSubmission
from src.app.use_cases.cash.set_transaction_pin import SetTransactionPin
from src.app.use_cases.cash.submit_cash import SubmitCash
from src.app.use_cases.ledger.list_ledger_entries import ListLedgerEntries
from src.app.use_cases.ledger.reconcile_balances import ReconcileBalances
from src.app.use_cases.merchant.cancel_payment import CancelPayment
from src.app.use_cases.merchant.confirm_payment import ConfirmPayment
from src.app.use_cases.merchant.initiate_payment import InitiatePayment
from src.app.use_cases.merchant.refund_payment import RefundPayment
from src.app.use_cases.sales.sell_points import SellPoints
from src.depends import build_poster, get_session
from src.domain.actor import ActorProfile, ActorRef, ActorRole, Identity, Merchant
from src.domain.balance import Balance
from src.domain.point_card import PointCard
from src.domain.transaction_pin import TransactionPin

# Cheap bcrypt cost for tests
PIN_ROUNDS = 4


class LedgerHarness:
    """
    Runs every command in its own session, the way separate API requests do

    Concurrent calls therefore race on the database exactly like
    concurrent requests.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def _execute(self, build, *args, **kwargs):
        async with self.session_factory() as session:
            return await build(session).execute(*args, **kwargs)

    # Seeding

    async def add_actor(
        self,
        actor_id: str,
        *roles: ActorRole,
        organization_id: str = "org_1",
        identity_tag: Optional[str] = None,
        is_active: bool = True,
    ) -> Identity:
        profile = ActorProfile(
            actor_id=actor_id,
            display_name=actor_id,
            roles=",".join(role.value for role in roles),
            identity_tag=identity_tag,
            organization_id=organization_id,
            is_active=is_active,
        )
        async with self.session_factory() as session:
            await SqlAlchemyActorRepository(session).save_profile(profile)
            await session.commit()
        return profile.to_identity()

    async def add_merchant(self, merchant_id: str, owner_id: str, assistant_ids=(), organization_id: str = "org_1"):
        async with self.session_factory() as session:
            await SqlAlchemyActorRepository(session).save_merchant(
                Merchant(
                    merchant_id=merchant_id,
                    name=merchant_id,
                    owner_id=owner_id,
                    assistant_ids=json.dumps(list(assistant_ids)),
                    organization_id=organization_id,
                )
            )
            await session.commit()

    # Reads

    async def balance(self, actor_id: str, role: ActorRole) -> Optional[Balance]:
        async with self.session_factory() as session:
            return await SqlAlchemyBalanceRepository(session).get(ActorRef(actor_id=actor_id, role=role))

    async def available(self, actor_id: str, role: ActorRole) -> int:
        balance = await self.balance(actor_id, role)
        return balance.available_points if balance else 0

    async def card(self, card_id: str) -> Optional[PointCard]:
        async with self.session_factory() as session:
            return await SqlAlchemyPointCardRepository(session).get_by_id(card_id)

    async def pin_record(self, actor_id: str) -> Optional[TransactionPin]:
        async with self.session_factory() as session:
            return await SqlAlchemyTransactionPinRepository(session).get(actor_id)

    async def reconcile(self):
        return await self._execute(
            lambda s: ReconcileBalances(SqlAlchemyBalanceRepository(s), SqlAlchemyLedgerEntryRepository(s))
        )

    async def list_entries(self, identity: Identity, actor_id: str, **kwargs):
        return await self._execute(
            lambda s: ListLedgerEntries(SqlAlchemyLedgerEntryRepository(s), SqlAlchemyActorRepository(s)),
            identity,
            actor_id,
            **kwargs,
        )

    async def card_balance(self, card_id_or_number: str):
        return await self._execute(lambda s: GetCardBalance(SqlAlchemyPointCardRepository(s)), card_id_or_number)

    # Commands

    async def fund_pool(self, identity, command):
        return await self._execute(
            lambda s: FundPool(SqlAlchemyUnitOfWork(s), SqlAlchemyLedgerEntryRepository(s), build_poster(s)),
            identity,
            command,
        )

    async def allocate(self, identity, command):
        return await self._execute(
            lambda s: AllocatePoints(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyLedgerEntryRepository(s),
                SqlAlchemyActorRepository(s),
                build_poster(s),
            ),
            identity,
            command,
        )

    async def recall(self, identity, command):
        return await self._execute(
            lambda s: RecallPoints(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyLedgerEntryRepository(s),
                SqlAlchemyActorRepository(s),
                build_poster(s),
            ),
            identity,
            command,
        )

    async def grant_cohort(self, identity, command):
        return await self._execute(
            lambda s: GrantByCohort(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyLedgerEntryRepository(s),
                SqlAlchemyActorRepository(s),
                build_poster(s),
            ),
            identity,
            command,
        )

    async def sell(self, identity, command):
        return await self._execute(
            lambda s: SellPoints(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyLedgerEntryRepository(s),
                SqlAlchemyActorRepository(s),
                build_poster(s),
                max_per_transaction=100,
            ),
            identity,
            command,
        )

    async def initiate_payment(self, identity, command):
        return await self._execute(
            lambda s: InitiatePayment(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyMerchantTransactionRepository(s),
                SqlAlchemyActorRepository(s),
                SqlAlchemyPointCardRepository(s),
            ),
            identity,
            command,
        )

    async def confirm_payment(self, identity, transaction_id, *args):
        return await self._execute(
            lambda s: ConfirmPayment(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyMerchantTransactionRepository(s),
                SqlAlchemyActorRepository(s),
                SqlAlchemyPointCardRepository(s),
                SqlAlchemyLedgerEntryRepository(s),
                build_poster(s),
            ),
            identity,
            transaction_id,
            *args,
        )

    async def cancel_payment(self, identity, transaction_id, command):
        return await self._execute(
            lambda s: CancelPayment(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyMerchantTransactionRepository(s),
                SqlAlchemyActorRepository(s),
            ),
            identity,
            transaction_id,
            command,
        )

    async def refund_payment(self, identity, transaction_id, command):
        return await self._execute(
            lambda s: RefundPayment(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyMerchantTransactionRepository(s),
                SqlAlchemyActorRepository(s),
                build_poster(s),
            ),
            identity,
            transaction_id,
            command,
        )

    async def issue_card(self, identity, command):
        return await self._execute(
            lambda s: IssueCard(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyPointCardRepository(s),
                SqlAlchemyLedgerEntryRepository(s),
                build_poster(s),
                max_per_transaction=100,
            ),
            identity,
            command,
        )

    async def top_up_card(self, identity, card_id, command):
        return await self._execute(
            lambda s: TopUpCard(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyPointCardRepository(s),
                SqlAlchemyLedgerEntryRepository(s),
                build_poster(s),
                max_per_transaction=100,
            ),
            identity,
            card_id,
            command,
        )

    async def spend_card(self, card_id, command, identity=None):
        return await self._execute(
            lambda s: SpendCard(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyPointCardRepository(s),
                SqlAlchemyMerchantTransactionRepository(s),
                SqlAlchemyActorRepository(s),
                SqlAlchemyLedgerEntryRepository(s),
                build_poster(s),
            ),
            card_id,
            command,
            identity=identity,
        )

    async def submit_cash(self, identity, command):
        return await self._execute(
            lambda s: SubmitCash(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyCashSubmissionRepository(s),
                SqlAlchemyBalanceRepository(s),
                build_poster(s),
            ),
            identity,
            command,
        )

    async def claim(self, identity, submission_id):
        return await self._execute(
            lambda s: ClaimSubmission(SqlAlchemyUnitOfWork(s), SqlAlchemyCashSubmissionRepository(s)),
            identity,
            submission_id,
        )

    def _pin_verifier(self, session, max_failed_attempts=5):
        return TransactionPinVerifier(
            SqlAlchemyTransactionPinRepository(session),
            BcryptPinHasher(PIN_ROUNDS),
            max_failed_attempts=max_failed_attempts,
            lock_minutes=60,
        )

    async def set_pin(self, identity, command):
        return await self._execute(
            lambda s: SetTransactionPin(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyTransactionPinRepository(s),
                BcryptPinHasher(PIN_ROUNDS),
                self._pin_verifier(s),
            ),
            identity,
            command,
        )

    async def confirm_submission(self, identity, submission_id, command, max_failed_attempts=5):
        return await self._execute(
            lambda s: ConfirmSubmission(
                SqlAlchemyUnitOfWork(s),
                SqlAlchemyCashSubmissionRepository(s),
                self._pin_verifier(s, max_failed_attempts),
                build_poster(s),
            ),
            identity,
            submission_id,
            command,
        )


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """File backed SQLite database, fresh for every test"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger_test.db'}", echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def ledger(session_factory):
    return LedgerHarness(session_factory)


@pytest_asyncio.fixture
async def client(session_factory):
    """Test client where every request gets its own session"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class Chain:
    """Actors of one organization with points already flowing down to the seller"""

    def __init__(self, organizer, manager, seller, customer, cashier, merchant_owner, merchant_assistant):
        self.organizer = organizer
        self.manager = manager
        self.seller = seller
        self.customer = customer
        self.cashier = cashier
        self.merchant_owner = merchant_owner
        self.merchant_assistant = merchant_assistant
        self.merchant_id = "stall_1"


@pytest_asyncio.fixture
async def chain(ledger):
    """
    organizer pool 1000 -> seller_manager 300 -> seller 100
    plus a customer, a cashier and merchant stall_1
    """
    from src.app.use_cases.allocation.dtos import AllocateCommandDTO, FundPoolCommandDTO

    organizer = await ledger.add_actor("org_admin", ActorRole.ORGANIZER)
    manager = await ledger.add_actor("manager_1", ActorRole.SELLER_MANAGER)
    seller = await ledger.add_actor("seller_1", ActorRole.SELLER, ActorRole.CUSTOMER)
    customer = await ledger.add_actor("customer_1", ActorRole.CUSTOMER, identity_tag="student")
    cashier = await ledger.add_actor("cashier_1", ActorRole.CASHIER)
    owner = await ledger.add_actor("owner_1", ActorRole.CUSTOMER)
    assistant = await ledger.add_actor("assistant_1", ActorRole.CUSTOMER)
    await ledger.add_merchant("stall_1", owner_id="owner_1", assistant_ids=["assistant_1"])

    assert (await ledger.fund_pool(organizer, FundPoolCommandDTO(amount=1000))).is_ok()
    assert (
        await ledger.allocate(
            organizer,
            AllocateCommandDTO(
                from_role=ActorRole.ORGANIZER,
                to_actor_id="manager_1",
                to_role=ActorRole.SELLER_MANAGER,
                amount=300,
            ),
        )
    ).is_ok()
    assert (
        await ledger.allocate(
            manager,
            AllocateCommandDTO(
                from_role=ActorRole.SELLER_MANAGER,
                to_actor_id="seller_1",
                to_role=ActorRole.SELLER,
                amount=100,
            ),
        )
    ).is_ok()

    return Chain(organizer, manager, seller, customer, cashier, owner, assistant)
