"""Unit tests for the cash claim and confirmation use cases"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.errors import InvalidSecondFactor
from src.app.use_cases.cash.claim_submission import ClaimSubmission
from src.app.use_cases.cash.confirm_submission import ConfirmSubmission
from src.app.use_cases.cash.dtos import ConfirmSubmissionCommandDTO
from src.domain.actor import ActorRole
from src.domain.cash_submission import CashSubmission, SubmissionStatus


@pytest.fixture
def submission():
    return CashSubmission(
        id="sub_1",
        submitted_by="seller_1",
        submitter_role=ActorRole.SELLER,
        amount=120,
        status=SubmissionStatus.PENDING,
    )


@pytest.fixture
def cash_repo(submission):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=submission)
    repo.claim = AsyncMock(return_value=True)
    repo.mark_confirmed = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def cashier(make_identity):
    return make_identity("cashier_1", ActorRole.CASHIER)


@pytest.mark.asyncio
class TestClaimSubmission:

    async def test_claim_wins(self, mock_uow, cash_repo, cashier):
        result = await ClaimSubmission(mock_uow, cash_repo).execute(cashier, "sub_1")

        assert result.is_ok()
        cash_repo.claim.assert_awaited_once()
        mock_uow.commit.assert_awaited_once()

    async def test_lost_race_reports_already_claimed(self, mock_uow, cash_repo, submission, cashier):
        async def lose(submission_id, clerk_id, claimed_at):
            submission.received_by = "cashier_2"
            return False

        cash_repo.claim = AsyncMock(side_effect=lose)

        result = await ClaimSubmission(mock_uow, cash_repo).execute(cashier, "sub_1")

        assert result.error.code == "ALREADY_CLAIMED"
        mock_uow.rollback.assert_awaited_once()

    async def test_reclaim_by_holder_is_a_no_op(self, mock_uow, cash_repo, submission, cashier):
        submission.received_by = "cashier_1"

        result = await ClaimSubmission(mock_uow, cash_repo).execute(cashier, "sub_1")

        assert result.is_ok()
        cash_repo.claim.assert_not_awaited()

    async def test_non_cashier_is_forbidden(self, mock_uow, cash_repo, make_identity):
        result = await ClaimSubmission(mock_uow, cash_repo).execute(
            make_identity("seller_2", ActorRole.SELLER), "sub_1"
        )

        assert result.error.code == "FORBIDDEN"

    async def test_confirmed_submission(self, mock_uow, cash_repo, submission, cashier):
        submission.status = SubmissionStatus.CONFIRMED

        result = await ClaimSubmission(mock_uow, cash_repo).execute(cashier, "sub_1")

        assert result.error.code == "ALREADY_CONFIRMED"


@pytest.fixture
def pin_verifier():
    verifier = MagicMock()
    verifier.verify = AsyncMock(return_value=None)
    return verifier


@pytest.fixture
def poster():
    poster = MagicMock()
    poster.post = AsyncMock(side_effect=lambda entry, on_shortfall=None: entry)
    return poster


@pytest.mark.asyncio
class TestConfirmSubmission:

    async def test_confirm_posts_cash_claim(self, mock_uow, cash_repo, submission, pin_verifier, poster, cashier):
        submission.received_by = "cashier_1"

        result = await ConfirmSubmission(mock_uow, cash_repo, pin_verifier, poster).execute(
            cashier, "sub_1", ConfirmSubmissionCommandDTO(pin="123456", confirmation_note="counted")
        )

        assert result.is_ok()
        entry = poster.post.call_args.args[0]
        assert entry.amount == 120
        assert entry.source_actor_id == "seller_1"
        assert entry.target_actor_id == "cashier_1"
        assert entry.target_role == ActorRole.CASHIER

    async def test_must_hold_the_claim(self, mock_uow, cash_repo, submission, pin_verifier, poster, cashier):
        submission.received_by = "cashier_2"

        result = await ConfirmSubmission(mock_uow, cash_repo, pin_verifier, poster).execute(
            cashier, "sub_1", ConfirmSubmissionCommandDTO(pin="123456")
        )

        assert result.error.code == "NOT_CLAIMED_BY_YOU"
        pin_verifier.verify.assert_not_awaited()

    async def test_wrong_pin_commits_failure_counter(
        self, mock_uow, cash_repo, submission, pin_verifier, poster, cashier
    ):
        submission.received_by = "cashier_1"
        pin_verifier.verify = AsyncMock(side_effect=InvalidSecondFactor("wrong", reason="pin_mismatch"))

        result = await ConfirmSubmission(mock_uow, cash_repo, pin_verifier, poster).execute(
            cashier, "sub_1", ConfirmSubmissionCommandDTO(pin="000000")
        )

        assert result.error.code == "INVALID_SECOND_FACTOR"
        mock_uow.commit.assert_awaited_once()
        cash_repo.mark_confirmed.assert_not_awaited()
        poster.post.assert_not_awaited()

    async def test_already_confirmed(self, mock_uow, cash_repo, submission, pin_verifier, poster, cashier):
        submission.received_by = "cashier_1"
        submission.status = SubmissionStatus.CONFIRMED

        result = await ConfirmSubmission(mock_uow, cash_repo, pin_verifier, poster).execute(
            cashier, "sub_1", ConfirmSubmissionCommandDTO(pin="123456")
        )

        assert result.error.code == "ALREADY_CONFIRMED"
