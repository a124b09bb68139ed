"""Unit tests for the merchant payment state machine"""

import pytest
from datetime import timedelta

from src.domain.actor import ActorRole
from src.domain.base import utc_now
from src.domain.merchant_transaction import (
    MerchantTransaction,
    PaymentAction,
    PaymentStatus,
    next_status,
)
from src.domain.point_card import PointCard


class TestTransitions:

    @pytest.mark.parametrize(
        "current, action, expected",
        [
            (PaymentStatus.PENDING, PaymentAction.CONFIRM, PaymentStatus.COMPLETED),
            (PaymentStatus.PENDING, PaymentAction.CANCEL, PaymentStatus.CANCELLED),
            (PaymentStatus.COMPLETED, PaymentAction.REFUND, PaymentStatus.REFUNDED),
        ],
    )
    def test_legal_moves(self, current, action, expected):
        assert next_status(current, action) == expected

    @pytest.mark.parametrize(
        "current, action",
        [
            (PaymentStatus.PENDING, PaymentAction.REFUND),
            (PaymentStatus.COMPLETED, PaymentAction.CONFIRM),
            (PaymentStatus.COMPLETED, PaymentAction.CANCEL),
            (PaymentStatus.CANCELLED, PaymentAction.REFUND),
            (PaymentStatus.CANCELLED, PaymentAction.CONFIRM),
            (PaymentStatus.REFUNDED, PaymentAction.REFUND),
        ],
    )
    def test_illegal_moves(self, current, action):
        assert next_status(current, action) is None


class TestPayer:

    def test_customer_payment_payer_ref(self):
        transaction = MerchantTransaction(merchant_id="stall_1", customer_id="customer_1", amount=10)

        assert transaction.payer_ref.role == ActorRole.CUSTOMER
        assert transaction.merchant_ref.actor_id == "stall_1"
        assert not transaction.is_card_payment

    def test_card_payment_payer_ref(self):
        transaction = MerchantTransaction(merchant_id="stall_1", card_id="card_1", amount=10)

        assert transaction.payer_ref.actor_id == "card_1"
        assert transaction.payer_ref.role == ActorRole.POINT_CARD
        assert transaction.is_card_payment


class TestPointCardUsability:

    def test_card_without_expiry_is_usable(self):
        card = PointCard(card_number="CARD-20240601-AAAAA", initial_balance=50, current_balance=50)

        assert card.is_usable(utc_now())

    def test_expired_card_is_not_usable(self):
        now = utc_now()
        card = PointCard(
            card_number="CARD-20240601-BBBBB",
            initial_balance=50,
            current_balance=50,
            expires_at=now - timedelta(minutes=1),
        )

        assert card.is_expired(now)
        assert not card.is_usable(now)

    def test_inactive_card_is_not_usable(self):
        card = PointCard(
            card_number="CARD-20240601-CCCCC",
            initial_balance=50,
            current_balance=50,
            is_active=False,
        )

        assert not card.is_usable(utc_now())
