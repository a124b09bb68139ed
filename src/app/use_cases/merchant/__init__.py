"""Merchant payment state machine use cases"""
from .initiate_payment import InitiatePayment
from .confirm_payment import ConfirmPayment
from .cancel_payment import CancelPayment
from .refund_payment import RefundPayment
from .get_payment import GetPayment, ListPayments
from .dtos import (
    PaymentQrDTO,
    InitiatePaymentCommandDTO,
    ConfirmPaymentCommandDTO,
    ReasonCommandDTO,
    MerchantTransactionDTO,
    MerchantTransactionListDTO,
)

__all__ = [
    "InitiatePayment",
    "ConfirmPayment",
    "CancelPayment",
    "RefundPayment",
    "GetPayment",
    "ListPayments",
    "PaymentQrDTO",
    "InitiatePaymentCommandDTO",
    "ConfirmPaymentCommandDTO",
    "ReasonCommandDTO",
    "MerchantTransactionDTO",
    "MerchantTransactionListDTO",
]
