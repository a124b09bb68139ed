"""Typed ledger errors

Raised inside a unit of work and converted to ``libs.result.Error`` at the
use-case boundary. Every error is an expected outcome the caller can act on.
"""

from enum import Enum
from typing import Optional
from libs.result import Error


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    HIERARCHY_VIOLATION = "HIERARCHY_VIOLATION"
    INVALID_STATE = "INVALID_STATE"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    NOT_CLAIMED_BY_YOU = "NOT_CLAIMED_BY_YOU"
    ALREADY_CONFIRMED = "ALREADY_CONFIRMED"
    INVALID_SECOND_FACTOR = "INVALID_SECOND_FACTOR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    TRANSIENT_ERROR = "TRANSIENT_ERROR"


class LedgerError(Exception):
    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    # Writes made before the error are committed instead of rolled back
    keeps_side_effects: bool = False

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason

    def to_error(self) -> Error:
        return Error(code=self.code.value, message=self.message, reason=self.reason)


class ValidationFailed(LedgerError):
    code = ErrorCode.VALIDATION_ERROR


class InsufficientBalance(LedgerError):
    code = ErrorCode.INSUFFICIENT_BALANCE


class InsufficientInventory(LedgerError):
    code = ErrorCode.INSUFFICIENT_INVENTORY


class HierarchyViolation(LedgerError):
    code = ErrorCode.HIERARCHY_VIOLATION


class InvalidState(LedgerError):
    code = ErrorCode.INVALID_STATE


class AlreadyClaimed(LedgerError):
    code = ErrorCode.ALREADY_CLAIMED


class NotClaimedByYou(LedgerError):
    code = ErrorCode.NOT_CLAIMED_BY_YOU


class AlreadyConfirmed(LedgerError):
    code = ErrorCode.ALREADY_CONFIRMED


class InvalidSecondFactor(LedgerError):
    code = ErrorCode.INVALID_SECOND_FACTOR
    keeps_side_effects = True


class Forbidden(LedgerError):
    code = ErrorCode.FORBIDDEN


class NotFound(LedgerError):
    code = ErrorCode.NOT_FOUND


class ConcurrencyConflict(Exception):
    """A compare-and-set lost a race; the unit of work must be retried"""

