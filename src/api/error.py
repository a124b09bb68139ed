"""Client error raised by routes and its JSON rendering"""

from typing import Optional
from fastapi import Request
from fastapi.responses import JSONResponse
from libs.result import Error
from src.app.errors import ErrorCode

STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR.value: 400,
    ErrorCode.INSUFFICIENT_BALANCE.value: 402,
    ErrorCode.INSUFFICIENT_INVENTORY.value: 402,
    ErrorCode.FORBIDDEN.value: 403,
    ErrorCode.INVALID_SECOND_FACTOR.value: 403,
    ErrorCode.NOT_FOUND.value: 404,
    ErrorCode.HIERARCHY_VIOLATION.value: 409,
    ErrorCode.INVALID_STATE.value: 409,
    ErrorCode.ALREADY_CLAIMED.value: 409,
    ErrorCode.NOT_CLAIMED_BY_YOU.value: 409,
    ErrorCode.ALREADY_CONFIRMED.value: 409,
    ErrorCode.TRANSIENT_ERROR.value: 503,
}


class ClientError(Exception):
    """
    Use-case error surfaced to the HTTP client

    The status code defaults to the mapping of the error code.
    """

    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or STATUS_BY_CODE.get(error.code, 400)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse({"error": exc.error.to_dict()}, status_code=exc.status_code)
