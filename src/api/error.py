"""API error translation

Use case errors travel as libs.result.Error; routes raise ClientError and
the app renders {"error": {"code", "message", "reason"}}.
"""

from typing import Optional
from fastapi import status
from libs.result import Error

ERROR_STATUS = {
    "INSUFFICIENT_FUNDS": status.HTTP_402_PAYMENT_REQUIRED,
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "PERMISSION_DENIED": status.HTTP_403_FORBIDDEN,
    "CROSS_BUSINESS_REFERENCE": status.HTTP_403_FORBIDDEN,
    "BUSINESS_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CLIENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CREDIT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ALREADY_SETTLED": status.HTTP_409_CONFLICT,
    "CREDIT_CANCELLED": status.HTTP_409_CONFLICT,
    "OVER_PAYMENT": status.HTTP_409_CONFLICT,
    "INSTALLMENT_ALREADY_PAID": status.HTTP_409_CONFLICT,
    "OVER_INSTALLMENT_PAYMENT": status.HTTP_409_CONFLICT,
    "SCHEDULE_LOCKED": status.HTTP_409_CONFLICT,
    "AMOUNT_BELOW_PAID": status.HTTP_409_CONFLICT,
    "NEGATIVE_BALANCE": status.HTTP_409_CONFLICT,
    "INTERNAL_INVARIANT_VIOLATION": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(code: str) -> int:
    """HTTP status of an error code; unexpected *_FAILED errors are server side"""
    if code in ERROR_STATUS:
        return ERROR_STATUS[code]
    if code.endswith("_FAILED"):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_for(error.code)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.error.code,
                "message": self.error.message,
                "reason": self.error.reason,
            }
        }
