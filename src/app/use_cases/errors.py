"""Mapping of domain exceptions to Result errors"""

from libs.result import Error
from src.domain.exceptions import CreditEngineError, InvariantViolation


def rule_error(exc: CreditEngineError) -> Error:
    return Error(code=exc.code, message=exc.message, reason=exc.reason)


def invariant_error(exc: InvariantViolation) -> Error:
    return Error(
        code=exc.code,
        message="Internal consistency check failed, operation rolled back",
        reason=str(exc),
    )
