"""Domain errors for the invoice lifecycle and payment ledger"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes exposed in the API error envelope"""
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    OVERPAYMENT = "OVERPAYMENT"
    CONFLICT = "CONFLICT"            # Optimistic lock failure
    UPSTREAM_ERROR = "UPSTREAM_ERROR"  # Customer service unreachable
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainError(Exception):
    """Base class for business rule violations"""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND


class DomainValidationError(DomainError):
    code = ErrorCode.VALIDATION_ERROR


class InvalidStateError(DomainError):
    code = ErrorCode.INVALID_STATE


class OverpaymentError(DomainError):
    code = ErrorCode.OVERPAYMENT


class ConflictError(DomainError):
    code = ErrorCode.CONFLICT
