"""Custom Exception Hierarchy.

Typed exceptions carrying an error code and structured details so
callers can report ingestion problems record by record.
"""

from typing import Any, Dict, List, Optional

from src.errors.config import ERROR_SEVERITY_MAP, ErrorCode, ErrorSeverity


class LedgerError(Exception):
    """Base exception for all ledger errors.

    All custom exceptions inherit from this, allowing a single
    handler to catch the entire hierarchy.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = ERROR_SEVERITY_MAP.get(error_code, ErrorSeverity.CRITICAL)
        self.details = details or []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
        }


class ValidationError(LedgerError):
    """Raised when an input record fails validation."""

    def __init__(
        self,
        message: str = "Validation failed",
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
        field: Optional[str] = None,
    ):
        if field and not details:
            details = [{"field": field, "issue": message}]
        super().__init__(message, error_code, details)
        self.field = field


class ConfigurationError(LedgerError):
    """Raised when billing settings are out of range."""

    def __init__(
        self,
        message: str = "Invalid configuration",
        setting: Optional[str] = None,
    ):
        details = [{"setting": setting, "issue": message}] if setting else []
        super().__init__(message, ErrorCode.INVALID_CONFIGURATION, details)


class NotFoundError(LedgerError):
    """Raised when a referenced guest or payment does not exist."""

    def __init__(
        self,
        message: str = "Resource not found",
        error_code: ErrorCode = ErrorCode.GUEST_NOT_FOUND,
        resource_id: Optional[str] = None,
    ):
        details = [{"resource_id": resource_id}] if resource_id else []
        super().__init__(message, error_code, details)
