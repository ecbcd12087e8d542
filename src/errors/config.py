"""Error Configuration.

Defines error codes and severity levels for structured error
handling across the ledger.
"""

from enum import Enum
from typing import Dict


class ErrorCode(Enum):
    """Standardized error codes."""

    # Ingestion errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DATE = "INVALID_DATE"
    INVALID_STATUS = "INVALID_STATUS"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # Lookup errors
    GUEST_NOT_FOUND = "GUEST_NOT_FOUND"

    # Setup errors
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorSeverity(Enum):
    """Severity levels for error logging."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


ERROR_SEVERITY_MAP: Dict[ErrorCode, ErrorSeverity] = {
    ErrorCode.VALIDATION_ERROR: ErrorSeverity.LOW,
    ErrorCode.INVALID_DATE: ErrorSeverity.MEDIUM,
    ErrorCode.INVALID_STATUS: ErrorSeverity.MEDIUM,
    ErrorCode.MISSING_REQUIRED_FIELD: ErrorSeverity.LOW,
    ErrorCode.GUEST_NOT_FOUND: ErrorSeverity.LOW,
    ErrorCode.INVALID_CONFIGURATION: ErrorSeverity.HIGH,
    ErrorCode.INTERNAL_ERROR: ErrorSeverity.CRITICAL,
}
