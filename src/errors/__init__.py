"""Ledger Error Handling & Validation.

Typed exceptions, error codes, and ingestion validators shared by the
billing-cycle library and the batch CLI.
"""

from src.errors.config import (
    ERROR_SEVERITY_MAP,
    ErrorCode,
    ErrorSeverity,
)
from src.errors.exceptions import (
    ConfigurationError,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from src.errors.validators import (
    coerce_amount,
    validate_day,
    validate_status,
)

__all__ = [
    # Config
    "ERROR_SEVERITY_MAP",
    "ErrorCode",
    "ErrorSeverity",
    # Exceptions
    "ConfigurationError",
    "LedgerError",
    "NotFoundError",
    "ValidationError",
    # Validators
    "coerce_amount",
    "validate_day",
    "validate_status",
]
