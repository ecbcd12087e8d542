"""Input Validation Utilities.

Boundary validators for raw guest and payment records: calendar days,
monetary amounts, and status strings. Dates fail loudly here so that no
unparseable value ever reaches the billing arithmetic.
"""

import math
from collections.abc import Mapping
from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from src.errors.config import ErrorCode
from src.errors.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

# Document-store timestamps arrive as {"seconds": ..., "nanoseconds": ...}
# or, from the admin SDK export, {"_seconds": ..., "_nanoseconds": ...}.
TIMESTAMP_SECONDS_KEYS = ("seconds", "_seconds")


def validate_day(value: Any, field: str = "date", tz: Optional[tzinfo] = None) -> date:
    """Validate a date-like value and truncate it to a calendar day.

    Args:
        value: A ``date``, ``datetime``, ISO-8601 string, or timestamp mapping.
        field: Field name used in error details.
        tz: Zone whose local midnight defines the day. Aware datetimes and
            timestamps are converted into it; naive values are taken as-is.

    Returns:
        The calendar day.

    Raises:
        ValidationError: If the value is missing or cannot be parsed.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(
            message=f"{field} is required",
            error_code=ErrorCode.MISSING_REQUIRED_FIELD,
            field=field,
        )

    if isinstance(value, datetime):
        return _local_day(value, tz)

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        return _parse_iso(value.strip(), field, tz)

    if isinstance(value, Mapping):
        for key in TIMESTAMP_SECONDS_KEYS:
            if key in value:
                try:
                    seconds = float(value[key])
                except (TypeError, ValueError):
                    break
                moment = datetime.fromtimestamp(seconds, tz or timezone.utc)
                return moment.date()

    raise ValidationError(
        message=f"{field} is not a recognised date: {value!r}",
        error_code=ErrorCode.INVALID_DATE,
        field=field,
    )


def _local_day(moment: datetime, tz: Optional[tzinfo]) -> date:
    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.date()


def _parse_iso(text: str, field: str, tz: Optional[tzinfo]) -> date:
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return _local_day(datetime.fromisoformat(text), tz)
    except ValueError:
        raise ValidationError(
            message=f"{field} is not a valid ISO-8601 date: '{text}'",
            error_code=ErrorCode.INVALID_DATE,
            field=field,
        ) from None


def coerce_amount(value: Any) -> Decimal:
    """Convert a raw amount to ``Decimal``.

    Missing, non-numeric, NaN and infinite values all count as zero.
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return Decimal(0)
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip() or "0")
        except InvalidOperation:
            return Decimal(0)
    else:
        return Decimal(0)

    if not amount.is_finite():
        return Decimal(0)
    return amount


def validate_status(value: Any, enum_cls: Type[E], field: str = "status") -> E:
    """Validate a status string against an enum.

    Raises:
        ValidationError: If the value is not one of the enum's values.
    """
    if isinstance(value, enum_cls):
        return value

    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass

    allowed = ", ".join(m.value for m in enum_cls)
    raise ValidationError(
        message=f"Invalid {field}: {value!r}. Expected one of: {allowed}",
        error_code=ErrorCode.INVALID_STATUS,
        field=field,
    )
