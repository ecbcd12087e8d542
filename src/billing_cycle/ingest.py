"""Billing Cycle — Record ingestion.

Turns raw document-store records (camelCase dicts, as exported from the
``users`` and ``payments`` collections) into typed models. Dates and
statuses are validated here; amounts are coerced leniently.
"""

import logging
from datetime import date, tzinfo
from typing import Any, Iterable, List, Mapping, Optional

from src.billing_cycle.config import AccountStatus, PaymentStatus
from src.billing_cycle.models import GuestBillingProfile, PaymentRecord
from src.errors import coerce_amount, validate_day, validate_status

logger = logging.getLogger(__name__)


def _text(record: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return str(value).strip()
    return ""


def _optional_day(
    record: Mapping[str, Any], key: str, tz: Optional[tzinfo]
) -> Optional[date]:
    value = record.get(key)
    if value is None or value == "":
        return None
    return validate_day(value, key, tz)


def guest_from_record(
    record: Mapping[str, Any], tz: Optional[tzinfo] = None
) -> GuestBillingProfile:
    """Build a guest profile from a ``users`` document.

    ``createdAt`` stands in for ``joiningDate`` on older records.

    Raises:
        ValidationError: On an unparseable date or unknown account status.
    """
    joining = _optional_day(record, "joiningDate", tz)
    if joining is None:
        joining = _optional_day(record, "createdAt", tz)

    status_raw = record.get("accountStatus") or AccountStatus.ACTIVE
    return GuestBillingProfile(
        monthly_fee=coerce_amount(record.get("monthlyFee")),
        joining_date=joining,
        billing_start_date=_optional_day(record, "billingStartDate", tz),
        guest_id=_text(record, "id", "uid"),
        full_name=_text(record, "fullName"),
        phone=_text(record, "phone"),
        email=_text(record, "email"),
        father_name=_text(record, "fatherName"),
        address=_text(record, "address"),
        room_name=_text(record, "roomName"),
        floor=_text(record, "floor"),
        account_status=validate_status(status_raw, AccountStatus, "accountStatus"),
        deleted=bool(record.get("deleted", False)),
    )


def payment_from_record(
    record: Mapping[str, Any], tz: Optional[tzinfo] = None
) -> PaymentRecord:
    """Build a payment from a ``payments`` document.

    Raises:
        ValidationError: On an unparseable date or unknown payment status.
    """
    paid_on = _optional_day(record, "createdAt", tz)
    if paid_on is None:
        paid_on = _optional_day(record, "paymentDate", tz)

    return PaymentRecord(
        amount=coerce_amount(record.get("amount")),
        status=validate_status(
            record.get("status") or PaymentStatus.PENDING, PaymentStatus, "status"
        ),
        payment_id=_text(record, "id", "docId"),
        user_id=_text(record, "userId"),
        user_phone=_text(record, "userPhone"),
        user_name=_text(record, "userName"),
        user_email=_text(record, "userEmail"),
        paid_on=paid_on,
    )


def load_guests(
    records: Iterable[Mapping[str, Any]], tz: Optional[tzinfo] = None
) -> List[GuestBillingProfile]:
    """Convert ``users`` documents, skipping admin accounts."""
    guests = []
    skipped = 0
    for record in records:
        if record.get("role") == "admin":
            skipped += 1
            continue
        guests.append(guest_from_record(record, tz))
    logger.info("Loaded %d guests (%d admin records skipped)", len(guests), skipped)
    return guests


def load_payments(
    records: Iterable[Mapping[str, Any]], tz: Optional[tzinfo] = None
) -> List[PaymentRecord]:
    """Convert ``payments`` documents."""
    payments = [payment_from_record(r, tz) for r in records]
    logger.info("Loaded %d payments", len(payments))
    return payments
