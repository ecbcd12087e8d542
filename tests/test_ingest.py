"""Tests for raw record ingestion."""

from datetime import date, datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from src.billing_cycle.config import AccountStatus, PaymentStatus
from src.billing_cycle.ingest import (
    guest_from_record,
    load_guests,
    load_payments,
    payment_from_record,
)
from src.errors import ErrorCode, ValidationError

IST = ZoneInfo("Asia/Kolkata")


def _ts(year, month, day, hour=0):
    moment = datetime(year, month, day, hour, tzinfo=timezone.utc)
    return {"seconds": int(moment.timestamp()), "nanoseconds": 0}


class TestGuestFromRecord:
    def test_full_record(self):
        g = guest_from_record(
            {
                "id": "u1",
                "fullName": "Asha Rao",
                "phone": "9876543210",
                "email": "9876543210@hotel.com",
                "roomName": "101",
                "floor": "1F",
                "fatherName": "Suresh Rao",
                "address": "12 MG Road, Pune",
                "monthlyFee": "4500",
                "joiningDate": "2026-01-10",
                "billingStartDate": "2026-01-15",
                "accountStatus": "active",
            }
        )
        assert g.guest_id == "u1"
        assert g.full_name == "Asha Rao"
        assert g.father_name == "Suresh Rao"
        assert g.address == "12 MG Road, Pune"
        assert g.monthly_fee == Decimal("4500")
        assert g.joining_date == date(2026, 1, 10)
        assert g.billing_start_date == date(2026, 1, 15)
        assert g.account_status == AccountStatus.ACTIVE
        assert g.deleted is False

    def test_created_at_is_joining_fallback(self):
        g = guest_from_record({"id": "u1", "createdAt": _ts(2026, 1, 28, 20)}, tz=IST)
        assert g.joining_date == date(2026, 1, 29)
        assert g.billing_start_date is None

    def test_missing_fee_is_zero(self):
        assert guest_from_record({"id": "u1"}).monthly_fee == Decimal(0)

    def test_non_numeric_fee_is_zero(self):
        assert guest_from_record({"id": "u1", "monthlyFee": "TBD"}).monthly_fee == Decimal(0)

    def test_missing_status_defaults_active(self):
        assert guest_from_record({"id": "u1"}).account_status == AccountStatus.ACTIVE

    def test_blank_dates_are_none(self):
        g = guest_from_record({"id": "u1", "billingStartDate": "", "joiningDate": None})
        assert g.billing_start_date is None
        assert g.joining_date is None

    def test_bad_billing_date_raises(self):
        with pytest.raises(ValidationError) as exc:
            guest_from_record({"id": "u1", "billingStartDate": "Invalid Date"})
        assert exc.value.field == "billingStartDate"

    def test_unknown_account_status_raises(self):
        with pytest.raises(ValidationError) as exc:
            guest_from_record({"id": "u1", "accountStatus": "banned"})
        assert exc.value.error_code == ErrorCode.INVALID_STATUS

    def test_deleted_flag(self):
        assert guest_from_record({"id": "u1", "deleted": True}).deleted is True


class TestPaymentFromRecord:
    def test_full_record(self):
        p = payment_from_record(
            {
                "docId": "p1",
                "amount": 3000,
                "status": "approved",
                "userId": "u1",
                "userPhone": "9876543210",
                "userName": "Asha Rao",
                "userEmail": "9876543210@hotel.com",
                "createdAt": _ts(2026, 2, 1, 5),
            },
            tz=IST,
        )
        assert p.payment_id == "p1"
        assert p.amount == Decimal("3000")
        assert p.status == PaymentStatus.APPROVED
        assert p.user_phone == "9876543210"
        assert p.paid_on == date(2026, 2, 1)

    def test_payment_date_fallback(self):
        p = payment_from_record({"id": "p1", "amount": 10, "paymentDate": "2026-02-03"})
        assert p.paid_on == date(2026, 2, 3)

    def test_missing_status_is_pending(self):
        assert payment_from_record({"id": "p1", "amount": 10}).status == PaymentStatus.PENDING

    def test_unknown_status_raises(self):
        with pytest.raises(ValidationError):
            payment_from_record({"id": "p1", "amount": 10, "status": "refunded"})

    def test_garbage_amount_is_zero(self):
        assert payment_from_record({"id": "p1", "amount": "n/a"}).amount == Decimal(0)


class TestLoaders:
    def test_load_guests_skips_admins(self):
        guests = load_guests(
            [
                {"id": "admin", "role": "admin"},
                {"id": "u1", "role": "guest"},
                {"id": "u2"},
            ]
        )
        assert [g.guest_id for g in guests] == ["u1", "u2"]

    def test_load_payments(self):
        payments = load_payments([{"id": "p1", "amount": 1}, {"id": "p2", "amount": 2}])
        assert [p.payment_id for p in payments] == ["p1", "p2"]

    def test_load_payments_propagates_errors(self):
        with pytest.raises(ValidationError):
            load_payments([{"id": "p1", "amount": 1, "createdAt": "yesterday"}])
