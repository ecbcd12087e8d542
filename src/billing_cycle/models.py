"""Billing Cycle data models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from src.billing_cycle.config import AccountStatus, GuestStatus, PaymentStatus


@dataclass(frozen=True)
class GuestBillingProfile:
    """Snapshot of a guest record.

    Only ``monthly_fee``, ``billing_start_date`` and ``joining_date`` drive
    the billing arithmetic; the remaining fields identify the guest for
    payment matching and the dues board.
    """

    monthly_fee: Decimal = Decimal(0)
    joining_date: Optional[date] = None
    billing_start_date: Optional[date] = None
    guest_id: str = ""
    full_name: str = ""
    phone: str = ""
    email: str = ""
    father_name: str = ""
    address: str = ""
    room_name: str = ""
    floor: str = ""
    account_status: AccountStatus = AccountStatus.ACTIVE
    deleted: bool = False

    @property
    def is_billable(self) -> bool:
        """Whether the guest appears on the dues board."""
        return self.account_status == AccountStatus.ACTIVE and not self.deleted


@dataclass(frozen=True)
class PaymentRecord:
    """A single payment submitted by (or recorded for) a guest."""

    amount: Decimal
    status: PaymentStatus = PaymentStatus.PENDING
    payment_id: str = ""
    user_id: str = ""
    user_phone: str = ""
    user_name: str = ""
    user_email: str = ""
    paid_on: Optional[date] = None

    @property
    def is_approved(self) -> bool:
        return self.status == PaymentStatus.APPROVED


@dataclass(frozen=True)
class BillingStats:
    """Cumulative ledger totals behind an evaluation."""

    total_expected: Decimal = Decimal(0)
    total_paid: Decimal = Decimal(0)
    cycles_started: int = 0
    billing_start_date: Optional[date] = None


@dataclass(frozen=True)
class BillingEvaluation:
    """Derived billing standing of one guest at one point in time."""

    status: GuestStatus
    pending_amount: Decimal
    days_remaining: int
    next_due_date: date
    billing_stats: Optional[BillingStats] = None

    def to_dict(self) -> Dict[str, Any]:
        stats = self.billing_stats
        return {
            "status": self.status.value,
            "pending_amount": str(self.pending_amount),
            "days_remaining": self.days_remaining,
            "next_due_date": self.next_due_date.isoformat(),
            "billing_stats": None if stats is None else {
                "total_expected": str(stats.total_expected),
                "total_paid": str(stats.total_paid),
                "cycles_started": stats.cycles_started,
                "billing_start_date": (
                    stats.billing_start_date.isoformat()
                    if stats.billing_start_date else None
                ),
            },
        }
