"""Billing Cycle — Revenue reporting."""

from dataclasses import dataclass
from datetime import date, timedelta, tzinfo
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple

import pandas as pd

from src.billing_cycle.config import PaymentStatus
from src.billing_cycle.models import PaymentRecord
from src.errors import coerce_amount, validate_day

ZERO = Decimal(0)


@dataclass(frozen=True)
class RevenueSummary:
    """Approved revenue over the standard dashboard windows."""

    as_of: date
    today: Decimal = ZERO
    week: Decimal = ZERO
    month: Decimal = ZERO
    year: Decimal = ZERO
    pending_count: int = 0
    pending_total: Decimal = ZERO


@dataclass(frozen=True)
class PaymentTotals:
    """Per-status sums for one guest's payment history."""

    approved: Decimal = ZERO
    pending: Decimal = ZERO
    rejected: Decimal = ZERO


def _sum(payments: Iterable[PaymentRecord]) -> Decimal:
    return sum((coerce_amount(p.amount) for p in payments), ZERO)


def payment_totals(payments: Iterable[PaymentRecord]) -> PaymentTotals:
    payments = list(payments)
    return PaymentTotals(
        approved=_sum(p for p in payments if p.status == PaymentStatus.APPROVED),
        pending=_sum(p for p in payments if p.status == PaymentStatus.PENDING),
        rejected=_sum(p for p in payments if p.status == PaymentStatus.REJECTED),
    )


class RevenueReport:
    """Revenue windows and per-day breakdowns over approved payments.

    Payments without a date are kept out of every dated window.
    """

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self._tz = tz

    def summarize(self, payments: Iterable[PaymentRecord], now: Any) -> RevenueSummary:
        """Revenue for today, the last 7 days, this month and this year."""
        today = validate_day(now, "now", self._tz)
        payments = list(payments)
        approved = [p for p in payments if p.is_approved and p.paid_on is not None]
        pending = [p for p in payments if p.status == PaymentStatus.PENDING]

        def since(start: date) -> Decimal:
            return _sum(p for p in approved if p.paid_on >= start)

        return RevenueSummary(
            as_of=today,
            today=since(today),
            week=since(today - timedelta(days=7)),
            month=since(today.replace(day=1)),
            year=since(date(today.year, 1, 1)),
            pending_count=len(pending),
            pending_total=_sum(pending),
        )

    def revenue_on(
        self, payments: Iterable[PaymentRecord], day: Any
    ) -> Tuple[List[PaymentRecord], Decimal]:
        """Approved payments made on one calendar day, and their total."""
        target = validate_day(day, "day", self._tz)
        matched = [p for p in payments if p.is_approved and p.paid_on == target]
        return matched, _sum(matched)

    def daily_frame(self, payments: Iterable[PaymentRecord]) -> pd.DataFrame:
        """Approved revenue per day, newest first."""
        rows = [
            {"day": p.paid_on, "amount": coerce_amount(p.amount)}
            for p in payments
            if p.is_approved and p.paid_on is not None
        ]
        if not rows:
            return pd.DataFrame(columns=["day", "revenue", "payments"])
        df = pd.DataFrame(rows)
        grouped = df.groupby("day")["amount"].agg(
            revenue=lambda s: sum(s, ZERO),
            payments="count",
        )
        return grouped.reset_index().sort_values("day", ascending=False, ignore_index=True)
