"""Billing Cycle — Evaluator.

Cumulative-ledger billing: every cycle that has started is billed in full,
every approved payment ever made is credited, and the difference is what
the guest owes. Payments are never bucketed by date, so an overpayment in
one cycle carries forward as credit and an underpayment carries forward as
debt.
"""

import logging
from datetime import date, timedelta, tzinfo
from decimal import Decimal
from typing import Any, Iterable, Optional

from src.billing_cycle.config import BillingCycleConfig, GuestStatus, PaymentStatus
from src.billing_cycle.models import (
    BillingEvaluation,
    BillingStats,
    GuestBillingProfile,
    PaymentRecord,
)
from src.errors import coerce_amount, validate_day

logger = logging.getLogger(__name__)

ZERO = Decimal(0)


class BillingCycleEvaluator:
    """Computes debt, next due date and status for a guest.

    Stateless apart from its configuration; safe to share and to call on
    every render. The clock is always supplied by the caller.
    """

    def __init__(
        self,
        config: Optional[BillingCycleConfig] = None,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self._config = config or BillingCycleConfig()
        self._tz = tz

    @property
    def config(self) -> BillingCycleConfig:
        return self._config

    def evaluate(
        self,
        guest: Optional[GuestBillingProfile],
        payments: Iterable[PaymentRecord],
        now: Any,
    ) -> BillingEvaluation:
        """Evaluate a guest's billing standing as of ``now``.

        Args:
            guest: Guest snapshot, or None while it is still loading.
            payments: Every payment already matched to this guest.
            now: Evaluation time; truncated to its calendar day.

        Returns:
            The billing evaluation. A None guest yields a neutral ``ok``
            placeholder, which does not mean the guest has no dues.

        Raises:
            ValidationError: If ``now`` or a guest date is not a date.
        """
        cfg = self._config
        today = validate_day(now, "now", self._tz)

        if guest is None:
            return BillingEvaluation(
                status=GuestStatus.OK,
                pending_amount=ZERO,
                days_remaining=cfg.no_guest_days_remaining,
                next_due_date=today,
            )

        billing_start = self._billing_start(guest, today)

        if today < billing_start:
            return BillingEvaluation(
                status=GuestStatus.OK,
                pending_amount=ZERO,
                days_remaining=(billing_start - today).days,
                next_due_date=billing_start,
                billing_stats=BillingStats(billing_start_date=billing_start),
            )

        days_elapsed = (today - billing_start).days
        cycles_started = days_elapsed // cfg.cycle_days + 1

        total_expected = coerce_amount(guest.monthly_fee) * cycles_started
        total_paid = sum(
            (coerce_amount(p.amount) for p in payments if p.status == PaymentStatus.APPROVED),
            ZERO,
        )
        pending_amount = max(ZERO, total_expected - total_paid)

        next_due_date = billing_start + timedelta(days=cycles_started * cfg.cycle_days)
        days_remaining = (next_due_date - today).days

        if pending_amount > 0:
            status = GuestStatus.OVERDUE
        elif days_remaining <= cfg.due_soon_days:
            status = GuestStatus.DUE_SOON
        else:
            status = GuestStatus.OK

        logger.debug(
            "Evaluated guest %s: %s, pending=%s, next_due=%s",
            guest.guest_id or "<unsaved>",
            status.value,
            pending_amount,
            next_due_date.isoformat(),
        )

        return BillingEvaluation(
            status=status,
            pending_amount=pending_amount,
            days_remaining=days_remaining,
            next_due_date=next_due_date,
            billing_stats=BillingStats(
                total_expected=total_expected,
                total_paid=total_paid,
                cycles_started=cycles_started,
                billing_start_date=billing_start,
            ),
        )

    def _billing_start(self, guest: GuestBillingProfile, today: date) -> date:
        # billingStartDate, then joining date, then the evaluation day
        if guest.billing_start_date is not None:
            return validate_day(guest.billing_start_date, "billing_start_date", self._tz)
        if guest.joining_date is not None:
            return validate_day(guest.joining_date, "joining_date", self._tz)
        return today


_default_evaluator = BillingCycleEvaluator()


def evaluate(
    guest: Optional[GuestBillingProfile],
    payments: Iterable[PaymentRecord],
    now: Any,
    config: Optional[BillingCycleConfig] = None,
) -> BillingEvaluation:
    """Evaluate with the default rules (30-day cycles, 5-day warning)."""
    if config is None:
        return _default_evaluator.evaluate(guest, payments, now)
    return BillingCycleEvaluator(config).evaluate(guest, payments, now)
