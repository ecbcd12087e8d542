"""Billing Cycle — Payment matching and reconciliation.

Guests who are deleted and re-added get a new document id, so their older
payments no longer point at them. Matching falls back to the phone number,
and the reconciler plans the re-linking of orphaned payments.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence

from src.billing_cycle.config import BillingCycleConfig, MatchMethod
from src.billing_cycle.models import GuestBillingProfile, PaymentRecord
from src.errors import ErrorCode, NotFoundError

logger = logging.getLogger(__name__)


def payments_for_guest(
    guest: GuestBillingProfile, payments: Iterable[PaymentRecord]
) -> List[PaymentRecord]:
    """Select the payments that belong to a guest.

    A payment matches on document id, or on phone number when both sides
    carry one.
    """
    matched = []
    for p in payments:
        if guest.guest_id and p.user_id == guest.guest_id:
            matched.append(p)
        elif guest.phone and p.user_phone and p.user_phone == guest.phone:
            matched.append(p)
    return matched


def find_guest(
    guests: Iterable[GuestBillingProfile], guest_id: str
) -> GuestBillingProfile:
    """Look up a guest by document id.

    Raises:
        NotFoundError: If no guest has that id.
    """
    for guest in guests:
        if guest.guest_id == guest_id:
            return guest
    raise NotFoundError(
        message=f"Guest not found: {guest_id}",
        error_code=ErrorCode.GUEST_NOT_FOUND,
        resource_id=guest_id,
    )


def search_guests(
    guests: Iterable[GuestBillingProfile], query: str
) -> List[GuestBillingProfile]:
    """Case-insensitive search over a guest's identifying fields.

    Name, email, father's name, address, room and floor are compared
    lowercased; phone numbers are matched as a raw substring. A blank query
    returns every guest.
    """
    guests = list(guests)
    if not query or not query.strip():
        return guests

    needle = query.strip().lower()
    results = []
    for g in guests:
        haystack = (g.full_name, g.email, g.father_name, g.address, g.room_name, g.floor)
        if any(needle in (value or "").lower() for value in haystack):
            results.append(g)
        elif needle in (g.phone or ""):
            results.append(g)
    return results


# ── Reconciliation ────────────────────────────────────────────────────


@dataclass(frozen=True)
class PaymentFix:
    """A planned correction to one payment record.

    ``position`` is the index of the payment in the reconciled sequence;
    payment ids may be blank on older records.
    """

    position: int
    payment_id: str
    method: MatchMethod
    old_user_id: str
    new_user_id: str
    new_user_phone: str


@dataclass
class ReconciliationReport:
    """Outcome of a reconciliation pass. Nothing is written."""

    total: int = 0
    already_correct: int = 0
    fixes: List[PaymentFix] = field(default_factory=list)
    unresolved: List[PaymentRecord] = field(default_factory=list)

    @property
    def fixed(self) -> int:
        return len(self.fixes)

    @property
    def cannot_fix(self) -> int:
        return len(self.unresolved)

    def summary(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "already_correct": self.already_correct,
            "fixed": self.fixed,
            "cannot_fix": self.cannot_fix,
        }


class PaymentReconciler:
    """Plans how to re-link payments whose user id matches no guest."""

    def __init__(self, config: Optional[BillingCycleConfig] = None) -> None:
        self._config = config or BillingCycleConfig()

    @property
    def config(self) -> BillingCycleConfig:
        return self._config

    def reconcile(
        self,
        guests: Sequence[GuestBillingProfile],
        payments: Sequence[PaymentRecord],
    ) -> ReconciliationReport:
        """Classify every payment and plan fixes for the orphaned ones."""
        by_id = {g.guest_id: g for g in guests if g.guest_id}
        by_phone: Dict[str, GuestBillingProfile] = {}
        for g in guests:
            if g.phone:
                by_phone[g.phone] = g

        report = ReconciliationReport(total=len(payments))

        for position, payment in enumerate(payments):
            owner = by_id.get(payment.user_id)
            if owner is not None:
                report.already_correct += 1
                if not payment.user_phone and owner.phone:
                    report.fixes.append(
                        PaymentFix(
                            position=position,
                            payment_id=payment.payment_id,
                            method=MatchMethod.PHONE_BACKFILL,
                            old_user_id=payment.user_id,
                            new_user_id=owner.guest_id,
                            new_user_phone=owner.phone,
                        )
                    )
                continue

            match = self._match_orphan(payment, guests, by_phone)
            if match is None:
                logger.warning(
                    "Cannot re-link payment %s (userId=%s, userName=%s)",
                    payment.payment_id,
                    payment.user_id or "-",
                    payment.user_name or "-",
                )
                report.unresolved.append(payment)
                continue

            guest, method = match
            report.fixes.append(
                PaymentFix(
                    position=position,
                    payment_id=payment.payment_id,
                    method=method,
                    old_user_id=payment.user_id,
                    new_user_id=guest.guest_id,
                    new_user_phone=guest.phone or payment.user_phone,
                )
            )

        logger.info(
            "Reconciled %d payments: %d correct, %d fixes, %d unresolved",
            report.total,
            report.already_correct,
            report.fixed,
            report.cannot_fix,
        )
        return report

    def _match_orphan(
        self,
        payment: PaymentRecord,
        guests: Sequence[GuestBillingProfile],
        by_phone: Dict[str, GuestBillingProfile],
    ) -> Optional[tuple]:
        if payment.user_phone and payment.user_phone in by_phone:
            return by_phone[payment.user_phone], MatchMethod.USER_PHONE

        suffix = f"@{self._config.login_email_domain}"
        if payment.user_email and payment.user_email.lower().endswith(suffix.lower()):
            phone = payment.user_email.split("@")[0]
            if phone in by_phone:
                return by_phone[phone], MatchMethod.EMAIL_PHONE

        if payment.user_name:
            name = payment.user_name.lower()
            for g in guests:
                if g.full_name and g.full_name.lower() == name:
                    return g, MatchMethod.USER_NAME

        return None


def apply_fixes(
    payments: Sequence[PaymentRecord], report: ReconciliationReport
) -> List[PaymentRecord]:
    """Return a copy of ``payments`` with the report's fixes applied.

    ``payments`` must be the sequence that was reconciled. A fix whose
    position holds a different payment is skipped.
    """
    fixes = {f.position: f for f in report.fixes}
    result = []
    for position, p in enumerate(payments):
        fix = fixes.get(position)
        if fix is None or (p.payment_id, p.user_id) != (fix.payment_id, fix.old_user_id):
            result.append(p)
        else:
            result.append(replace(p, user_id=fix.new_user_id, user_phone=fix.new_user_phone))
    return result
