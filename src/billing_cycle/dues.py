"""Billing Cycle — Dues board.

The admin view of who owes money and who is about to: every billable guest
evaluated against its matched payments, filtered, counted and grouped by
room.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from src.billing_cycle.config import BillingCycleConfig, DueFilter, GuestStatus
from src.billing_cycle.evaluator import BillingCycleEvaluator
from src.billing_cycle.matching import payments_for_guest
from src.billing_cycle.models import BillingEvaluation, GuestBillingProfile, PaymentRecord
from src.logging_config import bind_guest, log_performance

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*(\d+)")

FRAME_COLUMNS = [
    "guest_id",
    "full_name",
    "phone",
    "room",
    "status",
    "pending_amount",
    "days_remaining",
    "next_due_date",
]


@dataclass(frozen=True)
class GuestDueInfo:
    """A guest paired with its current evaluation."""

    guest: GuestBillingProfile
    evaluation: BillingEvaluation

    @property
    def status(self) -> GuestStatus:
        return self.evaluation.status

    @property
    def days_remaining(self) -> int:
        return self.evaluation.days_remaining


class DuesBoard:
    """Builds and slices the payments-due list."""

    def __init__(
        self,
        evaluator: Optional[BillingCycleEvaluator] = None,
        config: Optional[BillingCycleConfig] = None,
    ) -> None:
        self._config = config or (evaluator.config if evaluator else BillingCycleConfig())
        self._evaluator = evaluator or BillingCycleEvaluator(self._config)

    @property
    def config(self) -> BillingCycleConfig:
        return self._config

    # ── Build ─────────────────────────────────────────────────────────

    @log_performance()
    def build(
        self,
        guests: Sequence[GuestBillingProfile],
        payments: Sequence[PaymentRecord],
        now: Any,
    ) -> List[GuestDueInfo]:
        """Evaluate every billable guest, soonest due first."""
        entries = []
        for guest in guests:
            if not guest.is_billable:
                continue
            with bind_guest(guest.guest_id):
                matched = payments_for_guest(guest, payments)
                evaluation = self._evaluator.evaluate(guest, matched, now)
            entries.append(GuestDueInfo(guest=guest, evaluation=evaluation))

        entries.sort(key=lambda e: e.days_remaining)
        counts = self.counts(entries)
        logger.info(
            "Dues board built for %d guests: %d overdue, %d due soon",
            len(entries),
            counts[GuestStatus.OVERDUE.value],
            counts[GuestStatus.DUE_SOON.value],
        )
        return entries

    # ── Slicing ───────────────────────────────────────────────────────

    @staticmethod
    def filter(
        entries: Sequence[GuestDueInfo],
        due_filter: DueFilter = DueFilter.ALL,
        search: str = "",
    ) -> List[GuestDueInfo]:
        """Keep entries needing attention, optionally matching a name.

        ``ALL`` keeps every entry that is not ``ok``.
        """
        due_filter = DueFilter(due_filter)
        needle = (search or "").strip().lower()

        results = []
        for e in entries:
            if due_filter == DueFilter.ALL:
                keep = e.status != GuestStatus.OK
            else:
                keep = e.status.value == due_filter.value
            if not keep:
                continue
            if needle and needle not in (e.guest.full_name or "").lower():
                continue
            results.append(e)
        return results

    @staticmethod
    def counts(entries: Sequence[GuestDueInfo]) -> Dict[str, int]:
        """Badge counts per attention status."""
        return {
            GuestStatus.OVERDUE.value: sum(1 for e in entries if e.status == GuestStatus.OVERDUE),
            GuestStatus.DUE_SOON.value: sum(1 for e in entries if e.status == GuestStatus.DUE_SOON),
        }

    def room_key(self, guest: GuestBillingProfile) -> str:
        if not guest.room_name:
            return self._config.unassigned_room_label
        return f"{guest.room_name} ({guest.floor or self._config.default_floor_label})"

    def group_by_room(
        self, entries: Sequence[GuestDueInfo]
    ) -> List[Tuple[str, List[GuestDueInfo]]]:
        """Group entries by room, ordered by room number then label."""
        groups: Dict[str, List[GuestDueInfo]] = {}
        for e in entries:
            groups.setdefault(self.room_key(e.guest), []).append(e)
        return sorted(groups.items(), key=lambda item: _room_sort_key(item[0]))

    # ── Export ────────────────────────────────────────────────────────

    def to_frame(self, entries: Sequence[GuestDueInfo]) -> pd.DataFrame:
        rows = [
            {
                "guest_id": e.guest.guest_id,
                "full_name": e.guest.full_name,
                "phone": e.guest.phone,
                "room": self.room_key(e.guest),
                "status": e.status.value,
                "pending_amount": e.evaluation.pending_amount,
                "days_remaining": e.days_remaining,
                "next_due_date": e.evaluation.next_due_date,
            }
            for e in entries
        ]
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def _room_sort_key(label: str) -> Tuple[int, str]:
    # Labels without a leading number sort as room 0
    match = _LEADING_NUMBER.match(label)
    return (int(match.group(1)) if match else 0, label)
