"""CLI entry point: python main.py --guests users.json --payments payments.json"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError as SettingsValidationError

from src.billing_cycle import (
    BillingCycleConfig,
    BillingCycleEvaluator,
    DueFilter,
    DuesBoard,
    PaymentReconciler,
    RevenueReport,
    apply_fixes,
    find_guest,
    load_guests,
    load_payments,
    payment_totals,
    payments_for_guest,
)
from src.errors import ConfigurationError, LedgerError, validate_day
from src.logging_config import PerformanceTimer, RunContext, configure_logging
from src.settings import get_settings

logger = logging.getLogger(__name__)


def _read_records(path: str) -> list:
    with open(Path(path), encoding="utf-8") as fh:
        data = json.load(fh)
    # Exports are either a bare list or {"documents": [...]}
    if isinstance(data, dict):
        data = data.get("documents", [])
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="PG ledger - guest dues, reconciliation and revenue"
    )
    parser.add_argument(
        "--guests", required=True,
        help="JSON export of the users collection"
    )
    parser.add_argument(
        "--payments", required=True,
        help="JSON export of the payments collection"
    )
    parser.add_argument(
        "--today", default=None,
        help="Evaluation date (YYYY-MM-DD, default: today in the configured timezone)"
    )
    parser.add_argument(
        "--filter", choices=[f.value for f in DueFilter], default=DueFilter.ALL.value,
        help="Which guests to list (default: everyone not ok)"
    )
    parser.add_argument(
        "--search", default="",
        help="Only list guests whose name contains this text"
    )
    parser.add_argument(
        "--group", action="store_true",
        help="Group the dues list by room"
    )
    parser.add_argument(
        "--guest", default=None,
        help="Print the statement of a single guest by id"
    )
    parser.add_argument(
        "--reconcile", action="store_true",
        help="Plan re-linking of orphaned payments before evaluating"
    )
    parser.add_argument(
        "--revenue", action="store_true",
        help="Print the revenue summary"
    )
    return parser


def _load_config():
    """Settings, zone and billing rules; any problem is a ConfigurationError."""
    try:
        settings = get_settings()
    except SettingsValidationError as exc:
        raise ConfigurationError(f"Invalid PGLEDGER_ settings: {exc}") from None
    return settings.tzinfo, BillingCycleConfig.from_settings(settings)


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging()

    with RunContext(operator="cli"):
        try:
            tz, config = _load_config()
            today = validate_day(args.today or datetime.now(tz), "today", tz)
            with PerformanceTimer("ingest"):
                guests = load_guests(_read_records(args.guests), tz)
                payments = load_payments(_read_records(args.payments), tz)
        except LedgerError as exc:
            logger.error("Startup failed: %s", exc.message, extra={"error_code": exc.error_code.value})
            print(f"Error: {exc.message}", file=sys.stderr)
            return 2

        print("=" * 60)
        print("PG LEDGER - PAYMENTS DUE")
        print(f"Guests: {len(guests)}   Payments: {len(payments)}   Currency: {config.currency}")
        print("=" * 60)

        if args.reconcile:
            report = PaymentReconciler(config).reconcile(guests, payments)
            print("\nReconciliation plan:")
            for key, value in report.summary().items():
                print(f"  {key:16s} {value}")
            for fix in report.fixes:
                print(f"  {fix.payment_id or '#' + str(fix.position)}: {fix.old_user_id or '-'} -> {fix.new_user_id} ({fix.method.value})")
            payments = apply_fixes(payments, report)

        evaluator = BillingCycleEvaluator(config, tz)

        if args.guest:
            try:
                guest = find_guest(guests, args.guest)
            except LedgerError as exc:
                print(f"Error: {exc.message}", file=sys.stderr)
                return 1
            matched = payments_for_guest(guest, payments)
            result = evaluator.evaluate(guest, matched, today)
            totals = payment_totals(matched)
            print(f"\n{guest.full_name or guest.guest_id}")
            print(json.dumps(result.to_dict(), indent=2))
            print(f"  approved {totals.approved}   pending {totals.pending}   rejected {totals.rejected}")
            return 0

        board = DuesBoard(evaluator)
        entries = board.build(guests, payments, today)
        counts = board.counts(entries)
        due = board.filter(entries, DueFilter(args.filter), args.search)

        print(f"\nOverdue: {counts['overdue']}   Due soon: {counts['due-soon']}")
        if not due:
            print("No payments due at the moment.")
        elif args.group:
            for room, members in board.group_by_room(due):
                print(f"\n{room}  ({len(members)} due)")
                print(board.to_frame(members).drop(columns=["room"]).to_string(index=False))
        else:
            print(board.to_frame(due).to_string(index=False))

        if args.revenue:
            summary = RevenueReport(tz).summarize(payments, today)
            print("\nRevenue (approved):")
            print(f"  Today      {summary.today}")
            print(f"  Last 7d    {summary.week}")
            print(f"  This month {summary.month}")
            print(f"  This year  {summary.year}")
            print(f"  Pending    {summary.pending_count} payments, {summary.pending_total}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
