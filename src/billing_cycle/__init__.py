"""Guest billing cycles: dues, payment matching and revenue."""

from .config import (
    AccountStatus,
    BillingCycleConfig,
    DueFilter,
    GuestStatus,
    MatchMethod,
    PaymentStatus,
)
from .models import (
    BillingEvaluation,
    BillingStats,
    GuestBillingProfile,
    PaymentRecord,
)
from .evaluator import (
    BillingCycleEvaluator,
    evaluate,
)
from .ingest import (
    guest_from_record,
    load_guests,
    load_payments,
    payment_from_record,
)
from .matching import (
    PaymentFix,
    PaymentReconciler,
    ReconciliationReport,
    apply_fixes,
    find_guest,
    payments_for_guest,
    search_guests,
)
from .dues import (
    DuesBoard,
    GuestDueInfo,
)
from .revenue import (
    PaymentTotals,
    RevenueReport,
    RevenueSummary,
    payment_totals,
)

__all__ = [
    # Config
    "AccountStatus",
    "BillingCycleConfig",
    "DueFilter",
    "GuestStatus",
    "MatchMethod",
    "PaymentStatus",
    # Models
    "BillingEvaluation",
    "BillingStats",
    "GuestBillingProfile",
    "PaymentRecord",
    # Evaluator
    "BillingCycleEvaluator",
    "evaluate",
    # Ingest
    "guest_from_record",
    "load_guests",
    "load_payments",
    "payment_from_record",
    # Matching
    "PaymentFix",
    "PaymentReconciler",
    "ReconciliationReport",
    "apply_fixes",
    "find_guest",
    "payments_for_guest",
    "search_guests",
    # Dues
    "DuesBoard",
    "GuestDueInfo",
    # Revenue
    "PaymentTotals",
    "RevenueReport",
    "RevenueSummary",
    "payment_totals",
]
