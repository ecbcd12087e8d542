"""Billing Cycle — Configuration."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from src.errors import ConfigurationError

if TYPE_CHECKING:
    from src.settings import Settings


class GuestStatus(str, Enum):
    """Derived payment standing of a guest."""

    OK = "ok"
    DUE_SOON = "due-soon"
    OVERDUE = "overdue"


class PaymentStatus(str, Enum):
    """Review state of a submitted payment."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AccountStatus(str, Enum):
    """Onboarding state of a guest account."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    DELETED = "deleted"


class DueFilter(str, Enum):
    """Dues board filter."""

    ALL = "all"
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"


class MatchMethod(str, Enum):
    """How an orphaned payment was tied back to a guest."""

    PHONE_BACKFILL = "phone backfill"
    USER_PHONE = "matched by userPhone"
    EMAIL_PHONE = "extracted phone from email"
    USER_NAME = "matched by userName"


@dataclass(frozen=True)
class BillingCycleConfig:
    """Billing rules shared by the evaluator, dues board and reconciler."""

    cycle_days: int = 30
    due_soon_days: int = 5
    no_guest_days_remaining: int = 30
    currency: str = "INR"
    login_email_domain: str = "hotel.com"
    unassigned_room_label: str = "Unassigned"
    default_floor_label: str = "GF"

    def __post_init__(self) -> None:
        if self.cycle_days < 1:
            raise ConfigurationError("cycle_days must be at least 1", setting="cycle_days")
        if self.due_soon_days < 0:
            raise ConfigurationError(
                "due_soon_days must be non-negative", setting="due_soon_days"
            )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "BillingCycleConfig":
        return cls(
            cycle_days=settings.cycle_days,
            due_soon_days=settings.due_soon_days,
            currency=settings.currency,
            login_email_domain=settings.login_email_domain,
        )
