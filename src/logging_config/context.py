"""Run Context Management.

Context variables binding the batch run ID, the operator, and the guest
currently being evaluated to every log entry.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterator


_run_id_var: ContextVar[str] = ContextVar("run_id", default="")
_operator_var: ContextVar[str] = ContextVar("operator", default="")
_guest_id_var: ContextVar[str] = ContextVar("guest_id", default="")
_extra_context_var: ContextVar[dict] = ContextVar("extra_context", default={})


def generate_run_id() -> str:
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:12]


def get_run_id() -> str:
    return _run_id_var.get()


def get_guest_id() -> str:
    return _guest_id_var.get()


def get_context_dict() -> dict[str, Any]:
    """Get all context variables as a dictionary for log binding."""
    ctx = {}
    run_id = _run_id_var.get()
    if run_id:
        ctx["run_id"] = run_id
    operator = _operator_var.get()
    if operator:
        ctx["operator"] = operator
    guest_id = _guest_id_var.get()
    if guest_id:
        ctx["guest_id"] = guest_id
    extra = _extra_context_var.get()
    if extra:
        ctx.update(extra)
    return ctx


def reset_context() -> None:
    """Clear every bound value."""
    _run_id_var.set("")
    _operator_var.set("")
    _guest_id_var.set("")
    _extra_context_var.set({})


@dataclass
class RunContext:
    """Context manager for run-scoped logging context.

    Example:
        with RunContext(operator="admin"):
            board.build(guests, payments, now)  # logs carry run_id
    """

    run_id: str = ""
    operator: str = ""
    extra: dict[str, Any] = field(default_factory=dict)
    started_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    _tokens: list = field(default_factory=list, repr=False)

    def __post_init__(self):
        if not self.run_id:
            self.run_id = generate_run_id()

    def __enter__(self) -> "RunContext":
        self._tokens = [
            (_run_id_var, _run_id_var.set(self.run_id)),
            (_operator_var, _operator_var.set(self.operator)),
            (_extra_context_var, _extra_context_var.set(self.extra.copy())),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since context was created."""
        delta = datetime.now(timezone.utc) - self.started_at
        return delta.total_seconds() * 1000

    def bind(self, **kwargs: Any) -> None:
        """Add extra key-value pairs to the context."""
        current = _extra_context_var.get()
        _extra_context_var.set({**current, **kwargs})
        self.extra.update(kwargs)


@contextmanager
def bind_guest(guest_id: str) -> Iterator[None]:
    """Tag log entries emitted inside the block with a guest ID."""
    token = _guest_id_var.set(guest_id)
    try:
        yield
    finally:
        _guest_id_var.reset(token)
