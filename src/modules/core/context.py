"""Explicit per-session context passed to every service command."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """Identifies the single owner of the aggregates being mutated.

    A cart, its orders, bookings and learning progress all belong to one
    session.  Services never look this up from ambient state.
    """

    session_id: str
    correlation_id: str = ""

    def __post_init__(self) -> None:
        if not self.session_id or not self.session_id.strip():
            raise ValueError("session_id must be a non-empty string.")

    @property
    def log_context(self) -> dict[str, str]:
        context = {"session_id": self.session_id}
        if self.correlation_id:
            context["correlation_id"] = self.correlation_id
        return context
