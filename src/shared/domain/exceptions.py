"""Base exceptions shared by every bounded context.

Services raise these (or module-specific subclasses) when a business rule
is violated.  Every command is all-or-nothing: when one of these is raised,
nothing has been persisted or published.
"""

from __future__ import annotations


class DomainError(Exception):
    """Root of every recoverable business-rule failure."""


class InvalidTransition(DomainError):
    """A lifecycle transition is not allowed from the current status."""

    def __init__(self, current: str, target: str, reason: str = "") -> None:
        self.current = str(current)
        self.target = str(target)
        self.reason = reason
        message = f"Cannot transition from {self.current} to {self.target}"
        if reason:
            message += f": {reason}"
        super().__init__(message + ".")
