"""Mini README: Exception types shared across Care101 services.

Structure:
    * NotFoundError - a referenced doctor, hospital, or record does not exist.
    * QuotaExceededError - a plan limit denied a mutating action.

Malformed payloads raise plain ``ValueError`` so the REST layer can map the
three families to 400, 403 and 404 responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .subscriptions.guard import PlanDecision


class NotFoundError(KeyError):
    """Raised when a document lookup fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class QuotaExceededError(Exception):
    """Raised by managers when the plan guard denies an action."""

    def __init__(self, decision: "PlanDecision") -> None:
        super().__init__(decision.message)
        self.decision = decision

    @property
    def message(self) -> str:
        return self.decision.message

    @property
    def upgrade_available(self) -> bool:
        return self.decision.upgrade_available
