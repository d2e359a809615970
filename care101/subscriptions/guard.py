"""Mini README: Subscription plan limit guard.

Structure:
    * PlanAction - enum of the mutating actions that carry free plan quotas.
    * PlanQuotas - dataclass of the free plan limits.
    * PlanDecision - allow/deny outcome with a display message.
    * PlanLimitGuard - reads current counts from the store and decides.

The guard is a pre-condition check. It reads a count, compares it with the
quota and returns; the caller performs the mutation afterwards. Two callers
that check before either inserts can both be allowed, so managers hold
``store.lock`` across the check and the insert when they need the quota to be
exact. Business denials are returned as ``PlanDecision`` values, never raised,
except through ``enforce`` which wraps them in ``QuotaExceededError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from ..errors import QuotaExceededError
from ..logging_utils import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from ..store import InMemoryStore

LOGGER = get_logger(__name__)


class PlanAction(str, Enum):
    """Actions gated by the free plan."""

    CREATE_RECORD = "create_record"
    ADD_ENTRY = "add_entry"
    ADD_HOSPITAL = "add_hospital"


@dataclass(frozen=True, slots=True)
class PlanQuotas:
    """Free plan limits; premium doctors are unrestricted."""

    max_records: int = 4
    max_entries_per_record: int = 3
    max_hospitals: int = 1


@dataclass(frozen=True, slots=True)
class PlanDecision:
    """Outcome of a plan limit check."""

    allowed: bool
    message: str = ""
    upgrade_available: bool = False

    @classmethod
    def allow(cls) -> "PlanDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, message: str) -> "PlanDecision":
        return cls(allowed=False, message=message, upgrade_available=True)

    def __bool__(self) -> bool:
        return self.allowed


class PlanLimitGuard:
    """Approve or deny mutating actions based on the doctor's plan."""

    def __init__(self, store: "InMemoryStore", quotas: Optional[PlanQuotas] = None) -> None:
        self._store = store
        self.quotas = quotas or PlanQuotas()

    def check(
        self,
        doctor_id: str,
        action: Union[PlanAction, str],
        target_id: Optional[str] = None,
    ) -> PlanDecision:
        """Return whether ``action`` is allowed for ``doctor_id`` right now.

        Raises ``NotFoundError`` when the doctor does not exist. Actions
        without a quota are always allowed.
        """

        doctor = self._store.get_doctor(doctor_id)
        if doctor.is_premium:
            return PlanDecision.allow()

        try:
            action = PlanAction(action)
        except ValueError:
            LOGGER.debug("No quota defined for action %s; allowing", action)
            return PlanDecision.allow()

        decision = PlanDecision.allow()
        if action is PlanAction.CREATE_RECORD:
            count = self._store.count_surgery_records(doctor_id)
            if count >= self.quotas.max_records:
                decision = PlanDecision.deny(
                    "Free Plan Limit: You can only manage "
                    f"{self.quotas.max_records} Patient Records. "
                    "Upgrade to Premium for unlimited access."
                )
        elif action is PlanAction.ADD_ENTRY:
            record = self._store.find_surgery_record(target_id) if target_id else None
            # Unknown records pass; the caller's own lookup reports them.
            if record is not None and len(record.entries) >= self.quotas.max_entries_per_record:
                decision = PlanDecision.deny(
                    "Free Plan Limit: You can only add "
                    f"{self.quotas.max_entries_per_record} progress entries per patient. "
                    "Upgrade to Premium."
                )
        elif action is PlanAction.ADD_HOSPITAL:
            count = self._store.count_hospitals(doctor_id)
            if count >= self.quotas.max_hospitals:
                decision = PlanDecision.deny(
                    "Free Plan Limit: You can only track "
                    f"{self.quotas.max_hospitals} Hospital in finances. "
                    "Upgrade to Premium."
                )

        if not decision.allowed:
            LOGGER.warning(
                "Plan limit reached for doctor=%s action=%s", doctor_id, action.value
            )
        return decision

    def enforce(
        self,
        doctor_id: str,
        action: Union[PlanAction, str],
        target_id: Optional[str] = None,
    ) -> None:
        """Raise ``QuotaExceededError`` when the check denies the action."""

        decision = self.check(doctor_id, action, target_id)
        if not decision.allowed:
            raise QuotaExceededError(decision)
