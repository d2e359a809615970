"""Mini README: Subscription lifecycle after payment events.

Structure:
    * SubscriptionManager - applies payment confirmations and cancellations.

A confirmed payment grants a premium window of ``period_days``. Cancelling
only stops auto-renewal; the doctor keeps premium access until the window
ends.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional

from ..logging_utils import get_logger
from .models import Doctor, SubscriptionPlan, SubscriptionStatus

if TYPE_CHECKING:  # pragma: no cover
    from ..store import InMemoryStore

LOGGER = get_logger(__name__)


class SubscriptionManager:
    """Mutate doctor subscriptions in response to billing events."""

    def __init__(self, store: "InMemoryStore", *, period_days: int = 30) -> None:
        self._store = store
        self.period_days = period_days

    def confirm_upgrade(self, doctor_id: str, now: Optional[datetime] = None) -> Doctor:
        """Move the doctor onto an active premium window starting ``now``."""

        doctor = self._store.get_doctor(doctor_id)
        started = now or datetime.now(timezone.utc)
        subscription = doctor.subscription
        subscription.plan = SubscriptionPlan.PREMIUM
        subscription.status = SubscriptionStatus.ACTIVE
        subscription.start_date = started
        subscription.end_date = started + timedelta(days=self.period_days)
        subscription.auto_renew = True
        LOGGER.info(
            "Doctor %s upgraded to premium until %s",
            doctor_id,
            subscription.end_date.isoformat(),
        )
        return doctor

    def cancel_subscription(self, doctor_id: str) -> Doctor:
        """Stop auto-renewal without revoking the current window."""

        doctor = self._store.get_doctor(doctor_id)
        doctor.subscription.auto_renew = False
        LOGGER.info("Doctor %s cancelled auto-renewal", doctor_id)
        return doctor
