"""Mini README: Doctor and subscription value types.

Structure:
    * SubscriptionPlan - enum of the free and premium tiers.
    * SubscriptionStatus - enum of active versus expired subscriptions.
    * Subscription - dataclass carrying the plan window and renewal flag.
    * Doctor - dataclass holding identity details and the subscription.

Plans gate how many surgery records, progress entries and finance hospitals
a doctor may create. Only the plan value is consulted by the guard; the
status and dates describe the billing window.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubscriptionPlan(str, Enum):
    """Enumerate the subscription tiers."""

    FREE = "free"
    PREMIUM = "premium"

    @classmethod
    def from_str(cls, value: str) -> "SubscriptionPlan":
        """Coerce arbitrary casing into a valid plan."""

        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Invalid plan selected: {value}") from error


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


@dataclass(slots=True)
class Subscription:
    """Current plan and billing window of a doctor."""

    plan: SubscriptionPlan = SubscriptionPlan.FREE
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    start_date: datetime = field(default_factory=_utcnow)
    end_date: Optional[datetime] = None
    auto_renew: bool = True

    def as_dict(self) -> Dict[str, object]:
        return {
            "plan": self.plan.value,
            "status": self.status.value,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "autoRenew": self.auto_renew,
        }


@dataclass(slots=True)
class Doctor:
    """A registered doctor owning hospitals and surgery records."""

    doctor_id: str
    name: str
    email: str
    specialization: str = "General Practitioner"
    subscription: Subscription = field(default_factory=Subscription)

    @property
    def is_premium(self) -> bool:
        return self.subscription.plan is SubscriptionPlan.PREMIUM

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.doctor_id,
            "name": self.name,
            "email": self.email,
            "specialization": self.specialization,
            "subscription": self.subscription.as_dict(),
        }
