"""Mini README: Subscription plans and the plan limit guard.

``models`` holds the doctor and subscription value types, ``guard`` decides
whether free plan quotas allow an action, and ``manager`` applies payment
confirmations and cancellations.
"""

from .guard import PlanAction, PlanDecision, PlanLimitGuard, PlanQuotas
from .manager import SubscriptionManager
from .models import Doctor, Subscription, SubscriptionPlan, SubscriptionStatus

__all__ = [
    "Doctor",
    "PlanAction",
    "PlanDecision",
    "PlanLimitGuard",
    "PlanQuotas",
    "Subscription",
    "SubscriptionManager",
    "SubscriptionPlan",
    "SubscriptionStatus",
]
