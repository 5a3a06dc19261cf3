"""
core/plans.py
────────────────────────────────────────────────────────────────────────
Subscription tier → premium-meal policy.

A "premium" meal is anything rated 5 or above.  Each tier grants a target
number of premium meals per week; a fractional target (weekly plan) means
the premium meal only lands on some weeks of the horizon.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

_LOG = logging.getLogger(__name__)

DEFAULT_TIER = "monthly"


@dataclass(frozen=True)
class SubscriptionPlan:
    tier: str
    label: str
    horizon_weeks_default: int
    premium_meals_per_week: float

    def premium_eligible(self, week_number: int) -> bool:
        if self.premium_meals_per_week >= 1:
            return True
        if self.premium_meals_per_week <= 0:
            return False
        # 0.5/week -> one week in two, starting at week 1
        cadence = round(1 / self.premium_meals_per_week)
        return (week_number - 1) % cadence == 0

    def premium_budget(self, week_number: int) -> int:
        if not self.premium_eligible(week_number):
            return 0
        return math.ceil(self.premium_meals_per_week)


PLANS: dict[str, SubscriptionPlan] = {
    "weekly": SubscriptionPlan("weekly", "Weekly Plan", 1, 0.5),
    "monthly": SubscriptionPlan("monthly", "Monthly Plan", 4, 1),
    "quarterly": SubscriptionPlan("quarterly", "3-Month Plan", 12, 1),
}


def resolve_plan(tier: str | None) -> SubscriptionPlan:
    key = (tier or "").strip().lower()
    plan = PLANS.get(key)
    if plan is None:
        _LOG.debug("unknown subscription tier %r → %s", tier, DEFAULT_TIER)
        return PLANS[DEFAULT_TIER]
    return plan
