from __future__ import annotations

from typing import Dict, Sequence

from .plans import DepositPlan
from .policy import BalanceKeys

__all__ = ["Balances", "seed_balances"]

Balances = Dict[str, float]


def seed_balances(
    ordered_plans: Sequence[DepositPlan],
    keys: BalanceKeys = BalanceKeys.FIRST_PLAN,
) -> Balances:
    """Return a zero balance for every portfolio name in play.

    With ``BalanceKeys.FIRST_PLAN`` only the first ordered plan defines the
    key set; names introduced by later plans are left out of the result.
    ``BalanceKeys.UNION`` appends those names in the order they appear.
    """

    if not ordered_plans:
        return {}
    sources = ordered_plans[:1] if keys is BalanceKeys.FIRST_PLAN else ordered_plans
    balances: Balances = {}
    for plan in sources:
        for name in plan.portfolios:
            balances.setdefault(name, 0)
    return balances
