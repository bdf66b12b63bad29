from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet

from .plans import PlanKind

__all__ = ["AllocatorConfig", "BalanceKeys", "DEFAULT_MAX_PLANS"]

DEFAULT_MAX_PLANS = 2


class BalanceKeys(str, Enum):
    """Which plans contribute portfolio names to the balance mapping."""

    FIRST_PLAN = "first_plan"
    UNION = "union"


@dataclass(slots=True)
class AllocatorConfig:
    """Thresholds and policies applied to a single allocation run."""

    max_plans: int = DEFAULT_MAX_PLANS
    recognized_kinds: FrozenSet[PlanKind] = field(
        default_factory=lambda: frozenset(PlanKind)
    )
    balance_keys: BalanceKeys = BalanceKeys.FIRST_PLAN
