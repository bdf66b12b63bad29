from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from .balances import Balances, seed_balances
from .plans import DepositPlan, PlanInput, PlanKind, order_plans
from .policy import AllocatorConfig
from .validation import validate

__all__ = [
    "AllocationResult",
    "PlanCursor",
    "allocate",
    "allocate_funds",
    "run_allocation",
]

logger = logging.getLogger(__name__)


class PlanCursor:
    """Read-only cursor over ordered plans that retires one-time plans."""

    def __init__(self, plans: Sequence[DepositPlan]) -> None:
        self._plans: Tuple[DepositPlan, ...] = tuple(plans)
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Optional[DepositPlan]:
        if self._index >= len(self._plans):
            return None
        return self._plans[self._index]

    @property
    def exhausted(self) -> bool:
        return self.current is None

    def retire_if_one_time(self) -> bool:
        """Advance past the current plan when it is single-use."""
        plan = self.current
        if plan is None or not plan.kind.retires:
            return False
        self._index += 1
        return True


@dataclass(slots=True)
class AllocationResult:
    """Outcome of :func:`run_allocation`."""

    balances: Balances
    total_deposited: float
    unallocated: float
    passes: int
    retired: Tuple[PlanKind, ...] = field(default_factory=tuple)

    @property
    def allocated(self) -> float:
        return self.total_deposited - self.unallocated

    def to_series(self) -> pd.Series:
        return pd.Series(self.balances, name="balance", dtype=float)


def _fill_pass(
    plan: DepositPlan,
    plan_index: int,
    remaining: float,
    balances: Balances,
    routed: Dict[Tuple[int, str], float],
) -> Tuple[float, float]:
    moved_total = 0
    for name, limit in plan.portfolios.items():
        if remaining <= 0:
            break
        if name not in balances:
            logger.debug("allocation_skip portfolio=%s reason=untracked", name)
            continue
        key = (plan_index, name)
        headroom = limit - routed.get(key, 0)
        if headroom <= 0:
            continue
        moved = headroom if remaining >= headroom else remaining
        balances[name] += moved
        routed[key] = routed.get(key, 0) + moved
        remaining -= moved
        moved_total += moved
    return remaining, moved_total


def allocate_funds(
    ordered_plans: Sequence[DepositPlan],
    total: float,
    balances: Balances,
) -> AllocationResult:
    """Distribute *total* over already validated and ordered plans.

    Each pass greedily fills the current plan's portfolios in insertion
    order. A plan never routes more than its limit to a portfolio over the
    whole run, so revisiting a saturated recurring plan moves nothing and
    ends the run.
    """

    cursor = PlanCursor(ordered_plans)
    routed: Dict[Tuple[int, str], float] = {}
    retired: List[PlanKind] = []
    remaining = total
    passes = 0

    while remaining > 0:
        plan = cursor.current
        if plan is None:
            break
        remaining, moved = _fill_pass(plan, cursor.index, remaining, balances, routed)
        passes += 1
        logger.debug(
            "allocation_pass index=%d kind=%s capacity=%s routed=%s remaining=%s",
            cursor.index,
            plan.kind.value,
            plan.capacity,
            moved,
            remaining,
        )
        if cursor.retire_if_one_time():
            retired.append(plan.kind)
            continue
        if moved <= 0:
            break

    return AllocationResult(
        balances=balances,
        total_deposited=total,
        unallocated=remaining,
        passes=passes,
        retired=tuple(retired),
    )


def run_allocation(
    plans: Sequence[PlanInput],
    deposits: Sequence[float],
    config: AllocatorConfig | None = None,
) -> AllocationResult:
    """Validate, order and allocate a deposit batch, returning full details."""

    cfg = config or AllocatorConfig()
    validate(plans, deposits, cfg)
    total = sum(deposits)
    ordered = order_plans(plans)
    balances = seed_balances(ordered, cfg.balance_keys)
    result = allocate_funds(ordered, total, balances)
    logger.info(
        "allocation_complete plans=%d total=%s allocated=%s unallocated=%s passes=%d",
        len(ordered),
        result.total_deposited,
        result.allocated,
        result.unallocated,
        result.passes,
    )
    return result


def allocate(
    plans: Sequence[PlanInput],
    deposits: Sequence[float],
    config: AllocatorConfig | None = None,
) -> Balances:
    """Return the portfolio balances produced by allocating *deposits*."""

    return run_allocation(plans, deposits, config).balances
