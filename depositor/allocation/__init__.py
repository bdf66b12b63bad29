"""Deposit plan validation, ordering, balance seeding and allocation."""

from .allocator import (
    AllocationResult,
    PlanCursor,
    allocate,
    allocate_funds,
    run_allocation,
)
from .balances import Balances, seed_balances
from .errors import (
    AllocationError,
    EmptyDepositsError,
    EmptyPlansError,
    InvalidPlanKindError,
    InvalidPortfolioError,
    TooManyPlansError,
)
from .plans import DepositPlan, PlanKind, coerce_plan, order_plans, resolve_kind
from .policy import DEFAULT_MAX_PLANS, AllocatorConfig, BalanceKeys
from .validation import validate

__all__ = [
    "AllocationResult",
    "PlanCursor",
    "allocate",
    "allocate_funds",
    "run_allocation",
    "Balances",
    "seed_balances",
    "AllocationError",
    "EmptyDepositsError",
    "EmptyPlansError",
    "InvalidPlanKindError",
    "InvalidPortfolioError",
    "TooManyPlansError",
    "DepositPlan",
    "PlanKind",
    "coerce_plan",
    "order_plans",
    "resolve_kind",
    "DEFAULT_MAX_PLANS",
    "AllocatorConfig",
    "BalanceKeys",
    "validate",
]
