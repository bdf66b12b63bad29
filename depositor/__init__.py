"""Depositor: allocate deposit batches across one-time and recurring plans."""

from .allocation import (
    AllocationError,
    AllocationResult,
    AllocatorConfig,
    BalanceKeys,
    DepositPlan,
    PlanKind,
    allocate,
    run_allocation,
)

__all__ = [
    "AllocationError",
    "AllocationResult",
    "AllocatorConfig",
    "BalanceKeys",
    "DepositPlan",
    "PlanKind",
    "allocate",
    "run_allocation",
]
