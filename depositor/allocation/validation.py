from __future__ import annotations

from typing import Optional, Sequence

from .errors import (
    EmptyDepositsError,
    EmptyPlansError,
    InvalidPlanKindError,
    TooManyPlansError,
)
from .plans import PlanInput, kind_label, resolve_kind
from .policy import AllocatorConfig

__all__ = ["validate"]


def _is_empty(batch: Optional[Sequence[object]]) -> bool:
    return batch is None or len(batch) == 0


def validate(
    plans: Optional[Sequence[PlanInput]],
    deposits: Optional[Sequence[float]],
    config: AllocatorConfig | None = None,
) -> None:
    """Raise the first precondition violation for a plan/deposit batch.

    Checks run in a fixed order: deposits present, plans present, plan count
    within ``config.max_plans``, then every plan kind recognised.
    """

    cfg = config or AllocatorConfig()
    if _is_empty(deposits):
        raise EmptyDepositsError()
    if plans is None or _is_empty(plans):
        raise EmptyPlansError()
    if len(plans) > cfg.max_plans:
        raise TooManyPlansError(len(plans), cfg.max_plans)

    invalid = []
    for plan in plans:
        label = kind_label(plan)
        kind = resolve_kind(label)
        if kind is None or kind not in cfg.recognized_kinds:
            invalid.append(label)
    if invalid:
        raise InvalidPlanKindError(tuple(invalid))
