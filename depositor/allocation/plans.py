from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .errors import InvalidPlanKindError, InvalidPortfolioError

__all__ = [
    "PlanKind",
    "DepositPlan",
    "PlanInput",
    "kind_label",
    "resolve_kind",
    "coerce_plan",
    "order_plans",
]


class PlanKind(str, Enum):
    """Deposit plan categories, ranked by processing order."""

    ONE_TIME = "one-time"
    RECURRING = "recurring"

    @property
    def rank(self) -> int:
        return _KIND_RANK[self]

    @property
    def retires(self) -> bool:
        """True when the plan is consumed by a single allocation pass."""
        return self is PlanKind.ONE_TIME


_KIND_RANK: Dict[PlanKind, int] = {
    PlanKind.ONE_TIME: 0,
    PlanKind.RECURRING: 1,
}

# Labels used by older plan payloads.
_KIND_ALIASES: Dict[str, PlanKind] = {
    "one time": PlanKind.ONE_TIME,
    "one_time": PlanKind.ONE_TIME,
    "onetime": PlanKind.ONE_TIME,
    "monthly": PlanKind.RECURRING,
}


@dataclass(frozen=True, slots=True)
class DepositPlan:
    """A plan kind plus its portfolio limits in insertion order."""

    kind: PlanKind
    portfolios: Mapping[str, float] = field(default_factory=dict)

    @property
    def capacity(self) -> float:
        return sum(self.portfolios.values())

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "DepositPlan":
        label = kind_label(payload)
        kind = resolve_kind(label)
        if kind is None:
            raise InvalidPlanKindError((label,))
        raw = payload.get("portfolios") or {}
        if not isinstance(raw, Mapping):
            raise InvalidPortfolioError(
                "plan portfolios must be a mapping of name -> limit"
            )
        portfolios: Dict[str, float] = {}
        for name, spec in raw.items():
            portfolios[str(name)] = _coerce_limit(name, spec)
        return cls(kind=kind, portfolios=portfolios)


PlanInput = Union[DepositPlan, Mapping[str, Any]]


def _coerce_limit(name: Any, spec: Any) -> float:
    value = spec.get("limit") if isinstance(spec, Mapping) else spec
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidPortfolioError(
            f"portfolio '{name}' limit must be numeric, got {value!r}",
            portfolio=str(name),
        )
    if not math.isfinite(value) or value < 0:
        raise InvalidPortfolioError(
            f"portfolio '{name}' limit must be a non-negative number",
            portfolio=str(name),
        )
    return value


def kind_label(plan: PlanInput) -> str:
    """Return the raw kind label carried by *plan*."""

    if isinstance(plan, DepositPlan):
        return plan.kind.value
    if isinstance(plan, Mapping):
        raw = plan.get("kind", plan.get("type"))
    else:
        raw = getattr(plan, "kind", None)
    if raw is None:
        return ""
    # str() of a str-valued Enum member is "PlanKind.ONE_TIME", not its value.
    return str(raw.value if isinstance(raw, Enum) else raw)


def resolve_kind(label: Any) -> Optional[PlanKind]:
    """Map a kind label (canonical or legacy) to :class:`PlanKind`."""

    if isinstance(label, PlanKind):
        return label
    token = str(label or "").strip()
    if not token:
        return None
    try:
        return PlanKind(token.lower())
    except ValueError:
        return _KIND_ALIASES.get(token.lower())


def coerce_plan(plan: PlanInput) -> DepositPlan:
    if isinstance(plan, DepositPlan):
        return plan
    if isinstance(plan, Mapping):
        return DepositPlan.from_mapping(plan)
    raise TypeError(f"unsupported plan payload: {type(plan).__name__}")


def order_plans(plans: Iterable[PlanInput]) -> List[DepositPlan]:
    """Return a new list with one-time plans ahead of recurring ones.

    ``sorted`` is stable, so plans of the same kind keep their input order.
    """

    return sorted((coerce_plan(plan) for plan in plans), key=lambda p: p.kind.rank)
