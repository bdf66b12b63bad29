from __future__ import annotations

import pytest

from depositor.allocation import (
    DepositPlan,
    InvalidPlanKindError,
    InvalidPortfolioError,
    PlanKind,
    coerce_plan,
    order_plans,
    resolve_kind,
)
from depositor.allocation.plans import kind_label


def test_order_puts_one_time_first():
    recurring = {"kind": "recurring", "portfolios": {"Retirement": {"limit": 100}}}
    one_time = {"kind": "one-time", "portfolios": {"High risk": {"limit": 10000}}}
    ordered = order_plans([recurring, one_time])
    assert [plan.kind for plan in ordered] == [PlanKind.ONE_TIME, PlanKind.RECURRING]


def test_order_is_stable_within_kind():
    first = DepositPlan(PlanKind.RECURRING, {"A": 1})
    second = DepositPlan(PlanKind.RECURRING, {"B": 2})
    one_time = DepositPlan(PlanKind.ONE_TIME, {"C": 3})
    ordered = order_plans([first, second, one_time])
    assert ordered == [one_time, first, second]


def test_order_does_not_mutate_input():
    plans = [
        DepositPlan(PlanKind.RECURRING, {"A": 1}),
        DepositPlan(PlanKind.ONE_TIME, {"B": 2}),
    ]
    snapshot = list(plans)
    order_plans(plans)
    assert plans == snapshot


def test_single_plan_is_returned_as_is():
    plan = DepositPlan(PlanKind.RECURRING, {"Retirement": 100})
    assert order_plans([plan]) == [plan]


def test_kind_rank_drives_order():
    assert PlanKind.ONE_TIME.rank < PlanKind.RECURRING.rank
    assert PlanKind.ONE_TIME.retires
    assert not PlanKind.RECURRING.retires


@pytest.mark.parametrize(
    "label, expected",
    [
        ("one-time", PlanKind.ONE_TIME),
        ("One time", PlanKind.ONE_TIME),
        ("RECURRING", PlanKind.RECURRING),
        ("Monthly", PlanKind.RECURRING),
        ("yearly", None),
        ("", None),
        (None, None),
    ],
)
def test_resolve_kind(label, expected):
    assert resolve_kind(label) is expected


def test_coerce_mapping_keeps_portfolio_order():
    plan = coerce_plan(
        {
            "kind": "one-time",
            "portfolios": {"Retirement": {"limit": 500}, "High risk": {"limit": 10000}},
        }
    )
    assert plan.kind is PlanKind.ONE_TIME
    assert list(plan.portfolios) == ["Retirement", "High risk"]
    assert plan.portfolios["High risk"] == 10000
    assert plan.capacity == 10500


def test_coerce_accepts_bare_limits_and_missing_portfolios():
    assert coerce_plan({"kind": "recurring", "portfolios": {"A": 5}}).portfolios == {"A": 5}
    assert coerce_plan({"kind": "one-time"}).portfolios == {}


@pytest.mark.parametrize("limit", [-1, "100", None, True, float("nan")])
def test_coerce_rejects_bad_limits(limit):
    with pytest.raises(InvalidPortfolioError) as excinfo:
        coerce_plan({"kind": "one-time", "portfolios": {"A": {"limit": limit}}})
    assert excinfo.value.portfolio == "A"


def test_coerce_rejects_unknown_payload():
    with pytest.raises(TypeError):
        coerce_plan("one-time")  # type: ignore[arg-type]


def test_coerce_rejects_unknown_kind():
    with pytest.raises(InvalidPlanKindError):
        coerce_plan({"kind": "weekly", "portfolios": {"A": 5}})


def test_coerce_rejects_non_mapping_portfolios():
    with pytest.raises(InvalidPortfolioError):
        coerce_plan({"kind": "one-time", "portfolios": [("A", 5)]})


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"kind": PlanKind.ONE_TIME}, "one-time"),
        ({"kind": PlanKind.RECURRING}, "recurring"),
        ({"type": PlanKind.RECURRING}, "recurring"),
        ({"kind": "Monthly"}, "Monthly"),
        ({}, ""),
    ],
)
def test_kind_label_reads_enum_members_by_value(payload, expected):
    assert kind_label(payload) == expected


def test_coerce_mapping_accepts_enum_kind():
    plan = coerce_plan({"kind": PlanKind.RECURRING, "portfolios": {"A": 5}})
    assert plan.kind is PlanKind.RECURRING
