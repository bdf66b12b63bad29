# depositor/cli.py
# =============================================================================
# Purpose:
#   Command-line interface for the deposit allocator. Wires configuration,
#   plan/deposit loading and the allocation pipeline together and prints the
#   resulting balances.
#
# Design Philosophy:
#   - Keep CLI thin; allocation rules live in depositor.allocation.
#   - Flags override environment values, which override defaults.
# =============================================================================
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .allocation import AllocationError, AllocationResult, BalanceKeys, run_allocation
from .config import Settings, allocator_config, load_settings
from .loaders import (
    DepositFileError,
    PlanFileError,
    load_deposits_csv,
    load_plans,
    parse_deposits,
)
from .logging_setup import setup_app_logging

logger = logging.getLogger(__name__)

ERROR_DEPOSIT_SOURCE = "provide deposits with either --deposit or --deposits-csv"
ERROR_DEPOSIT_SOURCES_EXCLUSIVE = (
    "inputs are mutually exclusive: --deposit and --deposits-csv"
)


def _usage_error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)
    raise SystemExit(2)


def _settings_from_args(args: argparse.Namespace) -> Settings:
    overrides: Dict[str, Any] = {
        "log_level": getattr(args, "log_level", None),
        "max_plans": getattr(args, "max_plans", None),
        "plan_kinds": getattr(args, "plan_kinds", None),
        "balance_keys": getattr(args, "balance_keys", None),
    }
    return load_settings(cli_overrides=overrides)


def _read_deposits(args: argparse.Namespace) -> List[float]:
    inline = getattr(args, "deposits", None)
    ledger = getattr(args, "deposits_csv", None)
    if inline and ledger:
        _usage_error(ERROR_DEPOSIT_SOURCES_EXCLUSIVE)
    if ledger:
        return load_deposits_csv(ledger, column=args.deposit_column)
    if inline:
        return parse_deposits(inline)
    _usage_error(ERROR_DEPOSIT_SOURCE)
    raise AssertionError("unreachable")


def _result_payload(result: AllocationResult) -> Dict[str, Any]:
    return {
        "balances": dict(result.balances),
        "total_deposited": result.total_deposited,
        "allocated": result.allocated,
        "unallocated": result.unallocated,
        "passes": result.passes,
        "retired": [kind.value for kind in result.retired],
    }


def _print_result(result: AllocationResult) -> None:
    width = max([len("Portfolio"), *(len(name) for name in result.balances)])
    print(f"{'Portfolio':<{width}}  {'Balance':>14}")
    for name, balance in result.balances.items():
        print(f"{name:<{width}}  {balance:>14,.2f}")
    print(f"Total deposited: {result.total_deposited:,.2f}")
    print(f"Allocated: {result.allocated:,.2f}")
    print(f"Unallocated: {result.unallocated:,.2f}")


def cmd_allocate(args: argparse.Namespace, *, settings: Settings | None = None) -> None:
    """Allocate a deposit batch across the plans in ``--plans``."""
    settings = settings or _settings_from_args(args)
    setup_app_logging(settings.log_level, settings.log_file)

    try:
        deposits = _read_deposits(args)
        plans = load_plans(args.plans)
        result = run_allocation(plans, deposits, allocator_config(settings))
    except (AllocationError, PlanFileError, DepositFileError) as exc:
        logger.error("allocation_failed reason=%s", exc)
        _usage_error(str(exc))
        return

    if args.json:
        print(json.dumps(_result_payload(result), indent=2))
    else:
        _print_result(result)


# -----------------------------------------------------------------------------
# CLI entrypoint
# -----------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI parser so shim modules can reuse it."""
    parser = argparse.ArgumentParser(
        prog="depositor", description="Deposit plan allocation CLI"
    )
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("allocate", help="Allocate deposits across deposit plans")
    p.add_argument(
        "--plans",
        type=Path,
        required=True,
        help="YAML or JSON file holding the deposit plans",
    )
    p.add_argument(
        "--deposit",
        dest="deposits",
        nargs="+",
        default=None,
        help="One or more deposit amounts (e.g. --deposit 10500 100)",
    )
    p.add_argument(
        "--deposits-csv",
        type=Path,
        default=None,
        help="CSV ledger with one deposit per row",
    )
    p.add_argument(
        "--deposit-column",
        default="amount",
        help="Ledger column holding the deposit amounts",
    )
    p.add_argument(
        "--max-plans",
        type=int,
        default=None,
        help="Maximum plans per batch (env ALLOC_MAX_PLANS, default 2)",
    )
    p.add_argument(
        "--plan-kinds",
        default=None,
        help="Comma list of accepted plan kinds (env ALLOC_PLAN_KINDS)",
    )
    p.add_argument(
        "--balance-keys",
        choices=[keys.value for keys in BalanceKeys],
        default=None,
        help="Portfolio names reported: first ordered plan only, or all plans",
    )
    p.add_argument("--log-level", default=None, help="Logging level (env LOG_LEVEL)")
    p.add_argument("--json", action="store_true", help="Emit the result as JSON")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments and dispatch to subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "allocate":
        cmd_allocate(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
