"""Load deposit plans and deposit ledgers from files or CLI tokens.

Plan files are YAML (or JSON, selected by suffix) holding either a list of
plans or a mapping with a ``plans`` key::

    plans:
      - kind: one-time
        portfolios:
          High risk: {limit: 10000}
          Retirement: {limit: 500}
      - kind: recurring
        portfolios:
          Retirement: {limit: 100}

Deposit ledgers are CSV files with one deposit per row. Plan kinds are not
checked here; that is left to :func:`depositor.allocation.validate` so the
allocator reports them with its own error types.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

import numpy as np
import pandas as pd
import yaml

__all__ = [
    "PlanFileError",
    "DepositFileError",
    "load_plans",
    "load_deposits_csv",
    "parse_deposits",
]

logger = logging.getLogger(__name__)


class PlanFileError(ValueError):
    """Raised when a plan file cannot be read or has the wrong shape."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class DepositFileError(ValueError):
    """Raised when deposits cannot be read from a ledger or token list."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


def _parse_plan_text(text: str, path: Path) -> Any:
    if path.suffix.lower() == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise PlanFileError(f"Invalid JSON in {path}: {exc}", path=path) from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise PlanFileError(
            f"Unsafe or invalid YAML payload in {path}: {exc}", path=path
        ) from exc


def load_plans(path: Path | str) -> List[Dict[str, Any]]:
    """Read plan payloads from *path*, preserving file order."""

    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise PlanFileError(f"Plan file not found: {source}", path=source) from exc
    except OSError as exc:
        raise PlanFileError(f"Unable to read plan file: {source}", path=source) from exc

    payload = _parse_plan_text(text, source)
    if isinstance(payload, Mapping):
        payload = payload.get("plans")
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise PlanFileError(
            f"{source} must hold a list of plans or a 'plans' list", path=source
        )

    plans: List[Dict[str, Any]] = []
    for position, entry in enumerate(payload):
        if not isinstance(entry, Mapping):
            raise PlanFileError(
                f"plan #{position} in {source} must be a mapping", path=source
            )
        portfolios = entry.get("portfolios")
        if portfolios is not None and not isinstance(portfolios, Mapping):
            raise PlanFileError(
                f"plan #{position} in {source}: portfolios must be a mapping",
                path=source,
            )
        plans.append(dict(entry))
    logger.debug("plans_loaded path=%s count=%d", source, len(plans))
    return plans


def load_deposits_csv(path: Path | str, column: str = "amount") -> List[float]:
    """Return the finite deposit amounts of a CSV ledger in row order."""

    source = Path(path)
    try:
        frame = pd.read_csv(source)
    except FileNotFoundError as exc:
        raise DepositFileError(f"Deposit ledger not found: {source}", path=source) from exc
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise DepositFileError(
            f"Unable to parse deposit ledger {source}: {exc}", path=source
        ) from exc

    if column not in frame.columns:
        raise DepositFileError(
            f"Deposit ledger {source} has no '{column}' column", path=source
        )
    values = pd.to_numeric(frame[column], errors="coerce").to_numpy(dtype=float)
    finite = np.isfinite(values)
    dropped = int((~finite).sum())
    if dropped:
        logger.warning(
            "deposits_dropped path=%s column=%s rows=%d reason=non_numeric",
            source,
            column,
            dropped,
        )
    return [float(value) for value in values[finite]]


def _parse_amount(token: str) -> float:
    text = token.strip().replace("_", "")
    try:
        return int(text)
    except ValueError:
        return float(text)


def parse_deposits(tokens: Iterable[str]) -> List[float]:
    """Parse CLI deposit tokens; integral values stay ``int``."""

    amounts: List[float] = []
    for token in tokens:
        try:
            amounts.append(_parse_amount(str(token)))
        except ValueError as exc:
            raise DepositFileError(f"Invalid deposit amount: {token!r}") from exc
    return amounts
