# depositor/config.py
# =============================================================================
# Purpose:
#   Centralize runtime configuration for the allocator. Values typically come
#   from a .env file or the process environment, with defaults that reproduce
#   the historical two-plan behaviour.
#
# Summary:
#   - Defines a Settings dataclass for strongly-typed config
#   - Loads environment variables via python-dotenv
#   - Exposes load_settings() and allocator_config() for the CLI and tests
# =============================================================================
from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Literal, Mapping, Tuple, overload

from dotenv import load_dotenv

from .allocation.plans import PlanKind, resolve_kind
from .allocation.policy import DEFAULT_MAX_PLANS, AllocatorConfig, BalanceKeys

_LOGGER = logging.getLogger("depositor.config")

DEFAULT_PLAN_KINDS: Tuple[str, ...] = tuple(kind.value for kind in PlanKind)


@dataclass
class Settings:
    """Strongly-typed container for config values."""

    log_level: str = "INFO"
    log_file: str | None = None
    max_plans: int = DEFAULT_MAX_PLANS
    plan_kinds: Tuple[str, ...] = DEFAULT_PLAN_KINDS
    balance_keys: str = BalanceKeys.FIRST_PLAN.value


@dataclass(frozen=True)
class _FieldSpec:
    env: str
    default: Any
    coerce: Callable[[Any, Any], Tuple[Any, bool]]


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def _pick_precedence(
    cli_value: Any, env_value: Any, default_value: Any
) -> Tuple[Any, str]:
    if not _is_missing(cli_value):
        return cli_value, "cli"
    if not _is_missing(env_value):
        return env_value, "env"
    return default_value, "default"


def _str_coercer(
    *, upper: bool = False, optional: bool = False
) -> Callable[[Any, Any], Tuple[str | None, bool]]:
    def _inner(value: Any, default: Any) -> Tuple[str | None, bool]:
        if value is None:
            return default, optional
        text = str(value).strip()
        if text == "":
            return default, optional
        if upper:
            text = text.upper()
        return text, True

    return _inner


def _positive_int_coercer(value: Any, default: Any) -> Tuple[int, bool]:
    if value is None:
        return int(default), False
    token = value.strip() if isinstance(value, str) else value
    try:
        parsed = int(token)
    except (TypeError, ValueError):
        return int(default), False
    if parsed < 1:
        return int(default), False
    return parsed, True


def _kinds_coercer(value: Any, default: Any) -> Tuple[Tuple[str, ...], bool]:
    if value is None:
        return tuple(default), False
    if isinstance(value, str):
        parts = [segment.strip() for segment in value.split(",") if segment.strip()]
    else:
        parts = [str(segment) for segment in value]
    kinds = []
    for part in parts:
        kind = resolve_kind(part)
        if kind is None:
            return tuple(default), False
        if kind.value not in kinds:
            kinds.append(kind.value)
    if not kinds:
        return tuple(default), False
    return tuple(kinds), True


def _balance_keys_coercer(value: Any, default: Any) -> Tuple[str, bool]:
    if value is None:
        return str(default), False
    token = str(getattr(value, "value", value)).strip().lower()
    try:
        return BalanceKeys(token).value, True
    except ValueError:
        return str(default), False


_FIELD_SPECS: Dict[str, _FieldSpec] = {
    "log_level": _FieldSpec("LOG_LEVEL", "INFO", _str_coercer(upper=True)),
    "log_file": _FieldSpec("LOG_FILE", None, _str_coercer(optional=True)),
    "max_plans": _FieldSpec("ALLOC_MAX_PLANS", DEFAULT_MAX_PLANS, _positive_int_coercer),
    "plan_kinds": _FieldSpec("ALLOC_PLAN_KINDS", DEFAULT_PLAN_KINDS, _kinds_coercer),
    "balance_keys": _FieldSpec(
        "ALLOC_BALANCE_KEYS", BalanceKeys.FIRST_PLAN.value, _balance_keys_coercer
    ),
}


@overload
def load_settings(
    *,
    cli_overrides: Mapping[str, Any] | None = None,
    include_sources: Literal[True],
    logger: logging.Logger | None = None,
) -> Tuple[Settings, Dict[str, str]]: ...


@overload
def load_settings(
    *,
    cli_overrides: Mapping[str, Any] | None = None,
    include_sources: Literal[False] = False,
    logger: logging.Logger | None = None,
) -> Settings: ...


def load_settings(
    *,
    cli_overrides: Mapping[str, Any] | None = None,
    include_sources: bool = False,
    logger: logging.Logger | None = None,
) -> Settings | Tuple[Settings, Dict[str, str]]:
    """Resolve settings with deterministic precedence and logging.

    The precedence order is CLI overrides > environment > defaults. When
    ``include_sources`` is true, the function returns ``(Settings, sources)``
    where *sources* maps field names to ``{"cli" | "env" | "default"}``.
    """

    load_dotenv()

    overrides = {
        key: value for key, value in (cli_overrides or {}).items() if value is not None
    }
    defaults = asdict(Settings())

    log = logger or _LOGGER
    resolved: Dict[str, Any] = {}
    sources: Dict[str, str] = {}

    for field_name, spec in _FIELD_SPECS.items():
        default_value = defaults.get(field_name, spec.default)
        cli_value = overrides.get(field_name)
        env_value = os.getenv(spec.env)

        raw_value, source = _pick_precedence(cli_value, env_value, default_value)
        coerced, ok = spec.coerce(raw_value, default_value)
        if not ok:
            if source != "default":
                log.warning(
                    "config_invalid_value key=%s source=%s fallback=%s",
                    field_name,
                    source,
                    default_value,
                )
            coerced = default_value
            source = "default"

        log.info(
            "config_resolved key=%s value=%s source=%s", field_name, coerced, source
        )
        resolved[field_name] = coerced
        sources[field_name] = source

    settings = Settings(**resolved)
    if include_sources:
        return settings, sources
    return settings


def allocator_config(settings: Settings) -> AllocatorConfig:
    """Translate resolved settings into the allocator's injected policy."""

    return AllocatorConfig(
        max_plans=settings.max_plans,
        recognized_kinds=frozenset(PlanKind(kind) for kind in settings.plan_kinds),
        balance_keys=BalanceKeys(settings.balance_keys),
    )
