"""Configuration for the settlement report parser.

The parser functions receive a :class:`ParserConfig` explicitly. Only the
command-line entry point builds one from the environment via
:func:`load_config`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is not None:
        value = value.strip()
        if value == "":
            return default
        return value
    return default


def _get_decimal(key: str, default: Decimal) -> Decimal:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"Environment variable {key} must be a number") from exc


def _get_bool(key: str, default: bool) -> bool:
    value = _get_env(key)
    if value is None:
        return default
    value_lower = value.lower()
    if value_lower in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if value_lower in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(f"Environment variable {key} must be a boolean")


DEFAULT_TOLERANCE = Decimal("0.01")


@dataclass(slots=True, frozen=True)
class ParserConfig:
    debug: bool = False
    check_consistency: bool = True
    consistency_tolerance: Decimal = DEFAULT_TOLERANCE
    strict_amount_arity: bool = False
    log_level: str = "INFO"


def load_config() -> ParserConfig:
    tolerance = _get_decimal("SETTLEMENT_CONSISTENCY_TOLERANCE", DEFAULT_TOLERANCE)
    if tolerance < 0:
        raise ValueError("SETTLEMENT_CONSISTENCY_TOLERANCE must not be negative")

    return ParserConfig(
        debug=_get_bool("SETTLEMENT_DEBUG", False),
        check_consistency=_get_bool("SETTLEMENT_CHECK_CONSISTENCY", True),
        consistency_tolerance=tolerance,
        strict_amount_arity=_get_bool("SETTLEMENT_STRICT_ARITY", False),
        log_level=(_get_env("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
