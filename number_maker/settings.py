"""Run options supplied by the caller and the immutable settings derived from them."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from .constants import DEFAULT_OPTIONS, OPTION_ALIASES, PARENS_SYMBOL, TRAVERSALS
from .operators import SYMBOLS, Operator, normalize_symbol, operators_for_symbols

logger = logging.getLogger(__name__)


class OptionsError(ValueError):
    """Raised when run options cannot be turned into settings."""


@dataclass
class Options:
    """Changeable options that control how a search runs."""

    digit_string: str = DEFAULT_OPTIONS["digit_string"]
    use_all_digits: bool = DEFAULT_OPTIONS["use_all_digits"]
    preserve_order: bool = DEFAULT_OPTIONS["preserve_order"]
    symbols: list[str] = field(default_factory=lambda: list(DEFAULT_OPTIONS["symbols"]))
    # Display
    display_limit: int = DEFAULT_OPTIONS["display_limit"]
    quiet: bool = DEFAULT_OPTIONS["quiet"]
    heartbeat_seconds: float = DEFAULT_OPTIONS["heartbeat_seconds"]
    # Internals
    value_limit: int = DEFAULT_OPTIONS["value_limit"]
    traversal: str = DEFAULT_OPTIONS["traversal"]
    cache_limit: int = DEFAULT_OPTIONS["cache_limit"]
    # Timing
    yield_seconds: float = DEFAULT_OPTIONS["yield_seconds"]
    max_duration_seconds: float = DEFAULT_OPTIONS["max_duration_seconds"]
    min_heartbeats: int = DEFAULT_OPTIONS["min_heartbeats"]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Options":
        """Build options from snake_case or camelCase keys.

        Unknown keys are ignored with a warning so that configuration files
        written for newer versions still load.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                logger.warning("[number-maker] ignoring unknown option %r", key)
                continue
            if name == "symbols" and isinstance(value, tuple):
                value = list(value)
            kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class Settings:
    """Parameters for one run, derived once from :class:`Options`."""

    digit_string: str
    digits: tuple[int, ...]
    use_all_digits: bool
    preserve_order: bool
    symbols: tuple[str, ...]
    allow_parens: bool
    unary_operators: tuple[Operator, ...]
    binary_operators: tuple[Operator, ...]
    value_limit: float
    display_limit: int
    quiet: bool
    traversal: str
    cache_limit: int
    heartbeat_seconds: float
    heartbeat_ms: float
    yield_seconds: float
    yield_ms: float
    max_duration_seconds: float
    min_heartbeats: int


def _check_number(name: str, value: Any, *, minimum: float, inclusive: bool) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise OptionsError(f"{name} must be a number, got {value!r}")
    if value < minimum or (not inclusive and value == minimum):
        bound = ">=" if inclusive else ">"
        raise OptionsError(f"{name} must be {bound} {minimum}, got {value!r}")
    return value


def build_settings(options: Options) -> Settings:
    """Validate ``options`` and derive the settings for a run.

    Raises :class:`OptionsError` with a descriptive message when the options
    are unusable.
    """
    digit_string = str(options.digit_string or "").strip()
    if not digit_string:
        raise OptionsError("digit string is empty")
    bad = sorted({ch for ch in digit_string if ch not in "0123456789"})
    if bad:
        raise OptionsError(f"digit string may only contain 0-9, found {''.join(bad)!r}")

    raw_symbols = options.symbols
    if isinstance(raw_symbols, str) or not isinstance(raw_symbols, (list, tuple)):
        raise OptionsError(f"symbols must be a list of strings, got {raw_symbols!r}")
    not_text = [s for s in raw_symbols if not isinstance(s, str)]
    if not_text:
        raise OptionsError(f"symbols must be strings, got {', '.join(repr(s) for s in not_text)}")
    symbols = tuple(normalize_symbol(s) for s in raw_symbols)
    unknown = [s for s in symbols if s not in SYMBOLS]
    if unknown:
        raise OptionsError(f"unknown operator symbol(s): {', '.join(repr(s) for s in unknown)}")
    operators = operators_for_symbols(symbols)
    if not operators and len(digit_string) > 1:
        raise OptionsError("no operators selected")

    value_limit = _check_number("value_limit", options.value_limit, minimum=0, inclusive=False)
    heartbeat_seconds = _check_number(
        "heartbeat_seconds", options.heartbeat_seconds, minimum=0, inclusive=False
    )
    yield_seconds = _check_number("yield_seconds", options.yield_seconds, minimum=0, inclusive=False)
    max_duration = _check_number(
        "max_duration_seconds", options.max_duration_seconds, minimum=0, inclusive=True
    )
    min_heartbeats = int(_check_number("min_heartbeats", options.min_heartbeats, minimum=0, inclusive=True))
    display_limit = int(_check_number("display_limit", options.display_limit, minimum=0, inclusive=True))
    cache_limit = int(_check_number("cache_limit", options.cache_limit, minimum=1, inclusive=True))
    if options.traversal not in TRAVERSALS:
        raise OptionsError(f"traversal must be one of {', '.join(TRAVERSALS)}, got {options.traversal!r}")

    use_all_digits = bool(options.use_all_digits)
    return Settings(
        digit_string=digit_string,
        digits=tuple(int(ch) for ch in digit_string),
        use_all_digits=use_all_digits,
        # order only matters when every digit has to be used
        preserve_order=bool(options.preserve_order) and use_all_digits,
        symbols=symbols,
        allow_parens=PARENS_SYMBOL in symbols,
        unary_operators=tuple(op for op in operators if op.is_unary),
        binary_operators=tuple(op for op in operators if not op.is_unary),
        value_limit=value_limit,
        display_limit=display_limit,
        quiet=bool(options.quiet),
        traversal=options.traversal,
        cache_limit=cache_limit,
        heartbeat_seconds=float(heartbeat_seconds),
        heartbeat_ms=float(heartbeat_seconds) * 1000,
        yield_seconds=float(yield_seconds),
        yield_ms=float(yield_seconds) * 1000,
        max_duration_seconds=float(max_duration),
        min_heartbeats=min_heartbeats,
    )


__all__ = ["OptionsError", "Options", "Settings", "build_settings"]
