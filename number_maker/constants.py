"""Package‑wide constants and default run options."""

from typing import Any

# Values closer than this to an integer are snapped to it.
EPSILON = 1e-9

# Groups expanded between two timing checks.
GROUPS_PER_HEARTBEAT = 100

# Precedence given to a bare digit when deciding on brackets.
BARE_PRECEDENCE = 99

PARENS_SYMBOL = "( )"
PARENS_DESCRIPTION = "Group expressions, e.g. 2×(3+4) = 14"

TRAVERSALS = ("depth", "breadth")

DEFAULT_OPTIONS: dict[str, Any] = {
    "digit_string": "2024",
    "use_all_digits": True,
    "preserve_order": False,
    "symbols": [PARENS_SYMBOL, "+", "-", "×", "÷", "&", "!", "^"],
    # Display
    "display_limit": 100,
    "quiet": False,
    "heartbeat_seconds": 1.0,
    # Internals
    "value_limit": 10000,
    "traversal": "depth",
    "cache_limit": 2_000_000,
    # Timing
    "yield_seconds": 2.0,
    "max_duration_seconds": 5.0,
    "min_heartbeats": 1,
}

# camelCase names used by the message format, mapped to option fields
OPTION_ALIASES: dict[str, str] = {
    "digitString": "digit_string",
    "useAllDigits": "use_all_digits",
    "preserveOrder": "preserve_order",
    "displayLimit": "display_limit",
    "heartbeatSeconds": "heartbeat_seconds",
    "valueLimit": "value_limit",
    "yieldSeconds": "yield_seconds",
    "maxDurationSeconds": "max_duration_seconds",
    "minHeartbeats": "min_heartbeats",
    "cacheLimit": "cache_limit",
}

__all__ = [
    "EPSILON",
    "GROUPS_PER_HEARTBEAT",
    "BARE_PRECEDENCE",
    "PARENS_SYMBOL",
    "PARENS_DESCRIPTION",
    "TRAVERSALS",
    "DEFAULT_OPTIONS",
    "OPTION_ALIASES",
]
