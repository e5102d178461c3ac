"""
Value typing and validation rules for stored configuration.

Configuration values are persisted as text. ``cast_value`` and
``serialize_value`` convert between the stored text and Python values for
the supported types (``string``, ``integer``, ``boolean``, ``array``,
``json``). ``validate_rule`` checks a value against one rule string.
"""

from __future__ import annotations

import json
import math
from typing import Any, Optional

TRUE_STRINGS = frozenset({"1", "true", "on", "yes"})


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def is_numeric(value: Any) -> bool:
    """True for ints, finite floats and strings that parse as a finite number (bools excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return False
        return math.isfinite(number)
    return False


def is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (list, dict, tuple, set)):
        return len(value) == 0
    return False


def cast_value(value: Optional[str], value_type: str) -> Any:
    """
    Convert a stored value into its Python type.

    Args:
        value: The stored (serialized) value
        value_type: One of string, integer, boolean, array, json

    Returns:
        The typed value, or None when nothing is stored
    """
    if value is None:
        return None
    if value_type == "integer":
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0
    if value_type == "boolean":
        return to_bool(value)
    if value_type in ("array", "json"):
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                return None
        return value
    return value


def serialize_value(value: Any, value_type: str) -> str:
    """Serialize a Python value for storage as text."""
    if value_type in ("array", "json"):
        return json.dumps(value) if isinstance(value, (list, dict)) else str(value)
    if value_type == "boolean":
        return "true" if to_bool(value) else "false"
    return str(value)


def parse_rules(raw: Optional[str]) -> list:
    if not raw:
        return []
    try:
        rules = json.loads(raw)
    except ValueError:
        return []
    return rules if isinstance(rules, list) else []


def validate_rule(rule: str, value: Any) -> bool:
    """
    Check a value against one validation rule.

    Supported rules: ``required``, ``min:N``, ``max:N``, ``in:a,b,c``,
    ``integer`` and ``boolean``. ``min``/``max`` compare numeric values by
    number and anything else by string length. Unknown rules pass.

    Args:
        rule: The rule string
        value: The value to check

    Returns:
        True if the value satisfies the rule
    """
    if rule.startswith("required"):
        return not is_empty(value)

    if rule.startswith("min:"):
        minimum = int(rule[4:])
        if is_numeric(value):
            return int(float(value)) >= minimum
        return len(str(value)) >= minimum

    if rule.startswith("max:"):
        maximum = int(rule[4:])
        if is_numeric(value):
            return int(float(value)) <= maximum
        return len(str(value)) <= maximum

    if rule.startswith("in:"):
        allowed = rule[3:].split(",")
        return str(value) in allowed

    if rule == "integer":
        return is_numeric(value) and float(value) == int(float(value))

    if rule == "boolean":
        return isinstance(value, bool) or value in ("true", "false", "0", "1", 0, 1)

    return True
