"""
Scalar coercion shared by the L5K and L5X parsers.

Both formats carry numbers and booleans as text: L5K attributes use
``Yes``/``No`` or ``1``/``0``, L5X attributes ``true``/``false``.
"""

from typing import Optional

TRUE_VALUES = frozenset({"true", "yes", "1"})


def to_bool(value: Optional[str], default: bool = False) -> bool:
    """Interpret a Yes/No, true/false or 1/0 value; missing or empty gives ``default``."""
    if value is None or value == "":
        return default
    return value.strip().lower() in TRUE_VALUES


def to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None
