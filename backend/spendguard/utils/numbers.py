import math
from typing import Any


def is_number(value: Any) -> bool:
    """True for finite ints/floats. Booleans are not amounts."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def format_money(value: float) -> str:
    return f"${value:.2f}"


def format_plain(value: float) -> str:
    """Render ``500.0`` as ``500`` and ``12.5`` as ``12.5``."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
