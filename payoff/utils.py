# payoff/utils.py
import math
import sys
import time
import random
import string
from typing import Any

EPSILON = 1e-6

def clamp_number(value: Any, fallback: float = 0.0) -> float:
    """Coerce anything to a finite float, or return `fallback`."""
    if value is None or value == "":
        return fallback
    try:
        n = float(value)
    except (TypeError, ValueError):
        return fallback
    return n if math.isfinite(n) else fallback

def round2(x: Any) -> float:
    # half-up, so 0.125 -> 0.13 and rounding twice changes nothing
    n = clamp_number(x, 0.0)
    return math.floor((n + sys.float_info.epsilon) * 100 + 0.5) / 100

def money(x: float) -> str:
    try:
        return f"${x:,.2f}"
    except (TypeError, ValueError):
        return f"${x}"

def make_id(prefix: str = "d") -> str:
    stamp = format(int(time.time() * 1000), "x")
    tail = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{prefix}_{stamp}_{tail}"
