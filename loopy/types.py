"""Value helpers for Loopy.

Every Loopy value is a signed 32-bit integer. Python integers are
unbounded, so results of arithmetic are folded back into range here.
"""

from __future__ import annotations

import re
from typing import Optional

I32_MIN = -(2 ** 31)
I32_MAX = 2 ** 31 - 1

_DECIMAL = re.compile(r'[+-]?[0-9]+')


def wrap_i32(value: int) -> int:
    """Wrap an arbitrary integer to 32-bit two's complement."""
    return ((value - I32_MIN) % 2 ** 32) + I32_MIN


def parse_i32(text: str) -> Optional[int]:
    """Parse a base-10 signed integer, returning None unless it fits in 32 bits."""
    if not _DECIMAL.fullmatch(text):
        return None
    value = int(text)
    if value < I32_MIN or value > I32_MAX:
        return None
    return value
