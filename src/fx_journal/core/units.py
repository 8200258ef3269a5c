"""Fixed pip and lot conventions for JPY-quoted pairs.

The broker export only carries JPY crosses, so one pip is 0.01 price
units and one lot of P&L scales by 100.  Neither constant is
configurable.
"""

from __future__ import annotations

import math

from .enums import Side

PIP_FACTOR = 100  # 0.01 price units = 1 pip
LOT_FACTOR = 100  # pips * lots -> account currency
SIZE_TOLERANCE = 1e-6


def pips_between(entry_price: float, exit_price: float, side: Side) -> float:
    """Signed pip move of a round trip opened on ``side``."""
    return (exit_price - entry_price) * side.sign * PIP_FACTOR


def qty_pl(pips: float | None, size: float) -> float:
    """Monetary P&L of ``pips`` on ``size`` lots (missing pips count as 0)."""
    return (pips or 0.0) * size * LOT_FACTOR


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +inf.

    Matches the broker platform's rounding (``round()`` would bank ties).
    """
    return math.floor(value + 0.5)


def same_size(a: float, b: float) -> bool:
    return abs(a - b) < SIZE_TOLERANCE
