"""Display helpers; undefined (None / NaN / inf) values render as ``-``."""

from __future__ import annotations

import math
from datetime import datetime

from ..core.durations import to_local
from ..core.units import round_half_up


def _defined(n: float | None) -> bool:
    return n is not None and math.isfinite(n)


def fmt_signed_int(n: float | None) -> str:
    """``1234.6`` -> ``+1,235``."""
    if not _defined(n):
        return "-"
    return f"{'+' if n >= 0 else '-'}{round_half_up(abs(n)):,}"


def fmt_int(n: float) -> str:
    return f"{round_half_up(n):,}"


def fmt_signed(n: float | None, digits: int = 0) -> str:
    if not _defined(n):
        return "-"
    return f"{'+' if n >= 0 else '-'}{abs(n):.{digits}f}"


def fmt_num(n: float | None) -> str:
    if not _defined(n):
        return "-"
    return str(round_half_up(n))


def fmt_rate(n: float | None, digits: int = 1) -> str:
    if not _defined(n):
        return "-"
    return f"{n:.{digits}f}%"


def fmt_date(ts: datetime | None) -> str:
    if ts is None:
        return ""
    return to_local(ts).strftime("%Y/%m/%d %H:%M:%S")
