"""Japanese-style duration strings for hold times."""

from __future__ import annotations

import math
from datetime import datetime


def humanize_duration(ms: float) -> str:
    """Render a millisecond duration as e.g. ``1時間5分`` or ``3分20秒``.

    Seconds are only shown when there is no hour component.  Negative
    or non-finite input yields an empty string.
    """
    if not math.isfinite(ms) or ms < 0:
        return ""
    total = int(ms // 1000)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{hours}時間")
    if minutes:
        parts.append(f"{minutes}分")
    if seconds and not hours:
        parts.append(f"{seconds}秒")
    return "".join(parts) or "0秒"


def epoch_ms(ts: datetime) -> int:
    """Milliseconds since the epoch; naive values are read as local time."""
    return round(ts.timestamp() * 1000)


def to_local(ts: datetime) -> datetime:
    """Aware timestamps are shifted to local time; naive ones already are."""
    return ts.astimezone() if ts.tzinfo is not None else ts


def local_date_key(ts: datetime) -> str:
    return to_local(ts).strftime("%Y-%m-%d")
