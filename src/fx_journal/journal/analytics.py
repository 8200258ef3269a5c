"""Calendar, tag and balance analytics built on ``summarize``.

Usage::

    pl_by_day = daily_pl(trades)
    for row in tag_analysis(trades):
        print(row.tag_name, row.summary.win_rate)
    proj = long_term_projection(trades, start_balance=100_000)
    goal = goal_projection(1_000_000, 100_000, summarize(trades).total_qty_pl, proj)
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import datetime, time

from ..core.durations import epoch_ms, local_date_key, to_local
from ..core.enums import GoalStatus
from ..core.models import (
    ClosedTrade,
    GoalProjection,
    LongTermProjection,
    ProjectionPoint,
    TagAnalysis,
)
from .stats import summarize

_MS_PER_HOUR = 3_600_000
PROJECTION_HORIZONS = {"weekly": 7, "monthly": 30, "yearly": 365}


def daily_pl(trades: list[ClosedTrade]) -> dict[str, float]:
    """Monetary P&L per local exit date (``YYYY-MM-DD``)."""
    totals: dict[str, float] = defaultdict(float)
    for trade in trades:
        if trade.exit_at is None or trade.pips is None:
            continue
        totals[local_date_key(trade.exit_at)] += trade.qty_pl
    return dict(totals)


def tag_analysis(trades: list[ClosedTrade]) -> list[TagAnalysis]:
    """One summary per tag, most-used tag first."""
    tags: list[str] = []
    for trade in trades:
        for tag in trade.tags:
            if tag not in tags:
                tags.append(tag)
    rows = [
        TagAnalysis(
            tag_name=tag,
            summary=summarize([t for t in trades if tag in t.tags]),
        )
        for tag in tags
    ]
    rows.sort(key=lambda r: r.summary.count, reverse=True)
    return rows


def long_term_projection(
    trades: list[ClosedTrade], start_balance: float
) -> LongTermProjection | None:
    """Extrapolate the balance from the mean P&L per distinct exit day.

    Returns None when no trade has an exit time.
    """
    days = {local_date_key(t.exit_at) for t in trades if t.exit_at is not None}
    if not days:
        return None
    total = summarize(trades).total_qty_pl
    avg_daily = total / len(days)
    balance = start_balance + total
    points = {
        name: ProjectionPoint(balance=balance + avg_daily * n, gain=avg_daily * n)
        for name, n in PROJECTION_HORIZONS.items()
    }
    return LongTermProjection(avg_daily_pl=avg_daily, **points)


def goal_projection(
    target_balance: float,
    start_balance: float,
    total_qty_pl: float,
    projection: LongTermProjection | None,
) -> GoalProjection:
    current = start_balance + total_qty_pl
    if target_balance <= current:
        return GoalProjection(status=GoalStatus.ACHIEVED, days=0)
    if projection is None or projection.avg_daily_pl <= 0:
        return GoalProjection(status=GoalStatus.UNREACHABLE, days=math.inf)
    needed = target_balance - current
    return GoalProjection(
        status=GoalStatus.PROJECTED,
        days=math.ceil(needed / projection.avg_daily_pl),
    )


def projected_day_pl(trades: list[ClosedTrade], now: datetime) -> float | None:
    """Today's P&L extrapolated to midnight at today's hourly rate.

    Needs at least two trades closed today spanning a positive interval.
    """
    today = local_date_key(now)
    stamps = sorted(
        (epoch_ms(t.exit_at), t.qty_pl)
        for t in trades
        if t.exit_at is not None and local_date_key(t.exit_at) == today
    )
    if len(stamps) < 2:
        return None
    first_ms, last_ms = stamps[0][0], stamps[-1][0]
    if last_ms <= first_ms:
        return None
    today_pl = sum(pl for _, pl in stamps)
    rate = today_pl / ((last_ms - first_ms) / _MS_PER_HOUR)
    end_of_day = datetime.combine(
        to_local(now).date(), time(23, 59, 59, 999000)
    )
    remaining_hours = max(0.0, (epoch_ms(end_of_day) - last_ms) / _MS_PER_HOUR)
    return today_pl + rate * remaining_hours
