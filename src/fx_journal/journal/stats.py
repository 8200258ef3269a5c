"""Performance summary over a list of closed trades.

Drawdown is tracked on the cumulative pip curve in list order; win /
loss classification and the money figures use ``pips * size * 100``.
Trades with zero P&L count toward ``count`` and ``total_qty_pl`` but
toward neither the win nor the loss bucket.
"""

from __future__ import annotations

import math

from ..core.durations import humanize_duration
from ..core.models import ClosedTrade, Summary
from ..core.units import round_half_up

NAN = float("nan")


def empty_summary() -> Summary:
    return Summary(
        count=0,
        win_rate=NAN,
        total_pips=0.0,
        avg_pips=NAN,
        avg_hold="",
        max_dd=0,
        total_qty_pl=0,
        expectancy_qty=NAN,
        payoff=NAN,
    )


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def max_drawdown_pips(pips: list[float]) -> float:
    """Worst peak-to-trough drop of the running pip total (<= 0)."""
    equity = peak = worst = 0.0
    for p in pips:
        equity += p
        peak = max(peak, equity)
        worst = min(worst, equity - peak)
    return worst


def summarize(trades: list[ClosedTrade]) -> Summary:
    if not trades:
        return empty_summary()

    count = len(trades)
    pips = [t.pips or 0.0 for t in trades]
    pl = [t.qty_pl for t in trades]
    wins = [v for v in pl if v > 0]
    losses = [v for v in pl if v < 0]
    holds = [t.hold_ms for t in trades if t.hold_ms is not None]

    win_frac = len(wins) / count
    loss_frac = len(losses) / count
    avg_win = _mean(wins)
    avg_loss = _mean(losses)
    if avg_loss != 0 and math.isfinite(avg_win) and math.isfinite(avg_loss):
        payoff = abs(avg_win / avg_loss)
    else:
        payoff = NAN

    total_pips = sum(pips)
    return Summary(
        count=count,
        win_rate=win_frac * 100,
        total_pips=total_pips,
        avg_pips=total_pips / count,
        avg_hold=humanize_duration(_mean(holds)) if holds else "",
        max_dd=abs(round_half_up(max_drawdown_pips(pips))),
        total_qty_pl=round_half_up(sum(pl)),
        expectancy_qty=avg_win * win_frac - abs(avg_loss) * loss_frac,
        payoff=payoff,
    )
