"""Consecutive-loss guard: enforced break after a losing streak.

Counts losing trades back from the most recent exit.  Once the streak
reaches ``limit`` a cooldown of ``cooldown_minutes`` is proposed.  The
CLI stores its end time with ``LedgerStore.save_cooldown`` and refuses
imports until ``LedgerStore.active_cooldown`` reports it has passed.

Usage::

    guard = ConsecutiveLossGuard(limit=3, cooldown_minutes=30)
    alert = guard.check(ledger, now=datetime.now())
    if alert:
        print(f"{alert.streak} losses in a row, pause until {alert.until}")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..core.durations import epoch_ms
from ..core.models import ClosedTrade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CooldownAlert:
    streak: int
    until: datetime


class ConsecutiveLossGuard:
    """Detect a run of ``limit`` straight losses.

    Parameters
    ----------
    limit : int
        Losses in a row that trigger a cooldown.  ``<= 0`` disables it.
    cooldown_minutes : int
        Length of the proposed break.
    """

    def __init__(self, *, limit: int = 3, cooldown_minutes: int = 30) -> None:
        self._limit = limit
        self._cooldown = timedelta(minutes=cooldown_minutes)

    @staticmethod
    def losing_streak(trades: list[ClosedTrade]) -> int:
        """Number of most-recent trades in a row with negative pips."""
        recent_first = sorted(
            trades,
            key=lambda t: epoch_ms(t.exit_at) if t.exit_at else 0,
            reverse=True,
        )
        streak = 0
        for trade in recent_first:
            if (trade.pips or 0.0) >= 0:
                break
            streak += 1
        return streak

    def check(self, trades: list[ClosedTrade], now: datetime) -> CooldownAlert | None:
        if self._limit <= 0 or len(trades) < self._limit:
            return None
        streak = self.losing_streak(trades)
        if streak < self._limit:
            return None
        until = now + self._cooldown
        logger.warning(
            "Losing streak of %d (limit %d): cooldown until %s",
            streak, self._limit, until.isoformat(),
        )
        return CooldownAlert(streak=streak, until=until)
