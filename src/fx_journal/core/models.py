"""Core domain models used across the journal.

Trades and positions are pydantic models so that ledgers written by the
web front-end (camelCase keys, ISO timestamp strings) validate straight
into the same types the parser produces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .durations import epoch_ms
from .enums import Action, GoalStatus, Side
from .units import qty_pl

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Parser intermediates
# ---------------------------------------------------------------------------

@dataclass
class RawBlock:
    """One header line and the body lines that follow it."""

    header: str
    lines: list[str] = field(default_factory=list)


class Event(BaseModel):
    """A single parsed open or close entry."""

    symbol: str
    action: Action
    side: Side
    size: float
    order_price: float | None = None
    at: datetime | None = None
    ticket: str | None = None


class OpenPosition(BaseModel):
    """An open leg waiting in its symbol's queue for a closing entry."""

    model_config = _CAMEL

    symbol: str
    side: Side
    size: float
    entry_price: float | None = None
    entry_at: datetime | None = None
    ticket_open: str | None = None


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------

class ClosedTrade(BaseModel):
    """A round trip produced by one close entry.

    ``side`` is the side of the opening leg.  Unmatched closes carry no
    entry fields and therefore no ``pips`` / ``pl_text``.
    """

    model_config = _CAMEL

    symbol: str
    side: Side
    size: float
    entry_price: float | None = None
    exit_price: float | None = None
    entry_at: datetime | None = None
    exit_at: datetime | None = None
    pips: float | None = None
    pl_text: str | None = None
    hold: str | None = None
    ticket_open: str | None = None
    ticket_close: str | None = None
    tags: list[str] = Field(default_factory=list)

    @property
    def qty_pl(self) -> float:
        """Unrounded monetary P&L (0 when pips are unknown)."""
        return qty_pl(self.pips, self.size)

    @property
    def hold_ms(self) -> float | None:
        if self.entry_at is None or self.exit_at is None:
            return None
        return float(epoch_ms(self.exit_at) - epoch_ms(self.entry_at))


class Summary(BaseModel):
    """Aggregate statistics over a set of closed trades.

    NaN means "undefined" (no trades, or no losses for ``payoff``).
    """

    model_config = _CAMEL

    count: int
    win_rate: float  # percent
    total_pips: float
    avg_pips: float
    avg_hold: str
    max_dd: int  # pips, non-negative
    total_qty_pl: int
    expectancy_qty: float
    payoff: float


class ParseResult(BaseModel):
    """Output of one ``parse`` call."""

    model_config = _CAMEL

    closed_trades: list[ClosedTrade] = Field(default_factory=list)
    open_positions: list[OpenPosition] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class MergeResult(BaseModel):
    merged: list[ClosedTrade]
    added: int


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------

class TagAnalysis(BaseModel):
    model_config = _CAMEL

    tag_name: str
    summary: Summary


class ProjectionPoint(BaseModel):
    balance: float
    gain: float


class LongTermProjection(BaseModel):
    """Balance extrapolated from the average P&L per trading day."""

    model_config = _CAMEL

    avg_daily_pl: float
    weekly: ProjectionPoint
    monthly: ProjectionPoint
    yearly: ProjectionPoint


class GoalProjection(BaseModel):
    status: GoalStatus
    days: float  # inf when unreachable


class Snapshot(BaseModel):
    """Trades closed on one local calendar day, as saved to disk."""

    model_config = _CAMEL

    date_key: str
    saved_at: datetime
    count: int
    summary: Summary
    trades: list[ClosedTrade]
