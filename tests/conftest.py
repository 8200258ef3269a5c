"""Shared fixtures for the fx-journal test suite."""

from __future__ import annotations

from datetime import datetime

import pytest

from fx_journal.core.enums import Side
from fx_journal.core.models import ClosedTrade

# A close block pasted above its opening block, as the broker lists
# newest first.  SELL 2.7 @ 147.174 closed by BUY 2.7 @ 147.170.
SAMPLE_LOG = (
    "USD/JPY\t成行\t決済\n"
    "買\t2.7\t147.170[成行]\n"
    "147.210\t約定済\t147.170\t25/08/22 03:13:25\n"
    "25/08/21\t+108\t\t25/08/22 03:13:25\n"
    "-\t063257\t\n"
    "USD/JPY\t成行\t新規\n"
    "売\t2.7\t147.174[成行]\n"
    "147.208\t約定済\t147.174\t25/08/22 03:06:26\t\t0\t25/08/22 03:06:26\n"
    "-\t063256\t\n"
)

SAMPLE_OPEN_AT = datetime(2025, 8, 22, 3, 6, 26)
SAMPLE_CLOSE_AT = datetime(2025, 8, 22, 3, 13, 25)


def log_block(
    action: str,
    side: str,
    size: float | str,
    price: float | str,
    at: str | None = None,
    ticket: str | None = None,
    symbol: str = "USD/JPY",
) -> str:
    """Render one broker block (``action`` is 新規 / 決済, ``side`` 買 / 売)."""
    lines = [
        f"{symbol}\t成行\t{action}",
        f"{side}\t{size}\t{price}[成行]",
        f"{price}\t約定済\t{price}\t{at or ''}",
    ]
    if ticket:
        lines.append(f"-\t{ticket}\t")
    return "\n".join(lines) + "\n"


def make_trade(
    pips: float | None = 0.0,
    size: float = 1.0,
    side: Side = Side.BUY,
    entry_at: datetime | None = None,
    exit_at: datetime | None = None,
    tags: list[str] | None = None,
    symbol: str = "USD/JPY",
    ticket_close: str | None = None,
) -> ClosedTrade:
    """A ClosedTrade with just enough fields for statistics tests."""
    return ClosedTrade(
        symbol=symbol,
        side=side,
        size=size,
        entry_price=150.0 if pips is not None else None,
        exit_price=150.0 + (pips or 0.0) / 100 if pips is not None else None,
        entry_at=entry_at,
        exit_at=exit_at,
        pips=pips,
        tags=tags or [],
        ticket_close=ticket_close,
    )


@pytest.fixture
def sample_log() -> str:
    return SAMPLE_LOG


@pytest.fixture
def base_time() -> datetime:
    return datetime(2025, 8, 22, 9, 0, 0)
