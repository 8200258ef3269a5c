"""Trade identity, ledger merging and selection-based edits.

The identity key formats prices to 5 decimals and size to 4, so two
parses of the same log text collapse onto one ledger row even when the
floats differ in the last bits.  Timestamps enter the key as epoch
milliseconds, which keeps it stable whether a trade's times were parsed
from the log or revived from ISO strings.
"""

from __future__ import annotations

from typing import Iterable

from ..core.durations import epoch_ms
from ..core.errors import SelectionError
from ..core.models import ClosedTrade, MergeResult


def _fixed(value: float | None, places: int) -> str:
    return f"{value:.{places}f}" if value is not None else ""


def identity_key(trade: ClosedTrade) -> str:
    return "|".join(
        [
            trade.symbol,
            trade.side.value,
            _fixed(trade.size or 0.0, 4),
            _fixed(trade.entry_price, 5),
            _fixed(trade.exit_price, 5),
            str(epoch_ms(trade.entry_at)) if trade.entry_at else "",
            str(epoch_ms(trade.exit_at)) if trade.exit_at else "",
            trade.ticket_open or "",
            trade.ticket_close or "",
        ]
    )


def merge_unique_with_count(
    existing: list[ClosedTrade], incoming: Iterable[ClosedTrade]
) -> MergeResult:
    """Append the ``incoming`` trades whose key is not yet present."""
    seen = {identity_key(t) for t in existing}
    merged = list(existing)
    added = 0
    for trade in incoming:
        key = identity_key(trade)
        if key in seen:
            continue
        merged.append(trade)
        seen.add(key)
        added += 1
    return MergeResult(merged=merged, added=added)


# ---------------------------------------------------------------------------
# Selection edits
# ---------------------------------------------------------------------------

def select_keys(trades: list[ClosedTrade]) -> set[str]:
    return {identity_key(t) for t in trades}


def _check_selection(trades: list[ClosedTrade], keys: set[str]) -> None:
    missing = sorted(keys - select_keys(trades))
    if missing:
        raise SelectionError(missing)


def parse_tag_input(text: str) -> list[str]:
    """``"scalp, news,,"`` -> ``["scalp", "news"]``."""
    return [tag.strip() for tag in text.split(",") if tag.strip()]


def apply_tags(
    trades: list[ClosedTrade], keys: set[str], tags: list[str]
) -> list[ClosedTrade]:
    """Return a copy of ``trades`` with ``tags`` replacing the selected rows' tags."""
    _check_selection(trades, keys)
    return [
        t.model_copy(update={"tags": list(tags)}) if identity_key(t) in keys else t
        for t in trades
    ]


def remove_trades(trades: list[ClosedTrade], keys: set[str]) -> list[ClosedTrade]:
    _check_selection(trades, keys)
    return [t for t in trades if identity_key(t) not in keys]
