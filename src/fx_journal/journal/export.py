"""Trade export — CSV/JSON output and periodic report generation.

Exports ledger trades in flat formats for spreadsheets and archival,
and buckets them by day / ISO week / month with a ``Summary`` per
bucket.

Usage::

    exporter = TradeExporter()
    csv_str = exporter.to_csv(trades)
    json_str = exporter.to_json(trades)
    report = exporter.periodic_report(trades, period="weekly")
"""

from __future__ import annotations

import csv
import io
import json
import logging
import math
from collections import defaultdict
from typing import Any

from ..core.durations import to_local
from ..core.enums import ReportPeriod
from ..core.models import ClosedTrade, Summary
from .dedup import identity_key
from .stats import summarize

logger = logging.getLogger(__name__)

# Default CSV columns
_CSV_COLUMNS = [
    "key",
    "symbol",
    "side",
    "size",
    "entry_price",
    "exit_price",
    "entry_at",
    "exit_at",
    "pips",
    "pl",
    "hold",
    "ticket_open",
    "ticket_close",
    "tags",
]


class TradeExporter:
    """Export trades to CSV/JSON and generate periodic reports.

    Parameters
    ----------
    decimal_places : int
        Rounding precision for pip values.  Default 4.
    """

    def __init__(self, *, decimal_places: int = 4) -> None:
        self._dp = decimal_places

    # ------------------------------------------------------------------ #
    # CSV Export                                                           #
    # ------------------------------------------------------------------ #

    def to_csv(
        self,
        trades: list[ClosedTrade],
        *,
        columns: list[str] | None = None,
    ) -> str:
        """Export trades as a CSV string with a header row."""
        cols = columns or _CSV_COLUMNS
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()

        for trade in trades:
            row = self._trade_to_row(trade)
            writer.writerow({c: "" if row.get(c) is None else row[c] for c in cols})

        return buf.getvalue()

    # ------------------------------------------------------------------ #
    # JSON Export                                                          #
    # ------------------------------------------------------------------ #

    def to_json(
        self,
        trades: list[ClosedTrade],
        *,
        indent: int = 2,
    ) -> str:
        """Export trades as a JSON list of flat objects."""
        rows = [self._trade_to_row(t) for t in trades]
        return json.dumps(rows, indent=indent, ensure_ascii=False, default=str)

    # ------------------------------------------------------------------ #
    # Periodic Report                                                      #
    # ------------------------------------------------------------------ #

    def periodic_report(
        self,
        trades: list[ClosedTrade],
        *,
        period: ReportPeriod | str = ReportPeriod.DAILY,
    ) -> dict[str, Any]:
        """Generate a per-period performance summary.

        Returns
        -------
        dict
            ``period`` : str
            ``buckets`` : list of ``{"period_key", **summary}`` dicts,
            oldest first
            ``totals`` : summary across all trades
        """
        period = ReportPeriod(period)
        buckets: dict[str, list[ClosedTrade]] = defaultdict(list)
        undated = 0
        for trade in trades:
            key = self._period_key(trade, period)
            if key is None:
                undated += 1
                continue
            buckets[key].append(trade)
        if undated:
            logger.debug("Left %d undated trades out of period buckets", undated)

        bucket_summaries = [
            {"period_key": key, **self._summary_row(summarize(buckets[key]))}
            for key in sorted(buckets)
        ]
        return {
            "period": period.value,
            "buckets": bucket_summaries,
            "totals": self._summary_row(summarize(trades)),
        }

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    def _trade_to_row(self, trade: ClosedTrade) -> dict[str, Any]:
        """Convert a ClosedTrade to a flat dict for export."""
        return {
            "key": identity_key(trade),
            "symbol": trade.symbol,
            "side": trade.side.value,
            "size": trade.size,
            "entry_price": trade.entry_price,
            "exit_price": trade.exit_price,
            "entry_at": trade.entry_at.isoformat() if trade.entry_at else None,
            "exit_at": trade.exit_at.isoformat() if trade.exit_at else None,
            "pips": round(trade.pips, self._dp) if trade.pips is not None else None,
            "pl": int(trade.pl_text) if trade.pl_text else None,
            "hold": trade.hold,
            "ticket_open": trade.ticket_open,
            "ticket_close": trade.ticket_close,
            "tags": ",".join(trade.tags),
        }

    def _summary_row(self, summary: Summary) -> dict[str, Any]:
        """Summary as plain JSON-safe values (NaN -> None)."""
        row = summary.model_dump()
        for name, value in row.items():
            if isinstance(value, float):
                row[name] = round(value, self._dp) if math.isfinite(value) else None
        return row

    def _period_key(self, trade: ClosedTrade, period: ReportPeriod) -> str | None:
        """Get the period bucket key for a trade."""
        ts = trade.exit_at or trade.entry_at
        if ts is None:
            return None
        ts = to_local(ts)

        if period is ReportPeriod.WEEKLY:
            year, week, _ = ts.isocalendar()
            return f"{year}-W{week:02d}"
        if period is ReportPeriod.MONTHLY:
            return ts.strftime("%Y-%m")
        return ts.strftime("%Y-%m-%d")
