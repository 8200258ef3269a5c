"""JSON file storage for the trade ledger and daily snapshots.

Directory layout::

    {data_dir}/
        trades.json                      # the working ledger
        cooldown.json                    # active losing-streak cooldown, if any
        snapshots/
            fx_trades_2025-08-21.json    # trades closed that day
            fx_trades_2025-08-22.json

The ledger is written with camelCase keys, the same layout the browser
front-end keeps, so either side can read the other's export.
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ..core.config import StorageConfig
from ..core.durations import epoch_ms, local_date_key
from ..core.errors import LedgerCorruptError, SnapshotNotFoundError
from ..core.file_io import safe_write_text
from ..core.models import ClosedTrade, ParseResult, Snapshot
from ..journal.dedup import merge_unique_with_count
from ..journal.parser import parse
from ..journal.stats import summarize

logger = logging.getLogger(__name__)

_TRADES = TypeAdapter(list[ClosedTrade])
SNAPSHOT_PREFIX = "fx_trades_"


@dataclass
class ImportOutcome:
    """Result of merging one paste into the ledger."""

    parsed: ParseResult
    added: int
    total: int

    @property
    def message(self) -> str:
        if self.added:
            return f"added {self.added} trades (total {self.total})"
        if self.parsed.errors:
            return f"nothing added ({len(self.parsed.errors)} warnings)"
        return "nothing added (all duplicates)"


def _dump_trades(trades: list[ClosedTrade]) -> list[dict[str, Any]]:
    return [t.model_dump(mode="json", by_alias=True) for t in trades]


class LedgerStore:
    """Load and save the ledger and its per-day snapshots.

    Args:
        data_dir: Root directory.  Created lazily on first write.
        ledger_file: Ledger file name inside ``data_dir``.
        snapshot_dir: Snapshot directory inside ``data_dir``.
        cooldown_file: Cooldown end-time file inside ``data_dir``.
    """

    def __init__(
        self,
        data_dir: str | Path = "data",
        ledger_file: str = "trades.json",
        snapshot_dir: str = "snapshots",
        cooldown_file: str = "cooldown.json",
    ) -> None:
        self._base = Path(data_dir)
        self._ledger_path = self._base / ledger_file
        self._snapshot_dir = self._base / snapshot_dir
        self._cooldown_path = self._base / cooldown_file

    @classmethod
    def from_config(cls, cfg: StorageConfig) -> LedgerStore:
        return cls(cfg.data_dir, cfg.ledger_file, cfg.snapshot_dir, cfg.cooldown_file)

    @property
    def ledger_path(self) -> Path:
        return self._ledger_path

    # -- ledger --------------------------------------------------------------

    def load(self) -> list[ClosedTrade]:
        """Read the ledger; a missing file is an empty ledger."""
        if not self._ledger_path.exists():
            return []
        try:
            return _TRADES.validate_json(self._ledger_path.read_bytes())
        except ValidationError as exc:
            raise LedgerCorruptError(str(self._ledger_path), str(exc)) from exc

    def save(self, trades: list[ClosedTrade]) -> None:
        safe_write_text(
            self._ledger_path,
            json.dumps(_dump_trades(trades), ensure_ascii=False, indent=2),
        )
        logger.info("Saved %d trades to %s", len(trades), self._ledger_path)

    def import_text(self, raw_text: str) -> ImportOutcome:
        """Parse ``raw_text`` and merge its closed trades into the ledger."""
        parsed = parse(raw_text)
        result = merge_unique_with_count(self.load(), parsed.closed_trades)
        if result.added:
            self.save(result.merged)
        for err in parsed.errors:
            logger.warning("Parse warning: %s", err)
        return ImportOutcome(parsed=parsed, added=result.added, total=len(result.merged))

    # -- cooldown ------------------------------------------------------------

    def save_cooldown(self, until: datetime) -> None:
        """Persist the end of a losing-streak cooldown as epoch milliseconds."""
        safe_write_text(self._cooldown_path, json.dumps({"cooldownEndTime": epoch_ms(until)}))
        logger.info("Cooldown stored until %s", until.isoformat())

    def active_cooldown(self, now: datetime) -> datetime | None:
        """End of the stored cooldown, or None once it has passed.

        An expired or unreadable cooldown file is removed.
        """
        if not self._cooldown_path.exists():
            return None
        try:
            end_ms = json.loads(self._cooldown_path.read_text(encoding="utf-8"))["cooldownEndTime"]
            until = datetime.fromtimestamp(end_ms / 1000)
        except (ValueError, KeyError, TypeError, OverflowError, OSError) as exc:
            logger.warning("Discarding unreadable cooldown file %s: %s", self._cooldown_path, exc)
            self._cooldown_path.unlink(missing_ok=True)
            return None
        if end_ms <= epoch_ms(now):
            self._cooldown_path.unlink(missing_ok=True)
            logger.info("Cooldown ended at %s", until.isoformat())
            return None
        return until

    # -- snapshots -----------------------------------------------------------

    def _snapshot_path(self, date_key: str) -> Path:
        return self._snapshot_dir / f"{SNAPSHOT_PREFIX}{date_key}.json"

    def save_daily_snapshots(
        self,
        trades: list[ClosedTrade],
        saved_at: datetime | None = None,
    ) -> list[Snapshot]:
        """Write one snapshot per local day (exit time, else entry time).

        Trades with neither timestamp are not snapshotted.  An existing
        snapshot for the same day is overwritten.
        """
        saved_at = saved_at or datetime.now().astimezone()
        by_date: dict[str, list[ClosedTrade]] = defaultdict(list)
        for trade in trades:
            ts = trade.exit_at or trade.entry_at
            if ts is not None:
                by_date[local_date_key(ts)].append(trade)

        snapshots = []
        for date_key in sorted(by_date):
            day = by_date[date_key]
            snap = Snapshot(
                date_key=date_key,
                saved_at=saved_at,
                count=len(day),
                summary=summarize(day),
                trades=day,
            )
            payload = {
                "date": date_key,
                "count": snap.count,
                "savedAt": saved_at.isoformat(),
                "summary": snap.summary.model_dump(mode="json", by_alias=True),
                "trades": _dump_trades(day),
            }
            safe_write_text(
                self._snapshot_path(date_key),
                json.dumps(payload, ensure_ascii=False, indent=2),
            )
            snapshots.append(snap)
        logger.info("Saved %d daily snapshots to %s", len(snapshots), self._snapshot_dir)
        return snapshots

    def _read_snapshot(self, path: Path) -> Snapshot:
        obj = json.loads(path.read_text(encoding="utf-8"))
        trades = _TRADES.validate_python(obj.get("trades") or [])
        return Snapshot(
            date_key=obj.get("date") or path.stem[len(SNAPSHOT_PREFIX):],
            saved_at=obj.get("savedAt") or datetime.fromtimestamp(path.stat().st_mtime),
            count=obj.get("count", len(trades)),
            summary=summarize(trades),
            trades=trades,
        )

    def list_snapshots(self) -> list[Snapshot]:
        """All readable snapshots, newest date first."""
        if not self._snapshot_dir.exists():
            return []
        snapshots = []
        for path in self._snapshot_dir.glob(f"{SNAPSHOT_PREFIX}*.json"):
            try:
                snapshots.append(self._read_snapshot(path))
            except (ValueError, ValidationError) as exc:
                logger.warning("Skipping unreadable snapshot %s: %s", path.name, exc)
        snapshots.sort(key=lambda s: s.date_key, reverse=True)
        return snapshots

    def load_snapshot(self, date_key: str) -> Snapshot:
        path = self._snapshot_path(date_key)
        if not path.exists():
            raise SnapshotNotFoundError(f"No snapshot for {date_key}")
        return self._read_snapshot(path)

    def reset_history(self) -> int:
        """Delete every snapshot file; returns how many were removed."""
        if not self._snapshot_dir.exists():
            return 0
        removed = 0
        for path in self._snapshot_dir.glob(f"{SNAPSHOT_PREFIX}*.json"):
            path.unlink()
            removed += 1
        logger.info("Removed %d snapshots from %s", removed, self._snapshot_dir)
        return removed
