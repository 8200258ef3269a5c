"""Trade journal: broker log parsing and performance analytics.

Rebuilds closed round trips from pasted broker trade logs and measures
them.  Everything here is pure: no I/O, no clock reads.

Key components
--------------
**Parsing**

parse                    Text -> closed trades, open legs, warnings
split_blocks             Header-delimited block splitter
extract_events           Block -> open / close event
match_events             FIFO pairing of closes against open legs

**Ledger**

identity_key             Canonical dedup key of a closed trade
merge_unique_with_count  Append-only merge of parsed trades into a ledger
apply_tags / remove_trades  Selection-based ledger edits

**Analytics**

summarize                Win rate, pips, drawdown, expectancy, payoff
daily_pl / tag_analysis  Calendar and per-tag breakdowns
long_term_projection     Balance extrapolation and goal ETA
ConsecutiveLossGuard     Cooldown after a losing streak
TradeExporter            CSV/JSON export and periodic reports
"""

from .analytics import (
    daily_pl,
    goal_projection,
    long_term_projection,
    projected_day_pl,
    tag_analysis,
)
from .blocks import split_blocks
from .dedup import (
    apply_tags,
    identity_key,
    merge_unique_with_count,
    parse_tag_input,
    remove_trades,
    select_keys,
)
from .discipline import ConsecutiveLossGuard, CooldownAlert
from .export import TradeExporter
from .extractor import extract_events
from .matcher import match_events
from .parser import parse
from .stats import summarize

__all__ = [
    "parse",
    "split_blocks",
    "extract_events",
    "match_events",
    "summarize",
    "identity_key",
    "merge_unique_with_count",
    "select_keys",
    "parse_tag_input",
    "apply_tags",
    "remove_trades",
    "daily_pl",
    "tag_analysis",
    "long_term_projection",
    "goal_projection",
    "projected_day_pl",
    "ConsecutiveLossGuard",
    "CooldownAlert",
    "TradeExporter",
]
