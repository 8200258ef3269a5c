"""FX trade-log journal: parse broker exports, match round trips, measure them."""

from .core.models import ClosedTrade, OpenPosition, ParseResult, Summary
from .journal import identity_key, merge_unique_with_count, parse, summarize

__version__ = "0.1.0"

__all__ = [
    "ClosedTrade",
    "OpenPosition",
    "ParseResult",
    "Summary",
    "parse",
    "summarize",
    "identity_key",
    "merge_unique_with_count",
]
