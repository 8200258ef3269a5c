"""Text-to-ledger entry point: split, extract, match."""

from __future__ import annotations

import logging

from ..core.models import ParseResult
from .blocks import split_blocks
from .extractor import extract_events
from .matcher import match_events

logger = logging.getLogger(__name__)


def parse(raw_text: str) -> ParseResult:
    """Parse pasted broker log text into closed trades.

    Never raises on malformed input; unreadable blocks are reported in
    ``ParseResult.errors`` and the rest of the text is still used.
    """
    blocks = split_blocks(raw_text)
    events, errors = extract_events(blocks)
    closed, open_positions = match_events(events)
    logger.debug(
        "Parsed %d blocks -> %d events, %d closed, %d open, %d errors",
        len(blocks), len(events), len(closed), len(open_positions), len(errors),
    )
    return ParseResult(
        closed_trades=closed,
        open_positions=open_positions,
        errors=errors,
    )
