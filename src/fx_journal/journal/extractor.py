"""Turn raw blocks into open / close events.

Block layout as exported by the broker (tab separated)::

    USD/JPY     成行        決済
    買          2.7         147.170[成行]
    147.210     約定済      147.170     25/08/22 03:13:25
    25/08/21    +108                    25/08/22 03:13:25
    -           063257

Problems are collected as human-readable strings; a bad block is
skipped and extraction carries on with the next one.
"""

from __future__ import annotations

import re
from datetime import datetime

from ..core.enums import BUY_TOKEN, SELL_TOKEN, Action, Side
from ..core.models import Event, RawBlock
from .blocks import HEADER_RE

# ASCII digits only; \s stays Unicode so full-width spaces still separate.
DETAIL_RE = re.compile(
    rf"^\s*({BUY_TOKEN}|{SELL_TOKEN})\s*([0-9.]+)\s*([0-9.]+)\[[^\\\]]+\]"
)
TIMESTAMP_RE = re.compile(r"(\d{2})/(\d{2})/(\d{2}) (\d{2}):(\d{2}):(\d{2})", re.ASCII)
TICKET_RE = re.compile(r"\b(\d{6,})\b", re.ASCII)
_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+", re.ASCII)


def parse_number(text: str) -> float | None:
    """Read the leading decimal of ``text`` (``"1.2.3"`` -> 1.2)."""
    m = _NUMBER_RE.match(text.replace(",", ""))
    return float(m.group(0)) if m else None


def parse_timestamp(text: str) -> datetime | None:
    """Find a ``YY/MM/DD HH:MM:SS`` stamp in ``text`` as a naive local time."""
    m = TIMESTAMP_RE.search(text)
    if m is None:
        return None
    yy, mo, da, hh, mi, ss = (int(g) for g in m.groups())
    try:
        return datetime(2000 + yy, mo, da, hh, mi, ss)
    except ValueError:
        return None


def find_ticket(lines: list[str]) -> str | None:
    for line in lines:
        m = TICKET_RE.search(line)
        if m:
            return m.group(1)
    return None


def _line(lines: list[str], idx: int) -> str:
    return lines[idx] if idx < len(lines) else ""


def extract_event(block: RawBlock, errors: list[str]) -> Event | None:
    """Parse one block, appending any problems to ``errors``."""
    head = block.header.strip()
    m_head = HEADER_RE.match(head)
    if m_head is None:
        errors.append(f'unrecognized block header: "{head}"')
        return None
    symbol, action_token = m_head.groups()

    side: Side | None = None
    size: float | None = None
    order_price: float | None = None
    detail = _line(block.lines, 0).strip()
    m_detail = DETAIL_RE.match(detail)
    if m_detail:
        side = Side.from_token(m_detail.group(1))
        size = parse_number(m_detail.group(2))
        order_price = parse_number(m_detail.group(3))
    else:
        errors.append(f'could not read side/size/price: "{detail}"')

    at = parse_timestamp(_line(block.lines, 1).strip())
    if at is None:
        at = parse_timestamp(_line(block.lines, 2))

    if side is None or size is None:
        errors.append(f'required fields missing, ignoring this block: "{head}"')
        return None

    return Event(
        symbol=symbol,
        action=Action.from_token(action_token),
        side=side,
        size=size,
        order_price=order_price,
        at=at,
        ticket=find_ticket(block.lines),
    )


def extract_events(blocks: list[RawBlock]) -> tuple[list[Event], list[str]]:
    events: list[Event] = []
    errors: list[str] = []
    for block in blocks:
        event = extract_event(block, errors)
        if event is not None:
            events.append(event)
    return events, errors
