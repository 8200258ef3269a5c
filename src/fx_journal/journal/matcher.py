"""FIFO pairing of close entries against open legs.

Each symbol keeps an ordered list of open legs.  A close entry takes the
first leg (scanning from the front) on the opposite side with the same
size; legs of a different size are skipped over, not blocking.  Queues
live only for the duration of one ``match_events`` call.
"""

from __future__ import annotations

import logging

from ..core.durations import epoch_ms, humanize_duration
from ..core.enums import Action
from ..core.models import ClosedTrade, Event, OpenPosition
from ..core.units import pips_between, qty_pl, round_half_up, same_size

logger = logging.getLogger(__name__)


def _event_time(event: Event) -> int:
    return epoch_ms(event.at) if event.at is not None else 0


def _take_match(
    queue: list[OpenPosition], close: Event
) -> OpenPosition | None:
    need = close.side.opposite
    for idx, pos in enumerate(queue):
        if pos.side is need and same_size(pos.size, close.size):
            return queue.pop(idx)
    return None


def close_trade(close: Event, matched: OpenPosition | None) -> ClosedTrade:
    """Build the trade record for ``close`` (``matched`` may be None)."""
    trade = ClosedTrade(
        symbol=close.symbol,
        side=matched.side if matched else close.side.opposite,
        size=close.size,
        entry_price=matched.entry_price if matched else None,
        exit_price=close.order_price,
        entry_at=matched.entry_at if matched else None,
        exit_at=close.at,
        ticket_open=matched.ticket_open if matched else None,
        ticket_close=close.ticket,
    )
    if trade.entry_price is not None and trade.exit_price is not None:
        trade.pips = pips_between(trade.entry_price, trade.exit_price, trade.side)
        trade.pl_text = str(round_half_up(qty_pl(trade.pips, trade.size)))
    if trade.hold_ms is not None:
        trade.hold = humanize_duration(trade.hold_ms)
    return trade


def match_events(
    events: list[Event],
) -> tuple[list[ClosedTrade], list[OpenPosition]]:
    """Replay ``events`` in time order.

    Returns one closed trade per close entry (matched or not) and the
    open legs left over in every queue.
    """
    queues: dict[str, list[OpenPosition]] = {}
    closed: list[ClosedTrade] = []

    for event in sorted(events, key=_event_time):
        if event.action is Action.OPEN:
            queues.setdefault(event.symbol, []).append(
                OpenPosition(
                    symbol=event.symbol,
                    side=event.side,
                    size=event.size,
                    entry_price=event.order_price,
                    entry_at=event.at,
                    ticket_open=event.ticket,
                )
            )
            continue

        matched = _take_match(queues.get(event.symbol, []), event)
        if matched is None:
            logger.debug(
                "No open leg for close %s %s %s (ticket=%s)",
                event.symbol, event.side.value, event.size, event.ticket,
            )
        closed.append(close_trade(event, matched))

    open_positions = [pos for queue in queues.values() for pos in queue]
    return closed, open_positions
