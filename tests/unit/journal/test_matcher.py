"""Tests for FIFO matching of close events against open legs."""

from datetime import datetime, timedelta

import pytest

from fx_journal.core.enums import Action, Side
from fx_journal.core.models import Event
from fx_journal.journal.matcher import match_events

T0 = datetime(2025, 8, 22, 9, 0, 0)


def _event(action, side, size, price, minutes=None, ticket=None, symbol="USD/JPY"):
    return Event(
        symbol=symbol,
        action=action,
        side=side,
        size=size,
        order_price=price,
        at=T0 + timedelta(minutes=minutes) if minutes is not None else None,
        ticket=ticket,
    )


def _open(side, size, price, minutes=None, **kw):
    return _event(Action.OPEN, side, size, price, minutes, **kw)


def _close(side, size, price, minutes=None, **kw):
    return _event(Action.CLOSE, side, size, price, minutes, **kw)


class TestRoundTrip:
    def test_sell_closed_by_buy(self):
        closed, still_open = match_events([
            _open(Side.SELL, 2.7, 147.174, 0, ticket="063256"),
            _close(Side.BUY, 2.7, 147.170, 7, ticket="063257"),
        ])
        assert still_open == []
        trade = closed[0]
        assert trade.side is Side.SELL
        assert trade.entry_price == pytest.approx(147.174)
        assert trade.exit_price == pytest.approx(147.170)
        assert trade.pips == pytest.approx(0.4)
        assert trade.pl_text == "108"
        assert trade.ticket_open == "063256"
        assert trade.ticket_close == "063257"
        assert trade.hold == "7分"

    def test_buy_closed_by_sell_at_loss(self):
        closed, _ = match_events([
            _open(Side.BUY, 1.0, 150.000, 0),
            _close(Side.SELL, 1.0, 149.750, 90),
        ])
        assert closed[0].side is Side.BUY
        assert closed[0].pips == pytest.approx(-25.0)
        assert closed[0].pl_text == "-2500"
        assert closed[0].hold == "1時間30分"

    def test_events_sorted_by_time_before_matching(self):
        closed, still_open = match_events([
            _close(Side.SELL, 1.0, 151.0, 10),
            _open(Side.BUY, 1.0, 150.0, 0),
        ])
        assert still_open == []
        assert closed[0].entry_price == 150.0

    def test_untimed_events_sort_first(self):
        closed, still_open = match_events([
            _open(Side.BUY, 1.0, 150.0, 5),
            _close(Side.SELL, 1.0, 151.0),
        ])
        # The untimed close runs before the open exists.
        assert closed[0].entry_price is None
        assert len(still_open) == 1


class TestQueueScan:
    def test_oldest_same_size_matched_first(self):
        closed, still_open = match_events([
            _open(Side.BUY, 1.0, 150.0, 0),
            _open(Side.BUY, 1.0, 151.0, 1),
            _close(Side.SELL, 1.0, 152.0, 2),
        ])
        assert closed[0].entry_price == 150.0
        assert [p.entry_price for p in still_open] == [151.0]

    def test_different_size_skipped_not_blocking(self):
        closed, still_open = match_events([
            _open(Side.BUY, 1.0, 100.0, 0),
            _open(Side.BUY, 2.0, 101.0, 1),
            _open(Side.BUY, 2.0, 102.0, 2),
            _close(Side.SELL, 2.0, 103.0, 3),
        ])
        assert closed[0].entry_price == 101.0
        assert [(p.size, p.entry_price) for p in still_open] == [(1.0, 100.0), (2.0, 102.0)]

    def test_same_side_leg_not_matched(self):
        closed, still_open = match_events([
            _open(Side.BUY, 1.0, 150.0, 0),
            _close(Side.BUY, 1.0, 151.0, 1),
        ])
        assert closed[0].entry_price is None
        assert len(still_open) == 1

    def test_size_tolerance(self):
        closed, _ = match_events([
            _open(Side.SELL, 0.3, 150.0, 0),
            _close(Side.BUY, 0.1 + 0.2, 149.0, 1),
        ])
        assert closed[0].entry_price == 150.0

    def test_queues_are_per_symbol(self):
        closed, still_open = match_events([
            _open(Side.BUY, 1.0, 160.0, 0, symbol="EUR/JPY"),
            _close(Side.SELL, 1.0, 151.0, 1, symbol="USD/JPY"),
        ])
        assert closed[0].entry_price is None
        assert still_open[0].symbol == "EUR/JPY"

    def test_leftovers_ordered_by_first_open(self):
        _, still_open = match_events([
            _close(Side.SELL, 1.0, 160.0, 0, symbol="EUR/JPY"),
            _open(Side.BUY, 1.0, 150.0, 1, symbol="USD/JPY"),
            _open(Side.BUY, 1.0, 161.0, 2, symbol="EUR/JPY"),
        ])
        assert [p.symbol for p in still_open] == ["USD/JPY", "EUR/JPY"]


class TestUnmatchedClose:
    def test_still_produces_trade(self):
        closed, still_open = match_events([_close(Side.BUY, 2.0, 147.0, 0, ticket="111111")])
        assert len(closed) == 1
        trade = closed[0]
        assert trade.side is Side.SELL
        assert trade.entry_price is None
        assert trade.entry_at is None
        assert trade.exit_price == 147.0
        assert trade.pips is None
        assert trade.pl_text is None
        assert trade.hold is None
        assert trade.ticket_close == "111111"
        assert still_open == []

    def test_close_without_price(self):
        closed, _ = match_events([
            _open(Side.BUY, 1.0, 150.0, 0),
            _close(Side.SELL, 1.0, None, 1),
        ])
        assert closed[0].entry_price == 150.0
        assert closed[0].pips is None


def test_match_has_no_state_between_calls():
    match_events([_open(Side.BUY, 1.0, 150.0, 0)])
    closed, still_open = match_events([_close(Side.SELL, 1.0, 151.0, 1)])
    assert closed[0].entry_price is None
    assert still_open == []
