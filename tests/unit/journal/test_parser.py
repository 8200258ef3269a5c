"""End-to-end tests for parse()."""

import pytest

from fx_journal.core.enums import Side
from fx_journal.journal.parser import parse

from ...conftest import SAMPLE_CLOSE_AT, SAMPLE_OPEN_AT, log_block


class TestSampleLog:
    def test_one_round_trip(self, sample_log):
        result = parse(sample_log)
        assert result.errors == []
        assert result.open_positions == []
        assert len(result.closed_trades) == 1

    def test_trade_fields(self, sample_log):
        trade = parse(sample_log).closed_trades[0]
        assert trade.symbol == "USD/JPY"
        assert trade.side is Side.SELL
        assert trade.size == pytest.approx(2.7)
        assert trade.entry_at == SAMPLE_OPEN_AT
        assert trade.exit_at == SAMPLE_CLOSE_AT
        assert trade.pips == pytest.approx(0.4, abs=0.11)
        assert trade.pl_text == "108"
        assert trade.hold == "6分59秒"
        assert trade.ticket_open == "063256"
        assert trade.ticket_close == "063257"
        assert trade.tags == []

    def test_parse_is_repeatable(self, sample_log):
        assert parse(sample_log) == parse(sample_log)


class TestParse:
    def test_empty_text(self):
        result = parse("")
        assert result.closed_trades == []
        assert result.open_positions == []
        assert result.errors == []

    def test_open_leg_without_close_stays_open(self):
        text = log_block("新規", "買", 1, "150.000", "25/08/22 09:00:00", "100001")
        result = parse(text)
        assert result.closed_trades == []
        assert len(result.open_positions) == 1
        assert result.open_positions[0].ticket_open == "100001"

    def test_bad_block_does_not_stop_the_rest(self):
        text = (
            "USD/JPY\t成行\t新規\n???\n"
            + log_block("新規", "買", 1, "150.000", "25/08/22 09:00:00")
            + log_block("決済", "売", 1, "150.500", "25/08/22 09:30:00")
        )
        result = parse(text)
        assert len(result.errors) == 2
        assert len(result.closed_trades) == 1
        assert result.closed_trades[0].pips == pytest.approx(50.0)
        assert result.closed_trades[0].hold == "30分"

    def test_partial_size_close_is_unmatched(self):
        text = log_block("新規", "買", 2, "150.000", "25/08/22 09:00:00") + log_block(
            "決済", "売", 1, "150.500", "25/08/22 09:30:00"
        )
        result = parse(text)
        assert result.closed_trades[0].entry_price is None
        assert result.closed_trades[0].pips is None
        assert len(result.open_positions) == 1

    def test_two_symbols_match_independently(self):
        text = "".join(
            [
                log_block("新規", "売", 1, "160.000", "25/08/22 09:00:00", symbol="EUR/JPY"),
                log_block("新規", "買", 1, "150.000", "25/08/22 09:01:00"),
                log_block("決済", "買", 1, "159.900", "25/08/22 09:10:00", symbol="EUR/JPY"),
                log_block("決済", "売", 1, "150.100", "25/08/22 09:11:00"),
            ]
        )
        trades = parse(text).closed_trades
        assert [t.symbol for t in trades] == ["EUR/JPY", "USD/JPY"]
        assert all(t.pips == pytest.approx(10.0) for t in trades)


def test_full_width_numbers_drop_the_block():
    result = parse("USD/JPY\t成行\t新規\n買\t２\t１５０.０００[成行]\n")
    assert result.open_positions == []
    assert result.closed_trades == []
    assert len(result.errors) == 2
