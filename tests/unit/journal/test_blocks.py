"""Tests for split_blocks: header detection and body grouping."""

from fx_journal.journal.blocks import is_header, split_blocks

from ...conftest import SAMPLE_LOG


class TestIsHeader:
    def test_open_and_close_headers(self):
        assert is_header("USD/JPY\t成行\t新規")
        assert is_header("EUR/JPY 指値 決済")

    def test_surrounding_whitespace_ignored(self):
        assert is_header("   USD/JPY  成行  決済   ")

    def test_action_token_must_be_last(self):
        assert not is_header("USD/JPY\t成行\t決済\t済")

    def test_wrong_token_count(self):
        assert not is_header("USD/JPY\t決済")
        assert not is_header("USD/JPY 成行 x 決済")

    def test_unknown_action(self):
        assert not is_header("USD/JPY\t成行\t取消")


class TestSplitBlocks:
    def test_sample_has_two_blocks(self):
        blocks = split_blocks(SAMPLE_LOG)
        assert len(blocks) == 2
        assert blocks[0].header == "USD/JPY\t成行\t決済"
        assert blocks[1].header == "USD/JPY\t成行\t新規"

    def test_body_lines_follow_header(self):
        blocks = split_blocks(SAMPLE_LOG)
        assert blocks[0].lines[0] == "買\t2.7\t147.170[成行]"
        assert blocks[0].lines[-1] == "-\t063257\t"
        assert len(blocks[1].lines) == 3

    def test_no_header_yields_nothing(self):
        assert split_blocks("") == []
        assert split_blocks("just some text\nand more\n") == []

    def test_preamble_discarded(self):
        text = "口座照会\n約定一覧\nUSD/JPY\t成行\t新規\n売\t1\t150.000[成行]\n"
        blocks = split_blocks(text)
        assert len(blocks) == 1
        assert blocks[0].lines == ["売\t1\t150.000[成行]", ""]

    def test_blank_lines_collapse(self):
        text = "USD/JPY 成行 新規\n\n\n売 1 150.000[成行]\n\n\n25/08/22 03:06:26"
        blocks = split_blocks(text)
        assert blocks[0].lines == ["売 1 150.000[成行]", "25/08/22 03:06:26"]

    def test_carriage_returns_stripped(self):
        text = "USD/JPY 成行 新規\r\n売 1 150.000[成行]\r\n"
        blocks = split_blocks(text)
        assert blocks[0].header == "USD/JPY 成行 新規"
        assert blocks[0].lines[0] == "売 1 150.000[成行]"

    def test_header_kept_untrimmed(self):
        blocks = split_blocks("  USD/JPY 成行 新規  \nbody")
        assert blocks[0].header == "  USD/JPY 成行 新規  "
