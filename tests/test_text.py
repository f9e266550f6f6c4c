"""Tests for terminal text measurement."""

from donutcli.ui.text import count_rows, pad_end, strip_ansi, visual_length


def test_strip_ansi():
    assert strip_ansi("\x1b[1;31mred\x1b[0m text") == "red text"


def test_visual_length_ignores_escapes():
    assert visual_length("\x1b[32mok\x1b[0m") == 2


def test_visual_length_counts_wide_glyphs():
    assert visual_length("漢字") == 4
    assert visual_length("🍩") == 2


def test_pad_end():
    assert pad_end("ab", 5) == "ab   "
    assert pad_end("漢", 4) == "漢  "


def test_pad_end_never_truncates():
    assert pad_end("abcdef", 3) == "abcdef"


def test_count_rows_without_width():
    assert count_rows("one\ntwo\nthree") == 3
    assert count_rows("x" * 500) == 1


def test_count_rows_wraps_long_lines():
    assert count_rows("x" * 100, 40) == 3
    assert count_rows("x" * 40 + "\nshort", 40) == 2


def test_count_rows_empty_line_is_one_row():
    assert count_rows("", 40) == 1
    assert count_rows("a\n\nb", 40) == 3
