"""
toplangs/tests/test_primitives.py — Tests for shared SVG building blocks.

Tests verify:
- Number/byte formatting and XML escaping.
- Query value parsing (comma lists, booleans).
- flex_layout offsets along both axes.
- Progress bars never drop below a 2% fill.
- Text measurement grows with text length and font size.
"""

import pytest

from toplangs.viz.primitives import (
    chunk_array,
    clamp_value,
    create_progress_node,
    escape_xml,
    flex_layout,
    format_bytes,
    format_number,
    lowercase_trim,
    measure_text,
    parse_array,
    parse_boolean,
)


@pytest.mark.parametrize(
    "value, expected",
    [(150.0, "150"), (0.1 + 0.2, "0.3"), (116.66666, "116.667"), (-0.0001, "0"), (2.5, "2.5")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0 B"),
        (-5, "0 B"),
        (float("inf"), "0 B"),
        (512, "512.0 B"),
        (1536, "1.5 KB"),
        (5 * 1024 ** 2, "5.0 MB"),
        (1024 ** 7, "1024.0 EB"),
    ],
)
def test_format_bytes(value, expected):
    assert format_bytes(value) == expected


def test_escape_xml():
    assert escape_xml('<a href="x">&</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"


def test_clamp_and_trim():
    assert clamp_value(25, 1, 20) == 20
    assert clamp_value(-1, 1, 20) == 1
    assert lowercase_trim("  TypeScript ") == "typescript"


def test_chunk_array():
    assert chunk_array([1, 2, 3, 4, 5], 3) == [[1, 2, 3], [4, 5]]
    assert chunk_array([], 3) == []


def test_parse_array():
    assert parse_array("html,css,,js") == ["html", "css", "js"]
    assert parse_array(None) == []
    assert parse_array(["a", ""]) == ["a"]


@pytest.mark.parametrize(
    "value, expected",
    [("true", True), ("TRUE", True), ("false", False), (True, True), ("yes", None), (None, None)],
)
def test_parse_boolean(value, expected):
    assert parse_boolean(value) is expected


def test_flex_layout_row_and_column():
    row = flex_layout(["<a/>", "<b/>", "<c/>"], gap=10)
    assert row == [
        '<g transform="translate(0, 0)"><a/></g>',
        '<g transform="translate(10, 0)"><b/></g>',
        '<g transform="translate(20, 0)"><c/></g>',
    ]
    column = flex_layout(["<a/>", "<b/>"], gap=25, direction="column", sizes=[5])
    assert column[1] == '<g transform="translate(0, 30)"><b/></g>'


def test_flex_layout_skips_empty_items():
    assert len(flex_layout(["<a/>", "", "<b/>"], gap=10)) == 2


def test_progress_node_minimum_fill():
    node = create_progress_node(0, 25, 205, "#3572A5", 0.5, "#ddd")
    assert 'width="2%"' in node
    assert "animation-delay" not in node


def test_progress_node_with_delay():
    node = create_progress_node(0, 25, 205, "#3572A5", 64.25, "#ddd", delay=750)
    assert 'width="64.25%"' in node
    assert "animation-delay: 750ms" in node


def test_measure_text_scales():
    short = measure_text("Go", 11)
    long = measure_text("JavaScript", 11)
    assert 0 < short < long
    assert measure_text("JavaScript", 22) > long
    assert measure_text("") == 0
