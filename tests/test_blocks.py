"""Tests for the block classifier."""

from docpress.blocks import (
    Blockquote, BulletItem, Heading, NumberedItem, Paragraph, Rule, Spacer, Table,
    classify, classify_text,
)
from docpress.inline import plain_text


def test_headings_clamp_to_four_levels():
    blocks = classify_text("# Title\n#### Deep\n###### Deeper")
    assert blocks == [Heading(1, "Title"), Heading(4, "Deep"), Heading(4, "Deeper")]


def test_heading_needs_a_space():
    blocks = classify(["#NoSpace"])
    assert isinstance(blocks[0], Paragraph)


def test_heading_text_is_plain():
    assert classify(["## **Bold** heading"]) == [Heading(2, "Bold heading")]


def test_each_block_kind():
    blocks = classify([
        "---",
        "> quoted *text*",
        "- dash item",
        "* star item",
        "2) second",
        "",
        "Just a paragraph.",
    ])
    assert isinstance(blocks[0], Rule)
    assert blocks[1] == Blockquote("quoted text")
    assert isinstance(blocks[2], BulletItem) and plain_text(blocks[2].runs) == "dash item"
    assert isinstance(blocks[3], BulletItem) and plain_text(blocks[3].runs) == "star item"
    assert isinstance(blocks[4], NumberedItem) and blocks[4].index == 2
    assert isinstance(blocks[5], Spacer)
    assert isinstance(blocks[6], Paragraph)


def test_first_matching_rule_wins():
    blocks = classify(["> - not a bullet", "*** ", "1. - numbered"])
    assert blocks[0] == Blockquote("- not a bullet")
    assert isinstance(blocks[1], Rule)
    assert isinstance(blocks[2], NumberedItem)


def test_bold_paragraph_is_not_a_bullet():
    blocks = classify(["**Name** signs here"])
    assert isinstance(blocks[0], Paragraph)
    assert blocks[0].runs[0].bold


def test_table_rows_group_and_skip_separators():
    blocks = classify_text("| A | **B** |\n|---|:--:|\n| 1 | 2 |\nAfter")
    assert blocks[0] == Table(rows=[["A", "B"], ["1", "2"]])
    assert isinstance(blocks[1], Paragraph)


def test_separator_only_table_is_dropped():
    assert classify(["|---|---|"]) == []


def test_content_is_normalized_first():
    blocks = classify_text("• item with “quotes”")
    assert isinstance(blocks[0], BulletItem)
    assert plain_text(blocks[0].runs) == 'item with "quotes"'
