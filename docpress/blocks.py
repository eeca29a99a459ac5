"""
Block classifier.

Turns the raw content of a section into a flat list of typed blocks. This
stage is pure: it never measures or draws anything.

License: MIT
"""

import re
from dataclasses import dataclass, field
from typing import List, Sequence, Union

from docpress.inline import Run, parse_runs, strip_markup
from docpress.text import normalize

MAX_HEADING_LEVEL = 4

HEADING_PATTERN = re.compile(r"^\s*(#{1,6}) (.*)$")
RULE_LINES = {"---", "***", "___"}
BLOCKQUOTE_PATTERN = re.compile(r"^\s*> (.*)$")
BULLET_PATTERN = re.compile(r"^\s*[-*] (.*)$")
NUMBERED_PATTERN = re.compile(r"^\s*(\d+)[.)] (.*)$")
TABLE_SEPARATOR_PATTERN = re.compile(r"^\|[\s\-:|]+\|$")


@dataclass(frozen=True)
class Heading:
    level: int
    text: str


@dataclass(frozen=True)
class Paragraph:
    runs: List[Run] = field(default_factory=list)


@dataclass(frozen=True)
class BulletItem:
    runs: List[Run] = field(default_factory=list)


@dataclass(frozen=True)
class NumberedItem:
    index: int
    runs: List[Run] = field(default_factory=list)


@dataclass(frozen=True)
class Blockquote:
    text: str


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class Spacer:
    """Vertical gap produced by a blank line."""


@dataclass(frozen=True)
class Table:
    rows: List[List[str]] = field(default_factory=list)


# Union type for all block types
Block = Union[
    Heading,
    Paragraph,
    BulletItem,
    NumberedItem,
    Blockquote,
    Rule,
    Spacer,
    Table,
]


def is_table_row(line: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= 2 and stripped.startswith("|") and stripped.endswith("|")


def parse_table(lines: Sequence[str]) -> List[List[str]]:
    """Split pipe-delimited rows into cells, skipping separator rows."""
    rows: List[List[str]] = []
    for line in lines:
        stripped = line.strip()
        if TABLE_SEPARATOR_PATTERN.match(stripped):
            continue
        cells = stripped.split("|")[1:-1]
        rows.append([strip_markup(cell.strip()) for cell in cells])
    return rows


def classify(lines: Sequence[str]) -> List[Block]:
    """
    Classify document lines into blocks.

    Rules are checked top to bottom for every line and the first match wins:
    heading, horizontal rule, blockquote, bullet item, numbered item, blank
    line, table row, paragraph.

    Args:
        lines: Lines of one section, already normalized

    Returns:
        Blocks in document order
    """
    blocks: List[Block] = []
    i = 0
    while i < len(lines):
        line = lines[i].rstrip("\r")
        stripped = line.strip()

        heading = HEADING_PATTERN.match(line)
        if heading:
            level = min(len(heading.group(1)), MAX_HEADING_LEVEL)
            blocks.append(Heading(level=level, text=strip_markup(heading.group(2).strip())))
            i += 1
            continue

        if stripped in RULE_LINES:
            blocks.append(Rule())
            i += 1
            continue

        quote = BLOCKQUOTE_PATTERN.match(line)
        if quote:
            blocks.append(Blockquote(text=strip_markup(quote.group(1).strip())))
            i += 1
            continue

        bullet = BULLET_PATTERN.match(line)
        if bullet:
            blocks.append(BulletItem(runs=parse_runs(bullet.group(1).strip())))
            i += 1
            continue

        numbered = NUMBERED_PATTERN.match(line)
        if numbered:
            blocks.append(NumberedItem(index=int(numbered.group(1)),
                                       runs=parse_runs(numbered.group(2).strip())))
            i += 1
            continue

        if not stripped:
            blocks.append(Spacer())
            i += 1
            continue

        if is_table_row(line):
            table_lines = [line]
            while i + 1 < len(lines) and is_table_row(lines[i + 1]):
                i += 1
                table_lines.append(lines[i])
            rows = parse_table(table_lines)
            # A table made only of separator rows has nothing to show
            if rows:
                blocks.append(Table(rows=rows))
            i += 1
            continue

        blocks.append(Paragraph(runs=parse_runs(stripped)))
        i += 1

    return blocks


def classify_text(content: str) -> List[Block]:
    """Normalize raw section content and classify it line by line."""
    return classify(normalize(content).split("\n"))
