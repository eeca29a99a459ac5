"""
Inline style parser.

Splits a single line of section text into styled runs using the
``**bold**``, ``*italic*`` and ```code``` delimiters.

License: MIT
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

# Listed in tie-break order: at the same start index bold beats italic,
# italic beats code.
INLINE_PATTERNS: Tuple[Tuple[str, "re.Pattern[str]"], ...] = (
    ("bold", re.compile(r"\*\*(.+?)\*\*")),
    ("italic", re.compile(r"\*(.+?)\*")),
    ("code", re.compile(r"`(.+?)`")),
)


@dataclass(frozen=True)
class Run:
    """
    A span of text with one combination of style flags.

    ``start`` and ``end`` locate the run in the source line, delimiters
    included, so the runs of a line cover it without gaps or overlaps.
    """
    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False
    start: int = 0
    end: int = 0

    @property
    def plain(self) -> bool:
        return not (self.bold or self.italic or self.code)


def _earliest_match(line: str, pos: int) -> Optional[Tuple[str, "re.Match[str]"]]:
    best: Optional[Tuple[str, "re.Match[str]"]] = None
    for style, pattern in INLINE_PATTERNS:
        match = pattern.search(line, pos)
        if match is None:
            continue
        # Strict comparison keeps the earlier pattern on ties
        if best is None or match.start() < best[1].start():
            best = (style, match)
    return best


def parse_runs(line: str) -> List[Run]:
    """
    Tokenize a line into styled runs.

    Args:
        line: One line of section text

    Returns:
        Runs in source order. Unterminated delimiters stay in the plain text.
    """
    runs: List[Run] = []
    if not line:
        return runs

    pos = 0
    while pos < len(line):
        found = _earliest_match(line, pos)
        if found is None:
            runs.append(Run(text=line[pos:], start=pos, end=len(line)))
            break

        style, match = found
        if match.start() > pos:
            runs.append(Run(text=line[pos:match.start()], start=pos, end=match.start()))
        runs.append(Run(text=match.group(1), start=match.start(), end=match.end(),
                        **{style: True}))
        pos = match.end()

    return runs


def plain_text(runs: List[Run]) -> str:
    """Concatenate run texts, dropping the markup."""
    return "".join(run.text for run in runs)


def strip_markup(line: str) -> str:
    return plain_text(parse_runs(line))
