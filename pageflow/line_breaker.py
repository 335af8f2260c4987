"""Word wrap for block text.

Splits a block into lines that fit a maximum width without losing or altering
whitespace. Every character of the block ends up either in a line's text or in
the separator that follows it, so lines can be mapped back to absolute
character offsets.
"""

import re
from typing import NamedTuple

from .measure import WidthMeasurer

TAB_WIDTH = 4
_TAB_SPACES = " " * TAB_WIDTH
_TOKEN_RE = re.compile(r"(\s+)")


class TextLine(NamedTuple):
    """One wrapped line of a block.

    Attributes:
        text: Characters shown on the line
        start: Absolute offset of the line's first character in the block
        separator: Source text consumed between this line and the next one
    """
    text: str
    start: int
    separator: str = ""

    @property
    def end(self) -> int:
        return self.start + len(self.text)


def expand_tabs(text: str) -> str:
    """Replace tabs with spaces the way they are measured."""
    return text.replace("\t", _TAB_SPACES)


def _tokenize(paragraph: str) -> list[str]:
    """Split into alternating non-whitespace and whitespace runs."""
    return [token for token in _TOKEN_RE.split(paragraph) if token]


def _wrap_paragraph(paragraph: str, base: int, max_width: float,
                    measurer: WidthMeasurer) -> list[tuple[str, int]]:
    """Wrap one paragraph, returning (text, start offset) pairs."""
    if not paragraph.strip():
        # Blank lines survive as one empty line
        return [("", base)]

    def width(s: str) -> float:
        return measurer.measure(expand_tabs(s))

    lines: list[tuple[str, int]] = []
    current = ""
    current_start = base
    pos = base
    for token in _tokenize(paragraph):
        candidate = current + token
        if current.strip() and width(candidate) > max_width:
            lines.append((current, current_start))
            if token.isspace():
                # No leading space on the new line
                current = ""
                current_start = pos + len(token)
            else:
                current = token
                current_start = pos
        else:
            current = candidate
        pos += len(token)

    if current:
        lines.append((current, current_start))
    return lines or [("", base)]


def layout_lines(text: str, max_width: float, measurer: WidthMeasurer) -> list[TextLine]:
    """Wrap text into lines carrying their absolute offsets.

    Args:
        text: Block text, may contain explicit line breaks
        max_width: Maximum measured width of a line
        measurer: Width backend for the block's font

    Returns:
        Lines in order. Concatenating each line's text and separator
        reproduces text exactly.
    """
    if not text:
        return [TextLine("", 0, "")]

    pieces: list[tuple[str, int]] = []
    base = 0
    for paragraph in text.split("\n"):
        pieces.extend(_wrap_paragraph(paragraph, base, max_width, measurer))
        base += len(paragraph) + 1  # +1 for the line break

    lines = []
    for i, (line_text, start) in enumerate(pieces):
        end = start + len(line_text)
        next_start = pieces[i + 1][1] if i + 1 < len(pieces) else len(text)
        lines.append(TextLine(line_text, start, text[end:next_start]))
    return lines


def break_into_lines(text: str, max_width: float, measurer: WidthMeasurer) -> list[str]:
    """Wrap text into lines that fit max_width.

    Whitespace is kept as typed except where a wrap happens on it. A word
    wider than max_width is placed alone on its line, unsplit.
    """
    return [line.text for line in layout_lines(text, max_width, measurer)]
