"""Mapping between block offsets and on-screen positions.

A caret is stored as an absolute character offset into its block. To draw it
the host needs the segment holding that offset, the offset relative to the
segment start, and finally the line and x/y position. Segments of one block
share their boundary offsets; a boundary offset always resolves to the
earlier segment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple, Sequence

from .line_breaker import expand_tabs
from .measure import WidthMeasurer
from .model import Page, Segment
from .page_config import PageConfig


class OffsetError(IndexError):
    """Raised when an offset lies outside the laid out text of a block."""


class SegmentPosition(NamedTuple):
    """An offset expressed relative to the segment containing it."""
    segment: Segment
    relative: int

    @property
    def absolute(self) -> int:
        return self.segment.start_offset + self.relative


@dataclass(frozen=True)
class CaretGeometry:
    """Where a caret is drawn.

    Attributes:
        page_number: Page holding the caret
        segment: Segment holding the caret
        relative: Offset relative to segment.start_offset
        line_index: Line within the segment
        column: Character index within that line
        x: Horizontal position on the page
        y: Top edge of the caret's line
    """
    page_number: int
    segment: Segment
    relative: int
    line_index: int
    column: int
    x: float
    y: float


def find_segment(segments: Sequence[Segment], offset: int) -> SegmentPosition:
    """Find the segment holding an absolute offset.

    Args:
        segments: One block's segments in layout order
        offset: Absolute character offset into the block

    Returns:
        The earliest segment with start_offset <= offset <= end_offset.

    Raises:
        OffsetError: If there are no segments or the offset is out of range.
    """
    if not segments:
        raise OffsetError("Block has no segments")
    for segment in segments:
        if segment.start_offset <= offset <= segment.end_offset:
            return SegmentPosition(segment, offset - segment.start_offset)
    raise OffsetError(
        f"Offset {offset} outside block range "
        f"[{segments[0].start_offset}, {segments[-1].end_offset}]"
    )


def to_absolute(segment: Segment, relative: int) -> int:
    """Convert a segment-relative offset back to an absolute one."""
    if not 0 <= relative <= segment.length:
        raise OffsetError(
            f"Relative offset {relative} outside segment of length {segment.length}"
        )
    return segment.start_offset + relative


def line_at(segment: Segment, relative: int) -> tuple[int, int]:
    """Find the (line index, column) of a segment-relative offset.

    A line owns the offsets from its start up to (not including) the next
    line's start; the last line also owns the segment end. Offsets inside a
    separator are clamped to the end of the line before it.
    """
    line_start = 0
    last = len(segment.lines) - 1
    for i, (line, sep) in enumerate(zip(segment.lines, segment.separators)):
        next_start = line_start + len(line) + len(sep)
        if relative < next_start or i == last:
            return i, min(relative - line_start, len(line))
        line_start = next_start
    return 0, 0


class LayoutIndex:
    """Lookup from block ids to their segments for one layout snapshot."""

    def __init__(self, pages: Iterable[Page]):
        self.pages = list(pages)
        self._segments: dict[str, list[Segment]] = {}
        for page in self.pages:
            for segment in page.segments:
                self._segments.setdefault(segment.block_id, []).append(segment)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def __contains__(self, block_id: str) -> bool:
        return block_id in self._segments

    def segments_for(self, block_id: str) -> list[Segment]:
        """Return a block's segments in order; empty if it was not laid out."""
        return list(self._segments.get(block_id, []))

    def pages_for(self, block_id: str) -> list[int]:
        """Return the page numbers a block appears on."""
        return sorted({s.page_number for s in self._segments.get(block_id, [])})

    def locate(self, block_id: str, offset: int) -> SegmentPosition:
        return find_segment(self._segments.get(block_id, []), offset)

    def absolute(self, segment: Segment, relative: int) -> int:
        return to_absolute(segment, relative)

    def caret(self, block_id: str, offset: int, config: PageConfig,
              measurer: WidthMeasurer) -> CaretGeometry:
        """Compute where to draw a caret at offset in block_id.

        Like a line boundary, a segment boundary is drawn at the start of the
        segment that begins there rather than the end of the one before.
        """
        position = self.locate(block_id, offset)
        segments = self._segments[block_id]
        if position.relative == position.segment.length:
            following = segments.index(position.segment) + 1
            if following < len(segments):
                position = SegmentPosition(segments[following], 0)
        segment = position.segment
        line_index, column = line_at(segment, position.relative)
        line = segment.lines[line_index] if segment.lines else ""
        x = config.margin_left + measurer.measure(expand_tabs(line[:column]))
        y = segment.y + line_index * config.line_height
        return CaretGeometry(
            page_number=segment.page_number,
            segment=segment,
            relative=position.relative,
            line_index=line_index,
            column=column,
            x=x,
            y=y,
        )
