"""Pagination of blocks into fixed-size pages.

Lays out the whole document in one pass: each block is word wrapped to the
content width and its lines are stacked down the page. When the next line
would cross the bottom margin the page is closed and the block continues on
the next page in a new segment, so a block can flow across any number of
pages without being split.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .line_breaker import TextLine, layout_lines
from .measure import WidthMeasurer, measurer_for
from .model import Block, BlockLike, Page, Segment, as_block
from .page_config import DEFAULT_PAGE_CONFIG, PageConfig

logger = logging.getLogger(__name__)


class DuplicateBlockIdError(ValueError):
    """Raised when two blocks in one layout share an id."""


class _PageBuilder:
    """Accumulates segments for the page currently being filled."""

    def __init__(self, config: PageConfig):
        self.config = config
        self.pages: list[Page] = []
        self.page_number = 1
        self.segments: list[Segment] = []
        self.lines_on_page = 0
        self.pending: list[tuple[TextLine, float]] = []  # lines of the open segment
        self.pending_start_line = 0

    def is_empty(self) -> bool:
        return not self.segments and not self.pending

    @property
    def cursor_y(self) -> float:
        # Computed from the line count so float line heights do not drift
        return self.config.margin_top + self.lines_on_page * self.config.line_height

    def fits(self) -> bool:
        return self.cursor_y + self.config.line_height <= self.config.content_bottom

    def place(self, line: TextLine) -> None:
        self.pending.append((line, self.cursor_y))
        self.lines_on_page += 1

    def close_segment(self, block: Block, next_start: int) -> None:
        """Turn the pending lines into a segment ending at next_start."""
        if not self.pending:
            return
        lines = [line for line, _ in self.pending]
        self.segments.append(Segment(
            block_id=block.id,
            page_number=self.page_number,
            start_offset=lines[0].start,
            end_offset=next_start,
            start_line=self.pending_start_line,
            end_line=self.pending_start_line + len(lines) - 1,
            y=self.pending[0][1],
            height=len(lines) * self.config.line_height,
            lines=tuple(line.text for line in lines),
            separators=tuple(line.separator for line in lines),
        ))
        self.pending_start_line += len(lines)
        self.pending = []

    def new_page(self) -> None:
        self.pages.append(Page(self.page_number, tuple(self.segments)))
        self.page_number += 1
        self.segments = []
        self.lines_on_page = 0

    def finish(self) -> list[Page]:
        if self.segments:
            self.pages.append(Page(self.page_number, tuple(self.segments)))
            self.segments = []
        return self.pages


class Paginator:
    """Converts an ordered block list into pages of segments."""

    def __init__(self, config: PageConfig = DEFAULT_PAGE_CONFIG,
                 measurer: Optional[WidthMeasurer] = None):
        """Initialize the paginator.

        Args:
            config: Page geometry, validated here.
            measurer: Width backend; defaults to reportlab metrics for the
                configured font.

        Raises:
            ConfigurationError: If the configuration cannot hold a line.
        """
        self.config = config.validate()
        self.measurer = measurer if measurer is not None else measurer_for(config)

    @property
    def content_width(self) -> float:
        return self.config.content_width

    def block_lines(self, text: str) -> list[TextLine]:
        """Wrap a block's text to the content width."""
        if not text:
            return [TextLine("", 0, "")]
        return layout_lines(text, self.content_width, self.measurer)

    def paginate(self, blocks: Iterable[BlockLike]) -> list[Page]:
        """Lay out blocks into pages.

        Args:
            blocks: Blocks in document order, as Block objects or
                {id, text} mappings. Ids must be unique.

        Returns:
            Pages numbered from 1. An empty block list gives no pages.

        Raises:
            DuplicateBlockIdError: If a block id appears twice.
        """
        block_list = [as_block(b) for b in blocks]
        check_unique_ids(block_list)

        builder = _PageBuilder(self.config)
        for block in block_list:
            lines = self.block_lines(block.text)
            builder.pending_start_line = 0
            for line in lines:
                # A line always goes onto an empty page, so layout cannot stall
                if not builder.fits() and not builder.is_empty():
                    builder.close_segment(block, line.start)
                    builder.new_page()
                builder.place(line)
            builder.close_segment(block, len(block.text))

        pages = builder.finish()
        logger.debug(f"Paginated {len(block_list)} blocks into {len(pages)} pages")
        return pages


def check_unique_ids(blocks: list[Block]) -> None:
    seen: set[str] = set()
    for block in blocks:
        if block.id in seen:
            raise DuplicateBlockIdError(f"Duplicate block id: {block.id!r}")
        seen.add(block.id)


def paginate(blocks: Iterable[BlockLike], config: PageConfig = DEFAULT_PAGE_CONFIG,
             measurer: Optional[WidthMeasurer] = None) -> list[Page]:
    """Paginate blocks with a one-off Paginator."""
    return Paginator(config, measurer).paginate(blocks)
