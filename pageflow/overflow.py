"""Keeping a block on a single page.

Alternative to letting blocks flow across pages: when new text would make a
block span more than one page, find the longest prefix that still fits on one
page and split the rest off into a new block. Each probe is a full
repagination, and a binary search needs O(log n) of them.

Whether a prefix fits is assumed to be monotone in its length. That holds for
ordinary greedy wrapping but is not guaranteed for every layout, so this is
a fallback policy; flowing blocks through segments is the default.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Sequence

from .model import Block, BlockLike, as_block
from .paginator import Paginator

logger = logging.getLogger(__name__)

WORD_BOUNDARIES = (" ", "\n")


class OverflowSplit(NamedTuple):
    """Result of splitting an overflowing block.

    Attributes:
        head: Text kept in the block, trailing whitespace trimmed
        tail: Text for the new block, leading whitespace trimmed
        cut: Offset in the original text where the split happened
    """
    head: str
    tail: str
    cut: int


def _with_text(blocks: Sequence[Block], block_id: str, text: str) -> list[Block]:
    return [Block(b.id, text) if b.id == block_id else b for b in blocks]


def spans_multiple_pages(paginator: Paginator, blocks: Sequence[BlockLike],
                         block_id: str, text: str) -> bool:
    """Check whether block_id would span more than one page holding text."""
    trial = _with_text([as_block(b) for b in blocks], block_id, text)
    pages = paginator.paginate(trial)
    block_pages = {page.page_number for page in pages if page.segments_for(block_id)}
    return len(block_pages) > 1


def longest_single_page_prefix(paginator: Paginator, blocks: Sequence[BlockLike],
                               block_id: str, text: str) -> int:
    """Binary search for the longest prefix of text keeping the block on one page."""
    block_list = [as_block(b) for b in blocks]
    left, right = 0, len(text)
    max_fit = 0
    probes = 0
    while left <= right:
        mid = (left + right) // 2
        probes += 1
        if spans_multiple_pages(paginator, block_list, block_id, text[:mid]):
            right = mid - 1
        else:
            max_fit = mid
            left = mid + 1
    logger.debug(f"Longest single-page prefix of {block_id}: {max_fit} chars ({probes} probes)")
    return max_fit


def resolve_overflow(paginator: Paginator, blocks: Sequence[BlockLike],
                     block_id: str, text: str) -> OverflowSplit:
    """Split text so the first part keeps block_id on a single page.

    The cut backs off from the longest fitting prefix to the nearest
    preceding space or newline. Without one, the raw cut point is used.
    """
    max_fit = longest_single_page_prefix(paginator, blocks, block_id, text)
    if max_fit == len(text):
        return OverflowSplit(text, "", len(text))
    cut = max_fit
    while cut > 0 and text[cut] not in WORD_BOUNDARIES:
        cut -= 1
    if cut == 0:
        cut = max_fit
    return OverflowSplit(text[:cut].rstrip(), text[cut:].lstrip(), cut)
