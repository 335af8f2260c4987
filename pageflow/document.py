"""Editable document model on top of the pagination engine.

Holds the ordered block list and a caret, applies the edits an input surface
produces (typing, paste, Enter, Backspace, range delete), and repaginates the
whole document after each edit. Carets are stored as (block id, absolute
offset) so they survive relayout unchanged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from .model import Block, BlockLike, Page, as_block, new_block_id
from .offsets import CaretGeometry, LayoutIndex
from .overflow import resolve_overflow, spans_multiple_pages
from .paginator import Paginator, check_unique_ids

logger = logging.getLogger(__name__)

POLICY_SPAN = "span"
POLICY_SPLIT = "split"
OVERFLOW_POLICIES = (POLICY_SPAN, POLICY_SPLIT)


class UnknownBlockError(KeyError):
    """Raised when an edit names a block that is not in the document."""


def blocks_from_text(content: str) -> list[Block]:
    """Split plain text into blocks at blank lines.

    Single line breaks stay inside their block.
    """
    paragraphs = [p.strip("\n") for p in re.split(r"\n[ \t]*\n", content)]
    return [Block(new_block_id(), p) for p in paragraphs if p] or [Block(new_block_id(), "")]


@dataclass
class Caret:
    block_id: str
    offset: int = 0


class Document:
    """An ordered list of blocks with a caret and a cached layout."""

    def __init__(self, paginator: Paginator, blocks: Optional[Iterable[BlockLike]] = None,
                 title: str = "Untitled", overflow_policy: str = POLICY_SPAN):
        """Initialize the document.

        Args:
            paginator: Layout engine used for every relayout.
            blocks: Initial blocks; a new document holds one empty block.
            title: Document title, kept for persistence.
            overflow_policy: "span" lets blocks flow across pages, "split"
                moves overflowing text into new blocks.
        """
        if overflow_policy not in OVERFLOW_POLICIES:
            raise ValueError(f"Unknown overflow policy: {overflow_policy}")
        self.paginator = paginator
        self.title = title
        self.overflow_policy = overflow_policy
        self.blocks: list[Block] = [as_block(b) for b in blocks] if blocks else []
        if not self.blocks:
            self.blocks = [Block(new_block_id(), "")]
        check_unique_ids(self.blocks)
        self.caret = Caret(self.blocks[0].id, 0)
        self._pages: Optional[list[Page]] = None
        self._index: Optional[LayoutIndex] = None

    # --- Layout ---
    @property
    def pages(self) -> list[Page]:
        if self._pages is None:
            self._pages = self.paginator.paginate(self.blocks)
        return self._pages

    @property
    def index(self) -> LayoutIndex:
        if self._index is None:
            self._index = LayoutIndex(self.pages)
        return self._index

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def _changed(self) -> None:
        self._pages = None
        self._index = None

    def caret_geometry(self) -> CaretGeometry:
        """Return where the caret is drawn in the current layout."""
        return self.index.caret(self.caret.block_id, self.caret.offset,
                                self.paginator.config, self.paginator.measurer)

    # --- Lookup ---
    def index_of(self, block_id: str) -> int:
        for i, block in enumerate(self.blocks):
            if block.id == block_id:
                return i
        raise UnknownBlockError(block_id)

    def block(self, block_id: str) -> Block:
        return self.blocks[self.index_of(block_id)]

    def text(self) -> str:
        """All block texts joined with newlines."""
        return "\n".join(b.text for b in self.blocks)

    # --- Caret ---
    def move_caret(self, block_id: str, offset: int) -> Caret:
        """Move the caret, clamping offset into the block's text."""
        text = self.block(block_id).text
        self.caret = Caret(block_id, max(0, min(offset, len(text))))
        return self.caret

    # --- Edits ---
    def set_block_text(self, block_id: str, text: str) -> None:
        """Replace a block's text, as an input surface reports it.

        Under the split policy, text that would make the block span pages is
        cut at a word boundary and the remainder moves into new blocks; the
        caret then goes to the start of the last new block. Otherwise a caret
        in this block is clamped to the new text.
        """
        idx = self.index_of(block_id)
        if self.overflow_policy == POLICY_SPLIT and spans_multiple_pages(
                self.paginator, self.blocks, block_id, text):
            self._split_overflow(idx, text)
        else:
            self.blocks[idx] = Block(block_id, text)
            if self.caret.block_id == block_id:
                self.caret = Caret(block_id, max(0, min(self.caret.offset, len(text))))
        self._changed()

    def _split_overflow(self, idx: int, text: str) -> None:
        block_id = self.blocks[idx].id
        while True:
            split = resolve_overflow(self.paginator, self.blocks, block_id, text)
            self.blocks[idx] = Block(block_id, split.head)
            if not split.tail:
                break
            new_block = Block(new_block_id(), split.tail)
            self.blocks.insert(idx + 1, new_block)
            logger.info(f"Split overflowing block {block_id} at offset {split.cut}")
            self.caret = Caret(new_block.id, 0)
            if not spans_multiple_pages(self.paginator, self.blocks, new_block.id, split.tail):
                break
            idx, block_id, text = idx + 1, new_block.id, split.tail

    def insert_text(self, text: str) -> None:
        """Insert text at the caret (typing or paste)."""
        block = self.block(self.caret.block_id)
        offset = self.caret.offset
        self.caret = Caret(block.id, offset + len(text))
        self.set_block_text(block.id, block.text[:offset] + text + block.text[offset:])

    def split_block(self) -> Block:
        """Split the caret's block at the caret (Enter).

        Returns:
            The new block holding the text after the caret.
        """
        idx = self.index_of(self.caret.block_id)
        block = self.blocks[idx]
        offset = self.caret.offset
        new_block = Block(new_block_id(), block.text[offset:])
        self.blocks[idx] = Block(block.id, block.text[:offset])
        self.blocks.insert(idx + 1, new_block)
        self.caret = Caret(new_block.id, 0)
        self._changed()
        return new_block

    def merge_with_previous(self, block_id: str) -> bool:
        """Append a block's text to the previous block and remove it.

        Returns:
            True if merged, False if block_id is the first block.
        """
        idx = self.index_of(block_id)
        if idx == 0:
            return False
        prev = self.blocks[idx - 1]
        curr = self.blocks[idx]
        self.blocks[idx - 1] = Block(prev.id, prev.text + curr.text)
        del self.blocks[idx]
        self.caret = Caret(prev.id, len(prev.text))
        self._changed()
        return True

    def delete_backward(self) -> None:
        """Delete the character before the caret (Backspace)."""
        block = self.block(self.caret.block_id)
        offset = self.caret.offset
        if offset > 0:
            self.blocks[self.index_of(block.id)] = Block(block.id, block.text[:offset - 1] + block.text[offset:])
            self.caret = Caret(block.id, offset - 1)
            self._changed()
        else:
            self.merge_with_previous(block.id)

    def _ordered(self, start: Caret, end: Caret) -> tuple[Caret, Caret]:
        if (self.index_of(start.block_id), start.offset) > (self.index_of(end.block_id), end.offset):
            return end, start
        return start, end

    def text_between(self, start: Caret, end: Caret) -> str:
        """Return the text between two carets, blocks joined with newlines."""
        start, end = self._ordered(start, end)
        first = self.index_of(start.block_id)
        last = self.index_of(end.block_id)
        if first == last:
            return self.blocks[first].text[start.offset:end.offset]
        parts = [self.blocks[first].text[start.offset:]]
        parts.extend(b.text for b in self.blocks[first + 1:last])
        parts.append(self.blocks[last].text[:end.offset])
        return "\n".join(parts)

    def delete_range(self, start: Caret, end: Caret) -> None:
        """Delete everything between two carets, possibly across blocks.

        The first block keeps its text before start followed by the last
        block's text after end; blocks in between are removed.
        """
        start, end = self._ordered(start, end)
        first = self.index_of(start.block_id)
        last = self.index_of(end.block_id)
        head = self.blocks[first].text[:start.offset]
        tail = self.blocks[last].text[end.offset:]
        self.blocks[first] = Block(self.blocks[first].id, head + tail)
        del self.blocks[first + 1:last + 1]
        self.caret = Caret(self.blocks[first].id, len(head))
        self._changed()

    def select_all(self) -> tuple[Caret, Caret]:
        last = self.blocks[-1]
        return Caret(self.blocks[0].id, 0), Caret(last.id, len(last.text))

    # --- Serialization ---
    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "blocks": [b.to_dict() for b in self.blocks]}

    @classmethod
    def from_dict(cls, paginator: Paginator, data: Mapping[str, Any],
                  overflow_policy: str = POLICY_SPAN) -> "Document":
        return cls(paginator, blocks=data.get("blocks") or None,
                   title=data.get("title") or "Untitled", overflow_policy=overflow_policy)
