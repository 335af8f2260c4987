"""Data model shared by the layout engine and its hosts.

A document is an ordered list of blocks. Pagination turns it into pages of
segments; a segment is the run of one block's lines that landed on one page.
Everything here is immutable so a layout can be handed out as a snapshot.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union


def new_block_id() -> str:
    """Return a fresh, unique block identifier."""
    return f"block-{uuid.uuid4().hex}"


@dataclass(frozen=True)
class Block:
    """An editable paragraph-like unit of text."""
    id: str
    text: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Block":
        return cls(id=str(data["id"]), text=str(data.get("text", "")))

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "text": self.text}


BlockLike = Union[Block, Mapping[str, Any]]


def as_block(block: BlockLike) -> Block:
    """Accept either a Block or an {id, text} mapping."""
    if isinstance(block, Block):
        return block
    return Block.from_dict(block)


@dataclass(frozen=True)
class Segment:
    """Contiguous lines of one block placed on a single page.

    Offsets are absolute character offsets into the owning block. The segment
    owns the separator after its last line, so end_offset equals the
    start_offset of the block's next segment.

    Attributes:
        block_id: Owning block
        page_number: 1-based page the segment sits on
        start_offset: Offset of the first line's first character
        end_offset: Offset where the block's next line starts (or block length)
        start_line: Index of the first line within the block
        end_line: Index of the last line within the block (inclusive)
        y: Top edge of the first line
        height: Number of lines times the line height
        lines: Line texts
        separators: Source text consumed after each line
    """
    block_id: str
    page_number: int
    start_offset: int
    end_offset: int
    start_line: int
    end_line: int
    y: float
    height: float
    lines: tuple[str, ...] = field(default_factory=tuple)
    separators: tuple[str, ...] = field(default_factory=tuple)

    @property
    def length(self) -> int:
        return self.end_offset - self.start_offset

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def text(self) -> str:
        """The block text covered by this segment, separators included."""
        return "".join(line + sep for line, sep in zip(self.lines, self.separators))

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class Page:
    """One laid out page."""
    page_number: int
    segments: tuple[Segment, ...] = field(default_factory=tuple)

    def segments_for(self, block_id: str) -> list[Segment]:
        return [s for s in self.segments if s.block_id == block_id]

    @property
    def block_ids(self) -> list[str]:
        """Ids of the blocks with content on this page, in order."""
        seen: list[str] = []
        for s in self.segments:
            if s.block_id not in seen:
                seen.append(s.block_id)
        return seen


def join_segments(segments: Iterable[Segment]) -> str:
    """Rebuild a block's text from its segments in order."""
    return "".join(s.text for s in segments)
