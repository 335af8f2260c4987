"""Tests for pagination of blocks into pages of segments."""

import pytest

from pageflow.measure import MonospaceMeasurer
from pageflow.model import Block, join_segments
from pageflow.page_config import DEFAULT_PAGE_CONFIG, ConfigurationError
from pageflow.paginator import DuplicateBlockIdError, Paginator, paginate

# Default page: 650 wide content area, so 65 characters per line at 10 each,
# and 40 lines of 24 per page.
CONFIG = DEFAULT_PAGE_CONFIG
LINES_PER_PAGE = 40


def _paginator():
    return Paginator(CONFIG, MonospaceMeasurer(10))


def _words(count: int) -> str:
    # 13 words of "aaaa " fill one 65-char line exactly
    return " ".join(["aaaa"] * count)


def _segments_for(pages, block_id):
    return [s for page in pages for s in page.segments if s.block_id == block_id]


def test_no_blocks_gives_no_pages():
    """Test paginating an empty block list."""
    assert _paginator().paginate([]) == []


def test_empty_document():
    """Test a document holding one empty block."""
    pages = _paginator().paginate([{"id": "a", "text": ""}])
    assert len(pages) == 1
    assert pages[0].page_number == 1
    assert len(pages[0].segments) == 1
    segment = pages[0].segments[0]
    assert segment.block_id == "a"
    assert segment.start_offset == 0
    assert segment.end_offset == 0
    assert segment.lines == ("",)
    assert segment.y == CONFIG.margin_top
    assert segment.height == CONFIG.line_height


def test_blank_line_preservation():
    """Test that blank lines take a line each."""
    pages = _paginator().paginate([Block("a", "a\n\nb")])
    segment = pages[0].segments[0]
    assert segment.lines == ("a", "", "b")
    assert segment.start_line == 0
    assert segment.end_line == 2
    assert segment.height == 3 * CONFIG.line_height


def test_lines_per_page_matches_config():
    """Test lines per page of the default page."""
    assert CONFIG.lines_per_page == LINES_PER_PAGE


def test_full_page_of_explicit_lines_fits_on_one_page():
    """Test a block exactly one page long."""
    text = "\n".join(f"line {i}" for i in range(LINES_PER_PAGE))
    pages = _paginator().paginate([Block("a", text)])
    assert len(pages) == 1
    assert len(pages[0].segments) == 1
    assert pages[0].segments[0].line_count == LINES_PER_PAGE


def test_one_more_line_forces_second_page():
    """Test that one extra line starts a second page."""
    text = "\n".join(f"line {i}" for i in range(LINES_PER_PAGE + 1))
    pages = _paginator().paginate([Block("a", text)])
    assert [p.page_number for p in pages] == [1, 2]
    first, second = pages[0].segments[0], pages[1].segments[0]
    assert first.end_offset == second.start_offset
    assert second.start_offset == text.index(f"line {LINES_PER_PAGE}")
    assert second.lines == (f"line {LINES_PER_PAGE}",)
    assert second.start_line == LINES_PER_PAGE
    assert second.y == CONFIG.margin_top


def test_wrapped_block_page_break_boundary():
    """Test the page break inside a wrapped block."""
    fits = _words(13 * LINES_PER_PAGE)
    pages = _paginator().paginate([Block("a", fits)])
    assert len(pages) == 1
    assert pages[0].segments[0].line_count == LINES_PER_PAGE

    overflow = _words(13 * LINES_PER_PAGE + 1)
    pages = _paginator().paginate([Block("a", overflow)])
    assert len(pages) == 2
    first, second = pages[0].segments[0], pages[1].segments[0]
    assert first.line_count == LINES_PER_PAGE
    assert first.end_offset == second.start_offset == 65 * LINES_PER_PAGE
    assert second.end_offset == len(overflow)
    assert second.lines == ("aaaa",)


def test_page_break_on_block_boundary():
    """Test a page break between blocks."""
    blocks = [Block(f"b{i}", f"block {i}") for i in range(LINES_PER_PAGE + 1)]
    pages = _paginator().paginate(blocks)
    assert len(pages) == 2
    assert len(pages[0].segments) == LINES_PER_PAGE
    last = pages[1].segments[0]
    assert last.block_id == f"b{LINES_PER_PAGE}"
    assert last.start_offset == 0
    assert last.y == CONFIG.margin_top


def test_block_spanning_three_pages():
    """Test a block flowing across three pages."""
    text = _words(13 * LINES_PER_PAGE * 2 + 20)
    pages = _paginator().paginate([Block("intro", "intro"), Block("long", text)])
    segments = _segments_for(pages, "long")
    assert [s.page_number for s in segments] == [1, 2, 3]
    assert segments[0].start_offset == 0
    assert segments[-1].end_offset == len(text)
    for a, b in zip(segments, segments[1:]):
        assert a.end_offset == b.start_offset
        assert a.start_offset <= a.end_offset
        assert a.end_line + 1 == b.start_line
    assert join_segments(segments) == text


def test_round_trip_with_explicit_breaks():
    """Test rejoining lines of a spanning block."""
    text = "\n".join(f"row {i}" for i in range(100))
    pages = _paginator().paginate([Block("a", text)])
    segments = _segments_for(pages, "a")
    assert len(segments) == 3
    assert "\n".join(line for s in segments for line in s.lines) == text


def test_page_containment():
    """Test that segments stay inside the content area."""
    blocks = [Block(f"b{i}", _words(i * 7 + 1) + "\n\n" + _words(i)) for i in range(30)]
    pages = _paginator().paginate(blocks)
    for page in pages:
        previous_bottom = CONFIG.margin_top
        for segment in page.segments:
            assert CONFIG.margin_top <= segment.y
            assert segment.y + segment.height <= CONFIG.height - CONFIG.margin_bottom
            # Segments are stacked without overlap
            assert segment.y >= previous_bottom
            previous_bottom = segment.bottom


def test_page_numbers_are_dense():
    """Test that pages are numbered from 1 without gaps."""
    blocks = [Block(f"b{i}", _words(100)) for i in range(20)]
    pages = _paginator().paginate(blocks)
    assert [p.page_number for p in pages] == list(range(1, len(pages) + 1))


def test_determinism():
    """Test that identical input gives identical pages."""
    blocks = [Block(f"b{i}", _words(i * 11)) for i in range(15)]
    paginator = _paginator()
    assert paginator.paginate(blocks) == paginator.paginate(list(blocks))


def test_appending_text_keeps_earlier_pages():
    """Test that appending blocks leaves earlier pages unchanged."""
    blocks = [Block(f"b{i}", _words(60)) for i in range(12)]
    before = _paginator().paginate(blocks)
    after = _paginator().paginate(blocks + [Block("new", _words(300))])
    assert after[:len(before) - 1] == before[:-1]


def test_oversized_token_does_not_loop():
    """Test a word wider than the page."""
    pages = _paginator().paginate([Block("a", "x" * 500)])
    assert len(pages) == 1
    assert pages[0].segments[0].lines == ("x" * 500,)


def test_page_block_ids():
    """Test the block ids of a page."""
    pages = _paginator().paginate([Block("a", "one"), Block("b", "two")])
    assert pages[0].block_ids == ["a", "b"]
    assert len(pages[0].segments_for("b")) == 1


def test_duplicate_block_ids_rejected():
    """Test that duplicate block ids are rejected."""
    with pytest.raises(DuplicateBlockIdError):
        _paginator().paginate([Block("a", "x"), Block("a", "y")])


def test_invalid_config_fails_fast():
    """Test that unusable page geometry is rejected."""
    with pytest.raises(ConfigurationError):
        Paginator(CONFIG.replace(margin_left=400, margin_right=400), MonospaceMeasurer(10))
    with pytest.raises(ConfigurationError):
        Paginator(CONFIG.replace(margin_top=600, margin_bottom=600), MonospaceMeasurer(10))


def test_default_measurer_uses_font_metrics():
    """Test paginating with the default reportlab measurer."""
    pages = paginate([Block("a", "Hello, world")])
    assert len(pages) == 1
    assert pages[0].segments[0].lines == ("Hello, world",)
