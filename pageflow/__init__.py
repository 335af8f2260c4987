"""Pageflow - live pagination for block-based plain-text documents."""

from .model import Block, Page, Segment, join_segments, new_block_id
from .page_config import PageConfig, DEFAULT_PAGE_CONFIG, ConfigurationError, get_page_config
from .measure import WidthMeasurer, ReportLabMeasurer, MonospaceMeasurer, FontLoadError
from .line_breaker import TextLine, break_into_lines, layout_lines
from .paginator import Paginator, DuplicateBlockIdError, paginate
from .offsets import LayoutIndex, SegmentPosition, CaretGeometry, OffsetError, find_segment, to_absolute
from .overflow import OverflowSplit, resolve_overflow
from .document import Document, Caret, UnknownBlockError

__all__ = [
    'Block',
    'Page',
    'Segment',
    'join_segments',
    'new_block_id',
    'PageConfig',
    'DEFAULT_PAGE_CONFIG',
    'ConfigurationError',
    'get_page_config',
    'WidthMeasurer',
    'ReportLabMeasurer',
    'MonospaceMeasurer',
    'FontLoadError',
    'TextLine',
    'break_into_lines',
    'layout_lines',
    'Paginator',
    'DuplicateBlockIdError',
    'paginate',
    'LayoutIndex',
    'SegmentPosition',
    'CaretGeometry',
    'OffsetError',
    'find_segment',
    'to_absolute',
    'OverflowSplit',
    'resolve_overflow',
    'Document',
    'Caret',
    'UnknownBlockError',
]
