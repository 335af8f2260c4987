"""String width measurement backends.

The layout engine never measures text itself; it asks a WidthMeasurer for the
width of a string in the font fixed at construction. The reportlab backend
uses the same font metrics the PDF exporter draws with, so the editor's line
breaks match the printed output.
"""

import os
from abc import ABC, abstractmethod
from typing import Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from .page_config import PageConfig


class FontLoadError(Exception):
    """Exception raised when a font cannot be loaded."""


class WidthMeasurer(ABC):
    """Measures the rendered width of a string for one fixed font."""

    @abstractmethod
    def measure(self, text: str) -> float:
        """Return the width of text. The empty string measures 0."""


class ReportLabMeasurer(WidthMeasurer):
    """Measure strings with reportlab's font metrics."""

    def __init__(self, font_family: str = "Helvetica", font_size: float = 16,
                 font_path: Optional[str] = None):
        """Initialize the measurer.

        Args:
            font_family: A standard PDF font name, or the name to register
                font_path under.
            font_size: Font size in the layout unit.
            font_path: Optional TrueType file to register as font_family.

        Raises:
            FontLoadError: If the font is unknown or cannot be registered.
        """
        self.font_family = font_family
        self.font_size = font_size
        if font_path:
            _register_truetype(font_family, font_path)
        try:
            pdfmetrics.getFont(font_family)
        except Exception as e:
            raise FontLoadError(f"Unknown font: {font_family}") from e

    def measure(self, text: str) -> float:
        if not text:
            return 0.0
        return pdfmetrics.stringWidth(text, self.font_family, self.font_size)


class MonospaceMeasurer(WidthMeasurer):
    """Every character advances by the same width, like a typewriter."""

    def __init__(self, advance: float = 1.0):
        self.advance = advance

    def measure(self, text: str) -> float:
        return len(text) * self.advance


def _register_truetype(font_family: str, font_path: str) -> None:
    """Register a TrueType font file under font_family if not yet registered."""
    if font_family in pdfmetrics.getRegisteredFontNames():
        return
    if not os.path.exists(font_path):
        raise FontLoadError(f"Font file not found: {font_path}")
    try:
        pdfmetrics.registerFont(TTFont(font_family, font_path))
    except Exception as e:
        raise FontLoadError(f"Could not register font {font_family} from {font_path}: {e}") from e


def measurer_for(config: PageConfig, font_path: Optional[str] = None) -> ReportLabMeasurer:
    """Create the reportlab measurer matching a page configuration."""
    return ReportLabMeasurer(config.font_family, config.font_size, font_path=font_path)
