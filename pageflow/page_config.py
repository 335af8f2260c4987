"""Page geometry configuration for the pagination engine.

This module defines the page presets the layout engine can run with. All
lengths of one configuration share a unit: the default preset uses screen
pixels (A4 at 96 per inch), the print presets use PDF points.
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Dict, Optional


# Physical page constants
POINTS_PER_INCH = 72
PIXELS_PER_INCH = 96
A4_WIDTH_INCHES = 8.27
A4_HEIGHT_INCHES = 11.69
LETTER_WIDTH_INCHES = 8.5
LETTER_HEIGHT_INCHES = 11.0

STANDARD_MARGIN_INCHES = 1.0  # Margins used by the print presets


class ConfigurationError(ValueError):
    """Raised when a page configuration cannot produce a layout."""


@dataclass(frozen=True)
class PageConfig:
    """Geometry of one page and the font laid out on it.

    Attributes:
        name: Preset name
        width: Full page width
        height: Full page height
        margin_top: Space above the content area
        margin_bottom: Space below the content area
        margin_left: Space left of the content area
        margin_right: Space right of the content area
        line_height: Vertical advance of one line
        font_size: Font size used for measurement and rendering
        font_family: Font name known to reportlab (or registered from a file)
    """
    name: str
    width: float
    height: float
    margin_top: float
    margin_bottom: float
    margin_left: float
    margin_right: float
    line_height: float
    font_size: float
    font_family: str

    @property
    def content_width(self) -> float:
        """Width available to a line of text."""
        return self.width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom

    @property
    def content_bottom(self) -> float:
        """Lowest y a line's bottom edge may reach."""
        return self.height - self.margin_bottom

    @property
    def lines_per_page(self) -> int:
        """Number of lines that fit into the content area."""
        return math.floor(self.content_height / self.line_height)

    def validate(self) -> "PageConfig":
        """Check that the configuration can lay out text.

        Returns:
            The configuration itself, so calls can be chained.

        Raises:
            ConfigurationError: If the content area is empty or a single line
                does not fit into it.
        """
        if self.content_width <= 0:
            raise ConfigurationError(
                f"Content width must be positive, got {self.content_width} "
                f"(page width {self.width}, margins {self.margin_left}/{self.margin_right})"
            )
        if self.content_height <= 0:
            raise ConfigurationError(
                f"Content height must be positive, got {self.content_height} "
                f"(page height {self.height}, margins {self.margin_top}/{self.margin_bottom})"
            )
        if self.line_height <= 0:
            raise ConfigurationError(f"Line height must be positive, got {self.line_height}")
        if self.font_size <= 0:
            raise ConfigurationError(f"Font size must be positive, got {self.font_size}")
        if self.line_height > self.content_height:
            raise ConfigurationError(
                f"Line height {self.line_height} exceeds content height {self.content_height}"
            )
        if not self.font_family:
            raise ConfigurationError("Font family must not be empty")
        return self

    def replace(self, **changes) -> "PageConfig":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def create_print(cls, name: str, width_inches: float, height_inches: float,
                     font_size: float = 12, font_family: str = "Helvetica") -> "PageConfig":
        """Create a print configuration measured in PDF points.

        Uses 1" margins on every side and a line height of 1.2 times the
        font size.
        """
        margin = STANDARD_MARGIN_INCHES * POINTS_PER_INCH  # 72
        return cls(
            name=name,
            width=round(width_inches * POINTS_PER_INCH),
            height=round(height_inches * POINTS_PER_INCH),
            margin_top=margin,
            margin_bottom=margin,
            margin_left=margin,
            margin_right=margin,
            line_height=font_size * 1.2,
            font_size=font_size,
            font_family=font_family,
        )


DEFAULT_PAGE_CONFIG = PageConfig(
    name="screen-a4",
    width=794,  # 8.27" at 96 px/inch
    height=1123,  # 11.69" at 96 px/inch
    margin_top=72,
    margin_bottom=72,
    margin_left=72,
    margin_right=72,
    line_height=24,
    font_size=16,
    font_family="Helvetica",
)


# Pre-defined page configurations
PAGE_CONFIGS: Dict[str, PageConfig] = {
    "screen-a4": DEFAULT_PAGE_CONFIG,
    "a4": PageConfig.create_print("a4", A4_WIDTH_INCHES, A4_HEIGHT_INCHES),
    "letter": PageConfig.create_print("letter", LETTER_WIDTH_INCHES, LETTER_HEIGHT_INCHES),
}


def get_page_config(name: str) -> Optional[PageConfig]:
    """Get a page configuration by preset name.

    Args:
        name: Name of the preset

    Returns:
        PageConfig if found, None otherwise
    """
    return PAGE_CONFIGS.get(name)
