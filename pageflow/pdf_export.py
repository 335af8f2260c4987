"""Render laid out pages to PDF.

Draws each segment's lines exactly where the paginator placed them, using the
font the layout was measured with. Layout units are taken as PDF points.
"""

import io
from typing import List, Optional

from reportlab.pdfgen import canvas

from .line_breaker import expand_tabs
from .measure import measurer_for
from .model import Page
from .page_config import PageConfig

FOOTER_FONT_SIZE = 9


class PDFExporter:
    """Generate PDF files from paginated documents."""

    def __init__(self, config: PageConfig, font_path: Optional[str] = None,
                 page_numbers: bool = True):
        """Initialize the exporter.

        Args:
            config: Page geometry the pages were laid out with.
            font_path: Optional TrueType file for config.font_family.
            page_numbers: Whether to draw a "Page N of M" footer.

        Raises:
            FontLoadError: If the font cannot be loaded.
        """
        self.config = config.validate()
        # Registers the font with reportlab when a file is given
        measurer_for(config, font_path=font_path)
        self.page_numbers = page_numbers

    def _baseline(self, line_top: float) -> float:
        """PDF y of the baseline for a line whose top edge is line_top."""
        c = self.config
        # Center the glyphs in the line box; descenders take about 20%
        baseline_from_top = (c.line_height + c.font_size) / 2 - c.font_size * 0.2
        return c.height - (line_top + baseline_from_top)

    def generate_pdf(self, pages: List[Page]) -> bytes:
        """Generate PDF from laid out pages.

        Returns:
            Complete PDF document as bytes.
        """
        c = self.config
        pdf_buffer = io.BytesIO()
        pdf = canvas.Canvas(pdf_buffer, pagesize=(c.width, c.height))
        total = len(pages)

        for page in pages:
            pdf.setFont(c.font_family, c.font_size)
            for segment in page.segments:
                for i, line in enumerate(segment.lines):
                    if not line:
                        continue
                    line_top = segment.y + i * c.line_height
                    pdf.drawString(c.margin_left, self._baseline(line_top), expand_tabs(line))

            if self.page_numbers:
                pdf.setFont(c.font_family, FOOTER_FONT_SIZE)
                pdf.drawCentredString(c.width / 2, c.margin_bottom / 2,
                                      f"Page {page.page_number} of {total}")
            pdf.showPage()

        pdf.save()
        return pdf_buffer.getvalue()

    def save(self, pages: List[Page], path: str) -> None:
        """Write the PDF for pages to path."""
        with open(path, 'wb') as f:
            f.write(self.generate_pdf(pages))
