#!/usr/bin/env python3
"""Pageflow - paginate a plain-text document.

Usage:
    python main.py [--preset NAME] [--pdf OUT.pdf] FILE

Blank lines separate blocks. Prints every page with the segments on it and,
with --pdf, writes the laid out pages to a PDF file.
"""

import sys
from pageflow.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
