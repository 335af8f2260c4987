"""Pageflow CLI entry point.

Allows running via `python -m pageflow` and provides the console script
defined in `pyproject.toml`.

Usage:
    pageflow [--verbose] [--preset NAME] [--pdf OUT.pdf] [--store-save] FILE
    pageflow [--verbose] [--preset NAME] [--pdf OUT.pdf] --store-load ID
    pageflow --version
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .version import get_version_string

USAGE = __doc__.split("Usage:")[1].rstrip()


class UsageError(Exception):
    """Raised for invalid command line arguments."""


def parse_args(args: list[str]) -> dict:
    """Parse the small set of options the CLI supports."""
    options: dict = {"verbose": False, "preset": None, "pdf": None,
                     "store_save": False, "store_load": None, "file": None}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("-v", "--verbose"):
            options["verbose"] = True
        elif arg == "--store-save":
            options["store_save"] = True
        elif arg in ("--preset", "--pdf", "--store-load"):
            if i + 1 >= len(args):
                raise UsageError(f"{arg} needs a value")
            options[arg[2:].replace("-", "_")] = args[i + 1]
            i += 1
        elif arg.startswith("-"):
            raise UsageError(f"Unknown option: {arg}")
        elif options["file"] is None:
            options["file"] = arg
        else:
            raise UsageError(f"Unexpected argument: {arg}")
        i += 1
    if (options["file"] is None) == (options["store_load"] is None):
        raise UsageError("Give either FILE or --store-load ID")
    return options


def format_layout(pages, title: Optional[str] = None) -> str:
    """Describe pages and their segments, one line per segment."""
    out = []
    if title:
        out.append(title)
    for page in pages:
        out.append(f"Page {page.page_number} of {len(pages)}")
        for s in page.segments:
            first = s.lines[0] if s.lines else ""
            out.append(
                f"  {s.block_id}  offsets {s.start_offset}-{s.end_offset}"
                f"  lines {s.start_line}-{s.end_line}  y={s.y:g} h={s.height:g}"
                f"  {first[:40]!r}"
            )
    return "\n".join(out)


def run(options: dict) -> int:
    from .document import Document, blocks_from_text
    from .page_config import ConfigurationError, get_page_config
    from .paginator import Paginator
    from .pdf_export import PDFExporter
    from .settings import SettingsStore, load_page_config
    from .storage import DocumentStore, StorageError
    from .measure import FontLoadError, measurer_for

    settings = SettingsStore().load()
    if options["preset"]:
        if get_page_config(options["preset"]) is None:
            raise UsageError(f"Unknown preset: {options['preset']}")
        settings["page_preset"] = options["preset"]

    try:
        config = load_page_config(settings)
        font_path = settings.get("font_path")
        paginator = Paginator(config, measurer_for(config, font_path=font_path))
    except (ConfigurationError, FontLoadError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    store = DocumentStore()
    try:
        if options["store_load"]:
            stored = store.fetch(options["store_load"])
            document = Document(paginator, stored.blocks, title=stored.title)
        else:
            with open(options["file"], 'r', encoding='utf-8') as f:
                document = Document(paginator, blocks_from_text(f.read()), title=options["file"])
        if options["store_save"]:
            doc_id = store.create(document.title, document.blocks)
            print(f"Saved document {doc_id}")
    except (OSError, StorageError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_layout(document.pages, document.title))

    if options["pdf"]:
        try:
            PDFExporter(config, font_path=font_path).save(document.pages, options["pdf"])
        except OSError as e:
            print(f"Error: Cannot write {options['pdf']}: {e}", file=sys.stderr)
            return 1
        print(f"Wrote {options['pdf']}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0
    try:
        options = parse_args(args)
    except UsageError as e:
        print(f"Error: {e}\nUsage:{USAGE}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if options["verbose"] else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(options)
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
