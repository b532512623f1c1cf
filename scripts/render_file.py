#!/usr/bin/env python
"""
Render a Markdown file (or stdin) to HTML with SurfaceMark.

Usage:
    .venv/bin/python scripts/render_file.py [FILE] [options]

Options:
    --wiki               Render on the wiki surface (default: usertext)
    --nofollow           Add rel="nofollow" to links
    --target T           Link target, e.g. _blank
    --domain D           Links into this domain skip a _blank target
    --toc                Prepend a table of contents
    --toc-id-prefix P    Prefix for heading ids / TOC anchors
    --output PATH        Also write a standalone HTML page to PATH

Example:
    echo "First line:\\nSecond Line:\\nThird Line" | .venv/bin/python scripts/render_file.py --target _blank
    .venv/bin/python scripts/render_file.py notes.md --toc --output markdown.html
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

# Ensure surfacemark package is importable when run from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from surfacemark import RENDERER_USERTEXT, RENDERER_WIKI, DepthExceeded, markdown


# ── CLI ───────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a Markdown document to sanitized HTML.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("file", nargs="?", default="-",
                        help="Markdown file to render (default: stdin)")
    parser.add_argument("--wiki", action="store_true",
                        help="Render on the wiki surface")
    parser.add_argument("--nofollow", action="store_true",
                        help='Add rel="nofollow" to links')
    parser.add_argument("--target", default=None, metavar="T",
                        help="Link target attribute")
    parser.add_argument("--domain", default=None, metavar="D",
                        help="Exempt domain for _blank targets")
    parser.add_argument("--toc", action="store_true",
                        help="Prepend a table of contents")
    parser.add_argument("--toc-id-prefix", default=None, metavar="P",
                        help="Prefix for heading ids")
    parser.add_argument("--output", default=None, metavar="PATH",
                        help="Write a standalone HTML page to PATH")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.file == "-":
        source = sys.stdin.buffer.read()
    else:
        path = Path(args.file).expanduser()
        if not path.exists():
            print(f"Error: file not found: {path}", file=sys.stderr)
            return 1
        source = path.read_bytes()

    try:
        html = markdown(
            source,
            nofollow=args.nofollow,
            target=args.target,
            domain=args.domain,
            toc_id_prefix=args.toc_id_prefix,
            renderer=RENDERER_WIKI if args.wiki else RENDERER_USERTEXT,
            enable_toc=args.toc,
        )
    except DepthExceeded as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.output:
        page = "<html>\n<body>\n" + html + "\n</body>\n</html>\n"
        Path(args.output).write_text(page, encoding="utf-8")

    sys.stdout.write(html)
    return 0


if __name__ == "__main__":
    sys.exit(main())
