"""Command-line interface for formatting pivot tables."""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import StyleOptions, load_style, parse_zebra_style
from .errors import PivotFormatError
from .layout_engine import PivotLayoutEngine
from .pdf_renderer import PDFRenderer
from .pivot_table import load_pivot
from .themes import THEMES, apply_theme, get_theme

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Format a pivot table into a styled PDF table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--data",
        type=Path,
        required=True,
        help="CSV file holding the pivot table",
    )
    parser.add_argument(
        "--meta",
        type=Path,
        required=True,
        help="YAML file with rows, cols, cols_values and optional labels",
    )
    parser.add_argument(
        "--style",
        type=Path,
        help="YAML file with style options",
    )
    parser.add_argument(
        "--theme",
        choices=sorted(THEMES),
        help="Color theme (overrides style file colors)",
    )
    parser.add_argument(
        "--zebra-style",
        help="Body banding: classic, stats or none (overrides style file)",
    )
    parser.add_argument(
        "--drop-stats",
        action="store_true",
        help="Drop the statistics column",
    )
    parser.add_argument(
        "--font-size",
        type=float,
        help="Font size (overrides style file)",
    )
    parser.add_argument(
        "--title",
        help="Title drawn above the table",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("pivot.pdf"),
        help="Output PDF path",
    )
    parser.add_argument(
        "--json",
        type=Path,
        help="Also write the styled table description as JSON",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def resolve_style(args: argparse.Namespace) -> StyleOptions:
    """Style file (or defaults) with command-line overrides applied."""
    style = load_style(args.style)
    if args.theme:
        style = apply_theme(style, get_theme(args.theme))
    if args.zebra_style:
        style = replace(style, zebra_style=parse_zebra_style(args.zebra_style))
    if args.drop_stats:
        style = replace(style, drop_stats=True)
    if args.font_size is not None:
        style = replace(style, font_size=args.font_size)
    return style


def run(args: argparse.Namespace) -> dict:
    """
    Lay out and render one pivot table.

    Returns summary statistics.
    """
    style = resolve_style(args)
    pivot, labels = load_pivot(args.data, args.meta)

    table = PivotLayoutEngine(style, labels).layout(pivot)

    args.out.parent.mkdir(parents=True, exist_ok=True)
    rendered = PDFRenderer().render(table, args.out, title=args.title)

    if args.json:
        args.json.parent.mkdir(parents=True, exist_ok=True)
        with open(args.json, "w") as f:
            json.dump(table.to_dict(), f, indent=2)

    stats = {
        "columns": table.n_cols,
        "header_rows": table.n_header_rows,
        "body_rows": table.n_body_rows,
        "merges": len(table.merges),
        "pages": rendered.page_count,
    }

    print(f"Wrote {args.out}")
    if args.json:
        print(f"Wrote {args.json}")
    print(f"  Columns: {stats['columns']}")
    print(f"  Header rows: {stats['header_rows']}")
    print(f"  Body rows: {stats['body_rows']}")
    print(f"  Pages: {stats['pages']}")

    return stats


def main(argv=None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        run(args)
    except PivotFormatError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
