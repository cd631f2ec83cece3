#!/usr/bin/env python3
"""
hipdf command line: lay out the pages of one PDF on a single new page.

Usage:
    hipdf input.pdf output.pdf --layout grid --columns 3 --max-size 180 250
    hipdf input.pdf output.pdf --layout vertical --gap 12 --position 20 500
    python -m hipdf.cli input.pdf output.pdf --pages 1,3,5 --layout horizontal
"""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

import pikepdf

from .config import load_config
from .embedding import LAYOUT_REGISTRY, EmbedOptions, PdfEmbedder, get_layout
from .embedding.selection import Pages, Range
from .utilities import CPU_and_Mem_usage, Print, set_log_level

# Range end used when --last-page is omitted; clamped to the document
_LAST_PAGE = sys.maxsize


def _page_list(value: str) -> List[int]:
    """Parse '1,3,5' (1-based) into 0-based indices."""
    try:
        pages = [int(part) for part in value.split(',') if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid page list: '{value}' (expected e.g. 1,3,5)") from None
    if not pages or any(page < 1 for page in pages):
        raise argparse.ArgumentTypeError(f"Invalid page list: '{value}' (pages start at 1)")
    return [page - 1 for page in pages]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='hipdf',
        description='Embed the pages of a PDF onto one new page using a multi-page layout',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hipdf input.pdf output.pdf
  hipdf input.pdf output.pdf --layout grid --columns 3 --gap 10 --max-size 180 250
  hipdf input.pdf output.pdf --layout vertical --first-page 2 --last-page 4
        """
    )

    parser.add_argument('input', type=Path, help='Source PDF file')
    parser.add_argument('output', type=Path, help='Output PDF file')
    parser.add_argument('--layout', choices=sorted(LAYOUT_REGISTRY), default=None,
                        help='Layout strategy (default: from config)')
    parser.add_argument('--columns', type=int, default=None, help='Grid columns')
    parser.add_argument('--gap', type=float, default=None, help='Gap between pages in points')
    parser.add_argument('--max-size', type=float, nargs=2, metavar=('W', 'H'), default=None,
                        help='Fit every page into W x H points')
    parser.add_argument('--first-page', type=int, default=None, help='First page to embed (1-based)')
    parser.add_argument('--last-page', type=int, default=None, help='Last page to embed (1-based)')
    parser.add_argument('--pages', type=_page_list, default=None, help='Explicit pages, e.g. 1,3,5')
    parser.add_argument('--position', type=float, nargs=2, metavar=('X', 'Y'), default=(0.0, 0.0),
                        help='Base position of the first page')
    parser.add_argument('--rotation', type=float, default=0.0, help='Rotation in degrees')
    parser.add_argument('--page-size', type=float, nargs=2, metavar=('W', 'H'), default=None,
                        help='Output page size (default: from config)')
    parser.add_argument('--config', type=Path, default=None, help='Path to config.json')
    parser.add_argument('--log-level', default=None, help='DEBUG, INFO, WARNING, FAILURE or CRITICAL')
    parser.add_argument('--stats', action='store_true', help='Print CPU and memory usage when done')
    return parser


def build_options(args: argparse.Namespace, config: dict) -> EmbedOptions:
    """Translate parsed arguments into EmbedOptions, filling gaps from config."""
    embedding_config = config.get('embedding', {})
    layout_name = args.layout or embedding_config.get('layout', 'first_page')
    layout_config = dict(embedding_config.get('layouts', {}).get(layout_name, {}))

    if args.columns is not None:
        layout_config['columns'] = args.columns
    if args.gap is not None:
        layout_config['gap'] = args.gap
        layout_config['gap_x'] = args.gap
        layout_config['gap_y'] = args.gap

    options = (
        EmbedOptions()
        .with_layout(get_layout(layout_name, layout_config))
        .at_position(*args.position)
        .with_rotation(args.rotation)
    )

    if args.max_size is not None:
        options.with_max_size(*args.max_size)

    if args.pages is not None:
        options.with_page_range(Pages(args.pages))
    elif args.first_page is not None or args.last_page is not None:
        first = (args.first_page or 1) - 1
        last = args.last_page - 1 if args.last_page is not None else _LAST_PAGE
        options.with_page_range(Range(first, last))

    return options


def compose(input_pdf: Path, output_pdf: Path, options: EmbedOptions, page_size, config: dict) -> dict:
    """
    Write a one-page PDF showing the selected pages of input_pdf.

    Returns:
        Statistics: pages_placed, xobjects, duration_seconds
    """
    start_time = time.time()
    Print("STARTING", f"Composing {input_pdf} -> {output_pdf}")

    with PdfEmbedder(config.get('embedding', {})) as embedder, pikepdf.new() as target:
        source_id = embedder.load_pdf(input_pdf)

        target.add_blank_page(page_size=tuple(page_size))
        result = embedder.embed_pdf(target, source_id, options)
        result.apply(target, target.pages[0])

        output_pdf.parent.mkdir(parents=True, exist_ok=True)
        target.save(output_pdf)

    stats = {
        'pages_placed': len(result.xobject_resources),
        'xobjects': sorted(result.xobject_resources),
        'duration_seconds': time.time() - start_time,
    }
    Print("SUCCESS", f"Placed {stats['pages_placed']} page(s) in {stats['duration_seconds']:.2f}s")
    return stats


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        set_log_level(args.log_level or config.get('log_level', 'INFO'))

        options = build_options(args, config)
        page_size = args.page_size or config.get('embedding', {}).get('default_page_size', (595, 842))

        compose(args.input, args.output, options, page_size, config)

        if args.stats:
            Print("INFO", CPU_and_Mem_usage())
        return 0

    except (FileNotFoundError, LookupError) as e:
        Print("FAILURE", str(e))
        return 1
    except (RuntimeError, ValueError) as e:
        Print("FAILURE", str(e))
        return 2
    except KeyboardInterrupt:
        Print("WARNING", "Interrupted by user")
        return 130
    except Exception as e:
        Print("FAILURE", f"Unexpected error: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
