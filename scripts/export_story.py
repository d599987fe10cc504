"""
Render a saved PixeTale book into HTML and/or PDF exports.

Usage:
    python scripts/export_story.py \
        --story pixetale_story.yaml \
        --output-dir exports/ \
        --kind all
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

# Ensure project root is on the Python path.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pixetale import ExportKind, StoryDocument, StorybookHTMLExporter  # noqa: E402
from pixetale.html_export import export_stem  # noqa: E402
from pixetale.pdf_generation import PAGE_SIZES, StorybookPDFBuilder  # noqa: E402

KIND_CHOICES = [kind.value for kind in ExportKind] + ["pdf", "all"]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert a PixeTale story YAML into printable and interactive exports."
    )
    parser.add_argument(
        "--story",
        required=True,
        help="Path to the story YAML (output of run_quest.py).",
    )
    parser.add_argument(
        "--output-dir",
        required=True,
        help="Directory that receives the exported files.",
    )
    parser.add_argument(
        "--kind",
        choices=KIND_CHOICES,
        default="all",
        help="Export to produce (default: all).",
    )
    parser.add_argument(
        "--page-size",
        choices=sorted(PAGE_SIZES.keys()),
        default="portrait",
        help="PDF page size (default: portrait).",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    story = StoryDocument.from_yaml(args.story)
    output_dir = Path(args.output_dir)
    exporter = StorybookHTMLExporter()

    written: list[Path] = []
    if args.kind == "all":
        written.extend(exporter.write_all(story, output_dir))
    elif args.kind != "pdf":
        written.append(exporter.write(story, args.kind, output_dir))

    if args.kind in ("pdf", "all"):
        pdf_name = f"{export_stem(story)}.pdf"
        builder = StorybookPDFBuilder(page_size=PAGE_SIZES[args.page_size])
        written.append(builder.build(story, output_dir / pdf_name))

    for path in written:
        print(f"Exported {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
