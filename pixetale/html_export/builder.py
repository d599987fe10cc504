"""
Render finished PixeTale books into standalone downloadable HTML documents.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape
from loguru import logger

from pixetale.story_generation import StoryDocument

from .templates import COLORING_BOOK_TEMPLATE, FLIPBOOK_TEMPLATE, PRINTABLE_BOOK_TEMPLATE

PAGE_FLIP_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/page-flip/dist/js/page-flip.browser.js"

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]+')
_WHITESPACE = re.compile(r"\s+")


class ExportKind(str, Enum):
    PRINTABLE = "printable"
    COLORING = "coloring"
    FLIPBOOK = "flipbook"


_TEMPLATE_NAMES = {
    ExportKind.PRINTABLE: "printable.html",
    ExportKind.COLORING: "coloring.html",
    ExportKind.FLIPBOOK: "flipbook.html",
}

_FILENAME_SUFFIXES = {
    ExportKind.PRINTABLE: "Printable_Story",
    ExportKind.COLORING: "ColoringBook",
    ExportKind.FLIPBOOK: "Interactive_Flipbook",
}

_environment = Environment(
    loader=DictLoader(
        {
            "printable.html": PRINTABLE_BOOK_TEMPLATE,
            "coloring.html": COLORING_BOOK_TEMPLATE,
            "flipbook.html": FLIPBOOK_TEMPLATE,
        }
    ),
    autoescape=select_autoescape(default=True, default_for_string=True),
    undefined=StrictUndefined,
)


def render_printable_book(story: StoryDocument) -> str:
    """Cover sheet, then an art sheet and a text sheet for every page."""
    return _render(ExportKind.PRINTABLE, story)


def render_coloring_book(story: StoryDocument) -> str:
    """Grayscale, high-contrast sheets ready to print and colour in."""
    return _render(ExportKind.COLORING, story)


def render_flipbook(story: StoryDocument, *, page_flip_script: str = PAGE_FLIP_SCRIPT_URL) -> str:
    """Interactive page-flip ebook with image/text spreads and keyboard navigation."""
    return _render(ExportKind.FLIPBOOK, story, page_flip_script=page_flip_script)


def export_stem(story: StoryDocument) -> str:
    """Title with whitespace runs turned into underscores and path characters removed."""
    stem = _UNSAFE_FILENAME_CHARS.sub("", story.title.strip())
    return _WHITESPACE.sub("_", stem) or "PixeTale"


def export_filename(story: StoryDocument, kind: ExportKind | str) -> str:
    """
    File name used for a download, e.g. ``The_Brave_Cat_Printable_Story.html``.
    """
    kind = ExportKind(kind)
    return f"{export_stem(story)}_{_FILENAME_SUFFIXES[kind]}.html"


def _render(kind: ExportKind, story: StoryDocument, **context: object) -> str:
    template = _environment.get_template(_TEMPLATE_NAMES[kind])
    return template.render(story=story, **context)


class StorybookHTMLExporter:
    """
    Writes HTML exports of a finished book into a directory.
    """

    _RENDERERS = {
        ExportKind.PRINTABLE: render_printable_book,
        ExportKind.COLORING: render_coloring_book,
        ExportKind.FLIPBOOK: render_flipbook,
    }

    def render(self, story: StoryDocument, kind: ExportKind | str) -> str:
        return self._RENDERERS[ExportKind(kind)](story)

    def write(self, story: StoryDocument, kind: ExportKind | str, output_dir: Path | str) -> Path:
        kind = ExportKind(kind)
        target_dir = Path(output_dir)
        target_dir.mkdir(parents=True, exist_ok=True)

        output_path = target_dir / export_filename(story, kind)
        output_path.write_text(self.render(story, kind), encoding="utf-8")
        logger.info("Wrote {} export to {}", kind.value, output_path)
        return output_path

    def write_all(self, story: StoryDocument, output_dir: Path | str) -> list[Path]:
        return [self.write(story, kind, output_dir) for kind in ExportKind]
