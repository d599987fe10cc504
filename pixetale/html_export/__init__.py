"""
Standalone HTML exports of finished PixeTale books.
"""

from .builder import (
    ExportKind,
    StorybookHTMLExporter,
    export_filename,
    export_stem,
    render_coloring_book,
    render_flipbook,
    render_printable_book,
)

__all__ = [
    "ExportKind",
    "StorybookHTMLExporter",
    "export_filename",
    "export_stem",
    "render_coloring_book",
    "render_flipbook",
    "render_printable_book",
]
