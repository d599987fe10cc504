"""
Printable PDF rendering for PixeTale books.
"""

from .builder import DEFAULT_LAYOUT, PAGE_SIZES, PageLayoutConfig, StorybookPDFBuilder

__all__ = ["DEFAULT_LAYOUT", "PAGE_SIZES", "PageLayoutConfig", "StorybookPDFBuilder"]
