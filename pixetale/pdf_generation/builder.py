"""
High-level utilities for rendering PixeTale books into printable PDFs.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional
from xml.sax.saxutils import escape

import requests
from loguru import logger
from PIL import Image
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import inch, mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from reportlab.platypus import Frame, Paragraph

from pixetale.ai_generation import decode_data_uri
from pixetale.story_generation import StoryDocument, StoryPage, TextPosition

TEXT_BAND_SHARE = 0.3


@dataclass(frozen=True)
class PageLayoutConfig:
    cover_background: colors.Color
    image_background: colors.Color
    text_background: colors.Color
    accent_color: colors.Color
    text_color: colors.Color
    overlay_color: colors.Color
    overlay_alpha: float


DEFAULT_LAYOUT = PageLayoutConfig(
    cover_background=colors.HexColor("#0D0D1A"),
    image_background=colors.HexColor("#000000"),
    text_background=colors.HexColor("#FDFDFD"),
    accent_color=colors.HexColor("#FBBF24"),
    text_color=colors.HexColor("#111111"),
    overlay_color=colors.HexColor("#000000"),
    overlay_alpha=0.6,
)


PAGE_SIZES = {
    "portrait": (6 * inch, 8 * inch),
    "letter": LETTER,
    "a4": A4,
}


class StorybookPDFBuilder:
    """
    Render PixeTale books into printable PDFs.

    The builder creates:
      * A cover page with the title, the tagline, and the cover illustration.
      * One page per story page: the illustration full-bleed with the narrative laid
        over the empty band named by the page's ``text_position``. Pages without an
        illustration get a plain text page instead.
    """

    def __init__(
        self,
        *,
        page_size: tuple[float, float] = PAGE_SIZES["portrait"],
        margin_mm: float = 12.0,
        layout: PageLayoutConfig = DEFAULT_LAYOUT,
        request_timeout: float = 30.0,
    ) -> None:
        self.page_size = page_size
        self.margin = margin_mm * mm
        self.layout = layout
        self.request_timeout = request_timeout

        self.title_style = ParagraphStyle(
            name="StoryTitle",
            fontName="Courier-Bold",
            fontSize=24,
            leading=28,
            alignment=TA_CENTER,
            textColor=self.layout.accent_color,
            spaceAfter=8,
        )
        self.subtitle_style = ParagraphStyle(
            name="StorySubtitle",
            fontName="Courier",
            fontSize=10,
            leading=12,
            alignment=TA_CENTER,
            textColor=colors.HexColor("#888888"),
            spaceAfter=12,
        )
        self.overlay_style = ParagraphStyle(
            name="Overlay",
            fontName="Helvetica",
            fontSize=13,
            leading=17,
            alignment=TA_JUSTIFY,
            textColor=colors.white,
            spaceAfter=6,
        )
        self.body_style = ParagraphStyle(
            name="Body",
            fontName="Times-Roman",
            fontSize=18,
            leading=26,
            alignment=TA_JUSTIFY,
            textColor=self.layout.text_color,
            spaceAfter=14,
        )
        self.footer_style = ParagraphStyle(
            name="Footer",
            fontName="Courier",
            fontSize=9,
            leading=11,
            alignment=TA_CENTER,
            textColor=colors.HexColor("#888888"),
        )

    def build_from_yaml(self, story_path: Path | str, output_path: Path | str) -> Path:
        story = StoryDocument.from_yaml(story_path)
        return self.build(story, output_path)

    def build(self, story: StoryDocument, output_path: Path | str) -> Path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        pdf = canvas.Canvas(str(output_file), pagesize=self.page_size)
        pdf.setTitle(story.title)
        width, height = self.page_size

        self._draw_cover_page(pdf, story, width, height)

        for page in story.pages:
            image_reader = self._load_image(page.image_url) if page.image_url else None
            if image_reader is not None:
                self._draw_illustrated_page(pdf, story, page, image_reader, width, height)
            else:
                self._draw_text_page(pdf, story, page, width, height)

        pdf.save()
        logger.info("Rendered {} pages to {}", story.page_count + 1, output_file)
        return output_file

    # ------------------------------------------------------------------ cover rendering

    def _draw_cover_page(
        self,
        pdf: canvas.Canvas,
        story: StoryDocument,
        width: float,
        height: float,
    ) -> None:
        pdf.setFillColor(self.layout.cover_background)
        pdf.rect(0, 0, width, height, stroke=0, fill=1)

        header_height = height * 0.25
        frame = Frame(
            self.margin,
            height - self.margin - header_height,
            width - 2 * self.margin,
            header_height,
            showBoundary=0,
        )
        frame.addFromList(
            [
                Paragraph(escape(story.title), self.title_style),
                Paragraph("A PIXETALE ADVENTURE", self.subtitle_style),
            ],
            pdf,
        )

        box_x = self.margin
        box_y = self.margin * 2
        box_width = width - 2 * self.margin
        box_height = height - header_height - self.margin * 4

        cover = self._load_image(story.cover_image_url) if story.cover_image_url else None
        if cover is not None:
            pdf.saveState()
            path = pdf.beginPath()
            path.rect(box_x, box_y, box_width, box_height)
            pdf.clipPath(path, stroke=0, fill=0)
            self._draw_image_cover_fit(pdf, cover, box_x, box_y, box_width, box_height)
            pdf.restoreState()

        pdf.setStrokeColor(colors.white)
        pdf.setLineWidth(3)
        pdf.rect(box_x, box_y, box_width, box_height, stroke=1, fill=0)

        self._draw_footer(pdf, "DEVELOPED FOR PIXETALE", width)
        pdf.showPage()

    # ------------------------------------------------------------------ illustrated pages

    def _draw_illustrated_page(
        self,
        pdf: canvas.Canvas,
        story: StoryDocument,
        page: StoryPage,
        image_reader: ImageReader,
        width: float,
        height: float,
    ) -> None:
        pdf.setFillColor(self.layout.image_background)
        pdf.rect(0, 0, width, height, stroke=0, fill=1)
        self._draw_image_cover_fit(pdf, image_reader, 0, 0, width, height)

        band_height = height * TEXT_BAND_SHARE
        band_y = height - band_height if page.text_position is TextPosition.TOP else 0

        pdf.saveState()
        pdf.setFillColor(self.layout.overlay_color)
        pdf.setFillAlpha(self.layout.overlay_alpha)
        pdf.rect(0, band_y, width, band_height, stroke=0, fill=1)
        pdf.restoreState()

        frame = Frame(
            self.margin,
            band_y + self.margin / 2,
            width - 2 * self.margin,
            band_height - self.margin,
            showBoundary=0,
        )
        frame.addFromList(self._paragraphs(page, self.overlay_style), pdf)
        pdf.showPage()

    # ------------------------------------------------------------------ text pages

    def _draw_text_page(
        self,
        pdf: canvas.Canvas,
        story: StoryDocument,
        page: StoryPage,
        width: float,
        height: float,
    ) -> None:
        pdf.setFillColor(self.layout.text_background)
        pdf.rect(0, 0, width, height, stroke=0, fill=1)

        bubble_width = width - (self.margin * 2)
        bubble_height = height - (self.margin * 3)
        bubble_x = (width - bubble_width) / 2
        bubble_y = self.margin * 2

        pdf.saveState()
        pdf.setStrokeColor(self.layout.text_color)
        pdf.setLineWidth(2)
        pdf.setFillColor(colors.white)
        pdf.roundRect(bubble_x, bubble_y, bubble_width, bubble_height, 12, stroke=1, fill=1)
        pdf.restoreState()

        padding = self.margin * 0.6
        frame = Frame(
            bubble_x + padding,
            bubble_y + padding,
            bubble_width - 2 * padding,
            bubble_height - 2 * padding,
            showBoundary=0,
        )
        frame.addFromList(self._paragraphs(page, self.body_style), pdf)

        self._draw_footer(pdf, f"- Story {page.page_number} - {escape(story.title)}", width)
        pdf.showPage()

    # ------------------------------------------------------------------ helpers

    @staticmethod
    def _paragraphs(page: StoryPage, style: ParagraphStyle) -> list[Paragraph]:
        return [
            Paragraph(escape(block).replace("\n", "<br/>"), style)
            for block in page.paragraphs()
        ]

    @staticmethod
    def _draw_image_cover_fit(
        pdf: canvas.Canvas,
        image_reader: ImageReader,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        img_width, img_height = image_reader.getSize()
        scale = max(width / img_width, height / img_height)
        draw_width = img_width * scale
        draw_height = img_height * scale
        pdf.drawImage(
            image_reader,
            x + (width - draw_width) / 2,
            y + (height - draw_height) / 2,
            draw_width,
            draw_height,
            mask="auto",
        )

    def _draw_footer(self, pdf: canvas.Canvas, text: str, width: float) -> None:
        footer_frame = Frame(
            self.margin,
            6,
            width - 2 * self.margin,
            20,
            showBoundary=0,
        )
        footer_frame.addFromList([Paragraph(text, self.footer_style)], pdf)

    def _load_image(self, source: str) -> Optional[ImageReader]:
        try:
            if source.startswith("data:"):
                _, data = decode_data_uri(source)
            else:
                response = requests.get(source, timeout=self.request_timeout)
                response.raise_for_status()
                data = response.content
        except (ValueError, requests.RequestException) as exc:
            logger.warning("Skipping illustration that could not be loaded: {}", exc)
            return None

        # Decode every pixel up front; a truncated stream otherwise fails inside drawImage.
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except (OSError, SyntaxError, ValueError) as exc:
            logger.warning("Skipping illustration that could not be decoded: {}", exc)
            return None
        return ImageReader(image)
