"""
Story document types produced by the generation pipeline.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def _text_field(payload: Mapping[str, Any], key: str, *, required: bool = True) -> str:
    """Return the stripped string at ``key``; ``null`` and non-string values are rejected."""
    if key not in payload or payload[key] is None:
        if required:
            raise ValueError(f"Field {key!r} must be a string.")
        return ""
    value = payload[key]
    if not isinstance(value, str):
        raise ValueError(f"Field {key!r} must be a string, got {type(value).__name__}.")
    return value.strip()


class TextPosition(str, Enum):
    """Edge of the illustration the page text is anchored to."""

    TOP = "top"
    BOTTOM = "bottom"

    @classmethod
    def parse(cls, value: Any) -> "TextPosition":
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.BOTTOM
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"textPosition must be 'top' or 'bottom', got {value!r}.") from exc


class GenerationStatus(str, Enum):
    """Lifecycle of a single quest, as shown by the presentation layer."""

    IDLE = "idle"
    WRITING = "writing"
    ILLUSTRATING = "illustrating"
    READY = "ready"
    ERROR = "error"


class StoryLanguage(str, Enum):
    ENGLISH = "English"
    SPANISH = "Spanish"
    BILINGUAL = "Bilingual (English & Spanish)"

    @classmethod
    def parse(cls, value: "StoryLanguage | str") -> "StoryLanguage":
        """
        Accept the enum value, the member name, or ``bilingual`` in any case.
        """
        if isinstance(value, cls):
            return value

        text = str(value).strip()
        lowered = text.lower()
        for member in cls:
            if lowered in {member.value.lower(), member.name.lower()}:
                return member
        raise ValueError(
            f"Unsupported story language {text!r}. "
            f"Choose one of: {', '.join(member.value for member in cls)}."
        )


@dataclass(frozen=True)
class StoryPage:
    """
    A single illustrated page of the storybook.

    ``text_position`` names the edge the narrative overlay sits on; the page's
    ``image_prompt`` asks for an empty band on that same edge.
    """

    page_number: int
    content: str
    image_prompt: str
    text_position: TextPosition = TextPosition.BOTTOM
    image_url: str | None = None

    def paragraphs(self) -> list[str]:
        """Split the page content on blank lines, dropping empty blocks."""
        return [block.strip() for block in _PARAGRAPH_BREAK.split(self.content) if block.strip()]

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "pageNumber": self.page_number,
            "content": self.content,
            "imagePrompt": self.image_prompt,
            "textPosition": self.text_position.value,
        }
        if self.image_url is not None:
            payload["imageUrl"] = self.image_url
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], *, position: int | None = None) -> "StoryPage":
        """
        Build a page from its wire representation.

        When ``position`` is given it overrides ``pageNumber``, so page numbers always
        follow reading order.
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"Invalid page entry: {payload!r}")
        try:
            page_number = int(payload["pageNumber"]) if position is None else position
            content = _text_field(payload, "content")
            image_prompt = _text_field(payload, "imagePrompt")
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid page entry: {payload!r}") from exc

        if not content:
            raise ValueError(f"Page {page_number} has no content.")

        image_url = payload.get("imageUrl")
        return cls(
            page_number=page_number,
            content=content,
            image_prompt=image_prompt,
            text_position=TextPosition.parse(payload.get("textPosition")),
            image_url=str(image_url) if image_url else None,
        )


@dataclass(frozen=True)
class StoryDocument:
    """
    The generated book: title, cover, and pages in reading order.

    Instances are immutable; every image that lands produces a new document via
    :meth:`with_cover_image` or :meth:`with_page_image`.
    """

    title: str
    cover_image_prompt: str
    pages: tuple[StoryPage, ...]
    cover_image_url: str | None = None

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise ValueError("Story title must be a non-empty string.")
        if not isinstance(self.pages, tuple):
            object.__setattr__(self, "pages", tuple(self.pages))

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def with_cover_image(self, url: str) -> "StoryDocument":
        return replace(self, cover_image_url=url)

    def with_page_image(self, index: int, url: str) -> "StoryDocument":
        if not 0 <= index < len(self.pages):
            raise IndexError(f"Page index {index} is out of range for {len(self.pages)} pages.")
        pages = list(self.pages)
        pages[index] = replace(pages[index], image_url=url)
        return replace(self, pages=tuple(pages))

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "coverImagePrompt": self.cover_image_prompt,
        }
        if self.cover_image_url is not None:
            payload["coverImageUrl"] = self.cover_image_url
        payload["pages"] = [page.to_dict() for page in self.pages]
        return payload

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StoryDocument":
        if not isinstance(payload, Mapping):
            raise ValueError("Story payload must be a mapping.")
        if "title" not in payload:
            raise ValueError("Story payload must include 'title'.")
        if "pages" not in payload:
            raise ValueError("Story payload must include 'pages'.")

        pages_payload = payload["pages"]
        if not isinstance(pages_payload, Sequence) or isinstance(pages_payload, (str, bytes)):
            raise ValueError("Story payload 'pages' must be a list.")
        if not pages_payload:
            raise ValueError("Story payload must contain at least one page.")

        pages = tuple(
            StoryPage.from_dict(entry, position=index)
            for index, entry in enumerate(pages_payload, start=1)
        )
        cover_url = payload.get("coverImageUrl")
        return cls(
            title=_text_field(payload, "title"),
            cover_image_prompt=_text_field(payload, "coverImagePrompt", required=False),
            pages=pages,
            cover_image_url=str(cover_url) if cover_url else None,
        )

    @classmethod
    def from_yaml(cls, source: str | Path) -> "StoryDocument":
        path = Path(source)
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(data, Mapping):
            raise ValueError("Story YAML must deserialize to a mapping.")
        return cls.from_dict(data)
