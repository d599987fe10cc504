"""
Helpers for turning image service output into self-contained data URIs.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable as IterableABC
from typing import Any, Callable, Iterator

import requests

# 4x4 near-black PNG shown when a page illustration cannot be produced.
PLACEHOLDER_IMAGE_URI = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAQAAAAECAIAAAAmkwkpAAAADklEQVR42mMQRAIMxHEAUxQDMZrbpzcAAAAASUVORK5CYII="
)

_EXTENSION_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
}

Downloader = Callable[[str], tuple[bytes, str | None]]


def sniff_mime_type(data: bytes, *, hint: str | None = None) -> str:
    """
    Guess an image MIME type from magic bytes, then from a file name or URL hint.
    """
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if hint:
        path = hint.split("?", 1)[0].lower()
        for extension, mime in _EXTENSION_MIME_TYPES.items():
            if path.endswith(extension):
                return mime
    return "image/png"


def to_data_uri(data: bytes, mime_type: str | None = None) -> str:
    mime = mime_type or sniff_mime_type(data)
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """
    Split a base64 ``data:`` URI into its MIME type and raw bytes.
    """
    if not uri.startswith("data:") or "," not in uri:
        raise ValueError("Not a data URI.")
    header, encoded = uri[5:].split(",", 1)
    mime_type, _, encoding = header.partition(";")
    if encoding != "base64":
        raise ValueError("Only base64 data URIs are supported.")
    try:
        return mime_type or "image/png", base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise ValueError("Data URI payload is not valid base64.") from exc


def download_image(url: str, *, timeout: float = 60.0) -> tuple[bytes, str | None]:
    """Fetch an image over HTTP and return its bytes and declared content type."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    content_type = response.headers.get("Content-Type")
    if content_type:
        content_type = content_type.split(";", 1)[0].strip()
    return response.content, content_type


def iter_image_outputs(raw: Any) -> Iterator[Any]:
    """
    Flatten whatever the image model returned into individual output items.

    Strings, bytes, and file-like outputs (objects with ``read``) are leaves. A
    sequence of one-character strings is a streamed URL and is joined back together.
    """
    if raw is None:
        return

    if isinstance(raw, (str, bytes, bytearray)) or hasattr(raw, "read"):
        yield raw
        return

    if isinstance(raw, IterableABC):
        collected = list(raw)
        if collected and all(isinstance(item, str) and len(item) == 1 for item in collected):
            yield "".join(collected)
            return
        for item in collected:
            yield from iter_image_outputs(item)
        return

    yield raw


def output_to_data_uri(item: Any, *, downloader: Downloader) -> str | None:
    """
    Convert one output item to a data URI, or ``None`` when it carries no image.
    """
    if isinstance(item, (bytes, bytearray)):
        data = bytes(item)
        if data.startswith(b"data:"):
            return data.decode("ascii", errors="ignore")
        return to_data_uri(data) if data else None

    if hasattr(item, "read"):
        data = item.read()
        if not data:
            return None
        hint = getattr(item, "url", None)
        return to_data_uri(data, sniff_mime_type(data, hint=str(hint) if hint else None))

    if isinstance(item, str):
        text = item.strip()
        if text.startswith("data:image"):
            return text
        if text.lower().startswith(("http://", "https://")):
            data, content_type = downloader(text)
            if not data:
                return None
            mime = content_type if content_type and content_type.startswith("image/") else None
            return to_data_uri(data, mime or sniff_mime_type(data, hint=text))

    return None


def first_image_data_uri(raw: Any, *, downloader: Downloader) -> str | None:
    """Return the first image payload found in ``raw`` as a data URI."""
    for item in iter_image_outputs(raw):
        uri = output_to_data_uri(item, downloader=downloader)
        if uri:
            return uri
    return None
