import pytest

from pixetale.html_export import (
    ExportKind,
    StorybookHTMLExporter,
    export_filename,
    render_coloring_book,
    render_flipbook,
    render_printable_book,
)
from pixetale.story_generation import StoryDocument

from conftest import make_story_payload


@pytest.fixture
def story():
    document = StoryDocument.from_dict(make_story_payload(page_count=3, title="The Brave Cat"))
    document = document.with_cover_image("data:image/png;base64,COVER")
    for index in range(document.page_count):
        document = document.with_page_image(index, f"data:image/png;base64,PAGE{index + 1}")
    return document


def test_printable_book_has_art_and_story_sheets(story):
    html = render_printable_book(story)

    assert "<title>The Brave Cat</title>" in html
    assert "A PIXETALE ADVENTURE" in html
    assert 'src="data:image/png;base64,COVER"' in html
    for number in (1, 2, 3):
        assert f"- Art {number} -" in html
        assert f"- Story {number} -" in html
        assert f'src="data:image/png;base64,PAGE{number}"' in html
    assert "<p>Page 2: Whiskers polished his tiny helmet.</p>" in html
    assert "<p>He dreamed of castles.</p>" in html


def test_coloring_book_is_grayscale_with_name_line(story):
    html = render_coloring_book(story)

    assert "COLORING BOOK" in html
    assert "NAME: ____" in html
    assert "grayscale(100%)" in html
    assert "window.print()" in html
    assert "Page 3" in html


def test_flipbook_has_spreads_and_closing_page(story):
    html = render_flipbook(story, page_flip_script="https://example.com/page-flip.js")

    assert '<script src="https://example.com/page-flip.js"></script>' in html
    for number in (1, 2, 3):
        assert f"{number}A</span>" in html
        assert f"{number}B</span>" in html
    assert "THE END" in html
    assert "Generated with PixeTale" in html
    assert "St.PageFlip" in html


def test_story_text_is_escaped():
    payload = make_story_payload(page_count=1, title="Cats <script>alert(1)</script>")
    payload["pages"][0]["content"] = "Tom & Jerry said <hi>."
    story = StoryDocument.from_dict(payload)

    for html in (render_printable_book(story), render_flipbook(story)):
        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html
        assert "Tom &amp; Jerry said &lt;hi&gt;." in html


def test_missing_images_render_empty_sources():
    story = StoryDocument.from_dict(make_story_payload(page_count=1))
    assert 'src=""' in render_printable_book(story)


@pytest.mark.parametrize(
    "kind, expected",
    [
        (ExportKind.PRINTABLE, "The_Brave_Cat_Printable_Story.html"),
        ("coloring", "The_Brave_Cat_ColoringBook.html"),
        (ExportKind.FLIPBOOK, "The_Brave_Cat_Interactive_Flipbook.html"),
    ],
)
def test_export_filename(story, kind, expected):
    assert export_filename(story, kind) == expected


def test_export_filename_strips_path_characters():
    story = StoryDocument.from_dict(make_story_payload(page_count=1, title='Cats: "Part 1/2"?'))
    assert export_filename(story, ExportKind.PRINTABLE) == "Cats_Part_12_Printable_Story.html"


def test_write_all_creates_three_documents(story, tmp_path):
    paths = StorybookHTMLExporter().write_all(story, tmp_path / "exports")

    assert sorted(path.name for path in paths) == [
        "The_Brave_Cat_ColoringBook.html",
        "The_Brave_Cat_Interactive_Flipbook.html",
        "The_Brave_Cat_Printable_Story.html",
    ]
    for path in paths:
        assert path.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")
