import json

import pytest

from pixetale.errors import GenerationFailure
from pixetale.story_generation import HeroTraits, StoryLanguage, StoryWriter, parse_story_payload

from conftest import FakeCompletion, make_story_payload


def test_generate_story_makes_one_structured_call(fake_completion):
    writer = StoryWriter(api_key="key", model="gemini/test-model", completion_fn=fake_completion)

    story = writer.generate_story("a cat knight", StoryLanguage.SPANISH, HeroTraits(name="Bigotes"))

    assert story.page_count == 10
    assert len(fake_completion.calls) == 1
    call = fake_completion.calls[0]
    assert call["model"] == "gemini/test-model"
    assert call["api_key"] == "key"
    assert call["response_format"]["type"] == "json_schema"
    assert [message["role"] for message in call["messages"]] == ["system", "user"]
    assert "Language: Spanish." in call["messages"][1]["content"]
    assert 'Use the name "Bigotes"' in call["messages"][1]["content"]


def test_model_falls_back_to_environment(monkeypatch):
    monkeypatch.delenv("PIXETALE_STORY_MODEL", raising=False)
    monkeypatch.delenv("LITELLM_STORY_MODEL", raising=False)
    monkeypatch.setenv("LITELLM_MODEL", "openai/gpt-4o-mini")

    assert StoryWriter(completion_fn=FakeCompletion(text="{}")).model == "openai/gpt-4o-mini"


def test_page_count_reaches_prompt():
    completion = FakeCompletion(text=json.dumps(make_story_payload(page_count=4)))
    writer = StoryWriter(api_key="key", completion_fn=completion, page_count=4)

    story = writer.generate_story("owls")

    assert story.page_count == 4
    assert "4-page" in completion.calls[0]["messages"][1]["content"]


def test_request_error_becomes_generation_failure():
    writer = StoryWriter(api_key="key", completion_fn=FakeCompletion(error=RuntimeError("boom")))

    with pytest.raises(GenerationFailure, match="boom"):
        writer.generate_story("owls")


@pytest.mark.parametrize("text", [None, ""])
def test_empty_reply_is_a_failure(text):
    writer = StoryWriter(api_key="key", completion_fn=FakeCompletion(text=text))

    with pytest.raises(GenerationFailure, match="No story content received"):
        writer.generate_story("owls")


def test_parse_accepts_fenced_json():
    raw = "```json\n" + json.dumps(make_story_payload(page_count=2)) + "\n```"
    story = parse_story_payload(raw)
    assert story.page_count == 2


def _payload_with(**overrides):
    payload = make_story_payload(page_count=2)
    page_overrides = overrides.pop("page", {})
    payload.update(overrides)
    payload["pages"][0].update(page_overrides)
    return json.dumps(payload)


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        json.dumps(["a", "list"]),
        json.dumps({"title": "No pages", "coverImagePrompt": "x"}),
        json.dumps({"title": "Empty", "coverImagePrompt": "x", "pages": []}),
        _payload_with(title=None),
        _payload_with(title=42),
        _payload_with(page={"content": None}),
        _payload_with(page={"imagePrompt": None}),
        _payload_with(page={"content": ["a", "list"]}),
    ],
)
def test_parse_rejects_invalid_payloads(raw):
    with pytest.raises(GenerationFailure):
        parse_story_payload(raw)


def test_parse_renumbers_pages_and_drops_invented_images():
    payload = make_story_payload(page_count=3)
    payload["pages"][0]["pageNumber"] = 5
    payload["pages"][2]["imageUrl"] = "https://example.com/fake.png"
    payload["coverImageUrl"] = "https://example.com/cover.png"

    story = parse_story_payload(json.dumps(payload))

    assert [page.page_number for page in story.pages] == [1, 2, 3]
    assert story.cover_image_url is None
    assert all(page.image_url is None for page in story.pages)
