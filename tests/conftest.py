"""Shared fixtures and fakes for the PixeTale test suite."""

import base64
import io
import json

import pytest
from PIL import Image

from pixetale.common import ChatResult
from pixetale.pipeline import PixetaleOrchestrator
from pixetale.story_generation import StoryWriter


def make_story_payload(page_count=10, title="Sir Whiskers and the Moon Castle"):
    pages = []
    for number in range(1, page_count + 1):
        position = "bottom" if number % 2 else "top"
        pages.append(
            {
                "pageNumber": number,
                "content": f"Page {number}: Whiskers polished his tiny helmet.\n\nHe dreamed of castles.",
                "imagePrompt": f"A cat in silver armor, scene {number}, leave empty space at the {position.upper()} 30%",
                "textPosition": position,
            }
        )
    return {
        "title": title,
        "coverImagePrompt": "A brave cat knight on a hill, iconic, centered, heroic",
        "pages": pages,
    }


def png_bytes(color=(200, 40, 40), size=(6, 8)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def png_data_uri(color=(200, 40, 40)):
    return "data:image/png;base64," + base64.b64encode(png_bytes(color)).decode("ascii")


class FakeCompletion:
    """Stands in for call_chat_completion; records every call."""

    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return ChatResult(text=self.text, raw={"choices": []})


class FakeClock:
    """Sleep function that advances a virtual clock instead of blocking."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class FakeImageGenerator:
    """
    Scripted replacement for ReplicateImageGenerator.

    ``outcomes`` maps a call index to either an exception to raise or an image to return;
    missing indexes return a generated data URI.
    """

    def __init__(self, clock=None, outcomes=None):
        self.clock = clock
        self.outcomes = outcomes or {}
        self.prompts = []
        self.call_times = []

    def generate_illustration(self, scene_description, **model_kwargs):
        index = len(self.prompts)
        self.prompts.append(scene_description)
        self.call_times.append(self.clock.now if self.clock else None)
        outcome = self.outcomes.get(index, f"data:image/png;base64,image{index}")
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeFileOutput:
    """Mimics replicate.helpers.FileOutput."""

    def __init__(self, data, url="https://replicate.delivery/out-0.png"):
        self._data = data
        self.url = url

    def read(self):
        return self._data


class FakeReplicateClient:
    """Scripted replicate.Client: each run() pops the next outcome."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def run(self, model, input):
        self.calls.append((model, input))
        outcome = self.outcomes.pop(0) if self.outcomes else [FakeFileOutput(png_bytes())]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class StatusError(Exception):
    """Error carrying an HTTP status, like replicate.exceptions.ReplicateError."""

    def __init__(self, message, status):
        super().__init__(message)
        self.status = status


@pytest.fixture
def story_payload():
    return make_story_payload()


@pytest.fixture
def fake_completion(story_payload):
    return FakeCompletion(text=json.dumps(story_payload))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def image_generator(clock):
    return FakeImageGenerator(clock=clock)


@pytest.fixture
def orchestrator(fake_completion, image_generator, clock):
    return PixetaleOrchestrator(
        story_writer=StoryWriter(api_key="test", model="gemini/test", completion_fn=fake_completion),
        image_generator=image_generator,
        image_delay_seconds=10.0,
        sleep_fn=clock,
    )
