import pytest

from pixetale.ai_generation import ReplicateImageGenerator
from pixetale.config import (
    DEFAULT_IMAGE_ATTEMPTS,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_PAGE_COUNT,
    DEFAULT_TEXT_MODEL,
    PixetaleSettings,
)
from pixetale.errors import ImageGenerationFailure
from pixetale.story_generation import build_story_prompt

from conftest import FakeClock, FakeReplicateClient


def test_default_settings():
    settings = PixetaleSettings.from_env({})
    assert settings.text_model == DEFAULT_TEXT_MODEL
    assert settings.image_model == DEFAULT_IMAGE_MODEL
    assert settings.image_delay_seconds == 10.0
    assert settings.image_max_attempts == 3
    assert settings.image_retry_base_delay == 2.0
    assert settings.page_count == 10
    assert settings.image_api_token is None


def test_settings_from_env():
    settings = PixetaleSettings.from_env(
        {
            "LITELLM_MODEL": "openai/gpt-4.1-mini",
            "GEMINI_API_KEY": "gem-key",
            "REPLICATE_API_TOKEN": "r8_token",
            "REPLICATE_MODEL": "google/imagen-4",
            "PIXETALE_IMAGE_DELAY": "0.5",
            "PIXETALE_IMAGE_ATTEMPTS": "5",
            "PIXETALE_PAGE_COUNT": "6",
            "PIXETALE_LOG_LEVEL": "debug",
        }
    )
    assert settings.text_model == "openai/gpt-4.1-mini"
    assert settings.text_api_key == "gem-key"
    assert settings.image_api_token == "r8_token"
    assert settings.image_model == "google/imagen-4"
    assert settings.image_delay_seconds == 0.5
    assert settings.image_max_attempts == 5
    assert settings.page_count == 6
    assert settings.log_level == "DEBUG"


def test_story_model_env_takes_precedence():
    settings = PixetaleSettings.from_env(
        {"PIXETALE_STORY_MODEL": "gemini/gemini-2.5-pro", "LITELLM_MODEL": "openai/gpt-4o"}
    )
    assert settings.text_model == "gemini/gemini-2.5-pro"


def test_invalid_number_names_the_variable():
    with pytest.raises(ValueError, match="PIXETALE_IMAGE_DELAY"):
        PixetaleSettings.from_env({"PIXETALE_IMAGE_DELAY": "soon"})


@pytest.mark.parametrize(
    "overrides",
    [
        {"image_delay_seconds": -1},
        {"image_max_attempts": 0},
        {"page_count": 0},
    ],
)
def test_settings_validation(overrides):
    with pytest.raises(ValueError):
        PixetaleSettings(**overrides)


def test_generators_share_config_defaults():
    defaults = PixetaleSettings()
    client = FakeReplicateClient([RuntimeError(f"attempt {n}") for n in range(DEFAULT_IMAGE_ATTEMPTS)])
    clock = FakeClock()
    generator = ReplicateImageGenerator(client=client, sleep_fn=clock)

    with pytest.raises(ImageGenerationFailure):
        generator.generate_illustration("A cat")

    assert generator.max_attempts == defaults.image_max_attempts
    assert len(client.calls) == defaults.image_max_attempts
    assert clock.sleeps == [
        defaults.image_retry_base_delay * attempt
        for attempt in range(1, defaults.image_max_attempts)
    ]
    assert f"{DEFAULT_PAGE_COUNT}-page" in build_story_prompt("owls").user
