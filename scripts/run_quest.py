"""
CLI to run a complete PixeTale quest: story, cover, and page illustrations.

Usage:
    python scripts/run_quest.py \
        --topic "A cat who wanted to be a knight" \
        --language English \
        --hero-name Whiskers --hero-kind Animal \
        --output whiskers.yaml \
        --export-dir exports/

Environment variables:
    GEMINI_API_KEY       - key for the story model (or the provider key LiteLLM expects)
    REPLICATE_API_TOKEN  - required for illustrations
    PIXETALE_IMAGE_DELAY - seconds between image requests (default: 10)
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv
from tqdm.auto import tqdm

# Ensure project root is on the Python path when running as a script.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pixetale import (  # noqa: E402
    GenerationStatus,
    HeroTraits,
    PixetaleOrchestrator,
    PixetaleSettings,
    QuestController,
    QuestState,
    StorybookHTMLExporter,
    StorybookPDFBuilder,
    StoryLanguage,
)
from pixetale.common import setup_logger  # noqa: E402
from pixetale.story_generation import HERO_KINDS  # noqa: E402

STATUS_LABELS = {
    GenerationStatus.WRITING: "INITIALIZING QUEST",
    GenerationStatus.ILLUSTRATING: "RENDERING WORLD",
    GenerationStatus.READY: "QUEST COMPLETE",
    GenerationStatus.ERROR: "QUEST FAILED",
}


class ProgressTracker:
    """
    Mirrors the controller's state snapshots onto a tqdm percentage bar.
    """

    def __init__(self) -> None:
        self._bar: tqdm | None = None
        self._last_status: GenerationStatus | None = None

    def __call__(self, state: QuestState) -> None:
        if state.status is GenerationStatus.IDLE:
            return

        if self._bar is None:
            self._bar = tqdm(total=100, unit="%", desc=STATUS_LABELS[state.status])

        if state.status is not self._last_status:
            self._last_status = state.status
            self._bar.set_description(STATUS_LABELS[state.status])
            if state.status is GenerationStatus.ILLUSTRATING:
                tqdm.write("* SLOW MODE ACTIVE TO PREVENT SERVER OVERLOAD *")

        if state.progress > self._bar.n:
            self._bar.update(state.progress - self._bar.n)

        if state.status in (GenerationStatus.READY, GenerationStatus.ERROR):
            self.close()

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a PixeTale 16-bit storybook.")
    parser.add_argument(
        "--topic",
        required=True,
        help='Adventure topic, e.g. "A cat who wanted to be a knight".',
    )
    parser.add_argument(
        "--language",
        default=StoryLanguage.ENGLISH.value,
        help="English, Spanish, or Bilingual (default: English).",
    )
    parser.add_argument("--hero-name", default=None, help="Hero name used in the story.")
    parser.add_argument(
        "--hero-kind",
        default=None,
        help=f"Hero gender/type: {', '.join(HERO_KINDS)} or free text.",
    )
    parser.add_argument("--hero-hair", default=None, help="Hero hair colour/style.")
    parser.add_argument("--hero-eyes", default=None, help="Hero eye colour.")
    parser.add_argument("--hero-clothing", default=None, help="Hero clothing or armour.")
    parser.add_argument(
        "--output",
        default="pixetale_story.yaml",
        help="YAML file that stores the finished book (default: pixetale_story.yaml).",
    )
    parser.add_argument(
        "--export-dir",
        default=None,
        help="Optional directory for the printable, coloring, and flipbook HTML exports.",
    )
    parser.add_argument("--pdf", default=None, help="Optional path for a printable PDF.")
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Override the pause between image requests, in seconds.",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO).")
    parser.add_argument("--log-file", default=None, help="Optional rotating log file.")
    return parser.parse_args(argv)


def build_hero_traits(args: argparse.Namespace) -> HeroTraits | None:
    hero = HeroTraits(
        name=args.hero_name,
        kind=args.hero_kind,
        hair=args.hero_hair,
        eyes=args.hero_eyes,
        clothing=args.hero_clothing,
    )
    return hero if hero.is_personalized else None


def main(
    argv: Sequence[str] | None = None,
    *,
    orchestrator: PixetaleOrchestrator | None = None,
) -> int:
    load_dotenv()
    args = parse_args(argv)

    settings = PixetaleSettings.from_env()
    if args.delay is not None:
        settings = dataclasses.replace(settings, image_delay_seconds=args.delay)
    setup_logger(args.log_level or settings.log_level, args.log_file)

    try:
        language = StoryLanguage.parse(args.language)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 2

    controller = QuestController(orchestrator or PixetaleOrchestrator.from_settings(settings))
    tracker = ProgressTracker()
    controller.subscribe(tracker)

    try:
        story = controller.start(args.topic, language, build_hero_traits(args))
    finally:
        tracker.close()

    state = controller.state
    if story is None or state.status is not GenerationStatus.READY:
        print(f"QUEST FAILED! {state.error or 'No story was produced.'}", file=sys.stderr)
        return 1

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(story.to_yaml(), encoding="utf-8")
    print(f"Saved '{story.title}' to {output_path}")

    if args.export_dir:
        for path in StorybookHTMLExporter().write_all(story, args.export_dir):
            print(f"Exported {path}")

    if args.pdf:
        pdf_path = StorybookPDFBuilder().build(story, args.pdf)
        print(f"Rendered PDF to {pdf_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
