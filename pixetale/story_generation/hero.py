"""
Optional hero customization collected alongside the adventure topic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

HERO_KINDS = ("Boy", "Girl", "Robot", "Animal")


def _coerce_optional_str(value: Any) -> str | None:
    if value is None:
        return None

    text = str(value).strip()
    return text or None


def _normalize_kind(value: Any) -> str | None:
    text = _coerce_optional_str(value)
    if text is None:
        return None
    for known in HERO_KINDS:
        if text.lower() == known.lower():
            return known
    return text


@dataclass(frozen=True)
class HeroTraits:
    """
    Free-text description of the story's main character.

    Attributes
    ----------
    name:
        Name used in the narrative.
    kind:
        One of :data:`HERO_KINDS` or any free-text type ("dragon", "grandma").
    hair:
        Hair colour or style.
    eyes:
        Eye colour.
    clothing:
        Clothing, armour, or costume.

    Every field is optional. Setting any one of them switches the story prompt into
    personalization mode.
    """

    name: str | None = None
    kind: str | None = None
    hair: str | None = None
    eyes: str | None = None
    clothing: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _coerce_optional_str(self.name))
        object.__setattr__(self, "kind", _normalize_kind(self.kind))
        object.__setattr__(self, "hair", _coerce_optional_str(self.hair))
        object.__setattr__(self, "eyes", _coerce_optional_str(self.eyes))
        object.__setattr__(self, "clothing", _coerce_optional_str(self.clothing))

    @property
    def is_personalized(self) -> bool:
        return any((self.name, self.kind, self.hair, self.eyes, self.clothing))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "HeroTraits":
        """
        Build traits from a form-style mapping; ``gender`` and ``type`` alias ``kind``.
        """
        if not data:
            return cls()

        return cls(
            name=data.get("name") or data.get("hero_name"),
            kind=data.get("kind") or data.get("gender") or data.get("type"),
            hair=data.get("hair") or data.get("hair_description"),
            eyes=data.get("eyes") or data.get("eye_description"),
            clothing=data.get("clothing") or data.get("outfit"),
        )

    def visual_signature(self) -> str:
        """
        The sentence every image prompt must repeat so the hero looks the same on each page.
        """
        kind = self.kind or "child"
        hair = self.hair or "distinct"
        clothing = self.clothing or "distinct clothes"
        return f"A {kind} with {hair} hair and {clothing}"

    def description(self) -> str:
        """Comma-joined description of the hero for the narrative instructions."""
        parts = [self.kind or "child"]
        if self.name:
            parts[0] = f"{parts[0]} named {self.name}"
        if self.hair:
            parts.append(f"with {self.hair} hair")
        if self.eyes:
            parts.append(f"with {self.eyes} eyes")
        if self.clothing:
            parts.append(f"wearing {self.clothing}")
        return ", ".join(parts)

    def to_dict(self) -> dict[str, str]:
        return {
            key: value
            for key, value in (
                ("name", self.name),
                ("kind", self.kind),
                ("hair", self.hair),
                ("eyes", self.eyes),
                ("clothing", self.clothing),
            )
            if value is not None
        }
