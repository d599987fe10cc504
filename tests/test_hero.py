from pixetale.story_generation import HeroTraits


def test_blank_fields_are_not_personalized():
    hero = HeroTraits(name="  ", kind="", hair=None)
    assert hero.name is None
    assert hero.kind is None
    assert not hero.is_personalized


def test_any_single_field_enables_personalization():
    assert HeroTraits(eyes="green").is_personalized


def test_known_kinds_are_canonicalized():
    assert HeroTraits(kind="robot").kind == "Robot"
    assert HeroTraits(kind="dragon").kind == "dragon"


def test_from_mapping_accepts_form_aliases():
    hero = HeroTraits.from_mapping(
        {"hero_name": "Mia", "gender": "girl", "hair_description": "red", "outfit": "a cape"}
    )
    assert hero == HeroTraits(name="Mia", kind="Girl", hair="red", clothing="a cape")
    assert HeroTraits.from_mapping(None) == HeroTraits()


def test_visual_signature_uses_defaults_for_missing_fields():
    assert HeroTraits(name="Leo").visual_signature() == (
        "A child with distinct hair and distinct clothes"
    )
    assert HeroTraits(kind="Girl", hair="curly red", clothing="a blue cape").visual_signature() == (
        "A Girl with curly red hair and a blue cape"
    )


def test_description_and_to_dict():
    hero = HeroTraits(name="Mia", kind="Girl", hair="red", eyes="green", clothing="a cape")
    assert hero.description() == "Girl named Mia, with red hair, with green eyes, wearing a cape"
    assert HeroTraits(name="Mia").to_dict() == {"name": "Mia"}
