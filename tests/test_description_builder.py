from services.description_builder import NO_TAGS_DESCRIPTION, build_rich_description


def test_no_tags_returns_fixed_sentence():
    assert build_rich_description([], 0.9) == NO_TAGS_DESCRIPTION
    assert build_rich_description(["", "   "], 0.9) == NO_TAGS_DESCRIPTION


def test_groups_subjects_environment_and_activities():
    description = build_rich_description(["woman", "outdoor", "walking", "street"], 0.0, target_length=10)
    assert description.startswith(
        "This outdoor and street setting centers on woman while walking, captured in a single cohesive moment."
    )


def test_mentions_nature_and_supporting_objects():
    description = build_rich_description(["dog", "tree", "ball"], 0.0, target_length=10)
    assert "natural details such as tree" in description
    assert "additional elements like dog and ball" in description


def test_duplicate_tags_are_ignored():
    description = build_rich_description(["Cat", "cat", " cat "], 0.0, target_length=10)
    assert description.count("Cat") == 1
    assert "cat," not in description


def test_confidence_is_reported_as_percentage():
    description = build_rich_description(["cat"], 0.92, target_length=10)
    assert "approximately 92%" in description


def test_short_description_is_padded():
    short = build_rich_description(["cat"], 0.0, target_length=200)
    long_target = build_rich_description(["cat"], 0.0, target_length=10)
    assert short.endswith("provides depth and atmosphere.")
    assert not long_target.endswith("provides depth and atmosphere.")


def test_supporting_objects_are_limited_to_six():
    tags = ["a1", "a2", "a3", "a4", "a5", "a6", "a7", "a8"]
    description = build_rich_description(tags, 0.0, target_length=10)
    assert "a6" in description
    assert "a7" not in description
