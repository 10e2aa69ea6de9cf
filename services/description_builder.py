"""
태그 기반 설명 생성기

LLM 설명 생성이 실패했을 때 Computer Vision 태그만으로 여러 문장의 설명을 만든다.
외부 호출 없이 항상 같은 입력에 같은 결과를 반환한다.
"""
from typing import List

from utils.helpers import format_list

NO_TAGS_DESCRIPTION = "No visual tags were detected, so a descriptive summary is unavailable."

SUBJECT_TAGS = {"person", "people", "man", "woman", "boy", "girl", "child", "adult", "grandparent", "smile", "couple"}
ENVIRONMENT_TAGS = {"outdoor", "indoor", "street", "house", "building", "garden", "yard", "room", "kitchen", "living room"}
NATURE_TAGS = {"tree", "plant", "flower", "grass", "sky", "cloud", "sunlight", "bush", "leaf"}
PALETTE_TAGS = {"bright", "colorful", "shadow", "sunny", "daytime", "night", "vibrant", "warm", "cool", "sunset"}
ACTIVITY_TAGS = {"walking", "standing", "posing", "holding", "shopping", "talking", "playing"}

MAX_SUPPORTING_OBJECTS = 6


def _normalize_tags(tags: List[str]) -> List[str]:
    """공백 제거, 빈 태그 제외, 대소문자 무시 중복 제거 (순서 유지)"""
    normalized = []
    seen = set()
    for tag in tags or []:
        if not tag or not tag.strip():
            continue
        value = tag.strip()
        if value.lower() in seen:
            continue
        seen.add(value.lower())
        normalized.append(value)
    return normalized


def _pick(tags: List[str], group: set) -> List[str]:
    return [tag for tag in tags if tag.lower() in group]


def build_rich_description(tags: List[str], confidence_score: float = 0.0, target_length: int = 75) -> str:
    """태그와 신뢰도로 서술형 설명을 만듭니다."""
    normalized = _normalize_tags(tags)
    if not normalized:
        return NO_TAGS_DESCRIPTION

    subjects = _pick(normalized, SUBJECT_TAGS)
    environments = _pick(normalized, ENVIRONMENT_TAGS)
    nature = _pick(normalized, NATURE_TAGS)
    palette = _pick(normalized, PALETTE_TAGS)
    activities = _pick(normalized, ACTIVITY_TAGS)

    grouped = {tag.lower() for tag in subjects + environments + nature + palette + activities}
    supporting = [tag for tag in normalized if tag.lower() not in grouped][:MAX_SUPPORTING_OBJECTS]

    environment_phrase = f"{format_list(environments)} setting" if environments else "scene"
    subject_phrase = format_list(subjects) if subjects else "various elements"
    activity_snippet = f" while {format_list(activities)}" if activities else ""

    sentences = [
        f"This {environment_phrase} centers on {subject_phrase}{activity_snippet}, captured in a single cohesive moment."
    ]

    if supporting or nature:
        details = []
        if nature:
            details.append(f"natural details such as {format_list(nature)}")
        if supporting:
            details.append(f"additional elements like {format_list(supporting)}")
        sentences.append(f"The frame also highlights {' and '.join(details)}.")

    if palette:
        sentences.append(
            f"Lighting cues from {format_list(palette)} create a distinct mood that guides the viewer's attention."
        )

    if confidence_score > 0:
        sentences.append(
            f"Analysis confidence is approximately {confidence_score:.0%}, "
            "reinforcing the presence of these subjects and surroundings."
        )

    description = " ".join(sentences)

    # 목표 길이의 절반에도 못 미치면 마무리 문장 추가
    if len(description.split()) < target_length * 0.5:
        description += (
            " Overall, the composition feels balanced with foreground subjects grounding the scene"
            " while the background context provides depth and atmosphere."
        )

    return description
