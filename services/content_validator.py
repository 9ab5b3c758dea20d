"""
생성 후 검증 / 보정
모델 출력의 규칙 위반(스킬 수치, 비시전자 주문, 미션 난이도)을 결정적으로 보정
"""

import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.content_models import Attributes, Character, ContentBody, ContentType, Mission, Objective, Skill
from models.request_models import AdvancedInput, AdvancedMissionInput
from models.response_models import ValidationReport
from prompt.normalization import normalize_class_name
from schemas.schema_registry import schema_for
from templates.dnd_reference import CLASSES, DIFFICULTY_LEVEL_BANDS, SKILL_ABILITIES, SPELLCASTING_CLASSES

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = "medium"
DEFAULT_PATH_TYPE = "mixed"


def ability_modifier(score: int) -> int:
    return (score - 10) // 2


def proficiency_bonus(level: int) -> int:
    return (level + 7) // 4


def compute_skill_modifier(attributes: Attributes, level: int, skill_name: str,
                           proficient: bool, expert: bool) -> int:
    """능력치 보정 + 숙련 보너스 + 전문화 보너스 (알 수 없는 스킬은 STR)"""
    ability = SKILL_ABILITIES.get(skill_name, "strength")
    bonus = proficiency_bonus(level)
    return ability_modifier(getattr(attributes, ability)) + bonus * int(proficient) + bonus * int(expert)


def skill_modifier(character: Character, skill_name: str, proficient: bool) -> int:
    return compute_skill_modifier(character.attributes, character.level, skill_name, proficient,
                                  skill_name in character.expertise)


def correct_skills(character: Character) -> Character:
    """모든 스킬 수치 재계산 (입력 객체는 변경하지 않음)"""
    corrected: List[Skill] = []
    changed = 0
    for skill in character.skills:
        expected = skill_modifier(character, skill.name, skill.proficiency)
        if expected != skill.modifier:
            changed += 1
        corrected.append(skill.model_copy(update={"modifier": expected}))

    if changed:
        logger.info(f"스킬 수치 보정: {character.name} ({changed}/{len(corrected)}개 수정)")
    return character.model_copy(update={"skills": corrected})


def is_non_caster(class_name: Optional[str]) -> bool:
    """정규화 후 알려진 비시전 클래스인지 판단 (모르는 클래스는 False)"""
    canonical = normalize_class_name(class_name)
    return canonical in CLASSES and canonical not in SPELLCASTING_CLASSES


def correct_character(character: Character) -> Character:
    character = correct_skills(character)
    if is_non_caster(character.class_name) and character.spells:
        logger.info(f"비시전 클래스 주문 제거: {character.class_name} ({len(character.spells)}개)")
        character = character.model_copy(update={"spells": []})
    return character


def resolve_difficulty(mission: Mission, advanced_input: Optional[AdvancedMissionInput] = None) -> str:
    """입력값 > 모델값 > medium"""
    if advanced_input is not None and advanced_input.difficulty:
        return advanced_input.difficulty
    return mission.difficulty or DEFAULT_DIFFICULTY


def correct_mission(mission: Mission, advanced_input: Optional[AdvancedMissionInput] = None) -> Mission:
    objectives: List[Objective] = []
    for objective in mission.objectives:
        if objective.is_alternative and not objective.path_type:
            objective = objective.model_copy(update={"path_type": DEFAULT_PATH_TYPE})
        objectives.append(objective)

    return mission.model_copy(update={
        "difficulty": resolve_difficulty(mission, advanced_input),
        "objectives": objectives,
    })


def correct_content(content_type, content: ContentBody, advanced_input: Optional[AdvancedInput] = None) -> ContentBody:
    content_type = ContentType(content_type)
    if content_type == ContentType.CHARACTER:
        return correct_character(content)
    if content_type == ContentType.MISSION:
        mission_input = advanced_input if isinstance(advanced_input, AdvancedMissionInput) else None
        return correct_mission(content, mission_input)
    return content


def _level_band_start(recommended_level: str) -> Optional[int]:
    match = re.search(r"\d+", recommended_level)
    return int(match.group()) if match else None


def validate_content(content_type, data: Dict[str, Any]) -> ValidationReport:
    """콘텐츠 구조 검증 (보정 없이 보고만)"""
    content_type = ContentType(content_type)
    errors: List[str] = []
    warnings: List[str] = []

    try:
        content = schema_for(content_type).model_validate(data)
    except ValidationError as e:
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"]) or "(root)"
            errors.append(f"{location}: {err['msg']}")
        return ValidationReport(is_valid=False, errors=errors, warnings=warnings)

    if isinstance(content, Character):
        for skill in content.skills:
            expected = skill_modifier(content, skill.name, skill.proficiency)
            if skill.modifier != expected:
                errors.append(f"스킬 수치 오류: {skill.name} = {skill.modifier} (기대값 {expected})")
        if is_non_caster(content.class_name) and content.spells:
            errors.append(f"비시전 클래스 주문 존재: {content.class_name}")
        for name in content.expertise:
            skill = next((s for s in content.skills if s.name == name), None)
            if skill is not None and not skill.proficiency:
                warnings.append(f"숙련 없는 전문화: {name}")

    elif isinstance(content, Mission):
        for i, objective in enumerate(content.objectives):
            if objective.is_alternative and not objective.path_type:
                errors.append(f"목표 {i + 1}: 대안 경로에 pathType 누락")
        if content.recommended_level:
            low, high = DIFFICULTY_LEVEL_BANDS[content.difficulty]
            start = _level_band_start(content.recommended_level)
            if start is not None and not low <= start <= high:
                warnings.append(
                    f"권장 레벨 불일치: {content.recommended_level} (난이도 {content.difficulty})"
                )
        if content.possible_outcomes is not None and not 3 <= len(content.possible_outcomes) <= 4:
            warnings.append(f"결과 개수: {len(content.possible_outcomes)}개 (3-4개 권장)")

    else:
        if content.adventure_hooks is not None and not 2 <= len(content.adventure_hooks) <= 3:
            warnings.append(f"모험 훅 개수: {len(content.adventure_hooks)}개 (2-3개 권장)")
        if content.description and content.description in (content.mood, content.lighting):
            warnings.append("description 이 mood/lighting 과 중복됩니다")

    return ValidationReport(is_valid=not errors, errors=errors, warnings=warnings)
