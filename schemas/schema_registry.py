"""
스키마 레지스트리
콘텐츠 타입별 / 섹션별 구조 계약 정의 (정적 설정)
"""

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, get_args, get_origin

from pydantic import BaseModel, Field, create_model

from models.content_models import (
    ChoiceBasedReward,
    ClassFeature,
    Character,
    ContentModel,
    ContentType,
    Environment,
    Mission,
    Objective,
    PowerfulItem,
    Reward,
    Skill,
    Spell,
)
from schemas.errors import SchemaRegistryError


@dataclass(frozen=True)
class SectionDefinition:
    annotation: Any
    description: str


@dataclass(frozen=True)
class SectionContract:
    """재생성 가능한 섹션 하나의 계약
    모델 응답 루트는 객체여야 하므로 리스트 / 스칼라 값은 ``value`` 필드로 감싸서 전달
    """

    content_type: ContentType
    name: str
    description: str
    annotation: Any
    model: Type[BaseModel]
    wrapped: bool
    is_list: bool
    indexed: bool = False

    def wrap(self, value: Any) -> Dict[str, Any]:
        return {"value": value} if self.wrapped else value

    def unwrap(self, data: Any) -> Any:
        """모델 응답 검증 후 wire 형태 값 반환"""
        if isinstance(data, BaseModel):
            data = data.model_dump(by_alias=True)
        validated = self.model.model_validate(data)
        dumped = validated.model_dump(by_alias=True, exclude_none=True, mode="json")
        return dumped["value"] if self.wrapped else dumped


@dataclass(frozen=True)
class ContentSpec:
    content_type: ContentType
    model: Type[ContentModel]
    sections: Mapping[str, SectionDefinition]
    summarize: Callable[[Dict[str, Any]], str]
    describe: Callable[[Dict[str, Any]], str]


def _character_summary(data: Dict[str, Any]) -> str:
    flavour = data.get("personality") or data.get("history") or ""
    return (
        f"{data.get('name', 'Unnamed')}, a {data.get('race', '')} {data.get('class', '')} "
        f"(Level {data.get('level', '?')}). {flavour}"
    ).strip()


def _environment_summary(data: Dict[str, Any]) -> str:
    return f"{data.get('name', 'Unnamed location')}: {str(data.get('description', ''))[:200]}..."


def _mission_summary(data: Dict[str, Any]) -> str:
    return f"{data.get('title', 'Untitled mission')}: {str(data.get('description', ''))[:200]}..."


CHARACTER_SECTIONS = {
    "history": SectionDefinition(str, "a new backstory and history connected to the scenario"),
    "personality": SectionDefinition(str, "a new personality description with 3-4 distinct traits"),
    "background": SectionDefinition(str, "a D&D 5e background (e.g., Entertainer, Sage, Noble)"),
    "traits": SectionDefinition(List[str], "personality traits and quirks"),
    "spells": SectionDefinition(
        List[Spell], "spells appropriate for the character's class and level (empty for non-casters)"
    ),
    "skills": SectionDefinition(
        List[Skill], "skills with correct proficiency flags based on class, background, and race"
    ),
    "expertise": SectionDefinition(List[str], "skill names with expertise (only for classes that grant it)"),
    "racialTraits": SectionDefinition(
        List[str], "racial traits for the character's race (standard D&D 5e racial features)"
    ),
    "classFeatures": SectionDefinition(
        List[ClassFeature], "class features for the character's class and level (ALL mandatory features)"
    ),
    "voiceDescription": SectionDefinition(str, "a voice quality description (NOT dialogue)"),
}

ENVIRONMENT_SECTIONS = {
    "description": SectionDefinition(str, "a vivid visual description of the place (no mood or lighting)"),
    "ambient": SectionDefinition(str, "ambient sounds, smells and atmosphere"),
    "mood": SectionDefinition(str, "the emotional tone players feel upon entering"),
    "lighting": SectionDefinition(str, "lighting conditions and visibility"),
    "features": SectionDefinition(List[str], "notable features, objects, or architectural elements"),
    "npcs": SectionDefinition(List[str], 'NPCs present, each as "Name - short role description"'),
    "currentConflict": SectionDefinition(str, "what is currently wrong or unstable in this location"),
    "adventureHooks": SectionDefinition(
        List[str], "2-3 concrete adventure hooks that can immediately involve the players"
    ),
}

MISSION_SECTIONS = {
    "description": SectionDefinition(str, "a detailed mission description"),
    "context": SectionDefinition(str, "background context and setup for the mission"),
    "objectives": SectionDefinition(
        List[Objective],
        "mission objectives (primary and optional); alternative paths need isAlternative and pathType",
    ),
    "rewards": SectionDefinition(Reward, "rewards for completing the mission"),
    "relatedNPCs": SectionDefinition(List[str], "NPCs involved in or related to this mission"),
    "relatedLocations": SectionDefinition(List[str], "locations relevant to this mission"),
    "powerfulItems": SectionDefinition(
        List[PowerfulItem], "powerful items or artifacts with a clear status/control mechanism"
    ),
    "possibleOutcomes": SectionDefinition(List[str], "3-4 possible outcomes based on player choices"),
    "choiceBasedRewards": SectionDefinition(
        List[ChoiceBasedReward], "optional rewards tied to specific choices or paths"
    ),
}

_REGISTRY: Mapping[ContentType, ContentSpec] = MappingProxyType({
    ContentType.CHARACTER: ContentSpec(
        content_type=ContentType.CHARACTER,
        model=Character,
        sections=MappingProxyType(CHARACTER_SECTIONS),
        summarize=_character_summary,
        describe=lambda d: (
            f"Character: {d.get('name')}, {d.get('race')} {d.get('class')} (Level {d.get('level')})"
        ),
    ),
    ContentType.ENVIRONMENT: ContentSpec(
        content_type=ContentType.ENVIRONMENT,
        model=Environment,
        sections=MappingProxyType(ENVIRONMENT_SECTIONS),
        summarize=_environment_summary,
        describe=lambda d: f"Environment: {d.get('name')}",
    ),
    ContentType.MISSION: ContentSpec(
        content_type=ContentType.MISSION,
        model=Mission,
        sections=MappingProxyType(MISSION_SECTIONS),
        summarize=_mission_summary,
        describe=lambda d: f"Mission: {d.get('title')}",
    ),
})


def content_spec_for(content_type) -> ContentSpec:
    return _REGISTRY[ContentType(content_type)]


def schema_for(content_type) -> Type[ContentModel]:
    return content_spec_for(content_type).model


def sections_for(content_type) -> List[str]:
    return list(content_spec_for(content_type).sections)


def _element_type(annotation: Any) -> Optional[Any]:
    if get_origin(annotation) in (list, List):
        return get_args(annotation)[0]
    return None


def schema_for_section(content_type, section_name: str, indexed: bool = False) -> SectionContract:
    """섹션 계약 조회 (알 수 없으면 SchemaRegistryError)"""
    content_type = ContentType(content_type)
    return _build_section_contract(content_type, section_name, indexed)


@lru_cache(maxsize=None)
def _build_section_contract(content_type: ContentType, section_name: str, indexed: bool) -> SectionContract:
    definition = content_spec_for(content_type).sections.get(section_name)
    if definition is None:
        raise SchemaRegistryError(content_type.value, section_name)

    element = _element_type(definition.annotation)
    is_list = element is not None
    if indexed and not is_list:
        raise SchemaRegistryError(
            content_type.value,
            section_name,
            f'Section "{section_name}" of "{content_type.value}" is not a list and cannot be indexed',
        )

    annotation = element if indexed else definition.annotation
    description = definition.description
    if indexed:
        description = f"a single replacement entry for {description}"

    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        model, wrapped = annotation, False
    else:
        model_name = f"{content_type.value.title()}{section_name[0].upper()}{section_name[1:]}Section"
        if indexed:
            model_name += "Item"
        model = create_model(
            model_name,
            __base__=ContentModel,
            value=(annotation, Field(..., description=description)),
        )
        wrapped = True

    return SectionContract(
        content_type=content_type,
        name=section_name,
        description=description,
        annotation=annotation,
        model=model,
        wrapped=wrapped,
        is_list=is_list,
        indexed=indexed,
    )


def registered_sections() -> Dict[str, List[str]]:
    return {ct.value: sections_for(ct) for ct in ContentType}
