"""
섹션 재생성 서비스
콘텐츠의 한 섹션(또는 리스트 항목 하나)만 새로 생성
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional
import copy
import logging

from pydantic import ValidationError

from models.content_models import Character, ContentType
from providers.llm_provider import clamp_temperature
from schemas.errors import SchemaRegistryError
from schemas.schema_registry import SectionContract, schema_for_section
from services.content_validator import correct_skills, is_non_caster
from services.generation_service import BaseGenerationService

logger = logging.getLogger(__name__)

SECTION_MAX_TEMPERATURE = 1.2


@dataclass
class SectionResult:
    section: str
    value: Any
    section_index: Optional[int]
    source: Literal["ai", "fallback"]


def apply_section(current_content: Dict[str, Any], section_name: str, value: Any,
                  section_index: Optional[int] = None) -> Dict[str, Any]:
    """섹션 하나(또는 리스트 항목 하나)만 교체한 복사본 반환"""
    updated = copy.deepcopy(current_content)
    if section_index is None:
        updated[section_name] = copy.deepcopy(value)
        return updated

    entries = updated.get(section_name)
    if not isinstance(entries, list) or not 0 <= section_index < len(entries):
        raise IndexError(f"{section_name}[{section_index}] does not exist")
    entries[section_index] = copy.deepcopy(value)
    return updated


class SectionService(BaseGenerationService):
    """섹션 재생성"""

    def _check_index(self, contract: SectionContract, current_content: Dict[str, Any],
                     section_index: Optional[int]) -> None:
        if section_index is None:
            return
        entries = current_content.get(contract.name)
        size = len(entries) if isinstance(entries, list) else 0
        if section_index < 0 or section_index >= size:
            raise SchemaRegistryError(
                contract.content_type.value,
                contract.name,
                f'sectionIndex {section_index} is out of range for "{contract.name}" ({size} entries)',
            )

    async def regenerate_section(self, scenario: str, content_type, section_name: str,
                                 current_content: Dict[str, Any], section_index: Optional[int] = None) -> SectionResult:
        content_type = ContentType(content_type)
        contract = schema_for_section(content_type, section_name, indexed=section_index is not None)
        self._check_index(contract, current_content, section_index)

        provider = self.resolve_provider()
        language = self.detector.detect(scenario)

        if not provider.is_available():
            logger.warning(f"[Section] 자격 증명 없음, 폴백 사용: {content_type.value}.{section_name}")
            return self._fallback_section(scenario, content_type, section_name, current_content, section_index)

        prompts = self.prompt_manager.build_section(scenario, content_type, contract, current_content,
                                                    language.value, section_index)
        temperature = clamp_temperature(self.settings.DEFAULT_TEMPERATURE, 0.1, SECTION_MAX_TEMPERATURE)

        result = await self.call_provider(provider, prompts.system_prompt, prompts.user_prompt,
                                          contract.model, temperature)
        if not result.ok:
            logger.error(f"[Section] 재생성 실패 ({result.error.kind}), 폴백 사용: {str(result.error)}")
            return self._fallback_section(scenario, content_type, section_name, current_content, section_index)

        value = contract.unwrap(result.data)
        if content_type == ContentType.CHARACTER:
            value = self._correct_character_section(section_name, value, current_content, section_index)

        logger.info(f"[Section] {content_type.value}.{section_name} 재생성 완료")
        return SectionResult(section=section_name, value=value, section_index=section_index, source="ai")

    @staticmethod
    def _correct_character_section(section_name: str, value: Any, current_content: Dict[str, Any],
                                   section_index: Optional[int]) -> Any:
        if section_name == "spells" and is_non_caster(current_content.get("class")):
            return [] if section_index is None else value
        # expertise / attributes 재생성은 skills 를 건드리지 않음 (기존 수치는 validate_content 가 오류로 보고)
        if section_name != "skills":
            return value

        skills: List[Any] = apply_section(current_content, "skills", value, section_index)["skills"]
        try:
            character = Character.model_validate({**current_content, "skills": skills})
        except ValidationError:
            logger.warning("[Section] 현재 캐릭터 검증 실패, 스킬 보정 생략")
            return value

        corrected = [s.to_wire() for s in correct_skills(character).skills]
        return corrected if section_index is None else corrected[section_index]

    def _fallback_section(self, scenario: str, content_type: ContentType, section_name: str,
                          current_content: Dict[str, Any], section_index: Optional[int]) -> SectionResult:
        value = self.fallback.generate_section(content_type, section_name, current_content,
                                               section_index, scenario=scenario)
        return SectionResult(section=section_name, value=value, section_index=section_index, source="fallback")
