"""
요청 모델 정의 (고급 입력 / 생성 파라미터 / API 요청 본문)
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from models.content_models import ContentType, Difficulty


class AdvancedCharacterInput(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    level: Optional[int] = Field(None, ge=1, le=20, description="Character level (1-20)")
    class_name: Optional[str] = Field(None, alias="class", description="D&D 5e class")
    race: Optional[str] = Field(None, description="D&D 5e race")
    background: Optional[str] = Field(None, description="Character background")


class AdvancedEnvironmentInput(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    mood: Optional[str] = Field(None, description="Desired mood (e.g., dark, mysterious, cheerful)")
    lighting: Optional[str] = Field(None, description="Desired lighting (e.g., bright, dim, candlelight)")
    npc_count: Optional[int] = Field(None, alias="npcCount", ge=0, le=10, description="Number of NPCs (0-10)")


class AdvancedMissionInput(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    difficulty: Optional[Difficulty] = Field(None, description="Mission difficulty")
    objective_count: Optional[int] = Field(
        None, alias="objectiveCount", ge=2, le=5, description="Number of objectives (2-5)"
    )
    reward_types: Optional[List[Literal["xp", "gold", "items"]]] = Field(
        None, alias="rewardTypes", description="Types of rewards to include"
    )


AdvancedInput = Union[AdvancedCharacterInput, AdvancedEnvironmentInput, AdvancedMissionInput]

ADVANCED_INPUT_MODELS = {
    ContentType.CHARACTER: AdvancedCharacterInput,
    ContentType.ENVIRONMENT: AdvancedEnvironmentInput,
    ContentType.MISSION: AdvancedMissionInput,
}


def parse_advanced_input(content_type: ContentType, data: Optional[Dict[str, Any]]) -> Optional[AdvancedInput]:
    """콘텐츠 타입별 고급 입력 검증"""
    if not data:
        return None
    return ADVANCED_INPUT_MODELS[ContentType(content_type)].model_validate(data)


class AdvancedGenerationParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    temperature: Optional[float] = Field(None, ge=0.1, le=1.5, description="AI temperature (0.1-1.5), default 0.8")
    tone: Optional[Literal["serious", "balanced", "playful"]] = Field(None, description="Narrative tone")
    complexity: Optional[Literal["simple", "standard", "detailed"]] = Field(None, description="Level of detail")


class GenerateContentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scenario: str = Field(..., min_length=1, description="Free-form scenario text")
    content_type: ContentType = Field(..., alias="contentType", description="character | environment | mission")
    advanced_input: Optional[Dict[str, Any]] = Field(None, alias="advancedInput", description="Structured constraints")
    generation_params: Optional[AdvancedGenerationParams] = Field(
        None, alias="generationParams", description="Temperature / tone / complexity"
    )


class RegenerateSectionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scenario: str = Field(..., min_length=1, description="Original scenario text")
    content_type: ContentType = Field(..., alias="contentType")
    section: str = Field(..., min_length=1, description="Wire name of the section to regenerate")
    current_content: Dict[str, Any] = Field(..., alias="currentContent", description="The existing content record")
    section_index: Optional[int] = Field(None, alias="sectionIndex", ge=0, description="Replace one list element only")


class VariationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_content: Dict[str, Any] = Field(..., alias="originalContent")
    content_type: ContentType = Field(..., alias="contentType")
    original_scenario: str = Field(..., alias="originalScenario")
    variation_prompt: Optional[str] = Field(None, alias="variationPrompt", description="Explicit change instructions")


class ValidateContentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content_type: ContentType = Field(..., alias="contentType")
    content: Dict[str, Any] = Field(..., description="Content record to check")
