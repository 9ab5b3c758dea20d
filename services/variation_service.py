"""
변형 생성 서비스
기존 콘텐츠를 요약해 합성 시나리오를 만들고 일반 생성 경로로 위임
"""

from typing import Any, Dict, Optional, Union
import logging

from pydantic import BaseModel

from models.content_models import ContentType, GeneratedContent
from models.request_models import AdvancedGenerationParams
from schemas.schema_registry import content_spec_for
from services.generation_service import GenerationService

logger = logging.getLogger(__name__)

VARIATION_TEMPERATURE = 0.9


class VariationService:
    def __init__(self, generation_service: Optional[GenerationService] = None):
        self.generation_service = generation_service or GenerationService()

    @property
    def prompt_manager(self):
        return self.generation_service.prompt_manager

    @staticmethod
    def summarize(content_type, original_content: Union[BaseModel, Dict[str, Any]]) -> str:
        if isinstance(original_content, BaseModel):
            original_content = original_content.model_dump(by_alias=True, exclude_none=True)
        return content_spec_for(content_type).summarize(original_content)

    async def generate_variation(self, original_content: Union[BaseModel, Dict[str, Any]], content_type,
                                 original_scenario: str, variation_prompt: Optional[str] = None) -> GeneratedContent:
        content_type = ContentType(content_type)
        summary = self.summarize(content_type, original_content)
        scenario = self.prompt_manager.build_variation_scenario(summary, content_type, original_scenario,
                                                                variation_prompt)
        logger.info(f"[Variation] {content_type.value} 변형 생성 (지시사항: {bool(variation_prompt)})")

        return await self.generation_service.generate(
            scenario,
            content_type,
            advanced_input=None,
            params=AdvancedGenerationParams(temperature=VARIATION_TEMPERATURE),
        )
