"""
콘텐츠 생성 서비스
언어 감지 -> 프롬프트 -> Provider -> 보정, 실패 시 결정적 폴백
"""

from typing import Any, Dict, Optional, Union
import logging
import time

from config.settings import Settings, get_settings
from models.content_models import ContentType, GeneratedContent
from models.request_models import (
    AdvancedCharacterInput,
    AdvancedGenerationParams,
    AdvancedInput,
    parse_advanced_input,
)
from prompt.prompt_manager import PromptManager, get_prompt_manager
from providers.llm_provider import (
    GenerationResult,
    LLMProvider,
    LLMProviderFactory,
    MAX_TEMPERATURE,
    MIN_TEMPERATURE,
    clamp_temperature,
)
from schemas.errors import GenerationError
from schemas.schema_registry import schema_for
from services.content_validator import correct_content
from templates.mock_templates import MockContentGenerator
from utils.language_detector import Language, LanguageDetector

logger = logging.getLogger(__name__)


class BaseGenerationService:
    """Provider 선택 / 자격 증명 정책 공통 처리"""

    def __init__(self, provider: Optional[LLMProvider] = None,
                 prompt_manager: Optional[PromptManager] = None,
                 detector: Optional[LanguageDetector] = None,
                 fallback: Optional[MockContentGenerator] = None,
                 settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._provider = provider
        self.prompt_manager = prompt_manager or get_prompt_manager()
        self._detector = detector
        self.fallback = fallback or MockContentGenerator()

    @property
    def detector(self) -> LanguageDetector:
        if self._detector is None:
            self._detector = LanguageDetector()
        return self._detector

    def resolve_provider(self) -> LLMProvider:
        """Provider 반환. 알 수 없는 provider / 잘못된 키 형식은 ConfigurationError"""
        provider = self._provider or LLMProviderFactory.get_provider(self.settings)
        provider.validate_credentials()
        return provider

    async def call_provider(self, provider: LLMProvider, system_prompt: str, user_prompt: str,
                            schema, temperature: float) -> GenerationResult:
        try:
            return await provider.generate_object(system_prompt, user_prompt, schema, temperature)
        except Exception as e:
            logger.error(f"{provider.get_provider_name()} 호출 중 예외 발생: {type(e).__name__}: {str(e)}",
                         exc_info=True)
            return GenerationResult.failure(GenerationError(str(e)))


class GenerationService(BaseGenerationService):
    """전체 콘텐츠 생성"""

    @staticmethod
    def detection_text(scenario: str, content_type: ContentType, advanced_input: Optional[AdvancedInput]) -> str:
        text = scenario
        if content_type == ContentType.CHARACTER and isinstance(advanced_input, AdvancedCharacterInput):
            for extra in (advanced_input.class_name, advanced_input.race, advanced_input.background):
                if extra:
                    text += " " + extra
        return text

    async def generate(self, scenario: str, content_type,
                       advanced_input: Union[AdvancedInput, Dict[str, Any], None] = None,
                       params: Optional[AdvancedGenerationParams] = None) -> GeneratedContent:
        content_type = ContentType(content_type)
        if isinstance(advanced_input, dict):
            advanced_input = parse_advanced_input(content_type, advanced_input)

        provider = self.resolve_provider()

        language = self.detector.detect(self.detection_text(scenario, content_type, advanced_input))
        logger.info(f"[Generation] {content_type.value} 생성 시작 (언어: {language.value}, "
                    f"provider: {provider.get_provider_name()})")

        if not provider.is_available():
            logger.warning(f"[Generation] 자격 증명 없음, 폴백 생성기 사용: {content_type.value}")
            return self._fallback_content(scenario, content_type, advanced_input, language)

        prompts = self.prompt_manager.build(scenario, content_type, language.value, advanced_input, params)
        requested = params.temperature if params and params.temperature is not None else self.settings.DEFAULT_TEMPERATURE
        temperature = clamp_temperature(requested, MIN_TEMPERATURE, MAX_TEMPERATURE)

        start_time = time.time()
        result = await self.call_provider(provider, prompts.system_prompt, prompts.user_prompt,
                                          schema_for(content_type), temperature)

        if not result.ok:
            logger.error(f"[Generation] 생성 실패 ({result.error.kind}), 폴백 사용: {str(result.error)}")
            return self._fallback_content(scenario, content_type, advanced_input, language)

        content = correct_content(content_type, result.data, advanced_input)
        logger.info(f"[Generation] {content_type.value} 생성 완료 ({time.time() - start_time:.2f}초)")

        return GeneratedContent(
            type=content_type,
            content=content,
            scenario=scenario,
            language=language.value,
            source="ai",
        )

    def _fallback_content(self, scenario: str, content_type: ContentType,
                          advanced_input: Optional[AdvancedInput], language: Language) -> GeneratedContent:
        return GeneratedContent(
            type=content_type,
            content=self.fallback.generate(scenario, content_type, advanced_input),
            scenario=scenario,
            language=language.value,
            source="fallback",
        )
