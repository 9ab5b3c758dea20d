"""
LLM Provider
스키마 제약 JSON 생성 (OpenAI / Claude) + 미설정 시 Mock Provider
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Type, TypeVar
import asyncio
import json
import logging
import time

import aiohttp
from pydantic import BaseModel, ValidationError

from config.settings import SUPPORTED_PROVIDERS, Settings, get_settings
from schemas.errors import ConfigurationError, GenerationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

MIN_TEMPERATURE = 0.1
MAX_TEMPERATURE = 1.5


@dataclass
class GenerationResult(Generic[T]):
    """생성 결과: data 또는 error 중 하나만 존재"""
    data: Optional[T] = None
    error: Optional[GenerationError] = None

    def __post_init__(self):
        if (self.data is None) == (self.error is None):
            raise ValueError("GenerationResult needs exactly one of data or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "GenerationResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, error: GenerationError) -> "GenerationResult[T]":
        return cls(error=error)


def clamp_temperature(temperature: float, low: float = MIN_TEMPERATURE, high: float = MAX_TEMPERATURE) -> float:
    return max(low, min(high, temperature))


def _validate(schema: Type[T], data: Any) -> GenerationResult[T]:
    try:
        return GenerationResult.success(schema.model_validate(data))
    except ValidationError as e:
        logger.error(f"응답 스키마 검증 실패: {schema.__name__} ({e.error_count()}개 오류)")
        return GenerationResult.failure(GenerationError(f"Response does not match {schema.__name__}: {e}",
                                                        kind=GenerationError.SCHEMA))


class LLMProvider(ABC):
    def __init__(self):
        pass

    @abstractmethod
    async def generate_object(self, system_prompt: str, user_prompt: str,
                              schema: Type[T], temperature: float) -> GenerationResult[T]:
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """프로바이더 사용 가능 여부 (자격 증명 존재)"""
        pass

    def validate_credentials(self) -> None:
        """자격 증명 형식 검증, 잘못된 경우 ConfigurationError"""
        return None


class OpenAIProvider(LLMProvider):
    """OpenAI GPT Provider (json_schema 응답 형식)"""

    KEY_PREFIX = "sk-"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", max_tokens: int = 4000, timeout: float = 30.0):
        super().__init__()
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.base_url = "https://api.openai.com/v1/chat/completions"

    def is_available(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def validate_credentials(self) -> None:
        if self.is_available() and not self.api_key.strip().startswith(self.KEY_PREFIX):
            raise ConfigurationError(
                f"OPENAI_API_KEY is malformed (expected prefix '{self.KEY_PREFIX}', got {len(self.api_key)} chars)"
            )

    async def generate_object(self, system_prompt: str, user_prompt: str,
                              schema: Type[T], temperature: float) -> GenerationResult[T]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            "max_tokens": self.max_tokens,
            "temperature": clamp_temperature(temperature),
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": schema.__name__,
                    "schema": schema.model_json_schema(by_alias=True),
                    "strict": False
                }
            }
        }

        try:
            start_time = time.time()
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.base_url, headers=headers, json=payload) as response:
                    response_time = time.time() - start_time

                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"OpenAI API 오류: 상태코드 {response.status} ({response_time:.2f}초)")
                        logger.error(f"  오류 내용: {error_text[:500]}")
                        kind = GenerationError.AUTH if response.status in (401, 403) else GenerationError.MODEL
                        return GenerationResult.failure(
                            GenerationError(f"OpenAI API error: {response.status}", kind=kind, status=response.status)
                        )

                    result = await response.json()
                    logger.info(f"OpenAI 응답 수신: {schema.__name__} ({response_time:.2f}초)")

        except asyncio.TimeoutError:
            logger.error(f"OpenAI API 타임아웃 ({self.timeout}초 초과)")
            return GenerationResult.failure(GenerationError("OpenAI request timed out", kind=GenerationError.TIMEOUT))
        except aiohttp.ClientError as e:
            logger.error(f"HTTP 클라이언트 오류: {type(e).__name__}: {str(e)}")
            return GenerationResult.failure(GenerationError(f"HTTP client error: {e}", kind=GenerationError.NETWORK))

        return self._parse_response(result, schema)

    def _parse_response(self, result: Dict[str, Any], schema: Type[T]) -> GenerationResult[T]:
        """OpenAI 응답 파싱"""
        choices = result.get("choices") or []
        if not choices:
            logger.error(f"OpenAI 응답에 choices가 없음: {str(result)[:200]}")
            return GenerationResult.failure(GenerationError("OpenAI response has no choices"))

        message = choices[0].get("message") or {}
        if message.get("refusal"):
            return GenerationResult.failure(GenerationError(f"Model refused: {message['refusal']}"))

        content = message.get("content") or ""
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"OpenAI 응답 파싱 실패: {e}")
            logger.error(f"  원본 콘텐츠: {content[:200]}")
            return GenerationResult.failure(GenerationError(f"Invalid JSON from model: {e}", kind=GenerationError.SCHEMA))

        return _validate(schema, data)

    def get_provider_name(self) -> str:
        return f"OpenAI {self.model}"


class ClaudeProvider(LLMProvider):
    """Anthropic Claude Provider (시스템 프롬프트에 스키마 포함)"""

    KEY_PREFIX = "sk-ant-"
    API_VERSION = "2023-06-01"

    def __init__(self, api_key: str, model: str = "claude-3-5-haiku-20241022", max_tokens: int = 4000,
                 timeout: float = 30.0):
        super().__init__()
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.base_url = "https://api.anthropic.com/v1/messages"

    def is_available(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def validate_credentials(self) -> None:
        if self.is_available() and not self.api_key.strip().startswith(self.KEY_PREFIX):
            raise ConfigurationError(
                f"CLAUDE_API_KEY is malformed (expected prefix '{self.KEY_PREFIX}', got {len(self.api_key)} chars)"
            )

    async def generate_object(self, system_prompt: str, user_prompt: str,
                              schema: Type[T], temperature: float) -> GenerationResult[T]:
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.API_VERSION,
            "content-type": "application/json"
        }

        schema_text = json.dumps(schema.model_json_schema(by_alias=True), ensure_ascii=False)
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            # Claude accepts 0.0-1.0
            "temperature": min(clamp_temperature(temperature), 1.0),
            "system": (
                f"{system_prompt}\n\nRespond with a single JSON object only, matching this JSON schema:\n{schema_text}"
            ),
            "messages": [
                {"role": "user", "content": user_prompt}
            ]
        }

        try:
            start_time = time.time()
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.base_url, headers=headers, json=payload) as response:
                    response_time = time.time() - start_time

                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Claude API 오류: 상태코드 {response.status} ({response_time:.2f}초)")
                        logger.error(f"  오류 내용: {error_text[:500]}")
                        kind = GenerationError.AUTH if response.status in (401, 403) else GenerationError.MODEL
                        return GenerationResult.failure(
                            GenerationError(f"Claude API error: {response.status}", kind=kind, status=response.status)
                        )

                    result = await response.json()
                    logger.info(f"Claude 응답 수신: {schema.__name__} ({response_time:.2f}초)")

        except asyncio.TimeoutError:
            logger.error(f"Claude API 타임아웃 ({self.timeout}초 초과)")
            return GenerationResult.failure(GenerationError("Claude request timed out", kind=GenerationError.TIMEOUT))
        except aiohttp.ClientError as e:
            logger.error(f"HTTP 클라이언트 오류: {type(e).__name__}: {str(e)}")
            return GenerationResult.failure(GenerationError(f"HTTP client error: {e}", kind=GenerationError.NETWORK))

        text = "".join(block.get("text", "") for block in result.get("content", []) if block.get("type") == "text")
        return self._parse_response(text, schema)

    def _parse_response(self, content: str, schema: Type[T]) -> GenerationResult[T]:
        """Claude 응답 파싱 (JSON 블록 추출)"""
        start = content.find('{')
        end = content.rfind('}') + 1
        if start == -1 or end == 0:
            logger.error(f"Claude 응답에서 JSON을 찾을 수 없음: {content[:100]}...")
            return GenerationResult.failure(GenerationError("No JSON object in Claude response",
                                                            kind=GenerationError.SCHEMA))
        try:
            data = json.loads(content[start:end])
        except json.JSONDecodeError as e:
            logger.error(f"Claude 응답 파싱 실패: {content[:100]}...")
            return GenerationResult.failure(GenerationError(f"Invalid JSON from model: {e}", kind=GenerationError.SCHEMA))

        return _validate(schema, data)

    def get_provider_name(self) -> str:
        return f"Claude {self.model}"


class MockProvider(LLMProvider):
    """자격 증명 미설정 상태 (항상 폴백 생성기로 위임)"""

    def __init__(self, reason: str = "no credential configured"):
        super().__init__()
        self.reason = reason

    def is_available(self) -> bool:
        return False

    async def generate_object(self, system_prompt: str, user_prompt: str,
                              schema: Type[T], temperature: float) -> GenerationResult[T]:
        return GenerationResult.failure(GenerationError(f"Mock provider cannot generate: {self.reason}",
                                                        kind=GenerationError.AUTH))

    def get_provider_name(self) -> str:
        return "Mock Provider"


class LLMProviderFactory:
    """LLM Provider 팩토리"""

    @staticmethod
    def get_provider(settings: Optional[Settings] = None) -> LLMProvider:
        settings = settings or get_settings()
        provider_name = settings.AI_PROVIDER.strip().lower()

        if provider_name not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(f"Unknown AI_PROVIDER: {settings.AI_PROVIDER!r} (expected one of {SUPPORTED_PROVIDERS})")

        if provider_name == "openai":
            if settings.OPENAI_API_KEY.strip():
                return OpenAIProvider(
                    api_key=settings.OPENAI_API_KEY,
                    model=settings.OPENAI_MODEL,
                    max_tokens=settings.OPENAI_MAX_TOKENS,
                    timeout=settings.LLM_TIMEOUT_SECONDS
                )
            logger.warning("OPENAI_API_KEY 미설정, 폴백 생성기를 사용합니다.")
            return MockProvider("OPENAI_API_KEY is not set")

        if provider_name == "claude":
            if settings.CLAUDE_API_KEY.strip():
                return ClaudeProvider(
                    api_key=settings.CLAUDE_API_KEY,
                    model=settings.CLAUDE_MODEL,
                    max_tokens=settings.CLAUDE_MAX_TOKENS,
                    timeout=settings.LLM_TIMEOUT_SECONDS
                )
            logger.warning("CLAUDE_API_KEY 미설정, 폴백 생성기를 사용합니다.")
            return MockProvider("CLAUDE_API_KEY is not set")

        return MockProvider("AI_PROVIDER is mock")

    @staticmethod
    def get_available_providers(settings: Optional[Settings] = None) -> Dict[str, bool]:
        """사용 가능한 Provider 목록"""
        settings = settings or get_settings()
        return settings.get_available_providers()

    @staticmethod
    def test_provider(provider_name: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
        """특정 Provider 설정 점검 (네트워크 호출 없음)"""
        settings = settings or get_settings()

        if provider_name == "openai":
            provider = OpenAIProvider(settings.OPENAI_API_KEY, settings.OPENAI_MODEL)
        elif provider_name == "claude":
            provider = ClaudeProvider(settings.CLAUDE_API_KEY, settings.CLAUDE_MODEL)
        elif provider_name == "mock":
            provider = MockProvider()
        else:
            return {"status": "error", "message": f"알 수 없는 Provider: {provider_name}"}

        try:
            provider.validate_credentials()
        except ConfigurationError as e:
            return {"status": "error", "provider": provider.get_provider_name(), "message": str(e)}

        return {
            "status": "available" if provider.is_available() else "unavailable",
            "provider": provider.get_provider_name(),
            "message": "사용 가능" if provider.is_available() else "API 키 없음 (폴백 생성기 사용)"
        }
