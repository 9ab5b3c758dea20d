"""
LLM Provider 테스트 (실제 네트워크 호출 없음)
"""
import asyncio
import json
from unittest.mock import patch

import aiohttp
import pytest

from config.settings import Settings
from models.content_models import Skill
from providers.llm_provider import (
    ClaudeProvider,
    GenerationResult,
    LLMProviderFactory,
    MockProvider,
    OpenAIProvider,
    clamp_temperature,
)
from schemas.errors import ConfigurationError, GenerationError

SKILL_JSON = {"name": "Arcana", "proficiency": True, "modifier": 6}


class FakeResponse:
    def __init__(self, status=200, body=None):
        self.status = status
        self.body = body or {}

    async def json(self):
        return self.body

    async def text(self):
        return json.dumps(self.body)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def post(self, url, headers=None, json=None):
        self.requests.append({"url": url, "headers": headers, "json": json})
        return self.response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def _openai_body(content):
    return {"choices": [{"message": {"content": content}}]}


def _claude_body(text):
    return {"content": [{"type": "text", "text": text}]}


@pytest.mark.unit
class TestGenerationResult:
    """생성 결과 타입 테스트"""

    def test_success(self):
        """성공 결과"""
        result = GenerationResult.success(Skill(**SKILL_JSON))
        assert result.ok
        assert result.error is None

    def test_failure(self):
        """실패 결과"""
        result = GenerationResult.failure(GenerationError("boom", kind=GenerationError.TIMEOUT))
        assert not result.ok
        assert result.error.kind == "timeout"

    def test_exactly_one_of_data_or_error(self):
        """data/error 둘 다 있거나 없으면 오류"""
        with pytest.raises(ValueError):
            GenerationResult()
        with pytest.raises(ValueError):
            GenerationResult(data=Skill(**SKILL_JSON), error=GenerationError("boom"))

    @pytest.mark.parametrize("value,expected", [(0.0, 0.1), (0.8, 0.8), (2.0, 1.5)])
    def test_clamp_temperature(self, value, expected):
        """온도 범위 제한"""
        assert clamp_temperature(value) == expected


@pytest.mark.unit
class TestOpenAIProvider:
    """OpenAI Provider 테스트"""

    @pytest.fixture
    def provider(self):
        return OpenAIProvider("sk-test", timeout=5)

    @pytest.mark.asyncio
    async def test_success(self, provider):
        """정상 응답 검증 후 반환"""
        session = FakeSession(FakeResponse(200, _openai_body(json.dumps(SKILL_JSON))))
        with patch("providers.llm_provider.aiohttp.ClientSession", return_value=session):
            result = await provider.generate_object("system", "user", Skill, 2.0)

        assert result.ok
        assert result.data == Skill(**SKILL_JSON)
        payload = session.requests[0]["json"]
        assert payload["temperature"] == 1.5
        assert payload["response_format"]["json_schema"]["name"] == "Skill"
        assert session.requests[0]["headers"]["Authorization"] == "Bearer sk-test"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,kind", [(401, "auth"), (403, "auth"), (429, "model"), (500, "model")])
    async def test_http_errors(self, provider, status, kind):
        """HTTP 오류 분류"""
        session = FakeSession(FakeResponse(status, {"error": "nope"}))
        with patch("providers.llm_provider.aiohttp.ClientSession", return_value=session):
            result = await provider.generate_object("system", "user", Skill, 0.8)

        assert not result.ok
        assert result.error.kind == kind
        assert result.error.status == status

    @pytest.mark.asyncio
    async def test_timeout(self, provider):
        """타임아웃"""
        with patch("providers.llm_provider.aiohttp.ClientSession", side_effect=asyncio.TimeoutError()):
            result = await provider.generate_object("system", "user", Skill, 0.8)
        assert result.error.kind == GenerationError.TIMEOUT

    @pytest.mark.asyncio
    async def test_network_error(self, provider):
        """네트워크 오류"""
        with patch("providers.llm_provider.aiohttp.ClientSession",
                   side_effect=aiohttp.ClientConnectionError("connection refused")):
            result = await provider.generate_object("system", "user", Skill, 0.8)
        assert result.error.kind == GenerationError.NETWORK

    def test_invalid_json(self, provider):
        """JSON 파싱 실패"""
        result = provider._parse_response(_openai_body("not json"), Skill)
        assert result.error.kind == GenerationError.SCHEMA

    def test_schema_mismatch(self, provider):
        """스키마 불일치"""
        result = provider._parse_response(_openai_body('{"name": "Arcana"}'), Skill)
        assert result.error.kind == GenerationError.SCHEMA

    def test_no_choices(self, provider):
        """choices 없음"""
        result = provider._parse_response({"choices": []}, Skill)
        assert not result.ok

    def test_refusal(self, provider):
        """모델 거부"""
        result = provider._parse_response({"choices": [{"message": {"refusal": "I can't"}}]}, Skill)
        assert "I can't" in str(result.error)

    def test_malformed_key(self):
        """키 형식 오류"""
        with pytest.raises(ConfigurationError):
            OpenAIProvider("abc123").validate_credentials()


@pytest.mark.unit
class TestClaudeProvider:
    """Claude Provider 테스트"""

    @pytest.fixture
    def provider(self):
        return ClaudeProvider("sk-ant-test", timeout=5)

    @pytest.mark.asyncio
    async def test_success_with_surrounding_text(self, provider):
        """텍스트 사이 JSON 추출"""
        text = f"Here is the skill:\n{json.dumps(SKILL_JSON)}\nEnjoy!"
        session = FakeSession(FakeResponse(200, _claude_body(text)))
        with patch("providers.llm_provider.aiohttp.ClientSession", return_value=session):
            result = await provider.generate_object("system", "user", Skill, 1.4)

        assert result.ok
        assert result.data.modifier == 6
        request = session.requests[0]
        assert request["headers"]["x-api-key"] == "sk-ant-test"
        assert request["json"]["temperature"] == 1.0
        assert '"modifier"' in request["json"]["system"]

    def test_no_json_in_response(self, provider):
        """JSON 없음"""
        result = provider._parse_response("I cannot help with that.", Skill)
        assert result.error.kind == GenerationError.SCHEMA

    @pytest.mark.asyncio
    async def test_unauthorized(self, provider):
        """인증 실패"""
        session = FakeSession(FakeResponse(401, {"error": "invalid x-api-key"}))
        with patch("providers.llm_provider.aiohttp.ClientSession", return_value=session):
            result = await provider.generate_object("system", "user", Skill, 0.8)
        assert result.error.kind == GenerationError.AUTH

    def test_openai_style_key_rejected(self):
        """sk-ant- 접두사 필요"""
        with pytest.raises(ConfigurationError):
            ClaudeProvider("sk-openai-key").validate_credentials()


@pytest.mark.unit
class TestProviderFactory:
    """Provider 팩토리 테스트"""

    def test_mock_by_default(self, test_settings):
        """mock 설정"""
        provider = LLMProviderFactory.get_provider(test_settings)
        assert isinstance(provider, MockProvider)
        assert not provider.is_available()

    def test_missing_key_gives_unavailable_provider(self):
        """키 없으면 폴백용 Mock Provider"""
        settings = Settings(_env_file=None, AI_PROVIDER="openai", OPENAI_API_KEY="")
        provider = LLMProviderFactory.get_provider(settings)
        assert isinstance(provider, MockProvider)
        assert "OPENAI_API_KEY" in provider.reason

    def test_configured_providers(self):
        """키가 있으면 실제 Provider"""
        openai = Settings(_env_file=None, AI_PROVIDER="OpenAI", OPENAI_API_KEY="sk-test")
        claude = Settings(_env_file=None, AI_PROVIDER="claude", CLAUDE_API_KEY="sk-ant-test")
        assert isinstance(LLMProviderFactory.get_provider(openai), OpenAIProvider)
        assert isinstance(LLMProviderFactory.get_provider(claude), ClaudeProvider)

    def test_unknown_provider(self):
        """알 수 없는 provider 는 설정 오류"""
        settings = Settings(_env_file=None, AI_PROVIDER="gemini")
        with pytest.raises(ConfigurationError):
            LLMProviderFactory.get_provider(settings)

    @pytest.mark.asyncio
    async def test_mock_provider_never_generates(self):
        """Mock Provider 는 항상 실패 결과"""
        result = await MockProvider().generate_object("system", "user", Skill, 0.8)
        assert result.error.kind == GenerationError.AUTH

    def test_test_provider(self):
        """설정 점검 (네트워크 없음)"""
        settings = Settings(_env_file=None, OPENAI_API_KEY="sk-test", CLAUDE_API_KEY="bad-key")
        assert LLMProviderFactory.test_provider("openai", settings)["status"] == "available"
        assert LLMProviderFactory.test_provider("claude", settings)["status"] == "error"
        assert LLMProviderFactory.test_provider("mock", settings)["status"] == "unavailable"
        assert LLMProviderFactory.test_provider("gemini", settings)["status"] == "error"
