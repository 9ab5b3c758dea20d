"""
환경 설정 관리
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_PROVIDERS = ("mock", "openai", "claude")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # AI Provider 설정
    AI_PROVIDER: str = "mock"

    # OpenAI 설정
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_MAX_TOKENS: int = 4000

    # Claude 설정
    CLAUDE_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-3-5-haiku-20241022"
    CLAUDE_MAX_TOKENS: int = 4000

    # 생성 설정
    LLM_TIMEOUT_SECONDS: float = 30.0
    DEFAULT_TEMPERATURE: float = 0.8
    LANGUAGE_CLASSIFIER_ENABLED: bool = True

    # Rate Limiting
    REQUEST_LIMIT_PER_HOUR: int = 100

    # 로깅 설정
    LOG_LEVEL: str = "INFO"

    def get_available_providers(self) -> dict:
        """사용 가능한 Provider 목록"""
        return {
            "openai": bool(self.OPENAI_API_KEY),
            "claude": bool(self.CLAUDE_API_KEY),
            "mock": True
        }

    def get_current_provider_info(self) -> dict:
        """현재 Provider 정보"""
        provider = self.AI_PROVIDER.lower()
        if provider == "openai" and self.OPENAI_API_KEY:
            return {
                "provider": "openai",
                "model": self.OPENAI_MODEL,
                "status": "configured"
            }
        elif provider == "claude" and self.CLAUDE_API_KEY:
            return {
                "provider": "claude",
                "model": self.CLAUDE_MODEL,
                "status": "configured"
            }
        else:
            return {
                "provider": "mock",
                "model": "deterministic_fallback",
                "status": "fallback"
            }

    def validate_settings(self) -> list:
        """설정 검증 및 경고 반환"""
        warnings = []

        if self.AI_PROVIDER.lower() not in SUPPORTED_PROVIDERS:
            warnings.append(f"알 수 없는 AI_PROVIDER: {self.AI_PROVIDER}")

        if self.AI_PROVIDER.lower() == "openai" and not self.OPENAI_API_KEY:
            warnings.append("OpenAI 선택되었으나 API 키가 없습니다. 폴백 생성기를 사용합니다.")
        elif self.OPENAI_API_KEY and not self.OPENAI_API_KEY.startswith("sk-"):
            warnings.append("OpenAI API 키 형식이 올바르지 않습니다. (sk- 로 시작해야 함)")

        if self.AI_PROVIDER.lower() == "claude" and not self.CLAUDE_API_KEY:
            warnings.append("Claude 선택되었으나 API 키가 없습니다. 폴백 생성기를 사용합니다.")
        elif self.CLAUDE_API_KEY and not self.CLAUDE_API_KEY.startswith("sk-ant-"):
            warnings.append("Claude API 키 형식이 올바르지 않습니다. (sk-ant- 로 시작해야 함)")

        if self.REQUEST_LIMIT_PER_HOUR > 1000:
            warnings.append("시간당 요청 제한이 너무 높습니다.")

        if self.LLM_TIMEOUT_SECONDS <= 0:
            warnings.append("LLM_TIMEOUT_SECONDS 는 0보다 커야 합니다.")

        return warnings


@lru_cache()
def get_settings() -> Settings:
    return Settings()
