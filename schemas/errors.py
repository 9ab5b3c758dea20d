"""
콘텐츠 생성 파이프라인 오류 정의
"""

from typing import Optional


class ContentGenerationError(Exception):
    """생성 파이프라인 오류 기본 클래스"""


class ConfigurationError(ContentGenerationError):
    """자격 증명 형식 오류 / Provider 설정 오류 (네트워크 호출 전에 발생)"""


class GenerationError(ContentGenerationError):
    """모델 호출 실패 (network, timeout, auth, model, schema)"""

    NETWORK = "network"
    TIMEOUT = "timeout"
    AUTH = "auth"
    MODEL = "model"
    SCHEMA = "schema"

    def __init__(self, message: str, kind: str = MODEL, status: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.status = status

    def __repr__(self) -> str:
        return f"GenerationError(kind={self.kind!r}, status={self.status!r}, message={str(self)!r})"


class SchemaRegistryError(ContentGenerationError, LookupError):
    """알 수 없는 섹션 이름 또는 잘못된 섹션 인덱스"""

    def __init__(self, content_type: str, section: str, detail: Optional[str] = None):
        self.content_type = content_type
        self.section = section
        message = detail or f'Invalid section "{section}" for content type "{content_type}"'
        super().__init__(message)
