from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from typing import Any, Dict
import logging
from datetime import datetime

from config.settings import get_settings
from models.content_models import ContentType
from models.request_models import (
    GenerateContentRequest,
    RegenerateSectionRequest,
    ValidateContentRequest,
    VariationRequest,
    parse_advanced_input,
)
from models.response_models import SectionListResponse, SectionResponse, ValidationReport
from providers.llm_provider import LLMProviderFactory
from schemas.errors import ConfigurationError, SchemaRegistryError
from schemas.schema_registry import sections_for
from services.content_validator import validate_content
from services.generation_service import GenerationService
from services.section_service import SectionService
from services.variation_service import VariationService
from utils.language_detector import get_classifier_handle
from utils.rate_limiter import RateLimiter

settings = get_settings()

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

for warning in settings.validate_settings():
    logger.warning(f"설정 경고: {warning}")

app = FastAPI(
    title="RPG Content Generator",
    description="D&D 5e 캐릭터 / 환경 / 미션 생성 서버",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

generation_service = GenerationService(settings=settings)
section_service = SectionService(settings=settings)
variation_service = VariationService(generation_service)
rate_limiter = RateLimiter(limit_per_hour=settings.REQUEST_LIMIT_PER_HOUR)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "default"


def _provider_name() -> str:
    try:
        return LLMProviderFactory.get_provider(settings).get_provider_name()
    except ConfigurationError as e:
        return f"misconfigured ({e})"


@app.get("/")
async def root():
    """서버 기본 정보"""
    return {
        "message": "RPG Content Generator",
        "status": "healthy",
        "provider": _provider_name(),
        "timestamp": datetime.now().isoformat(),
        "version": "1.0.0",
        "endpoints": ["generate", "generate/regenerate", "generate/variation", "validate-content",
                      "sections/{content_type}", "health", "providers", "config"]
    }


@app.get("/health")
async def health_check():
    """헬스 체크"""
    return {
        "status": "healthy",
        "current_provider": _provider_name(),
        "available_providers": LLMProviderFactory.get_available_providers(settings),
        "language_classifier": get_classifier_handle().is_available(),
        "total_requests": rate_limiter.get_total_requests(),
        "timestamp": datetime.now().isoformat()
    }


@app.get("/providers")
async def get_providers_status():
    """Provider 상태 조회"""
    return {
        "current": _provider_name(),
        "available": LLMProviderFactory.get_available_providers(settings),
        "checks": {name: LLMProviderFactory.test_provider(name, settings) for name in ("openai", "claude", "mock")},
        "settings": settings.get_current_provider_info()
    }


@app.get("/config")
async def get_config():
    """현재 설정 조회 (키 값 제외)"""
    return {
        "ai_provider": settings.AI_PROVIDER,
        "openai_configured": bool(settings.OPENAI_API_KEY),
        "claude_configured": bool(settings.CLAUDE_API_KEY),
        "default_temperature": settings.DEFAULT_TEMPERATURE,
        "timeout_seconds": settings.LLM_TIMEOUT_SECONDS,
        "request_limits": {
            "per_hour": settings.REQUEST_LIMIT_PER_HOUR
        },
        "warnings": settings.validate_settings()
    }


@app.get("/sections/{content_type}", response_model=SectionListResponse, response_model_by_alias=True)
async def get_sections(content_type: ContentType):
    """재생성 가능한 섹션 목록"""
    return SectionListResponse(content_type=content_type.value, sections=sections_for(content_type))


@app.post("/generate")
async def generate_content(request: GenerateContentRequest, http_request: Request):
    """콘텐츠 생성"""
    rate_limiter.check_rate_limit(_client_ip(http_request))

    advanced_input = parse_advanced_input(request.content_type, request.advanced_input)
    result = await generation_service.generate(
        request.scenario,
        request.content_type,
        advanced_input,
        request.generation_params
    )
    return result.model_dump(by_alias=True, exclude_none=True, mode="json")


@app.post("/generate/regenerate", response_model=SectionResponse, response_model_by_alias=True)
async def regenerate_section(request: RegenerateSectionRequest, http_request: Request):
    """섹션 재생성"""
    rate_limiter.check_rate_limit(_client_ip(http_request))

    result = await section_service.regenerate_section(
        request.scenario,
        request.content_type,
        request.section,
        request.current_content,
        request.section_index
    )
    return SectionResponse(
        section=result.section,
        data=result.value,
        section_index=result.section_index,
        source=result.source
    )


@app.post("/generate/variation")
async def generate_variation(request: VariationRequest, http_request: Request):
    """변형 생성"""
    rate_limiter.check_rate_limit(_client_ip(http_request))

    result = await variation_service.generate_variation(
        request.original_content,
        request.content_type,
        request.original_scenario,
        request.variation_prompt
    )
    return result.model_dump(by_alias=True, exclude_none=True, mode="json")


@app.post("/validate-content", response_model=ValidationReport, response_model_by_alias=True)
async def validate_content_structure(request: ValidateContentRequest):
    """콘텐츠 구조 검증"""
    return validate_content(request.content_type, request.content)


def _error_body(message: Any, status_code: int) -> Dict[str, Any]:
    return {
        "error": message,
        "status_code": status_code,
        "timestamp": datetime.now().isoformat()
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.detail, exc.status_code))


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"설정 오류: {str(exc)}")
    return JSONResponse(status_code=503, content=_error_body(str(exc), 503))


@app.exception_handler(SchemaRegistryError)
async def schema_registry_error_handler(request: Request, exc: SchemaRegistryError):
    return JSONResponse(status_code=400, content=_error_body(str(exc), 400))


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    errors = [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]
    return JSONResponse(status_code=422, content=_error_body(errors, 422))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]
    return JSONResponse(status_code=422, content=_error_body(errors, 422))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"처리되지 않은 오류: {type(exc).__name__}: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content=_error_body("서버 내부 오류가 발생했습니다.", 500))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
