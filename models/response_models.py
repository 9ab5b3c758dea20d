"""
응답 모델 정의
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Literal, Optional


class SectionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    section: str
    data: Any
    section_index: Optional[int] = Field(None, alias="sectionIndex")
    source: Literal["ai", "fallback"]


class ValidationReport(BaseModel):
    is_valid: bool = Field(..., alias="isValid", description="유효성 여부")
    errors: List[str] = Field(default_factory=list, description="오류 목록")
    warnings: List[str] = Field(default_factory=list, description="경고 목록")

    model_config = ConfigDict(populate_by_name=True)


class SectionListResponse(BaseModel):
    content_type: str = Field(..., alias="contentType")
    sections: List[str]

    model_config = ConfigDict(populate_by_name=True)
