from typing import Optional
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = Field(min_length=1)
    code: Optional[str] = None
    language: str = "auto"


@dataclass(slots=True)
class SearchResult:
    text: str
    is_error: bool = False


@dataclass(slots=True)
class CodeAnalysis:
    fixed: str
    alternatives: str


@dataclass(slots=True)
class AnalysisSections:
    technical_cause: str
    common_scenarios: str
    technical_background: str
    steps: str
    design_pattern: str
    code_organization: str
    common_pitfalls: str
    error_handling: str
    before_code: str
    after_code: str
    alternative_code: str
