"""Pydantic models describing the analysis payload."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalysisScores(BaseModel):
    style: float = Field(default=0.0, ge=0, le=100)
    grammar: float = Field(default=0.0, ge=0, le=100)
    creativity: float = Field(default=0.0, ge=0, le=100)
    clarity: float = Field(default=0.0, ge=0, le=100)
    relevance: float = Field(default=0.0, ge=0, le=100)


class AnalysisResult(BaseModel):
    """Validated model output. Serializes with the wire (camelCase) keys."""

    model_config = ConfigDict(populate_by_name=True)

    prompt_result: str = Field(alias="promptResult")
    response: str
    scores: AnalysisScores
    suggestions: List[str] = []

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class AnalyzeRequest(BaseModel):
    # Presence and length are checked in the route so failures map to 400.
    prompt: Optional[str] = None
    mode: Optional[str] = None


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt_result: str = Field(alias="promptResult")
    response: str
    scores: AnalysisScores
    suggestions: List[str]
    mode: str
    overall_score: float = Field(alias="overallScore")
    id: Optional[int] = None
    persisted: bool = False
