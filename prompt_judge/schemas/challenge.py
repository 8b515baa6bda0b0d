from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .base import CamelModel
from .user import AuthorSummary


class ChallengeCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=20000)
    prompt: Optional[str] = Field(default=None, max_length=5000)
    category: Optional[str] = Field(default=None, max_length=64)
    deadline: datetime

    model_config = {"str_strip_whitespace": True}


class SubmissionCreate(BaseModel):
    content: str = Field(min_length=1, max_length=20000)

    model_config = {"str_strip_whitespace": True}


class SubmissionResponse(CamelModel):
    id: int
    content: str
    score: float = 0.0
    feedback: str = ""
    author: Optional[AuthorSummary] = None
    created_at: datetime


class ChallengeResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    prompt: Optional[str] = None
    category: Optional[str] = None
    author: Optional[AuthorSummary] = None
    deadline: datetime
    submissions: List[SubmissionResponse] = []
    created_at: datetime
