from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .base import CamelModel
from ..models.template import TEMPLATE_CATEGORIES, TEMPLATE_DIFFICULTIES
from .user import AuthorSummary

TemplateCategory = Literal[TEMPLATE_CATEGORIES]
TemplateDifficulty = Literal[TEMPLATE_DIFFICULTIES]


class TemplateCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=20000)
    category: TemplateCategory
    difficulty: TemplateDifficulty = "intermediate"
    tags: List[str] = Field(default_factory=list, max_length=20)

    model_config = {"str_strip_whitespace": True}


class TemplateResponse(CamelModel):
    id: int
    title: str
    content: str
    category: str
    difficulty: str
    tags: List[str] = []
    author: Optional[AuthorSummary] = None
    likes: List[int] = []
    usage_count: int = 0
    created_at: datetime

    @field_validator("likes", mode="before")
    @classmethod
    def _like_ids(cls, value):
        return [getattr(user, "id", user) for user in value or []]

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value):
        return list(value or [])
