from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .base import CamelModel
from .user import AuthorSummary


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, max_length=20000)
    prompt: Optional[str] = Field(default=None, max_length=5000)
    category: Optional[str] = Field(default=None, max_length=64)

    model_config = {"str_strip_whitespace": True}


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)

    model_config = {"str_strip_whitespace": True}


class CommentResponse(CamelModel):
    id: int
    content: str
    author: Optional[AuthorSummary] = None
    created_at: datetime


class PostResponse(CamelModel):
    id: int
    title: str
    content: Optional[str] = None
    prompt: Optional[str] = None
    category: Optional[str] = None
    author: Optional[AuthorSummary] = None
    likes: List[int] = []
    comments: List[CommentResponse] = []
    created_at: datetime

    @field_validator("likes", mode="before")
    @classmethod
    def _like_ids(cls, value):
        return [getattr(user, "id", user) for user in value or []]
