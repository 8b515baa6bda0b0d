from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .base import CamelModel


class AchievementCheckRequest(BaseModel):
    category: Optional[str] = Field(default=None, max_length=32)


class AchievementDefinitionResponse(CamelModel):
    name: str
    description: str
    icon: str
    category: str


class AchievementResponse(CamelModel):
    id: int
    name: str
    description: str
    icon: str
    category: str
    earned_at: datetime


class AchievementCheckResponse(BaseModel):
    awarded: List[AchievementDefinitionResponse] = []
