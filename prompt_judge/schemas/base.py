from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

from ..shared.utils import ensure_utc


class CamelModel(BaseModel):
    """Response base: camelCase JSON keys, read straight from ORM rows."""

    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
    }

    @field_validator("created_at", "deadline", "earned_at", mode="after", check_fields=False)
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)
