from typing import Optional

from .base import CamelModel


class AuthorSummary(CamelModel):
    id: int
    name: Optional[str] = None
    image: Optional[str] = None
