"""
Shared dependencies. Re-exports the FastAPI-Users user dependencies.
"""

from .api.v1.users_fastapi import current_active_user as get_current_user
from .api.v1.users_fastapi import current_optional_user as get_optional_user

__all__ = ["get_current_user", "get_optional_user"]
