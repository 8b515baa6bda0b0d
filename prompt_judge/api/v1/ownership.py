"""Lookup helpers shared by the community routers."""

from typing import Type, TypeVar

from sqlalchemy.orm import Session

from ...shared.errors import AuthorizationError, NotFoundError

ModelT = TypeVar("ModelT")


def get_or_404(db: Session, model: Type[ModelT], object_id: int, label: str) -> ModelT:
    instance = db.get(model, object_id)
    if instance is None:
        raise NotFoundError(f"{label} not found")
    return instance


def ensure_author(author_id: int, user_id: int, label: str) -> None:
    if author_id != user_id:
        raise AuthorizationError(f"Not authorized to modify this {label.lower()}")
