"""Shared prompt templates."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session, selectinload

from .ownership import ensure_author, get_or_404
from ...deps import get_current_user
from ...models.template import Template
from ...models.user import User
from ...platform.database import get_db
from ...schemas.template import TemplateCreate, TemplateResponse

logger = logging.getLogger("prompt_judge.templates")

router = APIRouter(prefix="/templates", tags=["Templates"])


@router.get("", response_model=List[TemplateResponse])
def list_templates(
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Most used first."""
    query = db.query(Template).options(selectinload(Template.author), selectinload(Template.likes))
    if category:
        query = query.filter(Template.category == category)
    return query.order_by(Template.usage_count.desc(), Template.created_at.desc(), Template.id.desc()).all()


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
def create_template(
    data: TemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = Template(author_id=current_user.id, usage_count=0, **data.model_dump())
    db.add(template)
    db.commit()
    db.refresh(template)
    logger.info("Template created id=%s author_id=%s", template.id, current_user.id)
    return template


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(
    template_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = get_or_404(db, Template, template_id, "Template")
    ensure_author(template.author_id, current_user.id, "Template")
    db.delete(template)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{template_id}/like", response_model=TemplateResponse)
def toggle_template_like(
    template_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = get_or_404(db, Template, template_id, "Template")
    user = db.get(User, current_user.id)
    if user in template.likes:
        template.likes.remove(user)
    else:
        template.likes.append(user)
    db.commit()
    db.refresh(template)
    return template


@router.post("/{template_id}/use", response_model=TemplateResponse)
def record_template_use(
    template_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = get_or_404(db, Template, template_id, "Template")
    # Increment in SQL so concurrent uses are not lost.
    db.query(Template).filter(Template.id == template.id).update(
        {Template.usage_count: Template.usage_count + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(template)
    return template
