from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...components.achievements.service import evaluate_and_award, get_user_achievements
from ...deps import get_current_user
from ...models.user import User
from ...platform.database import get_db
from ...schemas.achievement import (
    AchievementCheckRequest,
    AchievementCheckResponse,
    AchievementDefinitionResponse,
    AchievementResponse,
)

router = APIRouter(prefix="/achievements", tags=["Achievements"])


@router.post("/check", response_model=AchievementCheckResponse)
def check_achievements(
    data: Optional[AchievementCheckRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Award every achievement the user now qualifies for; return only new ones."""
    category = data.category if data else None
    awarded = evaluate_and_award(db, current_user.id, category)
    return {"awarded": [AchievementDefinitionResponse.model_validate(a) for a in awarded]}


@router.get("", response_model=List[AchievementResponse])
def list_achievements(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_user_achievements(db, current_user.id)
