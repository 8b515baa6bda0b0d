"""User dashboard: analysis history, stats and monthly trend."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...components.dashboard.service import build_dashboard
from ...deps import get_current_user
from ...models.user import User
from ...platform.database import get_db

router = APIRouter(prefix="/user", tags=["Dashboard"])


@router.get("/analysis")
def get_user_analysis(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return build_dashboard(db, current_user.id)
