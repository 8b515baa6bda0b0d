"""Prompt-writing challenges and their submissions."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from .ownership import ensure_author, get_or_404
from ...deps import get_current_user
from ...models.challenge import Challenge, ChallengeSubmission
from ...models.user import User
from ...platform.database import get_db
from ...schemas.challenge import ChallengeCreate, ChallengeResponse, SubmissionCreate
from ...shared.errors import InvalidInputError
from ...shared.utils import ensure_utc, utcnow

logger = logging.getLogger("prompt_judge.challenges")

router = APIRouter(prefix="/challenges", tags=["Challenges"])


def _challenge_query(db: Session):
    return db.query(Challenge).options(
        selectinload(Challenge.author),
        selectinload(Challenge.submissions).selectinload(ChallengeSubmission.author),
    )


@router.get("", response_model=List[ChallengeResponse])
def list_challenges(db: Session = Depends(get_db)):
    return _challenge_query(db).order_by(Challenge.created_at.desc(), Challenge.id.desc()).all()


@router.post("", response_model=ChallengeResponse, status_code=status.HTTP_201_CREATED)
def create_challenge(
    data: ChallengeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payload = data.model_dump()
    payload["deadline"] = ensure_utc(payload["deadline"])
    challenge = Challenge(author_id=current_user.id, **payload)
    db.add(challenge)
    db.commit()
    db.refresh(challenge)
    logger.info("Challenge created id=%s author_id=%s deadline=%s", challenge.id, current_user.id, challenge.deadline)
    return challenge


@router.delete("/{challenge_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_challenge(
    challenge_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    challenge = get_or_404(db, Challenge, challenge_id, "Challenge")
    ensure_author(challenge.author_id, current_user.id, "Challenge")
    db.delete(challenge)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{challenge_id}/submissions", response_model=ChallengeResponse, status_code=status.HTTP_201_CREATED)
def submit_to_challenge(
    challenge_id: int,
    data: SubmissionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """One submission per user, accepted only before the deadline."""
    challenge = get_or_404(db, Challenge, challenge_id, "Challenge")
    if utcnow() > ensure_utc(challenge.deadline):
        raise InvalidInputError("Challenge deadline has passed")
    already_submitted = (
        db.query(ChallengeSubmission.id)
        .filter(
            ChallengeSubmission.challenge_id == challenge.id,
            ChallengeSubmission.author_id == current_user.id,
        )
        .first()
    )
    if already_submitted:
        raise InvalidInputError("You have already submitted to this challenge")

    db.add(ChallengeSubmission(challenge_id=challenge.id, author_id=current_user.id, content=data.content))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidInputError("You have already submitted to this challenge")

    db.expire(challenge)
    return _challenge_query(db).filter(Challenge.id == challenge_id).first()
