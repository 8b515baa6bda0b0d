"""Achievement threshold checks and at-most-once awarding."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .definitions import (
    ACTIVE_COMMENTER,
    ACTIVE_COMMENTER_COMMENTS,
    ANALYSIS_MASTER,
    ANALYSIS_MASTER_COUNT,
    CHALLENGE_MASTER,
    CHALLENGE_MASTER_PARTICIPATIONS,
    CHALLENGER,
    FIRST_ANALYSIS,
    FIRST_POST,
    PERFECT_SCORE,
    PERFECT_SCORE_VALUE,
    POPULAR_POST,
    POPULAR_POST_LIKES,
    TEMPLATE_CREATOR,
    TEMPLATE_MASTER,
    TEMPLATE_MASTER_USES,
    AchievementDefinition,
)
from ...models.achievement import Achievement
from ...models.analysis import Analysis
from ...models.challenge import Challenge, ChallengeSubmission
from ...models.post import Post, PostComment, post_likes
from ...models.template import Template
from ...shared.utils import isoformat_utc

logger = logging.getLogger("prompt_judge.achievements")


def check_analysis_achievements(db: Session, user_id: int) -> List[AchievementDefinition]:
    earned: List[AchievementDefinition] = []
    count = db.query(func.count(Analysis.id)).filter(Analysis.author_id == user_id).scalar() or 0
    if count == 1:
        earned.append(FIRST_ANALYSIS)
    if count == ANALYSIS_MASTER_COUNT:
        earned.append(ANALYSIS_MASTER)

    has_perfect = (
        db.query(Analysis.id)
        .filter(
            Analysis.author_id == user_id,
            or_(
                Analysis.style == PERFECT_SCORE_VALUE,
                Analysis.grammar == PERFECT_SCORE_VALUE,
                Analysis.creativity == PERFECT_SCORE_VALUE,
                Analysis.clarity == PERFECT_SCORE_VALUE,
                Analysis.relevance == PERFECT_SCORE_VALUE,
            ),
        )
        .first()
    )
    if has_perfect:
        earned.append(PERFECT_SCORE)
    return earned


def check_community_achievements(db: Session, user_id: int) -> List[AchievementDefinition]:
    earned: List[AchievementDefinition] = []
    post_count = db.query(func.count(Post.id)).filter(Post.author_id == user_id).scalar() or 0
    if post_count == 1:
        earned.append(FIRST_POST)

    popular = (
        db.query(post_likes.c.post_id)
        .join(Post, Post.id == post_likes.c.post_id)
        .filter(Post.author_id == user_id)
        .group_by(post_likes.c.post_id)
        .having(func.count(post_likes.c.user_id) >= POPULAR_POST_LIKES)
        .first()
    )
    if popular:
        earned.append(POPULAR_POST)

    comment_count = db.query(func.count(PostComment.id)).filter(PostComment.author_id == user_id).scalar() or 0
    if comment_count >= ACTIVE_COMMENTER_COMMENTS:
        earned.append(ACTIVE_COMMENTER)
    return earned


def check_template_achievements(db: Session, user_id: int) -> List[AchievementDefinition]:
    earned: List[AchievementDefinition] = []
    template_count, total_uses = (
        db.query(func.count(Template.id), func.coalesce(func.sum(Template.usage_count), 0))
        .filter(Template.author_id == user_id)
        .one()
    )
    if template_count == 1:
        earned.append(TEMPLATE_CREATOR)
    if (total_uses or 0) >= TEMPLATE_MASTER_USES:
        earned.append(TEMPLATE_MASTER)
    return earned


def check_challenge_achievements(db: Session, user_id: int) -> List[AchievementDefinition]:
    earned: List[AchievementDefinition] = []
    created = db.query(func.count(Challenge.id)).filter(Challenge.author_id == user_id).scalar() or 0
    if created == 1:
        earned.append(CHALLENGER)

    participated = (
        db.query(func.count(func.distinct(ChallengeSubmission.challenge_id)))
        .filter(ChallengeSubmission.author_id == user_id)
        .scalar()
        or 0
    )
    if participated >= CHALLENGE_MASTER_PARTICIPATIONS:
        earned.append(CHALLENGE_MASTER)
    return earned


CATEGORY_CHECKS: Dict[str, Callable[[Session, int], List[AchievementDefinition]]] = {
    "analysis": check_analysis_achievements,
    "community": check_community_achievements,
    "template": check_template_achievements,
    "challenge": check_challenge_achievements,
}


def check_achievements(db: Session, user_id: int, category: Optional[str] = None) -> List[AchievementDefinition]:
    """Definitions whose threshold ``user_id`` currently meets.

    An absent or unknown category checks all four categories.
    """
    key = (category or "").strip().lower()
    if key in CATEGORY_CHECKS:
        return CATEGORY_CHECKS[key](db, user_id)
    earned: List[AchievementDefinition] = []
    for check in CATEGORY_CHECKS.values():
        earned.extend(check(db, user_id))
    return earned


def award_achievement(db: Session, user_id: int, definition: AchievementDefinition) -> bool:
    """Create the achievement unless the user already has it.

    Returns True only when a new row was written. The (user_id, name) unique
    constraint makes a concurrent duplicate insert a no-op.
    """
    existing = (
        db.query(Achievement.id)
        .filter(Achievement.user_id == user_id, Achievement.name == definition.name)
        .first()
    )
    if existing:
        return False

    db.add(
        Achievement(
            user_id=user_id,
            name=definition.name,
            description=definition.description,
            icon=definition.icon,
            category=definition.category,
        )
    )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Achievement %r already awarded to user_id=%s", definition.name, user_id)
        return False
    logger.info("Awarded achievement %r to user_id=%s", definition.name, user_id)
    return True


def evaluate_and_award(db: Session, user_id: int, category: Optional[str] = None) -> List[AchievementDefinition]:
    """Check thresholds and return only the achievements awarded by this call."""
    awarded: List[AchievementDefinition] = []
    for definition in check_achievements(db, user_id, category):
        if award_achievement(db, user_id, definition):
            awarded.append(definition)
    return awarded


def get_user_achievements(db: Session, user_id: int) -> List[Achievement]:
    return (
        db.query(Achievement)
        .filter(Achievement.user_id == user_id)
        .order_by(Achievement.earned_at.desc(), Achievement.id.desc())
        .all()
    )


def serialize_achievement(achievement: Achievement) -> dict:
    return {
        "id": achievement.id,
        "name": achievement.name,
        "description": achievement.description,
        "icon": achievement.icon,
        "category": achievement.category,
        "earnedAt": isoformat_utc(achievement.earned_at),
    }
