"""Per-user dashboard: recent analyses, averages, mode stats and monthly trend."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..achievements.service import get_user_achievements, serialize_achievement
from ...models.analysis import SCORE_FIELDS, Analysis
from ...shared.utils import ensure_utc, isoformat_utc, round2, shift_month, utcnow

RECENT_ANALYSES_LIMIT = 5
TREND_MONTHS = 6


def _author_summary(analysis: Analysis) -> Optional[dict]:
    author = analysis.author
    if author is None:
        return None
    return {"id": author.id, "name": author.name, "email": author.email, "image": author.image}


def serialize_analysis(analysis: Analysis) -> dict:
    return {
        "id": analysis.id,
        "prompt": analysis.prompt,
        "mode": analysis.mode,
        "scores": analysis.scores,
        "promptResult": analysis.prompt_result,
        "response": analysis.response,
        "suggestions": list(analysis.suggestions or []),
        "createdAt": isoformat_utc(analysis.created_at),
        "author": _author_summary(analysis),
    }


def _average_scores(analyses: List[Analysis]) -> Dict[str, float]:
    if not analyses:
        return {field: 0.0 for field in SCORE_FIELDS}
    totals = {field: 0.0 for field in SCORE_FIELDS}
    for analysis in analyses:
        for field, value in analysis.scores.items():
            totals[field] += value
    return {field: round2(total / len(analyses)) for field, total in totals.items()}


def _mode_stats(analyses: List[Analysis]) -> Dict[str, dict]:
    grouped: Dict[str, List[float]] = defaultdict(list)
    for analysis in analyses:
        grouped[analysis.mode].append(analysis.overall_score)
    return {
        mode: {"count": len(values), "avgScore": round2(sum(values) / len(values))}
        for mode, values in grouped.items()
    }


def _monthly_trend(analyses: List[Analysis], now: datetime) -> List[dict]:
    """Exactly ``TREND_MONTHS`` entries ending with the month of ``now``."""
    buckets: Dict[Tuple[int, int], List[float]] = defaultdict(list)
    for analysis in analyses:
        created = ensure_utc(analysis.created_at)
        if created is None:
            continue
        buckets[(created.year, created.month)].append(analysis.overall_score)

    trend = []
    for offset in range(TREND_MONTHS - 1, -1, -1):
        year, month = shift_month(now.year, now.month, -offset)
        values = buckets.get((year, month), [])
        trend.append(
            {
                "date": f"{year:04d}-{month:02d}",
                "avgScore": round2(sum(values) / len(values)) if values else 0.0,
                "count": len(values),
            }
        )
    return trend


def build_dashboard(db: Session, user_id: int, now: Optional[datetime] = None) -> dict:
    """Aggregate a user's analysis history. A user with no analyses gets zeros."""
    now = ensure_utc(now) if now is not None else utcnow()
    analyses = (
        db.query(Analysis)
        .filter(Analysis.author_id == user_id)
        .order_by(Analysis.created_at.desc(), Analysis.id.desc())
        .all()
    )
    achievements = get_user_achievements(db, user_id)

    return {
        "analyses": [serialize_analysis(a) for a in analyses[:RECENT_ANALYSES_LIMIT]],
        "achievements": [serialize_achievement(a) for a in achievements],
        "stats": {
            "averageScores": _average_scores(analyses),
            "totalAnalyses": len(analyses),
            "modeStats": _mode_stats(analyses),
        },
        "trend": _monthly_trend(analyses, now),
    }
