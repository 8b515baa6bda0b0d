"""Achievement catalog. Names are the per-user uniqueness key."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class AchievementDefinition:
    name: str
    description: str
    icon: str
    category: str


FIRST_ANALYSIS = AchievementDefinition("First Analysis", "Complete your first prompt analysis", "🎯", "analysis")
PERFECT_SCORE = AchievementDefinition("Perfect Score", "Get a perfect score in any category", "⭐", "analysis")
ANALYSIS_MASTER = AchievementDefinition("Analysis Master", "Complete 10 analyses", "🎓", "analysis")

FIRST_POST = AchievementDefinition("First Post", "Create your first community post", "📝", "community")
POPULAR_POST = AchievementDefinition("Popular Post", "Get 5 likes on a post", "🔥", "community")
ACTIVE_COMMENTER = AchievementDefinition("Active Commenter", "Make 5 comments on community posts", "💬", "community")

TEMPLATE_CREATOR = AchievementDefinition("Template Creator", "Create your first template", "📋", "template")
TEMPLATE_MASTER = AchievementDefinition("Template Master", "Have your templates used 10 times", "🏆", "template")

CHALLENGER = AchievementDefinition("Challenger", "Create your first challenge", "🎮", "challenge")
CHALLENGE_MASTER = AchievementDefinition("Challenge Master", "Complete 5 challenges", "🌟", "challenge")

ACHIEVEMENTS_BY_CATEGORY: Dict[str, tuple] = {
    "analysis": (FIRST_ANALYSIS, PERFECT_SCORE, ANALYSIS_MASTER),
    "community": (FIRST_POST, POPULAR_POST, ACTIVE_COMMENTER),
    "template": (TEMPLATE_CREATOR, TEMPLATE_MASTER),
    "challenge": (CHALLENGER, CHALLENGE_MASTER),
}

# Thresholds
ANALYSIS_MASTER_COUNT = 10
PERFECT_SCORE_VALUE = 100.0
POPULAR_POST_LIKES = 5
ACTIVE_COMMENTER_COMMENTS = 5
TEMPLATE_MASTER_USES = 10
CHALLENGE_MASTER_PARTICIPATIONS = 5


def all_definitions() -> List[AchievementDefinition]:
    return [definition for group in ACHIEVEMENTS_BY_CATEGORY.values() for definition in group]
