from .user import AuthorSummary
from .post import CommentCreate, CommentResponse, PostCreate, PostResponse
from .template import TemplateCreate, TemplateResponse
from .challenge import ChallengeCreate, ChallengeResponse, SubmissionCreate, SubmissionResponse
from .achievement import (
    AchievementCheckRequest,
    AchievementCheckResponse,
    AchievementDefinitionResponse,
    AchievementResponse,
)

__all__ = [
    "AuthorSummary",
    "PostCreate",
    "PostResponse",
    "CommentCreate",
    "CommentResponse",
    "TemplateCreate",
    "TemplateResponse",
    "ChallengeCreate",
    "ChallengeResponse",
    "SubmissionCreate",
    "SubmissionResponse",
    "AchievementCheckRequest",
    "AchievementCheckResponse",
    "AchievementDefinitionResponse",
    "AchievementResponse",
]
