from .user import User
from .analysis import Analysis
from .achievement import Achievement
from .post import Post, PostComment, post_likes
from .template import Template, template_likes
from .challenge import Challenge, ChallengeSubmission

__all__ = [
    "User",
    "Analysis",
    "Achievement",
    "Post",
    "PostComment",
    "post_likes",
    "Template",
    "template_likes",
    "Challenge",
    "ChallengeSubmission",
]
