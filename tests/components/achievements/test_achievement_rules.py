from datetime import timedelta

from prompt_judge.components.achievements.definitions import all_definitions
from prompt_judge.components.achievements.service import (
    award_achievement,
    check_achievements,
    check_analysis_achievements,
    check_challenge_achievements,
    check_community_achievements,
    check_template_achievements,
    evaluate_and_award,
    get_user_achievements,
)
from prompt_judge.models.achievement import Achievement
from prompt_judge.models.analysis import Analysis
from prompt_judge.models.challenge import Challenge, ChallengeSubmission
from prompt_judge.models.post import Post, PostComment
from prompt_judge.models.template import Template
from prompt_judge.shared.utils import utcnow
from tests.conftest import create_user


def _add_analysis(db, user, score=50.0, **overrides):
    values = dict(style=score, grammar=score, creativity=score, clarity=score, relevance=score)
    values.update(overrides)
    db.add(Analysis(author_id=user.id, prompt="Explain tides", mode="technical", suggestions=[], **values))
    db.commit()


def _names(definitions):
    return {d.name for d in definitions}


def test_catalog_has_ten_unique_achievements():
    names = [d.name for d in all_definitions()]
    assert len(names) == 10
    assert len(set(names)) == 10


def test_first_analysis_only_on_exactly_one(db):
    user = create_user(db)
    assert check_analysis_achievements(db, user.id) == []
    _add_analysis(db, user)
    assert "First Analysis" in _names(check_analysis_achievements(db, user.id))
    _add_analysis(db, user)
    assert "First Analysis" not in _names(check_analysis_achievements(db, user.id))


def test_analysis_master_at_ten(db):
    user = create_user(db)
    for _ in range(10):
        _add_analysis(db, user)
    assert "Analysis Master" in _names(check_analysis_achievements(db, user.id))


def test_perfect_score_requires_exact_hundred(db):
    user = create_user(db)
    _add_analysis(db, user, clarity=99.5)
    assert "Perfect Score" not in _names(check_analysis_achievements(db, user.id))
    _add_analysis(db, user, grammar=100.0)
    assert "Perfect Score" in _names(check_analysis_achievements(db, user.id))


def test_community_rules(db):
    author = create_user(db)
    fans = [create_user(db) for _ in range(5)]
    post = Post(title="My best prompt", author_id=author.id)
    db.add(post)
    db.commit()
    assert _names(check_community_achievements(db, author.id)) == {"First Post"}

    post.likes.extend(fans[:4])
    db.commit()
    assert "Popular Post" not in _names(check_community_achievements(db, author.id))
    post.likes.append(fans[4])
    db.commit()
    assert "Popular Post" in _names(check_community_achievements(db, author.id))

    for index in range(5):
        db.add(PostComment(post_id=post.id, author_id=fans[0].id, content=f"Nice {index}"))
    db.commit()
    assert "Active Commenter" in _names(check_community_achievements(db, fans[0].id))


def test_template_rules(db):
    user = create_user(db)
    db.add(Template(title="Explainer", content="Explain [x]", category="technical", author_id=user.id, usage_count=4))
    db.commit()
    assert _names(check_template_achievements(db, user.id)) == {"Template Creator"}

    db.add(Template(title="Story", content="Write [x]", category="creative", author_id=user.id, usage_count=6))
    db.commit()
    assert _names(check_template_achievements(db, user.id)) == {"Template Master"}


def test_challenge_rules(db):
    host = create_user(db)
    player = create_user(db)
    deadline = utcnow() + timedelta(days=3)
    challenges = [Challenge(title=f"C{i}", author_id=host.id, deadline=deadline) for i in range(5)]
    db.add_all(challenges)
    db.commit()
    assert check_challenge_achievements(db, host.id) == []

    for challenge in challenges:
        db.add(ChallengeSubmission(challenge_id=challenge.id, author_id=player.id, content="My entry"))
    db.commit()
    assert _names(check_challenge_achievements(db, player.id)) == {"Challenge Master"}


def test_unknown_category_checks_everything(db):
    user = create_user(db)
    _add_analysis(db, user)
    db.add(Post(title="Hello", author_id=user.id))
    db.commit()
    assert _names(check_achievements(db, user.id, "nonsense")) == {"First Analysis", "First Post"}
    assert _names(check_achievements(db, user.id, "community")) == {"First Post"}


def test_award_is_idempotent(db):
    user = create_user(db)
    _add_analysis(db, user)

    first = evaluate_and_award(db, user.id, "analysis")
    second = evaluate_and_award(db, user.id, "analysis")

    assert _names(first) == {"First Analysis"}
    assert second == []
    rows = db.query(Achievement).filter(Achievement.user_id == user.id, Achievement.name == "First Analysis").all()
    assert len(rows) == 1


def test_concurrent_duplicate_insert_is_reported_as_not_awarded(db, monkeypatch):
    user = create_user(db)
    definition = next(d for d in all_definitions() if d.name == "First Post")
    assert award_achievement(db, user.id, definition) is True

    # Simulate a racing request that passed the existence check before our row landed.
    original_query = db.query

    class _NoExisting:
        def filter(self, *args, **kwargs):
            return self

        def first(self):
            return None

    monkeypatch.setattr(db, "query", lambda *entities: _NoExisting())
    assert award_achievement(db, user.id, definition) is False
    monkeypatch.setattr(db, "query", original_query)

    assert db.query(Achievement).filter(Achievement.user_id == user.id).count() == 1


def test_user_achievements_newest_first(db):
    user = create_user(db)
    now = utcnow()
    db.add(Achievement(user_id=user.id, name="First Post", description="d", icon="📝", category="community",
                       earned_at=now - timedelta(days=2)))
    db.add(Achievement(user_id=user.id, name="First Analysis", description="d", icon="🎯", category="analysis",
                       earned_at=now))
    db.commit()
    assert [a.name for a in get_user_achievements(db, user.id)] == ["First Analysis", "First Post"]
