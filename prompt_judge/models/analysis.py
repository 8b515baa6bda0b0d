from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from ..platform.database import Base
from ..shared.utils import utcnow

SCORE_FIELDS = ("style", "grammar", "creativity", "clarity", "relevance")


class Analysis(Base):
    """One persisted prompt analysis. Written once, never updated."""

    __tablename__ = "analyses"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=True)
    prompt = Column(Text, nullable=False)
    mode = Column(String(32), nullable=False, index=True)
    style = Column(Float, nullable=False, default=0.0)
    grammar = Column(Float, nullable=False, default=0.0)
    creativity = Column(Float, nullable=False, default=0.0)
    clarity = Column(Float, nullable=False, default=0.0)
    relevance = Column(Float, nullable=False, default=0.0)
    prompt_result = Column(Text, nullable=True)
    response = Column(Text, nullable=True)
    suggestions = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    author = relationship("User")

    @property
    def scores(self) -> dict:
        return {field: float(getattr(self, field) or 0.0) for field in SCORE_FIELDS}

    @property
    def overall_score(self) -> float:
        """Unweighted mean of the five category scores."""
        values = self.scores.values()
        return sum(values) / len(SCORE_FIELDS)
