from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Table, Text
from sqlalchemy.orm import relationship

from ..platform.database import Base
from ..shared.utils import utcnow

TEMPLATE_CATEGORIES = ("technical", "creative", "academic", "business", "casual")
TEMPLATE_DIFFICULTIES = ("beginner", "intermediate", "advanced")

template_likes = Table(
    "template_likes",
    Base.metadata,
    Column("template_id", Integer, ForeignKey("templates.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Template(Base):
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(32), nullable=False, index=True)
    difficulty = Column(String(32), nullable=False, default="intermediate")
    tags = Column(JSON, nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    usage_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    author = relationship("User")
    likes = relationship("User", secondary=template_likes)
