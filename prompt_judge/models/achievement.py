from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from ..platform.database import Base
from ..shared.utils import utcnow


class Achievement(Base):
    __tablename__ = "achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_achievements_user_id_name"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(String, nullable=False)
    icon = Column(String(16), nullable=False)
    category = Column(String(32), nullable=False)
    earned_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
