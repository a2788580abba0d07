# UserGathering 모델: 모임 참여 (행이 존재하면 참여 중)

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.base import Base


class UserGathering(Base):
    """참여 테이블. user-gathering 1:1 참여. 모임별 행 수 = 참여 인원."""

    __tablename__ = "user_gatherings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    gathering_id = Column(Integer, ForeignKey("gatherings.id", ondelete="CASCADE"), nullable=False, index=True)
    created_date = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", foreign_keys=[user_id])
    gathering = relationship("Gathering", foreign_keys=[gathering_id])

    __table_args__ = (UniqueConstraint("user_id", "gathering_id", name="uq_user_gathering_user_gathering"),)
