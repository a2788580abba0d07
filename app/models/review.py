# Review 모델: 모임 리뷰 (작성자는 모임 호스트가 아니어야 함)

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.base import Base

MIN_SCORE = 1
MAX_SCORE = 5


class Review(Base):
    """리뷰 테이블. user(작성자)와 gathering(대상)을 id로 참조."""

    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint(f"score BETWEEN {MIN_SCORE} AND {MAX_SCORE}", name="ck_reviews_score_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    gathering_id = Column(Integer, ForeignKey("gatherings.id", ondelete="CASCADE"), nullable=False, index=True)
    score = Column(Integer, nullable=False)  # 1..5
    comment = Column(String(1000), nullable=True)
    created_date = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", foreign_keys=[user_id])
    gathering = relationship("Gathering", foreign_keys=[gathering_id])
