# User 모델: 로그인 이메일로 식별되는 사용자

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from app.models.base import Base


class User(Base):
    """사용자 테이블. email은 로그인 식별자(unique)."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    company_name = Column(String(100), nullable=True)
    profile_image = Column(String(500), nullable=True)
    created_date = Column(DateTime(timezone=True), server_default=func.now())
