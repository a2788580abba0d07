# 사용자 조회 CRUD

from typing import Optional

from sqlalchemy.orm import Session

from app.exceptions import ApiException, ErrorCode
from app.models.user import User


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user_by_email_or_raise(db: Session, email: str) -> User:
    """로그인 이메일로 사용자 조회. 없으면 USER_NOT_FOUND."""
    user = find_by_email(db, email)
    if user is None:
        raise ApiException(ErrorCode.USER_NOT_FOUND)
    return user
