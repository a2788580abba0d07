from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    모든 SQLAlchemy 모델이 상속할 기본 Base 클래스

    모델 모듈은 app.models.base.Base를 상속하고,
    Alembic(env.py)과 테스트는 Base.metadata로 테이블을 인식한다.
    """

    pass


def as_utc(value: datetime) -> datetime:
    """tzinfo 없는 datetime은 UTC로 간주 (SQLite는 DateTime(timezone=True)도 naive로 돌려준다)."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
