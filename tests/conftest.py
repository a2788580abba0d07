import os

# app.database 임포트 전에 테스트용 설정 주입 (PostgreSQL 없이 SQLite 메모리 DB)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.base import Base  # noqa: E402
from app.models.gathering import Gathering, GatheringLocation, GatheringStatus, GatheringType  # noqa: E402
from app.models.review import Review  # noqa: E402
from app.models.user import User  # noqa: E402
from app.models.user_gathering import UserGathering  # noqa: E402


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(email: str, name: str = None, profile_image: str = None) -> User:
        user = User(email=email, name=name or email.split("@")[0], company_name="codeit", profile_image=profile_image)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_gathering(db):
    def _make_gathering(
        host: User,
        type: GatheringType = GatheringType.MINDFULNESS,
        location: GatheringLocation = GatheringLocation.HONGDAE,
        date_time: datetime = None,
        registration_end: datetime = None,
        capacity: int = 10,
        status: GatheringStatus = GatheringStatus.ONGOING,
        name: str = None,
        created_date: datetime = None,
        participants=(),
    ) -> Gathering:
        date_time = date_time or utc_now() + timedelta(days=7)
        gathering = Gathering(
            type=type.value,
            name=name,
            date_time=date_time,
            registration_end=registration_end or date_time - timedelta(days=1),
            location=location.value,
            capacity=capacity,
            image_url="https://example.com/image.png",
            host_user_id=host.id,
            status=status.value,
        )
        if created_date is not None:
            gathering.created_date = created_date
        db.add(gathering)
        db.flush()
        for user in participants:
            db.add(UserGathering(user_id=user.id, gathering_id=gathering.id))
        db.commit()
        db.refresh(gathering)
        return gathering

    return _make_gathering


@pytest.fixture
def make_review(db):
    def _make_review(user: User, gathering: Gathering, score: int, comment: str = None,
                     created_date: datetime = None) -> Review:
        review = Review(user_id=user.id, gathering_id=gathering.id, score=score, comment=comment)
        if created_date is not None:
            review.created_date = created_date
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    return _make_review
