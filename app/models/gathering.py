# Gathering 모델: 모임 엔티티 + 카테고리/장소/상태 enum

from enum import Enum as PyEnum
from typing import List

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.base import Base


def _match_member(enum_cls, texts: dict, text: str):
    """표시 문자열 또는 멤버 이름(대소문자 무시)으로 enum 멤버 조회. 없으면 ValueError."""
    if text is None:
        raise ValueError(f"{enum_cls.__name__}: 값이 없습니다.")
    needle = text.strip()
    for member, label in texts.items():
        if label == needle or member.name.lower() == needle.lower():
            return member
    raise ValueError(f"{enum_cls.__name__}: 알 수 없는 값입니다. ({text})")


class ParentCategory(str, PyEnum):
    """상위 카테고리. 검색 시 하위 타입 전체로 확장된다."""

    DALLAEMFIT = "DALLAEMFIT"
    WORKATION = "WORKATION"

    @property
    def text(self) -> str:
        return _PARENT_TEXTS[self]

    @property
    def children(self) -> List["GatheringType"]:
        return [t for t, parent in _TYPE_PARENTS.items() if parent is self]

    @classmethod
    def from_text(cls, text: str) -> "ParentCategory":
        return _match_member(cls, _PARENT_TEXTS, text)


class GatheringType(str, PyEnum):
    """모임 타입. 상위 카테고리는 _TYPE_PARENTS 테이블로 매핑."""

    OFFICE_STRETCHING = "OFFICE_STRETCHING"
    MINDFULNESS = "MINDFULNESS"
    WORKATION = "WORKATION"

    @property
    def text(self) -> str:
        return _TYPE_TEXTS[self]

    @property
    def parent_category(self) -> ParentCategory:
        return _TYPE_PARENTS[self]

    @classmethod
    def from_text(cls, text: str) -> "GatheringType":
        return _match_member(cls, _TYPE_TEXTS, text)


class GatheringLocation(str, PyEnum):
    """모임 장소."""

    KONDAE = "KONDAE"
    EULJIRO = "EULJIRO"
    SINRIM = "SINRIM"
    HONGDAE = "HONGDAE"

    @property
    def text(self) -> str:
        return _LOCATION_TEXTS[self]

    @classmethod
    def from_text(cls, text: str) -> "GatheringLocation":
        return _match_member(cls, _LOCATION_TEXTS, text)


class GatheringStatus(str, PyEnum):
    """모임 상태. ONGOING만 검색/목록에 노출된다."""

    ONGOING = "ONGOING"
    FINISHED = "FINISHED"
    CANCELED = "CANCELED"


_PARENT_TEXTS = {
    ParentCategory.DALLAEMFIT: "달램핏",
    ParentCategory.WORKATION: "워케이션",
}

_TYPE_TEXTS = {
    GatheringType.OFFICE_STRETCHING: "달램핏 오피스 스트레칭",
    GatheringType.MINDFULNESS: "달램핏 마인드풀니스",
    GatheringType.WORKATION: "워케이션",
}

_TYPE_PARENTS = {
    GatheringType.OFFICE_STRETCHING: ParentCategory.DALLAEMFIT,
    GatheringType.MINDFULNESS: ParentCategory.DALLAEMFIT,
    GatheringType.WORKATION: ParentCategory.WORKATION,
}

_LOCATION_TEXTS = {
    GatheringLocation.KONDAE: "건대입구",
    GatheringLocation.EULJIRO: "을지로3가",
    GatheringLocation.SINRIM: "신림",
    GatheringLocation.HONGDAE: "홍대입구",
}

# DB에는 String으로 저장 (마이그레이션 단순화). 앱에서는 enum으로 비교.
STATUS_DEFAULT = GatheringStatus.ONGOING.value


class Gathering(Base):
    """모임 테이블. 모집 종료일(registration_end)은 모임 일시(date_time)보다 앞서야 한다."""

    __tablename__ = "gatherings"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(30), nullable=False)  # GatheringType.name
    name = Column(String(100), nullable=True)
    date_time = Column(DateTime(timezone=True), nullable=False)  # 모임 일시
    registration_end = Column(DateTime(timezone=True), nullable=False)  # 모집 종료 일시
    location = Column(String(30), nullable=False)  # GatheringLocation.name
    capacity = Column(Integer, nullable=False)
    image_url = Column(String(500), nullable=True)
    host_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=STATUS_DEFAULT, server_default=STATUS_DEFAULT)
    created_date = Column(DateTime(timezone=True), server_default=func.now())

    host_user = relationship("User", foreign_keys=[host_user_id])
