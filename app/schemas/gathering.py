# 모임 API 요청/응답 스키마

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from app.models.gathering import GatheringLocation, GatheringType

GatheringStatusLiteral = Literal["ONGOING", "FINISHED", "CANCELED"]


class CreateGatheringRequest(BaseModel):
    """모임 생성 요청. type/location은 표시 문자열 또는 enum 이름."""

    name: Optional[str] = Field(default=None, max_length=100)
    type: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    date_time: datetime
    registration_end: datetime
    capacity: int = Field(..., ge=2)
    image_url: Optional[str] = Field(default=None, max_length=500)


class GatheringSearchCondition(BaseModel):
    """검색 조건. 모든 필드는 선택이며 None이면 조건 없음."""

    type: Optional[str] = None  # 상위 카테고리(달램핏) 또는 모임 타입
    location: Optional[str] = None  # 파싱 실패 시 조건 무시
    date: Optional[datetime] = None  # 해당 일자(자체 타임존 기준)에 열리는 모임
    host_user: Optional[int] = None


class _GatheringRow(BaseModel):
    """집계 쿼리 한 행 (gathering 컬럼 + participant_count)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: GatheringType
    name: Optional[str] = None
    date_time: datetime
    registration_end: datetime
    location: GatheringLocation
    participant_count: int = 0
    capacity: int
    image_url: Optional[str] = None
    host_user_id: int

    @field_validator("participant_count", mode="before")
    @classmethod
    def _null_count_to_zero(cls, v):
        return v or 0

    @field_serializer("type", "location")
    def _display_text(self, value) -> str:
        # 응답에는 리뷰 응답과 같은 표시 문자열 (예: "달램핏 마인드풀니스", "홍대입구")
        return value.text


class SearchGatheringResponse(_GatheringRow):
    """모임 검색 결과 한 건."""


class HostedGatheringResponse(_GatheringRow):
    """내가 주최한 모임 한 건."""


class GatheringDetailResponse(_GatheringRow):
    """GET /gatherings/{id} 상세 응답."""

    status: GatheringStatusLiteral
    created_date: Optional[datetime] = None


class JoinLeaveResponse(BaseModel):
    """참여/취소 결과."""

    message: str
    participant_count: int


class GatheringStatusResponse(BaseModel):
    """상태 변경 결과."""

    id: int
    status: GatheringStatusLiteral
