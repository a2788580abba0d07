# 리뷰 API 요청/응답 스키마

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.review import MAX_SCORE, MIN_SCORE


class WriteReviewRequest(BaseModel):
    """리뷰 작성 요청."""

    gathering_id: int
    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE, description="Score 1-5")
    comment: Optional[str] = Field(default=None, max_length=1000)


class ReviewSearchCondition(BaseModel):
    """리뷰 목록 조건. 모임 검색과 같은 규칙(없으면 조건 없음, 장소 파싱 실패는 무시)."""

    gathering_id: Optional[int] = None
    type: Optional[str] = None
    location: Optional[str] = None
    date: Optional[datetime] = None


class ReviewDetailsResponse(BaseModel):
    """리뷰 한 건 + 모임/작성자 요약. gathering_type/location은 표시 문자열."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    gathering_id: int
    gathering_name: Optional[str] = None
    gathering_type: str
    gathering_location: str
    gathering_image_url: Optional[str] = None
    user_id: int
    user_name: str
    user_profile_image: Optional[str] = None
    score: int
    comment: Optional[str] = None
    created_date: Optional[datetime] = None


class GatheringReviewsResponse(BaseModel):
    """모임 상세의 리뷰 목록 + 모임 단위 요약(평균 점수, 전체 리뷰 수)."""

    gathering_id: int
    average_score: float
    total_count: int
    data: List[ReviewDetailsResponse]
    has_next: bool
    current_page_size: int


class ReviewScoreCountResponse(BaseModel):
    """점수별 리뷰 수 히스토그램."""

    type: Optional[str] = None
    type_detail: Optional[str] = None
    average_score: float = 0.0
    one_star: int = 0
    two_stars: int = 0
    three_stars: int = 0
    four_stars: int = 0
    five_stars: int = 0
