# 리뷰 작성/조회 API
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_login_email, get_pageable
from app.exceptions import ApiException
from app.schemas.common import Pageable, PagedResponse
from app.schemas.review import (
    GatheringReviewsResponse,
    ReviewDetailsResponse,
    ReviewScoreCountResponse,
    ReviewSearchCondition,
    WriteReviewRequest,
)
from app.services import review_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("", status_code=status.HTTP_201_CREATED)
def post_review(
    body: WriteReviewRequest,
    db: Session = Depends(get_db),
    login_email: str = Depends(get_login_email),
):
    """리뷰 작성. 모임 주최자는 403. 검증 실패 시 아무것도 저장하지 않음."""
    try:
        review = review_service.write_review(db, body, login_email)
        db.commit()  # ✅ 트랜잭션 소유권: 라우터
        return {"message": "created", "review_id": review.id}

    except ApiException as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)

    except Exception:
        db.rollback()
        logger.exception("Failed to write review for gathering %s", body.gathering_id)
        raise HTTPException(status_code=500, detail="Failed to write review")


@router.get("/me", response_model=PagedResponse[ReviewDetailsResponse])
def get_my_reviews(
    pageable: Pageable = Depends(get_pageable),
    db: Session = Depends(get_db),
    login_email: str = Depends(get_login_email),
) -> PagedResponse[ReviewDetailsResponse]:
    """로그인 사용자가 작성한 리뷰 (최신순)."""
    try:
        return review_service.get_login_user_reviews(db, login_email, pageable)
    except ApiException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/gatherings/{gathering_id}", response_model=GatheringReviewsResponse)
def get_gathering_reviews(
    gathering_id: int,
    pageable: Pageable = Depends(get_pageable),
    db: Session = Depends(get_db),
) -> GatheringReviewsResponse:
    """모임 리뷰 목록 + 평균 점수/리뷰 수. 없는 모임이면 404."""
    try:
        return review_service.get_reviews_by_gathering_id(db, gathering_id, pageable)
    except ApiException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/scores", response_model=ReviewScoreCountResponse)
def get_review_scores(
    type: Optional[str] = Query(None, description="상위 카테고리 또는 모임 타입"),
    type_detail: Optional[str] = Query(None, description="세부 모임 타입 (type보다 우선)"),
    db: Session = Depends(get_db),
) -> ReviewScoreCountResponse:
    """점수별 리뷰 수."""
    try:
        return review_service.get_review_score_counts(db, type, type_detail)
    except ApiException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=PagedResponse[ReviewDetailsResponse])
def get_reviews(
    gathering_id: Optional[int] = Query(None),
    type: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    date: Optional[datetime] = Query(None),
    pageable: Pageable = Depends(get_pageable),
    db: Session = Depends(get_db),
) -> PagedResponse[ReviewDetailsResponse]:
    """조건별 리뷰 목록. sort=createdDate|score (기본 createdDate,desc)."""
    condition = ReviewSearchCondition(gathering_id=gathering_id, type=type, location=location, date=date)
    try:
        return review_service.get_reviews_by_conditions(db, condition, pageable)
    except ApiException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
