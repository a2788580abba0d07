# 리뷰 서비스: 작성 검증(주최자 작성 불가) + 조회 위임

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.crud import review_crud
from app.crud.gathering_crud import get_gathering
from app.crud.user_crud import get_user_by_email_or_raise
from app.exceptions import ApiException, ErrorCode
from app.models.review import Review
from app.schemas.common import Pageable, PagedResponse
from app.schemas.review import (
    GatheringReviewsResponse,
    ReviewDetailsResponse,
    ReviewScoreCountResponse,
    ReviewSearchCondition,
    WriteReviewRequest,
)

logger = logging.getLogger(__name__)


def write_review(db: Session, request: WriteReviewRequest, login_email: str) -> Review:
    """
    리뷰 작성.

    - 작성자(login_email) 없음 → USER_NOT_FOUND
    - 모임 없음 → GATHERING_NOT_FOUND
    - 모임 주최자 본인 → CANNOT_WRITE_REVIEW_AS_ORGANIZER
    검증을 모두 통과한 경우에만 Review 1건을 세션에 추가한다.

    ⚠️ commit/rollback 하지 않음. 호출자(라우터)가 트랜잭션을 제어.
    """
    user = get_user_by_email_or_raise(db, login_email)

    gathering = get_gathering(db, request.gathering_id)
    if gathering is None:
        raise ApiException(ErrorCode.GATHERING_NOT_FOUND)

    if gathering.host_user.email == login_email:
        logger.warning("Host %s tried to review own gathering %s", user.id, gathering.id)
        raise ApiException(ErrorCode.CANNOT_WRITE_REVIEW_AS_ORGANIZER)

    review = Review(
        user_id=user.id,
        gathering_id=gathering.id,
        score=request.score,
        comment=request.comment,
    )
    db.add(review)
    db.flush()
    logger.info("Review %s written by user %s for gathering %s", review.id, user.id, gathering.id)
    return review


def get_login_user_reviews(
    db: Session,
    login_email: str,
    pageable: Pageable,
) -> PagedResponse[ReviewDetailsResponse]:
    """로그인 사용자가 작성한 리뷰 (최신순)."""
    user = get_user_by_email_or_raise(db, login_email)
    return PagedResponse.from_slice(review_crud.find_reviews_by_user_id(db, user.id, pageable))


def get_reviews_by_gathering_id(db: Session, gathering_id: int, pageable: Pageable) -> GatheringReviewsResponse:
    """모임 리뷰 목록 + 요약. 없는 모임이면 GATHERING_NOT_FOUND."""
    if get_gathering(db, gathering_id) is None:
        raise ApiException(ErrorCode.GATHERING_NOT_FOUND)
    return review_crud.find_reviews_by_gathering_id(db, gathering_id, pageable)


def get_reviews_by_conditions(
    db: Session,
    condition: ReviewSearchCondition,
    pageable: Pageable,
) -> PagedResponse[ReviewDetailsResponse]:
    return PagedResponse.from_slice(review_crud.find_reviews_by_conditions(db, condition, pageable))


def get_review_score_counts(
    db: Session,
    type: Optional[str] = None,
    type_detail: Optional[str] = None,
) -> ReviewScoreCountResponse:
    return review_crud.find_review_score_counts(db, type, type_detail)
