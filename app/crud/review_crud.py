# 리뷰 조회 CRUD (작성자/모임/조건별 목록 + 점수 히스토그램)

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from app.crud.gathering_crud import category_eq, combine_predicates, date_between, location_eq
from app.exceptions import ApiException, ErrorCode
from app.models.gathering import Gathering, GatheringLocation, GatheringType
from app.models.review import MAX_SCORE, MIN_SCORE, Review
from app.models.user import User
from app.schemas.common import Pageable, Slice, SortOrder
from app.schemas.review import (
    GatheringReviewsResponse,
    ReviewDetailsResponse,
    ReviewScoreCountResponse,
    ReviewSearchCondition,
)

SORT_CREATED_DATE = "createdDate"
SORT_SCORE = "score"

# 점수 → 응답 필드명
SCORE_FIELDS = {
    1: "one_star",
    2: "two_stars",
    3: "three_stars",
    4: "four_stars",
    5: "five_stars",
}


def _review_details_query(db: Session) -> Query:
    """reviews JOIN gatherings JOIN users(작성자)."""
    return (
        db.query(
            Review.id,
            Review.gathering_id,
            Gathering.name.label("gathering_name"),
            Gathering.type.label("gathering_type"),
            Gathering.location.label("gathering_location"),
            Gathering.image_url.label("gathering_image_url"),
            Review.user_id,
            User.name.label("user_name"),
            User.profile_image.label("user_profile_image"),
            Review.score,
            Review.comment,
            Review.created_date,
        )
        .select_from(Review)
        .join(Gathering, Review.gathering_id == Gathering.id)
        .join(User, Review.user_id == User.id)
    )


def _to_details(row) -> ReviewDetailsResponse:
    data = dict(row._mapping)
    data["gathering_type"] = GatheringType(data["gathering_type"]).text
    data["gathering_location"] = GatheringLocation(data["gathering_location"]).text
    return ReviewDetailsResponse.model_validate(data)


def _fetch_slice(query: Query, pageable: Pageable) -> Slice[ReviewDetailsResponse]:
    rows = query.offset(pageable.offset).limit(pageable.size).all()
    return Slice.of([_to_details(r) for r in rows], pageable)


def _latest_first(query: Query) -> Query:
    return query.order_by(Review.created_date.desc(), Review.id.desc())


def apply_review_sorting(sort: List[SortOrder]):
    """createdDate / score 중 처음 인식되는 항목. 없으면 created_date DESC."""
    for order in sort:
        if order.name == SORT_CREATED_DATE:
            column = Review.created_date
        elif order.name == SORT_SCORE:
            column = Review.score
        else:
            continue
        return column.asc() if order.is_ascending else column.desc()
    return Review.created_date.desc()


def find_reviews_by_user_id(db: Session, user_id: int, pageable: Pageable) -> Slice[ReviewDetailsResponse]:
    """작성자가 쓴 리뷰. 최신순."""
    query = _latest_first(_review_details_query(db).filter(Review.user_id == user_id))
    return _fetch_slice(query, pageable)


def find_reviews_by_gathering_id(db: Session, gathering_id: int, pageable: Pageable) -> GatheringReviewsResponse:
    """모임의 리뷰 목록(최신순) + 평균 점수/전체 리뷰 수."""
    average, total = (
        db.query(func.avg(Review.score), func.count(Review.id))
        .filter(Review.gathering_id == gathering_id)
        .one()
    )
    page = _fetch_slice(
        _latest_first(_review_details_query(db).filter(Review.gathering_id == gathering_id)),
        pageable,
    )
    return GatheringReviewsResponse(
        gathering_id=gathering_id,
        average_score=round(float(average or 0), 1),
        total_count=int(total or 0),
        data=page.content,
        has_next=page.has_next,
        current_page_size=page.number_of_elements,
    )


def find_reviews_by_conditions(
    db: Session,
    condition: ReviewSearchCondition,
    pageable: Pageable,
) -> Slice[ReviewDetailsResponse]:
    """조건별 리뷰 목록. 타입/장소/일자 조건은 모임 검색과 동일한 규칙."""
    where = combine_predicates(
        None if condition.gathering_id is None else Review.gathering_id == condition.gathering_id,
        category_eq(condition.type),
        location_eq(condition.location),
        date_between(condition.date),
    )
    query = (
        _review_details_query(db)
        .filter(where)
        .order_by(apply_review_sorting(pageable.sort), Review.id.desc())
    )
    return _fetch_slice(query, pageable)


def _type_detail_eq(type_detail: Optional[str]):
    if not type_detail:
        return None
    try:
        return Gathering.type == GatheringType.from_text(type_detail).value
    except ValueError:
        raise ApiException(ErrorCode.GATHERING_TYPE_NOT_FOUND)


def find_review_score_counts(
    db: Session,
    type: Optional[str] = None,
    type_detail: Optional[str] = None,
) -> ReviewScoreCountResponse:
    """
    점수(1~5)별 리뷰 수와 평균.
    type_detail(세부 타입)이 있으면 우선, 없으면 type(상위 카테고리 또는 타입), 둘 다 없으면 전체.
    """
    predicate = _type_detail_eq(type_detail)
    if predicate is None:
        predicate = category_eq(type)

    rows = (
        db.query(Review.score, func.count(Review.id))
        .join(Gathering, Review.gathering_id == Gathering.id)
        .filter(combine_predicates(predicate))
        .group_by(Review.score)
        .all()
    )

    counts: Dict[str, int] = {}
    total = 0
    weighted = 0
    for score, count in rows:
        if MIN_SCORE <= score <= MAX_SCORE:
            counts[SCORE_FIELDS[score]] = int(count)
            total += count
            weighted += score * count

    return ReviewScoreCountResponse(
        type=type,
        type_detail=type_detail,
        average_score=round(weighted / total, 1) if total else 0.0,
        **counts,
    )
