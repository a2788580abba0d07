# 모임 검색/목록 CRUD (조건 조합 + 정렬 + 참여 인원 집계 + 슬라이스 페이징)

import logging
from datetime import datetime, time, timedelta, timezone
from typing import List, Optional

from sqlalchemy import and_, case, func, true
from sqlalchemy.orm import Query, Session

from app.exceptions import ApiException, ErrorCode
from app.models.gathering import (
    Gathering,
    GatheringLocation,
    GatheringStatus,
    GatheringType,
    ParentCategory,
)
from app.models.user_gathering import UserGathering
from app.schemas.common import Pageable, Slice, SortOrder
from app.schemas.gathering import (
    GatheringSearchCondition,
    HostedGatheringResponse,
    SearchGatheringResponse,
)

logger = logging.getLogger(__name__)

# 클라이언트가 sort 파라미터로 보낼 수 있는 필드명
SORT_REGISTRATION_END = "registrationEnd"
SORT_PARTICIPANT_COUNT = "participantCount"

# 집계 쿼리에서 GROUP BY 대상이 되는 모임 컬럼 (SELECT 목록과 동일)
GATHERING_COLUMNS = (
    Gathering.id,
    Gathering.type,
    Gathering.name,
    Gathering.date_time,
    Gathering.registration_end,
    Gathering.location,
    Gathering.capacity,
    Gathering.image_url,
    Gathering.host_user_id,
)


def participant_count():
    """모임별 참여 인원. LEFT JOIN이므로 참여자가 없으면 0."""
    return func.count(UserGathering.id)


# ---------------------------------------------------------------------------
# 조건(predicate) 빌더: 값이 없으면 None → 조건에서 제외
# ---------------------------------------------------------------------------


def is_ongoing():
    return Gathering.status == GatheringStatus.ONGOING.value


def category_eq(category: Optional[str]):
    """
    상위 카테고리(예: 달램핏)면 하위 타입 전체 IN, 아니면 단일 타입 일치.
    알 수 없는 타입 문자열은 GATHERING_TYPE_NOT_FOUND.
    """
    if not category:
        return None
    try:
        parent = ParentCategory.from_text(category)
        return Gathering.type.in_([t.value for t in parent.children])
    except ValueError:
        pass
    try:
        gathering_type = GatheringType.from_text(category)
    except ValueError:
        raise ApiException(ErrorCode.GATHERING_TYPE_NOT_FOUND)
    return Gathering.type == gathering_type.value


def location_eq(location_text: Optional[str]):
    """장소 문자열 파싱 실패 시 조건 없음(에러 아님)."""
    if not location_text:
        return None
    try:
        location = GatheringLocation.from_text(location_text)
    except ValueError:
        logger.debug("Ignoring unknown location filter: %s", location_text)
        return None
    return Gathering.location == location.value


def date_between(date: Optional[datetime]):
    """
    date의 자체 타임존 기준 그날 0시 ~ (원래 시각 + 1일) 사이에 열리는 모임.
    상한은 0시 + 1일이 아니라 원래 시각 + 1일이다 (양 끝 포함).
    """
    if date is None:
        return None
    start_of_day = datetime.combine(date.date(), time.min, tzinfo=date.tzinfo)
    end_of_day = date + timedelta(days=1)
    return Gathering.date_time.between(start_of_day, end_of_day)


def host_user_eq(host_user_id: Optional[int]):
    return None if host_user_id is None else Gathering.host_user_id == host_user_id


def combine_predicates(*predicates):
    """None을 걸러내고 AND. 전부 None이면 항상 참."""
    return and_(true(), *[p for p in predicates if p is not None])


# ---------------------------------------------------------------------------
# 정렬
# ---------------------------------------------------------------------------


def past_events_last(now: datetime):
    """이미 지난 모임(date_time < now)은 1, 예정 모임은 0 → ASC로 지난 모임을 뒤로."""
    return case((Gathering.date_time < now, 1), else_=0).asc()


def apply_sorting(sort: List[SortOrder]):
    """
    요청 정렬 중 처음으로 인식되는 항목(registrationEnd / participantCount)만 적용.
    없으면 registration_end ASC.
    """
    for order in sort:
        if order.name == SORT_REGISTRATION_END:
            column = Gathering.registration_end
        elif order.name == SORT_PARTICIPANT_COUNT:
            column = participant_count()
        else:
            continue
        return column.asc() if order.is_ascending else column.desc()
    return Gathering.registration_end.asc()


# ---------------------------------------------------------------------------
# 조회
# ---------------------------------------------------------------------------


def _gatherings_with_participant_count(db: Session) -> Query:
    """gatherings LEFT JOIN user_gatherings, 모임 컬럼 전체로 GROUP BY (조인 중복 제거)."""
    return (
        db.query(*GATHERING_COLUMNS, participant_count().label("participant_count"))
        .select_from(Gathering)
        .outerjoin(UserGathering, UserGathering.gathering_id == Gathering.id)
        .group_by(*GATHERING_COLUMNS)
    )


def search_gatherings(
    db: Session,
    condition: GatheringSearchCondition,
    pageable: Pageable,
    now: Optional[datetime] = None,
) -> Slice[SearchGatheringResponse]:
    """
    진행 중(ONGOING) 모임 검색.

    정렬: 지난 모임은 뒤로 → 요청 정렬(또는 모집 종료 ASC) → 모임 일시 ASC.
    has_next: 가져온 행 수 == size (근사값).
    """
    now = now or datetime.now(timezone.utc)
    where = combine_predicates(
        is_ongoing(),
        category_eq(condition.type),
        location_eq(condition.location),
        date_between(condition.date),
        host_user_eq(condition.host_user),
    )
    rows = (
        _gatherings_with_participant_count(db)
        .filter(where)
        .order_by(
            past_events_last(now),
            apply_sorting(pageable.sort),
            Gathering.date_time.asc(),
        )
        .offset(pageable.offset)
        .limit(pageable.size)
        .all()
    )
    return Slice.of([SearchGatheringResponse.model_validate(dict(r._mapping)) for r in rows], pageable)


def find_hosted_gatherings(
    db: Session,
    host_user_id: int,
    pageable: Pageable,
) -> Slice[HostedGatheringResponse]:
    """호스트가 주최한 진행 중 모임. 생성일 내림차순, 같은 생성일이면 id 내림차순."""
    rows = (
        _gatherings_with_participant_count(db)
        .filter(combine_predicates(host_user_eq(host_user_id), is_ongoing()))
        .order_by(Gathering.created_date.desc(), Gathering.id.desc())
        .offset(pageable.offset)
        .limit(pageable.size)
        .all()
    )
    return Slice.of([HostedGatheringResponse.model_validate(dict(r._mapping)) for r in rows], pageable)


def get_gathering(db: Session, gathering_id: int) -> Optional[Gathering]:
    return db.query(Gathering).filter(Gathering.id == gathering_id).first()


def get_gathering_for_update(db: Session, gathering_id: int) -> Optional[Gathering]:
    """FOR UPDATE로 gathering 행 잠금 (동시 참여 시 정원 초과 방지)."""
    return (
        db.query(Gathering)
        .filter(Gathering.id == gathering_id)
        .with_for_update()
        .first()
    )


def count_participants(db: Session, gathering_id: int) -> int:
    return (
        db.query(func.count(UserGathering.id))
        .filter(UserGathering.gathering_id == gathering_id)
        .scalar()
        or 0
    )
