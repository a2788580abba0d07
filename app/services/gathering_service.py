# 모임 서비스: 생성 검증, 상태 변경, 목록 조회 위임

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.crud import gathering_crud
from app.crud.user_crud import get_user_by_email_or_raise
from app.exceptions import ApiException, ErrorCode
from app.models.base import as_utc
from app.models.gathering import Gathering, GatheringLocation, GatheringStatus, GatheringType
from app.models.user_gathering import UserGathering
from app.schemas.common import Pageable, PagedResponse, Slice
from app.schemas.gathering import (
    CreateGatheringRequest,
    GatheringDetailResponse,
    GatheringSearchCondition,
    HostedGatheringResponse,
    SearchGatheringResponse,
)
from app.services.gathering_status import transition_status

logger = logging.getLogger(__name__)


def create_gathering(db: Session, request: CreateGatheringRequest, login_email: str) -> Gathering:
    """
    모임 생성. 주최자는 첫 참여자로 자동 등록된다.

    - 주최자 없음 → USER_NOT_FOUND
    - 모집 종료일 >= 모임 일시 → INVALID_REGISTRATION_END
    - 타입/장소 문자열 해석 실패 → GATHERING_TYPE_NOT_FOUND / GATHERING_LOCATION_NOT_FOUND

    ⚠️ commit/rollback 하지 않음. 호출자(라우터)가 트랜잭션을 제어.
    """
    host = get_user_by_email_or_raise(db, login_email)

    date_time = as_utc(request.date_time)
    registration_end = as_utc(request.registration_end)
    if registration_end >= date_time:
        raise ApiException(ErrorCode.INVALID_REGISTRATION_END)

    try:
        gathering_type = GatheringType.from_text(request.type)
    except ValueError:
        raise ApiException(ErrorCode.GATHERING_TYPE_NOT_FOUND)
    try:
        location = GatheringLocation.from_text(request.location)
    except ValueError:
        raise ApiException(ErrorCode.GATHERING_LOCATION_NOT_FOUND)

    gathering = Gathering(
        type=gathering_type.value,
        name=request.name,
        date_time=date_time,
        registration_end=registration_end,
        location=location.value,
        capacity=request.capacity,
        image_url=request.image_url,
        host_user_id=host.id,
        status=GatheringStatus.ONGOING.value,
    )
    db.add(gathering)
    db.flush()
    db.add(UserGathering(user_id=host.id, gathering_id=gathering.id))
    db.flush()

    logger.info("Gathering %s created by user %s (%s)", gathering.id, host.id, gathering_type.value)
    return gathering


def get_gathering_detail(db: Session, gathering_id: int) -> GatheringDetailResponse:
    gathering = gathering_crud.get_gathering(db, gathering_id)
    if gathering is None:
        raise ApiException(ErrorCode.GATHERING_NOT_FOUND)
    return GatheringDetailResponse(
        id=gathering.id,
        type=gathering.type,
        name=gathering.name,
        date_time=gathering.date_time,
        registration_end=gathering.registration_end,
        location=gathering.location,
        participant_count=gathering_crud.count_participants(db, gathering_id),
        capacity=gathering.capacity,
        image_url=gathering.image_url,
        host_user_id=gathering.host_user_id,
        status=gathering.status,
        created_date=gathering.created_date,
    )


def search_gatherings(
    db: Session,
    condition: GatheringSearchCondition,
    pageable: Pageable,
    now: Optional[datetime] = None,
) -> Slice[SearchGatheringResponse]:
    return gathering_crud.search_gatherings(db, condition, pageable, now=now)


def get_hosted_gatherings(
    db: Session,
    login_email: str,
    pageable: Pageable,
) -> PagedResponse[HostedGatheringResponse]:
    """로그인 사용자가 주최한 진행 중 모임 (생성일 내림차순)."""
    host = get_user_by_email_or_raise(db, login_email)
    return PagedResponse.from_slice(gathering_crud.find_hosted_gatherings(db, host.id, pageable))


def change_gathering_status(
    db: Session,
    gathering_id: int,
    login_email: str,
    target: GatheringStatus,
) -> Gathering:
    """주최자만 상태 변경 가능. 전이 규칙은 gathering_status 참고."""
    user = get_user_by_email_or_raise(db, login_email)
    gathering = gathering_crud.get_gathering_for_update(db, gathering_id)
    if gathering is None:
        raise ApiException(ErrorCode.GATHERING_NOT_FOUND)
    if gathering.host_user_id != user.id:
        raise ApiException(ErrorCode.NOT_GATHERING_HOST)
    return transition_status(gathering, target)


def cancel_gathering(db: Session, gathering_id: int, login_email: str) -> Gathering:
    return change_gathering_status(db, gathering_id, login_email, GatheringStatus.CANCELED)
