# 참여/취소 CRUD (비관적 락으로 정원 초과 방지)

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.gathering_crud import count_participants, get_gathering_for_update
from app.crud.user_crud import get_user_by_email_or_raise
from app.exceptions import ApiException, ErrorCode
from app.models.base import as_utc
from app.models.gathering import GatheringStatus
from app.models.user_gathering import UserGathering

logger = logging.getLogger(__name__)


def find_user_gathering(db: Session, gathering_id: int, user_id: int) -> Optional[UserGathering]:
    return (
        db.query(UserGathering)
        .filter(
            UserGathering.gathering_id == gathering_id,
            UserGathering.user_id == user_id,
        )
        .first()
    )


def join_gathering(
    db: Session,
    gathering_id: int,
    login_email: str,
    now: Optional[datetime] = None,
) -> int:
    """
    모임 참여.

    - FOR UPDATE로 gathering 행 잠금 → 동시 join 시에도 정원 초과 방지.
    - 진행 중(ONGOING)이고 모집 종료 전인 모임만 참여 가능.

    반환: 갱신된 참여 인원

    ⚠️ 이 함수는 commit/rollback 하지 않음. 호출자(라우터)가 트랜잭션을 제어.
    """
    user = get_user_by_email_or_raise(db, login_email)

    gathering = get_gathering_for_update(db, gathering_id)
    if gathering is None:
        raise ApiException(ErrorCode.GATHERING_NOT_FOUND)

    if gathering.status != GatheringStatus.ONGOING.value:
        raise ApiException(ErrorCode.GATHERING_NOT_ONGOING)

    now = now or datetime.now(timezone.utc)
    if as_utc(gathering.registration_end) <= now:
        raise ApiException(ErrorCode.REGISTRATION_CLOSED)

    if find_user_gathering(db, gathering_id, user.id) is not None:
        raise ApiException(ErrorCode.ALREADY_JOINED)

    current = count_participants(db, gathering_id)
    if current >= gathering.capacity:
        raise ApiException(ErrorCode.GATHERING_FULL)

    try:
        db.add(UserGathering(gathering_id=gathering_id, user_id=user.id))
        db.flush()
    except IntegrityError:
        # 같은 user가 동시에 join하면 UniqueConstraint 위반 가능 (rollback은 호출자)
        raise ApiException(ErrorCode.ALREADY_JOINED)

    logger.info("User %s joined gathering %s (%s/%s)", user.id, gathering_id, current + 1, gathering.capacity)
    return current + 1


def leave_gathering(db: Session, gathering_id: int, login_email: str) -> int:
    """
    모임 참여 취소. 호스트는 취소 불가.

    반환: 갱신된 참여 인원

    ⚠️ 이 함수는 commit/rollback 하지 않음. 호출자(라우터)가 트랜잭션을 제어.
    """
    user = get_user_by_email_or_raise(db, login_email)

    gathering = get_gathering_for_update(db, gathering_id)
    if gathering is None:
        raise ApiException(ErrorCode.GATHERING_NOT_FOUND)

    if gathering.host_user_id == user.id:
        raise ApiException(ErrorCode.HOST_CANNOT_LEAVE)

    participation = find_user_gathering(db, gathering_id, user.id)
    if participation is None:
        raise ApiException(ErrorCode.NOT_JOINED)

    db.delete(participation)
    db.flush()

    logger.info("User %s left gathering %s", user.id, gathering_id)
    return count_participants(db, gathering_id)
