# 모임 상태 전이 규칙
# ONGOING -> FINISHED, CANCELED
# FINISHED, CANCELED -> (종료 상태, 전이 없음)

import logging

from app.exceptions import ApiException, ErrorCode
from app.models.gathering import Gathering, GatheringStatus

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[GatheringStatus, set[GatheringStatus]] = {
    GatheringStatus.ONGOING: {GatheringStatus.FINISHED, GatheringStatus.CANCELED},
    GatheringStatus.FINISHED: set(),
    GatheringStatus.CANCELED: set(),
}


def can_transition(current: GatheringStatus, target: GatheringStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, set())


def transition_status(gathering: Gathering, target: GatheringStatus) -> Gathering:
    """
    gathering.status를 target으로 변경. 허용되지 않으면 INVALID_STATUS_TRANSITION(409).
    commit은 호출자가 한다.
    """
    current = GatheringStatus(gathering.status)
    if not can_transition(current, target):
        allowed = ", ".join(sorted(s.value for s in ALLOWED_TRANSITIONS.get(current, set()))) or "none"
        raise ApiException(
            ErrorCode.INVALID_STATUS_TRANSITION,
            f"{current.value} → {target.value} 변경 불가 (가능: {allowed})",
        )
    gathering.status = target.value
    logger.info("Gathering %s status %s -> %s", gathering.id, current.value, target.value)
    return gathering
