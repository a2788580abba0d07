# 도메인 예외: 에러 코드(HTTP 상태 + 메시지)와 이를 담는 ApiException

from enum import Enum


class ErrorCode(Enum):
    """(status_code, message). 라우터에서 HTTPException으로 변환."""

    USER_NOT_FOUND = (404, "유저정보를 찾을 수 없습니다.")
    GATHERING_NOT_FOUND = (404, "모임을 찾을 수 없습니다.")
    GATHERING_TYPE_NOT_FOUND = (404, "존재하지 않는 모임 타입입니다.")
    GATHERING_LOCATION_NOT_FOUND = (404, "존재하지 않는 모임 장소입니다.")
    INVALID_REGISTRATION_END = (400, "모집 종료일은 모임 시작일 이전이어야 합니다.")
    CANNOT_WRITE_REVIEW_AS_ORGANIZER = (403, "모임 주최자는 리뷰를 작성할 수 없습니다.")
    NOT_GATHERING_HOST = (403, "모임 주최자만 요청할 수 있습니다.")
    GATHERING_NOT_ONGOING = (400, "진행 중인 모임이 아닙니다.")
    REGISTRATION_CLOSED = (400, "모집이 마감된 모임입니다.")
    GATHERING_FULL = (400, "모임 정원이 가득 찼습니다.")
    ALREADY_JOINED = (400, "이미 참여한 모임입니다.")
    NOT_JOINED = (400, "참여하지 않은 모임입니다.")
    HOST_CANNOT_LEAVE = (400, "모임 주최자는 참여를 취소할 수 없습니다.")
    INVALID_STATUS_TRANSITION = (409, "변경할 수 없는 모임 상태입니다.")

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


class ApiException(Exception):
    """비즈니스 규칙 위반/조회 실패. message, status_code를 그대로 응답에 사용."""

    def __init__(self, error_code: ErrorCode, message: str | None = None):
        self.error_code = error_code
        self.message = message or error_code.message
        self.status_code = error_code.status_code
        super().__init__(self.message)
