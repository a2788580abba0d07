# 모임 생성/검색/참여 API
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.crud.user_gathering_crud import join_gathering, leave_gathering
from app.database import get_db
from app.dependencies import get_login_email, get_pageable
from app.exceptions import ApiException
from app.schemas.common import Pageable, PagedResponse
from app.schemas.gathering import (
    CreateGatheringRequest,
    GatheringDetailResponse,
    GatheringSearchCondition,
    GatheringStatusResponse,
    HostedGatheringResponse,
    JoinLeaveResponse,
    SearchGatheringResponse,
)
from app.services import gathering_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gatherings", tags=["Gatherings"])


def get_search_condition(
    type: Optional[str] = Query(None, description="상위 카테고리(달램핏) 또는 모임 타입"),
    location: Optional[str] = Query(None),
    date: Optional[datetime] = Query(None, description="해당 일자에 열리는 모임 (ISO 8601)"),
    host_user: Optional[int] = Query(None),
) -> GatheringSearchCondition:
    return GatheringSearchCondition(type=type, location=location, date=date, host_user=host_user)


@router.post("", response_model=GatheringDetailResponse, status_code=status.HTTP_201_CREATED)
def create_gathering(
    body: CreateGatheringRequest,
    db: Session = Depends(get_db),
    login_email: str = Depends(get_login_email),
) -> GatheringDetailResponse:
    """모임 생성. 주최자는 첫 참여자로 등록. 예외 시 rollback."""
    try:
        gathering = gathering_service.create_gathering(db, body, login_email)
        db.commit()  # ✅ 트랜잭션 소유권: 라우터
        return gathering_service.get_gathering_detail(db, gathering.id)

    except ApiException as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)

    except Exception:
        db.rollback()
        logger.exception("Failed to create gathering")
        raise HTTPException(status_code=500, detail="Failed to create gathering")


@router.get("", response_model=PagedResponse[SearchGatheringResponse])
def search_gatherings(
    condition: GatheringSearchCondition = Depends(get_search_condition),
    pageable: Pageable = Depends(get_pageable),
    db: Session = Depends(get_db),
) -> PagedResponse[SearchGatheringResponse]:
    """진행 중 모임 검색. 지난 모임은 뒤로, sort=registrationEnd|participantCount."""
    try:
        page = gathering_service.search_gatherings(db, condition, pageable)
    except ApiException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return PagedResponse.from_slice(page)


@router.get("/hosted", response_model=PagedResponse[HostedGatheringResponse])
def get_hosted_gatherings(
    pageable: Pageable = Depends(get_pageable),
    db: Session = Depends(get_db),
    login_email: str = Depends(get_login_email),
) -> PagedResponse[HostedGatheringResponse]:
    """내가 주최한 진행 중 모임. 생성일 내림차순."""
    try:
        return gathering_service.get_hosted_gatherings(db, login_email, pageable)
    except ApiException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{gathering_id}", response_model=GatheringDetailResponse)
def get_gathering(gathering_id: int, db: Session = Depends(get_db)) -> GatheringDetailResponse:
    """id로 모임 조회. 없으면 404."""
    try:
        return gathering_service.get_gathering_detail(db, gathering_id)
    except ApiException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{gathering_id}/join", response_model=JoinLeaveResponse)
def post_join(
    gathering_id: int,
    db: Session = Depends(get_db),
    login_email: str = Depends(get_login_email),
) -> JoinLeaveResponse:
    """모임 참여. 예외 시 rollback."""
    try:
        count = join_gathering(db, gathering_id, login_email)
        db.commit()  # ✅ 트랜잭션 소유권: 라우터
        return JoinLeaveResponse(message="joined", participant_count=count)

    except ApiException as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)

    except Exception:
        db.rollback()
        logger.exception("Failed to join gathering %s", gathering_id)
        raise HTTPException(status_code=500, detail="Failed to join gathering")


@router.delete("/{gathering_id}/leave", response_model=JoinLeaveResponse)
def delete_leave(
    gathering_id: int,
    db: Session = Depends(get_db),
    login_email: str = Depends(get_login_email),
) -> JoinLeaveResponse:
    """모임 참여 취소. 예외 시 rollback."""
    try:
        count = leave_gathering(db, gathering_id, login_email)
        db.commit()
        return JoinLeaveResponse(message="left", participant_count=count)

    except ApiException as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)

    except Exception:
        db.rollback()
        logger.exception("Failed to leave gathering %s", gathering_id)
        raise HTTPException(status_code=500, detail="Failed to leave gathering")


@router.put("/{gathering_id}/cancel", response_model=GatheringStatusResponse)
def put_cancel(
    gathering_id: int,
    db: Session = Depends(get_db),
    login_email: str = Depends(get_login_email),
) -> GatheringStatusResponse:
    """주최자가 모임 취소 (ONGOING → CANCELED). 이미 종료/취소면 409."""
    try:
        gathering = gathering_service.cancel_gathering(db, gathering_id, login_email)
        db.commit()
        return GatheringStatusResponse(id=gathering.id, status=gathering.status)

    except ApiException as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.message)

    except Exception:
        db.rollback()
        logger.exception("Failed to cancel gathering %s", gathering_id)
        raise HTTPException(status_code=500, detail="Failed to cancel gathering")
