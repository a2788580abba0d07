# 라우터 공통 의존성: 로그인 이메일, 페이지 요청

from typing import List

from fastapi import Header, Query

from app.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Pageable


def get_login_email(x_login_email: str = Header(..., alias="X-Login-Email")) -> str:
    """인증 계층이 확인한 로그인 이메일 (인증 자체는 이 서비스 밖에서 처리)."""
    return x_login_email.strip()


def get_pageable(
    page: int = Query(0, ge=0, description="0부터 시작"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: List[str] = Query(default=[], description="예: sort=participantCount,desc"),
) -> Pageable:
    return Pageable.of(page=page, size=size, sort=sort)
