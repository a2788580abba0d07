import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.logging_config import configure_logging
from app.routers.gatherings import router as gatherings_router
from app.routers.reviews import router as reviews_router

logger = logging.getLogger(__name__)

RUN_MIGRATIONS_ON_STARTUP = os.getenv("RUN_MIGRATIONS_ON_STARTUP", "true").lower() in ("1", "true", "yes")


def _run_alembic_upgrade() -> None:
    """앱 기동 시 DB 마이그레이션 자동 적용 (users, gatherings, user_gatherings, reviews)."""
    from alembic import command
    from alembic.config import Config

    root = Path(__file__).resolve().parent.parent
    cfg = Config(str(root / "alembic.ini"))
    command.upgrade(cfg, "head")


app = FastAPI(
    title="RelaxTogether API",
    description="직장인 힐링 모임(달램핏/워케이션) 검색·참여·리뷰 백엔드 API",
    version="0.1.0",
)


@app.on_event("startup")
def _startup() -> None:
    """로깅 설정 후 Alembic upgrade head 실행."""
    configure_logging()
    if not RUN_MIGRATIONS_ON_STARTUP:
        return
    try:
        _run_alembic_upgrade()
    except Exception:
        # DB 미기동 등 실패 시에도 앱은 기동 (예: 로컬에서 DB 없이 실행 시)
        logger.warning("Alembic upgrade failed on startup", exc_info=True)


# ✅ 라우터 등록은 app 생성 후에!
app.include_router(gatherings_router)
app.include_router(reviews_router)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    return {"status": "ok"}


@app.get("/", tags=["Root"])
async def root() -> dict:
    return {
        "message": "RelaxTogether API에 오신 것을 환영합니다.",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
