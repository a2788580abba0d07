import logging
import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """
    앱 기동 시 한 번 호출. 루트 로거 레벨/포맷을 설정하고
    uvicorn 핸들러가 이미 있으면 app 로거가 그 핸들러를 함께 쓰도록 연결한다.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)

    app_logger = logging.getLogger("app")
    app_logger.setLevel(level)
    if not app_logger.handlers:
        uvicorn_logger = logging.getLogger("uvicorn")
        if uvicorn_logger.handlers:
            app_logger.addHandler(uvicorn_logger.handlers[0])
            app_logger.propagate = False
