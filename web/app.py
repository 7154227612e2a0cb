"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.

실행:
    uvicorn web.app:create_app --factory
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config.loader import Settings, get_settings
from core.logging import setup_logging
from web.errors import register_exception_handlers
from web.routes import accounting, health
from web.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리

    시작 시 Ledger 스키마 초기화 + 표준 계정과목표 시드 (재시도 포함).
    실패하면 앱을 시작하지 않는다.
    """
    settings: Settings = app.state.settings

    if settings.accounting_enabled:
        try:
            await app.state.ledger_service.bootstrap()
        except Exception as e:
            logger.error(f"Ledger 부트스트랩 실패: {e}")
            raise
    else:
        logger.info("회계 모듈 비활성화 상태, 부트스트랩 건너뜀")

    yield

    logger.info("Web 종료")


def create_app(
    settings: Settings | None = None,
    configure_logging: bool = True,
    log_dir: Path | None = None,
) -> FastAPI:
    """FastAPI 앱 생성

    Args:
        settings: 애플리케이션 설정 (None이면 settings.yaml 로드)
        configure_logging: 콘솔 + 파일 로깅 설정 여부 (테스트에서는 False)
        log_dir: 로그 디렉토리

    Returns:
        FastAPI 인스턴스
    """
    if configure_logging:
        setup_logging("web", log_dir=log_dir)

    settings = settings or get_settings()

    app = FastAPI(
        title="Ledger API",
        description="복식부기 원장 API",
        version=health.VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.ledger_service = LedgerService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    if settings.accounting_enabled:
        app.include_router(accounting.router)
    else:
        logger.info("회계 모듈 비활성화: /api/accounting 라우터 미등록")

    return app
