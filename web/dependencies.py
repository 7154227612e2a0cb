"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from fastapi import Request

from core.config.loader import Settings
from web.services.ledger_service import LedgerService


def get_app_settings(request: Request) -> Settings:
    """애플리케이션 설정 반환 (create_app에서 app.state에 등록)"""
    return request.app.state.settings


def get_ledger_service(request: Request) -> LedgerService:
    """원장 서비스 반환

    요청마다 새 연결을 여는 것은 서비스 내부 책임.
    """
    return request.app.state.ledger_service
