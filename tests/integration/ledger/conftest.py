"""
Ledger 통합 테스트 fixture

임시 SQLite 파일에 스키마 + 표준 계정과목표를 시드한 상태로 제공.
"""

from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, open_session
from core.ledger import init_ledger_schema
from core.utils.resilience import OperationPolicy
from web.services.ledger_service import LedgerService


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "ledger.db"


@pytest_asyncio.fixture
async def db(db_path: Path) -> SQLiteAdapter:
    """시드된 임시 DB 세션"""
    async with open_session(db_path) as adapter:
        await init_ledger_schema(adapter)
        yield adapter


@pytest_asyncio.fixture
async def service(db_path: Path) -> LedgerService:
    """부트스트랩된 LedgerService"""
    service = LedgerService(
        db_path,
        read_policy=OperationPolicy.read(5.0),
        write_policy=OperationPolicy.write(5.0),
        bootstrap_policy=OperationPolicy.bootstrap(10.0, attempts=2, base_delay_sec=0.01),
        busy_timeout_ms=5000,
    )
    await service.bootstrap()
    return service


def _rent_payload(amount: Any = 1500, **overrides: Any) -> dict[str, Any]:
    """임대료 지급 분개 (현금 1010 대변 / 임대료 6100 차변)"""
    payload = {
        "entry_date": "2024-01-01",
        "description": "Rent",
        "lines": [
            {"account_code": "1010", "debit": 0, "credit": amount},
            {"account_code": "6100", "debit": amount, "credit": 0},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def rent_payload():
    """분개 페이로드 생성 함수"""
    return _rent_payload
