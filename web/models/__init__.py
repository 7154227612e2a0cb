"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    JournalEntryCreateRequest,
    JournalLineRequest,
)
from web.models.responses import (
    AccountBalanceResponse,
    AccountResponse,
    BalancesResponse,
    DataResponse,
    ErrorBody,
    ErrorResponse,
    HealthResponse,
    JournalEntryDetailResponse,
    JournalEntryResponse,
    JournalLineResponse,
    ModuleStatusResponse,
    OverviewResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "JournalEntryCreateRequest",
    "JournalLineRequest",
    # Responses
    "AccountBalanceResponse",
    "AccountResponse",
    "BalancesResponse",
    "DataResponse",
    "ErrorBody",
    "ErrorResponse",
    "HealthResponse",
    "JournalEntryDetailResponse",
    "JournalEntryResponse",
    "JournalLineResponse",
    "ModuleStatusResponse",
    "OverviewResponse",
]
