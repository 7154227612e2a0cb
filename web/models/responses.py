"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 정밀도 유지를 위해 문자열 ("1500.00").
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """성공 응답 래퍼"""

    data: T


class ErrorBody(BaseModel):
    """에러 상세"""

    kind: str = Field(..., description="에러 종류 (VALIDATION_ERROR 등)")
    message: str = Field(..., description="사람이 읽을 수 있는 메시지")
    issues: list[str] = Field(default_factory=list, description="위반 조건 목록")


class ErrorResponse(BaseModel):
    """에러 응답"""

    error: ErrorBody


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="버전")
    accounting: bool = Field(..., description="회계 모듈 활성화 여부")


class ModuleStatusResponse(BaseModel):
    """모듈 상태 응답"""

    module: str
    status: str


class AccountResponse(BaseModel):
    """계정 응답"""

    id: int
    code: str
    name: str
    category: str
    subcategory: str | None = None
    description: str | None = None
    is_active: bool
    created_at: str
    updated_at: str


class JournalLineResponse(BaseModel):
    """분개 항목 응답"""

    id: int
    entry_id: int
    account_id: int
    account_code: str
    account_name: str
    debit: str
    credit: str
    description: str | None = None
    line_order: int


class JournalEntryResponse(BaseModel):
    """분개 헤더 응답"""

    id: int
    entry_date: str
    description: str
    reference_number: str | None = None
    created_by: str | None = None
    created_at: str
    updated_at: str


class JournalEntryDetailResponse(JournalEntryResponse):
    """분개 상세 응답 (lines 포함)"""

    lines: list[JournalLineResponse]


class AccountBalanceResponse(BaseModel):
    """계정 잔액 응답"""

    id: int
    code: str
    name: str
    subcategory: str | None = None
    total_debit: str
    total_credit: str
    balance: str


class BalancesResponse(BaseModel):
    """분류별 잔액 응답"""

    assets: list[AccountBalanceResponse]
    liabilities: list[AccountBalanceResponse]
    equity: list[AccountBalanceResponse]
    revenue: list[AccountBalanceResponse]
    expenses: list[AccountBalanceResponse]


class OverviewResponse(BaseModel):
    """회계 요약 응답"""

    total_assets: str
    total_liabilities: str
    total_equity: str
    total_revenue: str
    total_expenses: str
    net_income: str
