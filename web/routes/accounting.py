"""
회계 API 라우트

계정과목표, 분개, 잔액/요약 API.
응답은 {"data": ...} 형식, 에러는 web.errors 핸들러가 처리.
"""

from fastapi import APIRouter, Depends, Path, Query, Response, status

from core.constants import Defaults
from core.ledger.types import ID_MAX
from web.dependencies import get_ledger_service
from web.models.requests import AccountCreateRequest, JournalEntryCreateRequest
from web.models.responses import (
    AccountResponse,
    BalancesResponse,
    DataResponse,
    ErrorResponse,
    JournalEntryDetailResponse,
    JournalEntryResponse,
    JournalLineResponse,
    ModuleStatusResponse,
    OverviewResponse,
)
from web.services.ledger_service import LedgerService

router = APIRouter(
    prefix="/api/accounting",
    tags=["Accounting"],
    responses={
        404: {"model": ErrorResponse, "description": "존재하지 않는 계정/분개"},
        422: {"model": ErrorResponse, "description": "검증 실패 (issues에 위반 조건 전체)"},
        503: {"model": ErrorResponse, "description": "저장소 설정 오류"},
        504: {"model": ErrorResponse, "description": "마감 시간 초과"},
    },
)


@router.get("/status", response_model=ModuleStatusResponse)
async def get_status():
    """회계 모듈 상태"""
    return ModuleStatusResponse(module="accounting", status="ok")


# =========================================================================
# 계정과목표
# =========================================================================


@router.get("/chart-of-accounts", response_model=DataResponse[list[AccountResponse]])
async def list_accounts(
    category: str | None = Query(default=None, description="계정 분류 필터"),
    service: LedgerService = Depends(get_ledger_service),
):
    """계정과목표 조회 (코드 오름차순)"""
    return {"data": await service.list_accounts(category)}


@router.post(
    "/chart-of-accounts",
    response_model=DataResponse[AccountResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_account(
    request: AccountCreateRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """계정 추가"""
    account = await service.add_account(
        code=request.code,
        name=request.name,
        category=request.category,
        subcategory=request.subcategory,
        description=request.description,
    )
    return {"data": account}


@router.post(
    "/chart-of-accounts/{account_id}/deactivate",
    response_model=DataResponse[AccountResponse],
)
async def deactivate_account(
    account_id: int = Path(..., le=ID_MAX, description="계정 ID"),
    service: LedgerService = Depends(get_ledger_service),
):
    """계정 비활성화"""
    return {"data": await service.deactivate_account(account_id)}


@router.delete("/chart-of-accounts/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: int = Path(..., le=ID_MAX, description="계정 ID"),
    service: LedgerService = Depends(get_ledger_service),
):
    """계정 삭제 (분개 항목이 참조 중이면 409)"""
    await service.delete_account(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================================================================
# 잔액 / 요약
# =========================================================================


@router.get("/balances", response_model=DataResponse[BalancesResponse])
async def get_balances(service: LedgerService = Depends(get_ledger_service)):
    """분류별 계정 잔액"""
    return {"data": await service.account_balances()}


@router.get("/overview", response_model=DataResponse[OverviewResponse])
async def get_overview(service: LedgerService = Depends(get_ledger_service)):
    """회계 요약 (총자산, 총부채, 순이익 등)"""
    return {"data": await service.overview()}


# =========================================================================
# 분개
# =========================================================================


@router.get("/journal-entries", response_model=DataResponse[list[JournalEntryResponse]])
async def list_journal_entries(
    limit: int = Query(
        default=Defaults.ENTRY_LIST_LIMIT, ge=1, le=Defaults.ENTRY_LIST_MAX_LIMIT
    ),
    service: LedgerService = Depends(get_ledger_service),
):
    """분개 목록 (최신순, 헤더만)"""
    return {"data": await service.list_entries(limit)}


@router.get(
    "/journal-entries/{entry_id}",
    response_model=DataResponse[JournalEntryDetailResponse],
)
async def get_journal_entry(
    entry_id: int = Path(..., le=ID_MAX, description="분개 ID"),
    service: LedgerService = Depends(get_ledger_service),
):
    """분개 상세 (lines 포함)"""
    return {"data": await service.get_entry(entry_id)}


@router.get(
    "/journal-entries/{entry_id}/lines",
    response_model=DataResponse[list[JournalLineResponse]],
)
async def list_journal_lines(
    entry_id: int = Path(..., le=ID_MAX, description="분개 ID"),
    service: LedgerService = Depends(get_ledger_service),
):
    """분개 항목 목록"""
    return {"data": await service.list_entry_lines(entry_id)}


@router.post(
    "/journal-entries",
    response_model=DataResponse[JournalEntryDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_journal_entry(
    request: JournalEntryCreateRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """분개 생성

    차변 합계 = 대변 합계 (허용 오차 0.01).
    검증 실패 시 위반 조건 전체를 issues로 반환.
    """
    entry = await service.create_entry(request.model_dump())
    return {"data": entry}
