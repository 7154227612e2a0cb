"""
Ledger 서비스

원장 작업 오케스트레이션.
- 작업마다 짧은 DB 세션을 열고 닫는다 (session_factory)
- 모든 작업은 run_with_policy로 마감 시간/재시도 정책 적용
- 분개 생성은 연결 전에 페이로드를 검증하고, 재시도하지 않는다
"""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, AsyncContextManager, Awaitable, Callable, Mapping, TypeVar

from adapters.db.sqlite_adapter import SQLiteAdapter, open_session
from core.config.loader import Settings
from core.constants import Defaults, Timeouts
from core.errors import LedgerValidationError, NotFoundError
from core.ledger import (
    AccountRegistry,
    BalanceAggregator,
    LedgerStore,
    build_entry_draft,
    init_ledger_schema,
)
from core.utils.resilience import OperationPolicy, run_with_policy

logger = logging.getLogger(__name__)

T = TypeVar("T")

SessionFactory = Callable[..., AsyncContextManager[SQLiteAdapter]]

# 쓰기 마감 시간 중 잠금 대기에 허용하는 비율
LOCK_WAIT_SHARE = 0.5


def _money(value: Decimal) -> str:
    """금액 직렬화 (소수 2자리 문자열)"""
    return f"{value:.2f}"


def _format_line(line: dict[str, Any]) -> dict[str, Any]:
    return {**line, "debit": _money(line["debit"]), "credit": _money(line["credit"])}


def _format_entry(entry: dict[str, Any]) -> dict[str, Any]:
    if "lines" not in entry:
        return entry
    return {**entry, "lines": [_format_line(line) for line in entry["lines"]]}


class LedgerService:
    """원장 서비스

    Args:
        db_path: 원장 DB 경로
        read_policy: 조회 정책
        write_policy: 쓰기 정책 (항상 재시도 없이 실행)
        bootstrap_policy: 스키마 초기화/시드 정책
        busy_timeout_ms: SQLite 잠금 대기 시간 (쓰기 마감 시간의 절반으로 제한)
        session_factory: 작업 1건 범위 세션 제공자 (테스트에서 교체 가능)
    """

    def __init__(
        self,
        db_path: Path | str,
        read_policy: OperationPolicy,
        write_policy: OperationPolicy,
        bootstrap_policy: OperationPolicy,
        busy_timeout_ms: int = Timeouts.BUSY_TIMEOUT_MS,
        session_factory: SessionFactory = open_session,
    ):
        self.db_path = Path(db_path)
        self.read_policy = read_policy
        self.write_policy = write_policy.non_retryable()
        self.bootstrap_policy = bootstrap_policy
        # 잠금 대기 <= 쓰기 마감 시간 * LOCK_WAIT_SHARE
        self.busy_timeout_ms = min(
            busy_timeout_ms, int(self.write_policy.timeout_sec * 1000 * LOCK_WAIT_SHARE)
        )
        self._session_factory = session_factory

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_factory: SessionFactory = open_session,
    ) -> "LedgerService":
        """설정에서 정책을 구성하여 생성"""
        timeouts = settings.timeouts
        retry = settings.retry
        return cls(
            db_path=settings.db_path,
            read_policy=OperationPolicy.read(timeouts.read_sec),
            write_policy=OperationPolicy.write(timeouts.write_sec),
            bootstrap_policy=OperationPolicy.bootstrap(
                timeouts.bootstrap_sec,
                attempts=retry.bootstrap_attempts,
                base_delay_sec=retry.base_delay_sec,
            ),
            busy_timeout_ms=settings.config.database.busy_timeout_ms,
            session_factory=session_factory,
        )

    # -------------------------------------------------------------------------
    # 실행 헬퍼
    # -------------------------------------------------------------------------

    async def _run(
        self,
        label: str,
        work: Callable[[SQLiteAdapter], Awaitable[T]],
        policy: OperationPolicy,
        readonly: bool,
    ) -> T:
        async def operation() -> T:
            async with self._session_factory(
                self.db_path, readonly=readonly, busy_timeout_ms=self.busy_timeout_ms
            ) as db:
                return await work(db)

        return await run_with_policy(operation, policy, label)

    async def _read(self, label: str, work: Callable[[SQLiteAdapter], Awaitable[T]]) -> T:
        return await self._run(label, work, self.read_policy, readonly=True)

    async def _write(self, label: str, work: Callable[[SQLiteAdapter], Awaitable[T]]) -> T:
        return await self._run(label, work, self.write_policy, readonly=False)

    # -------------------------------------------------------------------------
    # 부트스트랩
    # -------------------------------------------------------------------------

    async def bootstrap(self) -> int:
        """스키마 초기화 + 표준 계정과목표 시드

        멱등 작업이므로 bootstrap 정책에 따라 재시도.

        Returns:
            새로 시드된 계정 수
        """
        seeded = await self._run(
            "bootstrap", init_ledger_schema, self.bootstrap_policy, readonly=False
        )
        logger.info("Ledger 부트스트랩 완료", extra={"seeded": seeded})
        return seeded

    # -------------------------------------------------------------------------
    # 계정과목
    # -------------------------------------------------------------------------

    async def list_accounts(self, category: str | None = None) -> list[dict[str, Any]]:
        """계정 목록 (코드 오름차순)"""
        return await self._read(
            "list_accounts", lambda db: AccountRegistry(db).list_accounts(category)
        )

    async def add_account(
        self,
        code: str,
        name: str,
        category: str,
        subcategory: str | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        return await self._write(
            "add_account",
            lambda db: AccountRegistry(db).add_account(
                code, name, category, subcategory, description
            ),
        )

    async def deactivate_account(self, account_id: int) -> dict[str, Any]:
        return await self._write(
            "deactivate_account",
            lambda db: AccountRegistry(db).deactivate_account(account_id),
        )

    async def delete_account(self, account_id: int) -> None:
        await self._write(
            "delete_account",
            lambda db: AccountRegistry(db).delete_account(account_id),
        )

    # -------------------------------------------------------------------------
    # 잔액 / 요약
    # -------------------------------------------------------------------------

    async def account_balances(self) -> dict[str, list[dict[str, Any]]]:
        """분류별 계정 잔액"""
        balances = await self._read(
            "account_balances", lambda db: BalanceAggregator(db).account_balances()
        )
        return {
            category: [
                {
                    **row,
                    "total_debit": _money(row["total_debit"]),
                    "total_credit": _money(row["total_credit"]),
                    "balance": _money(row["balance"]),
                }
                for row in rows
            ]
            for category, rows in balances.items()
        }

    async def overview(self) -> dict[str, str]:
        """회계 요약 KPI"""
        overview = await self._read("overview", lambda db: BalanceAggregator(db).overview())
        return {key: _money(value) for key, value in overview.items()}

    # -------------------------------------------------------------------------
    # 분개
    # -------------------------------------------------------------------------

    async def list_entries(self, limit: int = 50) -> list[dict[str, Any]]:
        """분개 목록 (헤더만, 최신순)

        Raises:
            LedgerValidationError: limit이 1 ~ ENTRY_LIST_MAX_LIMIT 범위 밖
        """
        # SQLite는 음수 LIMIT을 무제한으로 처리
        if isinstance(limit, bool) or not 1 <= limit <= Defaults.ENTRY_LIST_MAX_LIMIT:
            raise LedgerValidationError(
                [f"limit must be between 1 and {Defaults.ENTRY_LIST_MAX_LIMIT}"],
                message=f"Invalid entry list limit: {limit}",
            )
        return await self._read(
            "list_entries", lambda db: LedgerStore(db).list_entries(limit)
        )

    async def get_entry(self, entry_id: int) -> dict[str, Any]:
        """분개 단건 (lines 포함)

        Raises:
            NotFoundError: 분개가 없는 경우
        """
        entry = await self._read("get_entry", lambda db: LedgerStore(db).get_entry(entry_id))
        if entry is None:
            raise NotFoundError(f"Journal entry {entry_id} not found")
        return _format_entry(entry)

    async def list_entry_lines(self, entry_id: int) -> list[dict[str, Any]]:
        """분개 항목 목록

        Raises:
            NotFoundError: 분개가 없는 경우
        """

        async def work(db: SQLiteAdapter) -> list[dict[str, Any]]:
            store = LedgerStore(db)
            if not await store.entry_exists(entry_id):
                raise NotFoundError(f"Journal entry {entry_id} not found")
            return await store.list_lines(entry_id)

        lines = await self._read("list_entry_lines", work)
        return [_format_line(line) for line in lines]

    async def create_entry(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """분개 생성

        검증은 연결 전에 수행 (실패 시 저장소 접근 없음).
        커밋 여부를 알 수 없는 타임아웃 후 재시도하면 중복 분개가 생기므로
        재시도하지 않는다.

        Raises:
            LedgerValidationError: 페이로드 검증 실패
            NotFoundError: 존재하지 않는 계정
            OperationTimeoutError: 마감 시간 초과
        """
        draft = build_entry_draft(payload)
        entry = await self._write(
            "create_entry", lambda db: LedgerStore(db).create_entry(draft)
        )
        return _format_entry(entry)
