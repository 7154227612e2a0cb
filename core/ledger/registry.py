"""
계정과목 레지스트리

계정과목표(chart of accounts) 조회, 시드, 관리.
계정은 물리 삭제하지 않는 것이 원칙 (비활성화 사용).
분개 항목이 참조하는 계정의 삭제는 FK RESTRICT로 거부된다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aiosqlite

from adapters.db.sqlite_adapter import translate_errors
from core.errors import LedgerValidationError, NotFoundError, ReferentialIntegrityError
from core.ledger.types import STANDARD_CHART, AccountCategory
from core.utils.timezone import now_utc, to_db_timestamp

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

ACCOUNT_COLUMNS = (
    "id, code, name, category, subcategory, description, is_active, created_at, updated_at"
)

# 계정 코드 최대 길이 (VARCHAR(10))
ACCOUNT_CODE_MAX_LENGTH = 10


def _row_to_account(row: tuple[Any, ...]) -> dict[str, Any]:
    return {
        "id": row[0],
        "code": row[1],
        "name": row[2],
        "category": row[3],
        "subcategory": row[4],
        "description": row[5],
        "is_active": bool(row[6]),
        "created_at": row[7],
        "updated_at": row[8],
    }


def validate_category(category: str) -> str:
    """계정 분류 검증

    Raises:
        LedgerValidationError: 5대 분류가 아닌 경우
    """
    if category not in AccountCategory.values():
        raise LedgerValidationError(
            [f"category must be one of {AccountCategory.values()}"],
            message=f"Invalid account category: {category!r}",
        )
    return category


class AccountRegistry:
    """계정과목 레지스트리

    Args:
        db: SQLite 어댑터 (작업 1건 범위)
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def count_accounts(self) -> int:
        """계정 수"""
        with translate_errors("count_accounts"):
            row = await self.db.fetchone("SELECT COUNT(*) FROM account")
        return int(row[0]) if row else 0

    async def list_accounts(self, category: str | None = None) -> list[dict[str, Any]]:
        """계정 목록 조회

        Args:
            category: 필터링할 계정 분류 (선택)

        Returns:
            계정 코드 오름차순 목록
        """
        sql = f"SELECT {ACCOUNT_COLUMNS} FROM account"
        params: list[Any] = []

        if category:
            sql += " WHERE category = ?"
            params.append(validate_category(category))

        sql += " ORDER BY code ASC"

        with translate_errors("list_accounts"):
            rows = await self.db.fetchall(sql, tuple(params))

        return [_row_to_account(row) for row in rows]

    async def get_account(self, account_id: int) -> dict[str, Any] | None:
        """계정 단건 조회 (ID)"""
        with translate_errors("get_account"):
            row = await self.db.fetchone(
                f"SELECT {ACCOUNT_COLUMNS} FROM account WHERE id = ?",
                (account_id,),
            )
        return _row_to_account(row) if row else None

    async def get_account_by_code(self, code: str) -> dict[str, Any] | None:
        """계정 단건 조회 (코드)"""
        with translate_errors("get_account_by_code"):
            row = await self.db.fetchone(
                f"SELECT {ACCOUNT_COLUMNS} FROM account WHERE code = ?",
                (code,),
            )
        return _row_to_account(row) if row else None

    async def seed_standard_chart(self) -> int:
        """표준 계정과목표 시드 (멱등)

        계정이 1개라도 있으면 건너뜀.
        BEGIN IMMEDIATE로 동시 시드 시에도 중복 없음.

        Returns:
            추가된 계정 수 (이미 시드된 경우 0)
        """
        with translate_errors("seed_standard_chart"):
            async with self.db.transaction(immediate=True):
                row = await self.db.fetchone("SELECT COUNT(*) FROM account")
                if row and row[0] > 0:
                    logger.info("계정과목표가 이미 시드되어 있어 건너뜀")
                    return 0

                now = to_db_timestamp(now_utc())
                await self.db.executemany(
                    """
                    INSERT INTO account (
                        code, name, category, subcategory, is_active, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, 1, ?, ?)
                    """,
                    [
                        (code, name, category, subcategory, now, now)
                        for code, name, category, subcategory in STANDARD_CHART
                    ],
                )

        logger.info("표준 계정과목표 시드 완료", extra={"accounts_added": len(STANDARD_CHART)})
        return len(STANDARD_CHART)

    async def add_account(
        self,
        code: str,
        name: str,
        category: str,
        subcategory: str | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        """계정 추가 (관리자용)

        Raises:
            LedgerValidationError: 필수값 누락, 잘못된 분류, 중복 코드
        """
        code = (code or "").strip()
        name = (name or "").strip()

        issues: list[str] = []
        if not code:
            issues.append("code is required")
        elif len(code) > ACCOUNT_CODE_MAX_LENGTH:
            issues.append(f"code must be at most {ACCOUNT_CODE_MAX_LENGTH} characters")
        if not name:
            issues.append("name is required")
        if category not in AccountCategory.values():
            issues.append(f"category must be one of {AccountCategory.values()}")
        if issues:
            raise LedgerValidationError(issues, message=f"Invalid account payload: {', '.join(issues)}")

        now = to_db_timestamp(now_utc())
        with translate_errors("add_account"):
            async with self.db.transaction(immediate=True):
                existing = await self.db.fetchone(
                    "SELECT id FROM account WHERE code = ?", (code,)
                )
                if existing:
                    raise LedgerValidationError(
                        [f"account code {code} already exists"],
                        message=f"Duplicate account code: {code}",
                    )

                cursor = await self.db.execute(
                    """
                    INSERT INTO account (
                        code, name, category, subcategory, description,
                        is_active, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, 1, ?, ?)
                    """,
                    (code, name, category, subcategory, description, now, now),
                )
                account_id = cursor.lastrowid

        logger.info("계정 추가", extra={"code": code, "category": category})
        account = await self.get_account(account_id)
        assert account is not None
        return account

    async def deactivate_account(self, account_id: int) -> dict[str, Any]:
        """계정 비활성화

        비활성 계정은 잔액 집계와 신규 분개에서 제외된다.

        Raises:
            NotFoundError: 계정이 없는 경우
        """
        with translate_errors("deactivate_account"):
            async with self.db.transaction():
                cursor = await self.db.execute(
                    "UPDATE account SET is_active = 0, updated_at = ? WHERE id = ?",
                    (to_db_timestamp(now_utc()), account_id),
                )
                if cursor.rowcount == 0:
                    raise NotFoundError(f"Account {account_id} not found")

        logger.info("계정 비활성화", extra={"account_id": account_id})
        account = await self.get_account(account_id)
        assert account is not None
        return account

    async def delete_account(self, account_id: int) -> None:
        """계정 삭제

        분개 항목이 참조 중이면 FK RESTRICT에 의해 거부된다.

        Raises:
            NotFoundError: 계정이 없는 경우
            ReferentialIntegrityError: 참조 중인 분개 항목이 있는 경우
        """
        with translate_errors("delete_account"):
            async with self.db.transaction():
                try:
                    cursor = await self.db.execute(
                        "DELETE FROM account WHERE id = ?", (account_id,)
                    )
                except aiosqlite.IntegrityError as e:
                    raise ReferentialIntegrityError(
                        f"Account {account_id} is referenced by journal lines and cannot be deleted"
                    ) from e
                if cursor.rowcount == 0:
                    raise NotFoundError(f"Account {account_id} not found")

        logger.info("계정 삭제", extra={"account_id": account_id})
