"""
Ledger 저장소

복식부기 분개 저장 및 조회.
분개 헤더와 항목은 하나의 트랜잭션으로 저장되며, 부분 저장은 없다.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from adapters.db.sqlite_adapter import translate_errors
from core.errors import LedgerValidationError, NotFoundError
from core.ledger.entry_builder import JournalEntryDraft, JournalLineDraft, balance_issue
from core.utils.timezone import now_utc, to_db_timestamp

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

ENTRY_COLUMNS = (
    "id, entry_date, description, reference_number, created_by, created_at, updated_at"
)


def _row_to_entry(row: tuple[Any, ...]) -> dict[str, Any]:
    return {
        "id": row[0],
        "entry_date": row[1],
        "description": row[2],
        "reference_number": row[3],
        "created_by": row[4],
        "created_at": row[5],
        "updated_at": row[6],
    }


def _row_to_line(row: tuple[Any, ...]) -> dict[str, Any]:
    return {
        "id": row[0],
        "entry_id": row[1],
        "account_id": row[2],
        "account_code": row[3],
        "account_name": row[4],
        "debit": Decimal(row[5]),
        "credit": Decimal(row[6]),
        "description": row[7],
        "line_order": row[8],
    }


class LedgerStore:
    """Ledger 저장소

    분개(journal_entry + journal_line)를 저장하고 조회하는 클래스.
    잔액은 저장하지 않는다 (BalanceAggregator가 매번 재계산).

    Args:
        db: SQLite 어댑터 (작업 1건 범위)
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def create_entry(self, draft: JournalEntryDraft) -> dict[str, Any]:
        """분개 저장

        BEGIN IMMEDIATE 트랜잭션 내에서 헤더 + 항목 저장.
        계정 참조 실패 시 전체 롤백.

        Args:
            draft: build_entry_draft로 검증된 분개 초안

        Returns:
            저장된 분개 (lines 포함)

        Raises:
            LedgerValidationError: 불균형 분개 또는 비활성 계정
            NotFoundError: 존재하지 않는 계정
        """
        # 초안을 직접 만든 호출자를 위한 재검증
        imbalance = balance_issue(draft.total_debit, draft.total_credit)
        if imbalance or not draft.lines:
            raise LedgerValidationError([imbalance or "lines array is required and must not be empty"])

        now = to_db_timestamp(now_utc())

        with translate_errors("create_entry"):
            async with self.db.transaction(immediate=True):
                cursor = await self.db.execute(
                    """
                    INSERT INTO journal_entry (
                        entry_date, description, reference_number, created_by,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        draft.entry_date.isoformat(),
                        draft.description,
                        draft.reference_number,
                        draft.created_by,
                        now,
                        now,
                    ),
                )
                entry_id = cursor.lastrowid

                for order, line in enumerate(draft.lines):
                    account_id = await self._resolve_account(line)
                    await self.db.execute(
                        """
                        INSERT INTO journal_line (
                            entry_id, account_id, debit, credit, description,
                            line_order, created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            entry_id,
                            account_id,
                            str(line.debit),
                            str(line.credit),
                            line.description,
                            order,
                            now,
                            now,
                        ),
                    )

        logger.info(
            "분개 저장",
            extra={
                "entry_id": entry_id,
                "lines": len(draft.lines),
                "total": str(draft.total_debit),
            },
        )

        entry = await self.get_entry(entry_id)
        assert entry is not None
        return entry

    async def _resolve_account(self, line: JournalLineDraft) -> int:
        """항목의 계정 참조를 내부 ID로 변환 (활성 계정만)"""
        if line.account_id is not None:
            row = await self.db.fetchone(
                "SELECT id, is_active FROM account WHERE id = ?", (line.account_id,)
            )
        else:
            row = await self.db.fetchone(
                "SELECT id, is_active FROM account WHERE code = ?", (line.account_code,)
            )

        if row is None:
            raise NotFoundError(f"Account {line.account_ref} not found")
        if not row[1]:
            raise LedgerValidationError(
                [f"account {line.account_ref} is inactive"],
                message=f"Cannot post to inactive account {line.account_ref}",
            )
        return int(row[0])

    async def get_entry(self, entry_id: int) -> dict[str, Any] | None:
        """분개 단건 조회 (lines 포함)"""
        with translate_errors("get_entry"):
            row = await self.db.fetchone(
                f"SELECT {ENTRY_COLUMNS} FROM journal_entry WHERE id = ?",
                (entry_id,),
            )
        if row is None:
            return None

        entry = _row_to_entry(row)
        entry["lines"] = await self.list_lines(entry_id)
        return entry

    async def list_entries(self, limit: int = 50) -> list[dict[str, Any]]:
        """분개 목록 조회 (헤더만)

        Returns:
            entry_date 내림차순, 같은 날짜는 id 내림차순
        """
        with translate_errors("list_entries"):
            rows = await self.db.fetchall(
                f"""
                SELECT {ENTRY_COLUMNS} FROM journal_entry
                ORDER BY entry_date DESC, id DESC
                LIMIT ?
                """,
                (limit,),
            )
        return [_row_to_entry(row) for row in rows]

    async def list_lines(self, entry_id: int) -> list[dict[str, Any]]:
        """분개 항목 조회 (계정 코드/이름 포함, 입력 순서)"""
        with translate_errors("list_lines"):
            rows = await self.db.fetchall(
                """
                SELECT l.id, l.entry_id, l.account_id, a.code, a.name,
                       l.debit, l.credit, l.description, l.line_order
                FROM journal_line l
                JOIN account a ON a.id = l.account_id
                WHERE l.entry_id = ?
                ORDER BY l.line_order ASC, l.id ASC
                """,
                (entry_id,),
            )
        return [_row_to_line(row) for row in rows]

    async def entry_exists(self, entry_id: int) -> bool:
        with translate_errors("entry_exists"):
            row = await self.db.fetchone(
                "SELECT 1 FROM journal_entry WHERE id = ?", (entry_id,)
            )
        return row is not None

    async def count_entries(self) -> int:
        with translate_errors("count_entries"):
            row = await self.db.fetchone("SELECT COUNT(*) FROM journal_entry")
        return int(row[0]) if row else 0

    async def count_lines(self) -> int:
        with translate_errors("count_lines"):
            row = await self.db.fetchone("SELECT COUNT(*) FROM journal_line")
        return int(row[0]) if row else 0
