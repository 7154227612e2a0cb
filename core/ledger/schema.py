"""
복식부기 스키마 초기화

Web 시작 시 자동으로 Ledger 테이블 생성 및 표준 계정과목 시드.
CREATE IF NOT EXISTS 패턴과 시드 멱등성으로 재시도에 안전.
"""

import logging
from typing import TYPE_CHECKING

from adapters.db.sqlite_adapter import translate_errors
from core.ledger.registry import AccountRegistry

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter", seed: bool = True) -> int:
    """Ledger 스키마 초기화 (테이블 + 인덱스 + 시드)

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: SQLiteAdapter 인스턴스
        seed: 표준 계정과목표 시드 여부

    Returns:
        새로 시드된 계정 수 (이미 시드된 경우 0)
    """
    with translate_errors("init_ledger_schema"):
        await _create_ledger_tables(db)

    seeded = 0
    if seed:
        seeded = await AccountRegistry(db).seed_standard_chart()

    logger.info("Ledger 스키마 초기화 완료", extra={"seeded": seeded})
    return seeded


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Ledger 테이블 생성"""

    # account 테이블 (계정과목표)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS account (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            code             TEXT NOT NULL UNIQUE,
            name             TEXT NOT NULL,
            category         TEXT NOT NULL CHECK (
                category IN ('assets', 'liabilities', 'equity', 'revenue', 'expenses')
            ),
            subcategory      TEXT,
            description      TEXT,
            is_active        INTEGER NOT NULL DEFAULT 1,
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL
        )
    """)

    # journal_entry 테이블 (분개 헤더)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS journal_entry (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            entry_date       TEXT NOT NULL,
            description      TEXT NOT NULL,
            reference_number TEXT,
            created_by       TEXT,
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL
        )
    """)

    # journal_line 테이블 (분개 항목)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS journal_line (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            entry_id         INTEGER NOT NULL,
            account_id       INTEGER NOT NULL,
            debit            TEXT NOT NULL DEFAULT '0.00',
            credit           TEXT NOT NULL DEFAULT '0.00',
            description      TEXT,
            line_order       INTEGER NOT NULL DEFAULT 0,
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL,
            FOREIGN KEY (entry_id) REFERENCES journal_entry(id) ON DELETE CASCADE,
            FOREIGN KEY (account_id) REFERENCES account(id) ON DELETE RESTRICT
        )
    """)

    # 인덱스 생성
    await db.execute("CREATE INDEX IF NOT EXISTS idx_account_category ON account(category)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_journal_entry_date ON journal_entry(entry_date)")
    await db.execute(
        "CREATE INDEX IF NOT EXISTS idx_journal_entry_reference ON journal_entry(reference_number)"
    )
    await db.execute("CREATE INDEX IF NOT EXISTS idx_journal_line_entry ON journal_line(entry_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_journal_line_account ON journal_line(account_id)")

    await db.commit()
    logger.debug("Ledger 테이블 생성 완료")
