"""
복식부기 (Double-Entry Bookkeeping) 원장

계정과목표, 분개 저장, 잔액 집계.

사용 예시:
```python
from core.ledger import BalanceAggregator, LedgerStore, build_entry_draft

draft = build_entry_draft(payload)

async with open_session(db_path) as db:
    entry = await LedgerStore(db).create_entry(draft)
    overview = await BalanceAggregator(db).overview()
```
"""

from core.ledger.aggregator import BalanceAggregator
from core.ledger.entry_builder import JournalEntryDraft, JournalLineDraft, build_entry_draft
from core.ledger.registry import AccountRegistry
from core.ledger.schema import init_ledger_schema
from core.ledger.store import LedgerStore
from core.ledger.types import (
    BALANCE_TOLERANCE,
    CATEGORY_ORDER,
    STANDARD_CHART,
    AccountCategory,
)

__all__ = [
    # 핵심 클래스
    "AccountRegistry",
    "LedgerStore",
    "BalanceAggregator",
    "JournalEntryDraft",
    "JournalLineDraft",
    # 함수
    "build_entry_draft",
    "init_ledger_schema",
    # 타입/상수
    "AccountCategory",
    "CATEGORY_ORDER",
    "BALANCE_TOLERANCE",
    "STANDARD_CHART",
]
