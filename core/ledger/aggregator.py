"""
잔액 집계기

저장된 분개 항목을 합산하여 계정별/분류별 잔액을 계산.
캐시된 잔액은 없으며 호출마다 전체 항목에서 재계산한다.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from adapters.db.sqlite_adapter import translate_errors
from core.ledger.types import CATEGORY_ORDER

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class BalanceAggregator:
    """잔액 집계기

    balance = Σdebit - Σcredit (모든 분류 공통 부호 규칙)

    Args:
        db: SQLite 어댑터 (작업 1건 범위)
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def account_balances(self) -> dict[str, list[dict[str, Any]]]:
        """활성 계정별 잔액

        항목이 없는 계정도 0으로 포함.
        금액은 TEXT로 저장되므로 Decimal로 Python에서 합산.

        Returns:
            {"assets": [...], "liabilities": [...], ...} 각 버킷은 코드 오름차순
        """
        with translate_errors("account_balances"):
            accounts = await self.db.fetchall(
                """
                SELECT id, code, name, category, subcategory
                FROM account
                WHERE is_active = 1
                ORDER BY code ASC
                """
            )
            lines = await self.db.fetchall(
                "SELECT account_id, debit, credit FROM journal_line"
            )

        totals: dict[int, list[Decimal]] = {}
        for account_id, debit, credit in lines:
            bucket = totals.setdefault(account_id, [ZERO, ZERO])
            bucket[0] += Decimal(debit)
            bucket[1] += Decimal(credit)

        result: dict[str, list[dict[str, Any]]] = {category: [] for category in CATEGORY_ORDER}
        for account_id, code, name, category, subcategory in accounts:
            total_debit, total_credit = totals.get(account_id, (ZERO, ZERO))
            result[category].append(
                {
                    "id": account_id,
                    "code": code,
                    "name": name,
                    "subcategory": subcategory,
                    "total_debit": total_debit,
                    "total_credit": total_credit,
                    "balance": total_debit - total_credit,
                }
            )

        return result

    async def overview(self) -> dict[str, Decimal]:
        """회계 요약 KPI

        net_income = total_revenue - total_expenses
        """
        balances = await self.account_balances()

        def category_total(category: str) -> Decimal:
            return sum((row["balance"] for row in balances[category]), ZERO)

        total_revenue = category_total("revenue")
        total_expenses = category_total("expenses")

        return {
            "total_assets": category_total("assets"),
            "total_liabilities": category_total("liabilities"),
            "total_equity": category_total("equity"),
            "total_revenue": total_revenue,
            "total_expenses": total_expenses,
            "net_income": total_revenue - total_expenses,
        }
