"""
분개 생성기

요청 페이로드를 검증하여 저장 가능한 분개 초안으로 변환.
저장소 접근 없이 순수하게 동작하며, 위반 조건을 모두 모아 한 번에 보고한다.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from core.errors import LedgerValidationError
from core.ledger.types import AMOUNT_MAX, AMOUNT_QUANTUM, BALANCE_TOLERANCE, ID_MAX
from core.utils.timezone import parse_entry_date

# 헤더 필드 최대 길이
REFERENCE_NUMBER_MAX_LENGTH = 64
CREATED_BY_MAX_LENGTH = 128

ZERO = Decimal("0.00")


@dataclass
class JournalLineDraft:
    """분개 항목 초안

    계정은 account_id(내부 ID) 또는 account_code(계정 코드) 중 하나로 지정.
    debit/credit 중 정확히 하나만 0이 아니어야 한다.
    """

    debit: Decimal
    credit: Decimal
    account_id: int | None = None
    account_code: str | None = None
    description: str | None = None

    @property
    def account_ref(self) -> str:
        """로그/에러용 계정 표기"""
        if self.account_id is not None:
            return f"id={self.account_id}"
        return f"code={self.account_code}"


@dataclass
class JournalEntryDraft:
    """분개 초안

    하나의 거래에 대한 복식부기 기록.
    차변 합계 = 대변 합계 (균형)
    """

    entry_date: date
    description: str
    lines: list[JournalLineDraft]
    reference_number: str | None = None
    created_by: str | None = None

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    @property
    def imbalance(self) -> Decimal:
        """차변 - 대변 차이 (절대값)"""
        return abs(self.total_debit - self.total_credit)

    def is_balanced(self) -> bool:
        """차변/대변 균형 검증

        Returns:
            True if |sum(debit) - sum(credit)| <= 0.01
        """
        return self.imbalance <= BALANCE_TOLERANCE


def balance_issue(total_debit: Decimal, total_credit: Decimal) -> str | None:
    """불균형 메시지 (균형이면 None)"""
    difference = abs(total_debit - total_credit)
    if difference <= BALANCE_TOLERANCE:
        return None
    return (
        f"journal entry must be balanced "
        f"(debits: {total_debit}, credits: {total_credit}, difference: {difference})"
    )


def parse_amount(value: Any, label: str, issues: list[str]) -> Decimal:
    """금액 파싱

    None/빈 문자열은 0. 음수, 소수 3자리 이상, 숫자가 아닌 값은 issue 추가 후 0 반환.
    """
    if value is None or value == "":
        return ZERO

    if isinstance(value, bool):
        issues.append(f"{label} must be a number")
        return ZERO

    try:
        # float는 문자열 경유로 이진 오차 제거
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        issues.append(f"{label} must be a number")
        return ZERO

    if not amount.is_finite():
        issues.append(f"{label} must be a finite number")
        return ZERO
    if amount < 0:
        issues.append(f"{label} must be >= 0")
        return ZERO
    if amount > AMOUNT_MAX:
        issues.append(f"{label} must be <= {AMOUNT_MAX}")
        return ZERO
    if amount != amount.quantize(AMOUNT_QUANTUM):
        issues.append(f"{label} must have at most 2 decimal places")
        return ZERO

    return amount.quantize(AMOUNT_QUANTUM)


def _optional_text(value: Any, label: str, max_length: int | None, issues: list[str]) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if max_length is not None and len(text) > max_length:
        issues.append(f"{label} must be at most {max_length} characters")
    return text


def _build_line(index: int, raw: Any, issues: list[str]) -> JournalLineDraft | None:
    prefix = f"lines[{index}]"
    if not isinstance(raw, Mapping):
        issues.append(f"{prefix} must be an object")
        return None

    account_id = raw.get("account_id")
    account_code = raw.get("account_code")
    if account_code is not None:
        account_code = str(account_code).strip() or None

    if account_id is not None and account_code is not None:
        issues.append(f"{prefix} must reference an account by account_id or account_code, not both")
    elif account_id is None and account_code is None:
        issues.append(f"{prefix}.account_id or {prefix}.account_code is required")
    elif account_id is not None:
        # SQLite INTEGER 범위를 넘는 ID는 조회 시 OverflowError
        valid_id = isinstance(account_id, int) and not isinstance(account_id, bool)
        if not valid_id or not 0 < account_id <= ID_MAX:
            issues.append(f"{prefix}.account_id must be a positive integer")
            account_id = None

    debit = parse_amount(raw.get("debit"), f"{prefix}.debit", issues)
    credit = parse_amount(raw.get("credit"), f"{prefix}.credit", issues)

    # 항목당 차변/대변 중 정확히 하나만 0이 아니어야 함
    if (debit == ZERO) == (credit == ZERO):
        issues.append(f"{prefix} must have exactly one non-zero amount (debit or credit)")

    return JournalLineDraft(
        account_id=account_id,
        account_code=account_code,
        debit=debit,
        credit=credit,
        description=_optional_text(raw.get("description"), f"{prefix}.description", None, issues),
    )


def build_entry_draft(payload: Mapping[str, Any]) -> JournalEntryDraft:
    """페이로드 검증 후 분개 초안 생성

    Args:
        payload: entry_date, description, reference_number?, created_by?, lines

    Returns:
        검증된 JournalEntryDraft

    Raises:
        LedgerValidationError: 위반 조건 전체 목록 포함
    """
    issues: list[str] = []

    entry_date: date | None = None
    raw_date = payload.get("entry_date")
    if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
        issues.append("entry_date is required")
    else:
        try:
            entry_date = parse_entry_date(raw_date)
        except ValueError:
            issues.append("entry_date must be an ISO date (YYYY-MM-DD)")

    description = _optional_text(payload.get("description"), "description", None, issues)
    if description is None:
        issues.append("description is required")

    reference_number = _optional_text(
        payload.get("reference_number"), "reference_number", REFERENCE_NUMBER_MAX_LENGTH, issues
    )
    created_by = _optional_text(
        payload.get("created_by"), "created_by", CREATED_BY_MAX_LENGTH, issues
    )

    raw_lines = payload.get("lines")
    lines: list[JournalLineDraft] = []
    if not isinstance(raw_lines, (list, tuple)) or len(raw_lines) == 0:
        issues.append("lines array is required and must not be empty")
    else:
        for index, raw in enumerate(raw_lines):
            line = _build_line(index, raw, issues)
            if line is not None:
                lines.append(line)

        imbalance = balance_issue(
            sum((line.debit for line in lines), ZERO),
            sum((line.credit for line in lines), ZERO),
        )
        if imbalance:
            issues.append(imbalance)

    if issues:
        raise LedgerValidationError(issues)

    assert entry_date is not None and description is not None
    return JournalEntryDraft(
        entry_date=entry_date,
        description=description,
        lines=lines,
        reference_number=reference_number,
        created_by=created_by,
    )
