"""
복식부기 타입 정의

계정 분류 Enum, 표준 계정과목표, 금액 상수
"""

from decimal import Decimal
from enum import Enum


class AccountCategory(str, Enum):
    """계정 분류

    복식부기의 5대 계정 유형.
    str을 상속하여 JSON 직렬화 가능.
    """

    ASSETS = "assets"
    LIABILITIES = "liabilities"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSES = "expenses"

    @classmethod
    def values(cls) -> list[str]:
        return [c.value for c in cls]


# 잔액 집계 버킷 순서
CATEGORY_ORDER: tuple[str, ...] = tuple(AccountCategory.values())

# 차변/대변 합계 허용 오차 (통화 단위)
BALANCE_TOLERANCE: Decimal = Decimal("0.01")

# 금액 저장 단위 (DECIMAL(15, 2))
AMOUNT_QUANTUM: Decimal = Decimal("0.01")

# 금액 최대값 (15자리 중 소수 2자리)
AMOUNT_MAX: Decimal = Decimal("9999999999999.99")

# 계정/분개 ID 최대값 (SQLite INTEGER 범위)
ID_MAX: int = 2**63 - 1


# 표준 소규모 사업자 계정과목표 (시드에서 사용)
STANDARD_CHART: list[tuple[str, str, str, str]] = [
    # (code, name, category, subcategory)

    # 자산 (1000-1999)
    ("1010", "Cash - Checking", "assets", "Current Assets"),
    ("1020", "Cash - Savings", "assets", "Current Assets"),
    ("1030", "Petty Cash", "assets", "Current Assets"),
    ("1100", "Accounts Receivable", "assets", "Current Assets"),
    ("1200", "Inventory", "assets", "Current Assets"),
    ("1300", "Prepaid Insurance", "assets", "Current Assets"),
    ("1310", "Prepaid Rent", "assets", "Current Assets"),
    ("1500", "Furniture & Equipment", "assets", "Fixed Assets"),
    ("1510", "Vehicles", "assets", "Fixed Assets"),
    ("1520", "Machinery", "assets", "Fixed Assets"),
    ("1600", "Accumulated Depreciation", "assets", "Fixed Assets"),

    # 부채 (2000-2999)
    ("2010", "Accounts Payable", "liabilities", "Current Liabilities"),
    ("2020", "Credit Card Payable", "liabilities", "Current Liabilities"),
    ("2100", "Accrued Payroll", "liabilities", "Current Liabilities"),
    ("2110", "Accrued Interest", "liabilities", "Current Liabilities"),
    ("2200", "Sales Tax Payable", "liabilities", "Current Liabilities"),
    ("2210", "Payroll Tax Payable", "liabilities", "Current Liabilities"),
    ("2300", "Short-Term Loans Payable", "liabilities", "Current Liabilities"),
    ("2310", "Line of Credit", "liabilities", "Current Liabilities"),
    ("2500", "Long-Term Loans Payable", "liabilities", "Long-Term Liabilities"),
    ("2510", "Mortgage Payable", "liabilities", "Long-Term Liabilities"),

    # 자본 (3000-3999)
    ("3010", "Owner's Capital", "equity", "Owner's Equity"),
    ("3020", "Common Stock", "equity", "Shareholder's Equity"),
    ("3030", "Additional Paid-In Capital", "equity", "Shareholder's Equity"),
    ("3100", "Retained Earnings", "equity", "Retained Earnings"),
    ("3200", "Owner's Drawings", "equity", "Distributions"),
    ("3210", "Dividends", "equity", "Distributions"),

    # 수익 (4000-4999)
    ("4010", "Product Sales Revenue", "revenue", "Operating Revenue"),
    ("4020", "Service Revenue", "revenue", "Operating Revenue"),
    ("4100", "Other Operating Revenue", "revenue", "Operating Revenue"),
    ("4900", "Interest Income", "revenue", "Non-Operating Revenue"),
    ("4910", "Other Income", "revenue", "Non-Operating Revenue"),

    # 매출원가 및 비용 (5000-6999)
    ("5010", "Cost of Materials", "expenses", "Cost of Goods Sold"),
    ("5020", "Direct Labor", "expenses", "Cost of Goods Sold"),
    ("5040", "Freight-In", "expenses", "Cost of Goods Sold"),
    ("6010", "Salaries and Wages", "expenses", "Operating Expenses"),
    ("6020", "Payroll Taxes", "expenses", "Operating Expenses"),
    ("6030", "Employee Benefits", "expenses", "Operating Expenses"),
    ("6100", "Rent Expense", "expenses", "Operating Expenses"),
    ("6110", "Utilities - Electric", "expenses", "Operating Expenses"),
    ("6120", "Utilities - Water & Gas", "expenses", "Operating Expenses"),
    ("6130", "Internet & Phone", "expenses", "Operating Expenses"),
    ("6200", "Office Supplies", "expenses", "Operating Expenses"),
    ("6300", "Marketing & Advertising", "expenses", "Operating Expenses"),
    ("6400", "Travel Expense", "expenses", "Operating Expenses"),
    ("6410", "Meals & Entertainment", "expenses", "Operating Expenses"),
    ("6500", "Insurance Expense", "expenses", "Operating Expenses"),
    ("6600", "Legal Fees", "expenses", "Operating Expenses"),
    ("6610", "Accounting Fees", "expenses", "Operating Expenses"),
    ("6620", "Consulting Fees", "expenses", "Operating Expenses"),
    ("6700", "Software & Subscriptions", "expenses", "Operating Expenses"),
    ("6800", "Repairs & Maintenance", "expenses", "Operating Expenses"),
    ("6900", "Bank Fees", "expenses", "Operating Expenses"),
    ("6950", "Depreciation Expense", "expenses", "Operating Expenses"),
    ("6990", "Income Tax Expense", "expenses", "Operating Expenses"),
]
