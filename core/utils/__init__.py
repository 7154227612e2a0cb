"""
유틸리티 패키지

시간 처리, 마감 시간/재시도 정책 등 공통 유틸리티
"""

from core.utils.resilience import (
    OperationPolicy,
    run_with_policy,
)
from core.utils.timezone import (
    now_utc,
    parse_entry_date,
    to_db_timestamp,
)

__all__ = [
    "OperationPolicy",
    "run_with_policy",
    "now_utc",
    "parse_entry_date",
    "to_db_timestamp",
]
