"""
시간 유틸리티

내부 저장: UTC ISO 문자열 | 분개 일자: YYYY-MM-DD
"""

from datetime import date, datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def to_db_timestamp(dt: datetime) -> str:
    """datetime을 DB 저장용 문자열로 변환

    naive datetime은 UTC로 간주. 마이크로초까지 보존하여
    같은 초 안의 생성 순서도 구분 가능.

    Example:
        >>> to_db_timestamp(datetime(2026, 2, 20, 16, 0, 0, tzinfo=timezone.utc))
        '2026-02-20T16:00:00.000000+00:00'
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_entry_date(value: str | date) -> date:
    """분개 일자 파싱

    Args:
        value: "YYYY-MM-DD" 문자열 또는 date

    Returns:
        date 객체

    Raises:
        ValueError: 형식이 잘못된 경우
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())
