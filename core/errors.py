"""
원장 에러 정의

경계(Web)로 전달되는 모든 에러는 기계가 읽을 수 있는 kind와
사람이 읽을 수 있는 message를 가진다.
저장소 엔진 내부 메시지는 message에 노출하지 않는다.
"""

from typing import Any


class LedgerError(Exception):
    """원장 에러 기본 클래스

    Args:
        message: 사용자용 메시지
        issues: 위반 조건 목록 (검증 에러 등)
    """

    kind: str = "LEDGER_ERROR"

    def __init__(self, message: str, issues: list[str] | None = None):
        self.message = message
        self.issues = list(issues or [])
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """경계 응답용 딕셔너리"""
        return {
            "kind": self.kind,
            "message": self.message,
            "issues": self.issues,
        }


class ConfigurationError(LedgerError):
    """저장소 설정 오류

    설정이 잘못되었거나 DB에 접근할 수 없는 경우.
    작업은 시도되지 않는다 (fail closed).
    """

    kind = "CONFIGURATION_ERROR"


class LedgerValidationError(LedgerError):
    """입력 검증 실패

    위반된 모든 조건을 issues에 담는다. 부수 효과 없음.
    """

    kind = "VALIDATION_ERROR"

    def __init__(self, issues: list[str], message: str | None = None):
        super().__init__(
            message or f"Invalid journal entry payload: {', '.join(issues)}",
            issues,
        )


class NotFoundError(LedgerError):
    """존재하지 않는 계정/분개 참조"""

    kind = "NOT_FOUND"


class ReferentialIntegrityError(LedgerError):
    """분개 항목이 참조 중인 계정 삭제 시도"""

    kind = "REFERENTIAL_INTEGRITY"


class OperationTimeoutError(LedgerError):
    """작업 마감 시간 초과

    연결은 해제된 상태. 읽기는 재시도 가능,
    쓰기는 커밋 여부 확인 없이 재시도 금지.
    """

    kind = "TIMEOUT"

    def __init__(self, label: str, timeout_sec: float):
        self.label = label
        self.timeout_sec = timeout_sec
        super().__init__(f'Operation "{label}" exceeded {timeout_sec}s')


class StorageError(LedgerError):
    """분류되지 않은 저장소 엔진 오류"""

    kind = "STORAGE_ERROR"


class LockTimeoutError(OperationTimeoutError):
    """쓰기 잠금 대기 시간(busy_timeout) 초과

    다른 연결이 쓰기 잠금을 쥐고 있어 작업을 시작하지 못한 경우.
    아무것도 기록되지 않은 상태.
    """

    def __init__(self, label: str):
        self.label = label
        self.timeout_sec = None
        LedgerError.__init__(self, f'Operation "{label}" timed out waiting for a write lock')
