"""
마감 시간 / 재시도 정책

모든 원장 작업은 run_with_policy를 통해 실행된다.
- 마감 시간 초과 시 작업 코루틴을 취소하고 OperationTimeoutError 발생
  (작업 내부의 async with 블록이 연결을 해제)
- 재시도는 retry_on에 해당하는 일시적 오류에만 지수 백오프로 수행

주의: 분개 생성은 재시도 금지 (중복 분개 위험). write 정책은 attempts=1 고정.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, TypeVar

from core.errors import (
    ConfigurationError,
    LockTimeoutError,
    OperationTimeoutError,
    StorageError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class OperationPolicy:
    """작업 실행 정책

    Args:
        timeout_sec: 전체 마감 시간 (재시도 대기 포함)
        attempts: 최대 시도 횟수 (1 = 재시도 없음)
        base_delay_sec: 첫 재시도 대기 시간 (이후 2배씩 증가)
        retry_on: 재시도 대상 예외 타입
    """

    timeout_sec: float
    attempts: int = 1
    base_delay_sec: float = 0.5
    retry_on: tuple[type[BaseException], ...] = (StorageError,)

    def __post_init__(self) -> None:
        if self.timeout_sec <= 0:
            raise ValueError(f"timeout_sec must be positive: {self.timeout_sec}")
        if self.attempts < 1:
            raise ValueError(f"attempts must be >= 1: {self.attempts}")

    @classmethod
    def read(cls, timeout_sec: float) -> "OperationPolicy":
        """조회용 정책 (재시도 없음)"""
        return cls(timeout_sec=timeout_sec)

    @classmethod
    def write(cls, timeout_sec: float) -> "OperationPolicy":
        """분개 쓰기용 정책 (재시도 없음)"""
        return cls(timeout_sec=timeout_sec, attempts=1)

    @classmethod
    def bootstrap(
        cls,
        timeout_sec: float,
        attempts: int,
        base_delay_sec: float,
    ) -> "OperationPolicy":
        """스키마 초기화/시드용 정책 (멱등 작업만 재시도)

        시작 직후 DB 접근 실패(ConfigurationError)와 잠금 대기 초과(LockTimeoutError)도 재시도 대상.
        """
        return cls(
            timeout_sec=timeout_sec,
            attempts=attempts,
            base_delay_sec=base_delay_sec,
            retry_on=(StorageError, ConfigurationError, LockTimeoutError),
        )

    def non_retryable(self) -> "OperationPolicy":
        """재시도를 제거한 사본"""
        return replace(self, attempts=1)

    def delay_for(self, attempt: int) -> float:
        """attempt번째 실패 후 대기 시간 (1부터 시작)"""
        return self.base_delay_sec * 2 ** (attempt - 1)


async def run_with_policy(
    operation: Callable[[], Awaitable[T]],
    policy: OperationPolicy,
    label: str,
) -> T:
    """정책에 따라 작업 실행

    Args:
        operation: 인자 없는 코루틴 함수 (시도마다 새로 호출)
        policy: 실행 정책
        label: 로그/에러용 작업 이름

    Returns:
        operation 결과

    Raises:
        OperationTimeoutError: 마감 시간 초과
        그 외: operation이 발생시킨 예외 (재시도 소진 시 마지막 예외)
    """

    async def attempt_loop() -> T:
        attempt = 0
        while True:
            try:
                return await operation()
            except policy.retry_on as e:
                attempt += 1
                if attempt >= policy.attempts:
                    raise

                delay = policy.delay_for(attempt)
                logger.warning(
                    f"작업 실패, 재시도 예정: {label}",
                    extra={
                        "attempt": attempt,
                        "remaining_attempts": policy.attempts - attempt,
                        "delay_sec": delay,
                        "error": str(e),
                    },
                )
                await asyncio.sleep(delay)

    try:
        return await asyncio.wait_for(attempt_loop(), timeout=policy.timeout_sec)
    except asyncio.TimeoutError as e:
        logger.error(f"작업 마감 시간 초과: {label} ({policy.timeout_sec}s)")
        raise OperationTimeoutError(label, policy.timeout_sec) from e
