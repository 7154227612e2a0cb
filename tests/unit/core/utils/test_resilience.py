"""
core/utils/resilience.py 테스트

마감 시간, 재시도, 정책 생성 테스트
"""

import asyncio

import pytest

from core.errors import (
    LedgerValidationError,
    LockTimeoutError,
    OperationTimeoutError,
    StorageError,
)
from core.utils.resilience import OperationPolicy, run_with_policy


class TestOperationPolicy:
    """OperationPolicy 테스트"""

    def test_write_policy_never_retries(self) -> None:
        """쓰기 정책은 재시도 없음"""
        policy = OperationPolicy.write(10.0)

        assert policy.attempts == 1

    def test_non_retryable(self) -> None:
        """재시도 제거 사본"""
        policy = OperationPolicy.bootstrap(15.0, attempts=3, base_delay_sec=0.5)

        stripped = policy.non_retryable()

        assert stripped.attempts == 1
        assert stripped.timeout_sec == 15.0
        assert policy.attempts == 3

    def test_exponential_delay(self) -> None:
        """지수 백오프"""
        policy = OperationPolicy.bootstrap(15.0, attempts=3, base_delay_sec=0.5)

        assert policy.delay_for(1) == 0.5
        assert policy.delay_for(2) == 1.0
        assert policy.delay_for(3) == 2.0

    def test_bootstrap_retries_lock_wait(self) -> None:
        """부트스트랩은 잠금 대기 초과도 재시도, 조회/쓰기 정책은 대상 아님"""
        bootstrap = OperationPolicy.bootstrap(15.0, attempts=3, base_delay_sec=0.5)

        assert LockTimeoutError in bootstrap.retry_on
        assert LockTimeoutError not in OperationPolicy.read(8.0).retry_on

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"timeout_sec": 0},
            {"timeout_sec": -1},
            {"timeout_sec": 1, "attempts": 0},
        ],
    )
    def test_invalid_policy(self, kwargs: dict) -> None:
        """잘못된 정책 값"""
        with pytest.raises(ValueError):
            OperationPolicy(**kwargs)


class TestRunWithPolicy:
    """run_with_policy 테스트"""

    @pytest.mark.asyncio
    async def test_returns_result(self) -> None:
        """정상 결과 반환"""

        async def operation() -> int:
            return 42

        result = await run_with_policy(operation, OperationPolicy.read(1.0), "answer")

        assert result == 42

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        """마감 시간 초과 시 OperationTimeoutError"""
        cancelled = asyncio.Event()

        async def operation() -> None:
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        with pytest.raises(OperationTimeoutError) as exc_info:
            await run_with_policy(operation, OperationPolicy.read(0.05), "slow_read")

        assert exc_info.value.kind == "TIMEOUT"
        assert exc_info.value.message == 'Operation "slow_read" exceeded 0.05s'
        # 작업 코루틴이 취소되어 정리 코드가 실행됨
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_retries_storage_error(self) -> None:
        """일시적 저장소 오류는 재시도"""
        calls = 0

        async def operation() -> str:
            nonlocal calls
            calls += 1
            if calls < 3:
                raise StorageError("Storage failure during bootstrap")
            return "ok"

        policy = OperationPolicy.bootstrap(5.0, attempts=3, base_delay_sec=0.001)

        assert await run_with_policy(operation, policy, "bootstrap") == "ok"
        assert calls == 3

    @pytest.mark.asyncio
    async def test_retries_exhausted(self) -> None:
        """재시도 소진 시 마지막 예외 전파"""
        calls = 0

        async def operation() -> None:
            nonlocal calls
            calls += 1
            raise StorageError("Storage failure during bootstrap")

        policy = OperationPolicy.bootstrap(5.0, attempts=2, base_delay_sec=0.001)

        with pytest.raises(StorageError):
            await run_with_policy(operation, policy, "bootstrap")
        assert calls == 2

    @pytest.mark.asyncio
    async def test_write_is_attempted_once(self) -> None:
        """쓰기 정책은 저장소 오류에도 1회만 시도"""
        calls = 0

        async def operation() -> None:
            nonlocal calls
            calls += 1
            raise StorageError("Storage failure during create_entry")

        with pytest.raises(StorageError):
            await run_with_policy(operation, OperationPolicy.write(5.0), "create_entry")
        assert calls == 1

    @pytest.mark.asyncio
    async def test_validation_error_not_retried(self) -> None:
        """검증 오류는 재시도 대상 아님"""
        calls = 0

        async def operation() -> None:
            nonlocal calls
            calls += 1
            raise LedgerValidationError(["description is required"])

        policy = OperationPolicy.bootstrap(5.0, attempts=3, base_delay_sec=0.001)

        with pytest.raises(LedgerValidationError):
            await run_with_policy(operation, policy, "bootstrap")
        assert calls == 1
