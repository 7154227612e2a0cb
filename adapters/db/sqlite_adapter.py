"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
요청마다 짧은 연결을 열고 닫는다 (open_session).

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import logging
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Iterator

import aiosqlite

from core.constants import Timeouts
from core.errors import (
    ConfigurationError,
    LedgerError,
    LockTimeoutError,
    NotFoundError,
    StorageError,
)

logger = logging.getLogger(__name__)

# sqlite3 기본 에러 코드 (확장 코드의 하위 8비트)
SQLITE_BUSY = 5


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
    busy_timeout_ms: int = Timeouts.BUSY_TIMEOUT_MS,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부
        busy_timeout_ms: 잠금 대기 시간 (밀리초)

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    if readonly:
        conn = await aiosqlite.connect(f"file:{db_path_str}?mode=ro", uri=True)
    else:
        # 디렉토리가 없으면 생성
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(db_path_str)

    try:
        # 동시 접근 설정
        await conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")

        if not readonly:
            # WAL 모드 설정 (읽기 전용 연결은 변경 불가, 쓰기 연결에서 설정된 값 사용)
            await conn.execute("PRAGMA journal_mode=WAL")

        # 외래 키 제약 활성화 (RESTRICT / CASCADE 동작에 필요)
        await conn.execute("PRAGMA foreign_keys=ON")
    except BaseException:
        await conn.close()
        raise

    logger.debug(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


def is_lock_timeout(error: aiosqlite.Error) -> bool:
    """busy_timeout 동안 잠금을 얻지 못한 에러인지 확인"""
    code = getattr(error, "sqlite_errorcode", None)
    if code is not None:
        return code & 0xFF == SQLITE_BUSY
    return "database is locked" in str(error)


@contextmanager
def translate_errors(label: str) -> Iterator[None]:
    """저장소 엔진 예외를 LedgerError로 변환

    - 잠금 대기 소진 (SQLITE_BUSY) → LockTimeoutError
    - INTEGER 범위를 넘는 ID → NotFoundError (해당 행이 존재할 수 없음)
    - 그 외 엔진 예외 → StorageError

    엔진 내부 메시지는 로그에만 남기고 경계로는 노출하지 않는다.
    이미 분류된 LedgerError는 그대로 전파.
    """
    try:
        yield
    except LedgerError:
        raise
    except OverflowError as e:
        logger.warning(f"ID 범위 초과: {label}", extra={"error": str(e)})
        raise NotFoundError(f"No record matches the identifier given to {label}") from e
    except aiosqlite.Error as e:
        if is_lock_timeout(e):
            logger.warning(f"쓰기 잠금 대기 시간 초과: {label}")
            raise LockTimeoutError(label) from e
        logger.error(f"저장소 오류: {label}", extra={"error": str(e)})
        raise StorageError(f"Storage failure during {label}") from e


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저 제공.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (조회용)
        busy_timeout_ms: 잠금 대기 시간 (밀리초)

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as adapter:
        async with adapter.transaction():
            await adapter.execute("INSERT INTO ...")
    ```
    """

    def __init__(
        self,
        db_path: Path | str,
        readonly: bool = False,
        busy_timeout_ms: int = Timeouts.BUSY_TIMEOUT_MS,
    ):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self.busy_timeout_ms = busy_timeout_ms
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(
            self.db_path, self.readonly, self.busy_timeout_ms
        )

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            conn, self._conn = self._conn, None
            await conn.close()
            logger.debug("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def executemany(
        self,
        sql: str,
        parameters: list[tuple[Any, ...]],
    ) -> aiosqlite.Cursor:
        """SQL 다중 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        return await self._conn.executemany(sql, parameters)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self, immediate: bool = False) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외(취소 포함) 시 자동 롤백.

        Args:
            immediate: True면 BEGIN IMMEDIATE로 쓰기 잠금을 먼저 획득
                (동시 쓰기 시 busy_timeout 대기 적용)

        사용 예시:
        ```python
        async with adapter.transaction(immediate=True):
            await adapter.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if immediate:
            await self._conn.execute("BEGIN IMMEDIATE")

        try:
            yield self._conn
            await self._conn.commit()
        except BaseException:
            await self._conn.rollback()
            raise

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


@asynccontextmanager
async def open_session(
    db_path: Path | str,
    readonly: bool = False,
    busy_timeout_ms: int = Timeouts.BUSY_TIMEOUT_MS,
) -> AsyncIterator[SQLiteAdapter]:
    """작업 1건 범위의 연결 제공

    연결/검증에 실패하면 ConfigurationError (작업 미시도).
    성공/검증 실패/저장소 실패/타임아웃(취소) 모든 경로에서 연결 해제.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부
        busy_timeout_ms: 잠금 대기 시간 (밀리초)
    """
    path = Path(db_path)
    if readonly and not path.exists():
        raise ConfigurationError(f"Ledger database is not initialised: {path.name}")

    adapter = SQLiteAdapter(path, readonly=readonly, busy_timeout_ms=busy_timeout_ms)
    try:
        await adapter.connect()
    except (aiosqlite.Error, OSError) as e:
        await adapter.close()
        logger.error("DB 연결 실패", extra={"db_path": str(path), "error": str(e)})
        raise ConfigurationError("Ledger database is unreachable") from e

    try:
        yield adapter
    finally:
        await adapter.close()
