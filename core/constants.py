"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 3008

    # 분개 목록 기본/최대 조회 개수
    ENTRY_LIST_LIMIT: int = 50
    ENTRY_LIST_MAX_LIMIT: int = 500


class Timeouts:
    """작업 마감 시간 (초)"""

    READ_SEC: float = 8.0
    WRITE_SEC: float = 10.0
    BOOTSTRAP_SEC: float = 15.0

    # SQLite 잠금 대기 (밀리초)
    BUSY_TIMEOUT_MS: int = 5000


class Retry:
    """재시도 정책 기본값 (부트스트랩 전용)"""

    BOOTSTRAP_ATTEMPTS: int = 3
    BASE_DELAY_SEC: float = 0.5


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    LEDGER_DB: Path = DATA_DIR / "ledger.db"
