"""
설정 로더

settings.yaml 로드 및 검증.
파일이 없으면 기본값 사용, 형식이 잘못되면 ConfigurationError (fail closed).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths, Retry, Timeouts
from core.errors import ConfigurationError

# 설정 파일 경로 환경 변수
SETTINGS_ENV_VAR: str = "LEDGER_SETTINGS"


@dataclass(frozen=True)
class DatabaseConfig:
    """DB 연결 설정"""

    path: Path
    busy_timeout_ms: int = Timeouts.BUSY_TIMEOUT_MS


@dataclass(frozen=True)
class TimeoutConfig:
    """작업별 마감 시간 (초)"""

    read_sec: float = Timeouts.READ_SEC
    write_sec: float = Timeouts.WRITE_SEC
    bootstrap_sec: float = Timeouts.BOOTSTRAP_SEC


@dataclass(frozen=True)
class RetryConfig:
    """부트스트랩 재시도 설정

    분개 쓰기에는 적용되지 않음.
    """

    bootstrap_attempts: int = Retry.BOOTSTRAP_ATTEMPTS
    base_delay_sec: float = Retry.BASE_DELAY_SEC


@dataclass(frozen=True)
class ModulesConfig:
    """모듈 활성화 설정"""

    accounting: bool = True


@dataclass(frozen=True)
class WebConfig:
    """Web 서버 설정"""

    host: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT


@dataclass(frozen=True)
class AppConfig:
    """전체 애플리케이션 설정

    불변 데이터 구조로 설정 변경 방지
    """

    database: DatabaseConfig
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    modules: ModulesConfig = field(default_factory=ModulesConfig)
    web: WebConfig = field(default_factory=WebConfig)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"settings.yaml의 '{name}' 섹션은 매핑이어야 합니다")
    return value


def _positive(value: Any, name: str, cast: type) -> Any:
    try:
        converted = cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} 값이 올바르지 않습니다: {value!r}") from e
    if converted <= 0:
        raise ConfigurationError(f"{name}은(는) 양수여야 합니다: {value!r}")
    return converted


def _resolve_db_path(raw: Any) -> Path:
    if raw is None:
        return Paths.LEDGER_DB
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigurationError("database.path가 비어 있습니다")
    path = Path(raw)
    # 상대 경로는 프로젝트 루트 기준
    return path if path.is_absolute() else PROJECT_ROOT / path


def parse_config(data: dict[str, Any]) -> AppConfig:
    """딕셔너리를 AppConfig로 변환

    Args:
        data: yaml.safe_load 결과

    Returns:
        AppConfig 인스턴스

    Raises:
        ConfigurationError: 값이 유효하지 않은 경우
    """
    issues: list[str] = []

    db = _section(data, "database")
    timeouts = _section(data, "timeouts")
    retry = _section(data, "retry")
    modules = _section(data, "modules")
    web = _section(data, "web")

    def collect(func, *args):
        try:
            return func(*args)
        except ConfigurationError as e:
            issues.append(e.message)
            return None

    database = DatabaseConfig(
        path=collect(_resolve_db_path, db.get("path")),
        busy_timeout_ms=collect(
            _positive, db.get("busy_timeout_ms", Timeouts.BUSY_TIMEOUT_MS),
            "database.busy_timeout_ms", int,
        ),
    )
    timeout_config = TimeoutConfig(
        read_sec=collect(_positive, timeouts.get("read_sec", Timeouts.READ_SEC), "timeouts.read_sec", float),
        write_sec=collect(_positive, timeouts.get("write_sec", Timeouts.WRITE_SEC), "timeouts.write_sec", float),
        bootstrap_sec=collect(
            _positive, timeouts.get("bootstrap_sec", Timeouts.BOOTSTRAP_SEC),
            "timeouts.bootstrap_sec", float,
        ),
    )
    retry_config = RetryConfig(
        bootstrap_attempts=collect(
            _positive, retry.get("bootstrap_attempts", Retry.BOOTSTRAP_ATTEMPTS),
            "retry.bootstrap_attempts", int,
        ),
        base_delay_sec=collect(
            _positive, retry.get("base_delay_sec", Retry.BASE_DELAY_SEC),
            "retry.base_delay_sec", float,
        ),
    )
    web_config = WebConfig(
        host=str(web.get("host", Defaults.WEB_HOST)),
        port=collect(_positive, web.get("port", Defaults.WEB_PORT), "web.port", int),
    )

    if issues:
        raise ConfigurationError(
            f"Invalid database configuration: {'; '.join(issues)}",
            issues,
        )

    return AppConfig(
        database=database,
        timeouts=timeout_config,
        retry=retry_config,
        modules=ModulesConfig(accounting=bool(modules.get("accounting", True))),
        web=web_config,
    )


def load_config(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 환경 변수 또는 기본 경로 사용)

    Returns:
        AppConfig 인스턴스

    Raises:
        ConfigurationError: 파싱 실패 또는 유효하지 않은 값
    """
    if path is None:
        env_path = os.environ.get(SETTINGS_ENV_VAR)
        path = Path(env_path) if env_path else Paths.SETTINGS_FILE

    if not path.exists():
        # 설정 파일이 없으면 기본값
        return parse_config({})

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("settings.yaml 최상위는 매핑이어야 합니다")

    return parse_config(data)


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            type(self)._config = load_config(settings_path)

    @property
    def config(self) -> AppConfig:
        """전체 설정"""
        assert self._config is not None
        return self._config

    @property
    def db_path(self) -> Path:
        """원장 DB 경로"""
        return self.config.database.path

    @property
    def timeouts(self) -> TimeoutConfig:
        """작업별 마감 시간"""
        return self.config.timeouts

    @property
    def retry(self) -> RetryConfig:
        """부트스트랩 재시도 설정"""
        return self.config.retry

    @property
    def accounting_enabled(self) -> bool:
        """회계 모듈 활성화 여부"""
        return self.config.modules.accounting

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
