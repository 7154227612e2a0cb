"""
core/config/loader.py 테스트

settings.yaml 로드, 검증, Settings 싱글턴 테스트
"""

from pathlib import Path

import pytest

from core.config.loader import (
    SETTINGS_ENV_VAR,
    AppConfig,
    Settings,
    get_settings,
    load_config,
    parse_config,
)
from core.constants import PROJECT_ROOT, Paths, Retry, Timeouts
from core.errors import ConfigurationError


class TestParseConfig:
    """parse_config 테스트"""

    def test_defaults(self) -> None:
        """빈 설정이면 기본값"""
        config = parse_config({})

        assert isinstance(config, AppConfig)
        assert config.database.path == Paths.LEDGER_DB
        assert config.timeouts.read_sec == Timeouts.READ_SEC
        assert config.timeouts.write_sec == Timeouts.WRITE_SEC
        assert config.timeouts.bootstrap_sec == Timeouts.BOOTSTRAP_SEC
        assert config.retry.bootstrap_attempts == Retry.BOOTSTRAP_ATTEMPTS
        assert config.modules.accounting is True

    def test_relative_path_resolved_from_project_root(self) -> None:
        """상대 경로는 프로젝트 루트 기준"""
        config = parse_config({"database": {"path": "var/books.db"}})

        assert config.database.path == PROJECT_ROOT / "var" / "books.db"

    def test_absolute_path_kept(self, temp_dir: Path) -> None:
        """절대 경로는 그대로"""
        db_path = temp_dir / "ledger.db"
        config = parse_config({"database": {"path": str(db_path)}})

        assert config.database.path == db_path

    def test_accounting_module_disabled(self) -> None:
        """회계 모듈 비활성화"""
        config = parse_config({"modules": {"accounting": False}})

        assert config.modules.accounting is False

    def test_collects_all_issues(self) -> None:
        """잘못된 값을 모두 모아서 보고"""
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config(
                {
                    "database": {"path": "  "},
                    "timeouts": {"read_sec": 0, "write_sec": -1},
                    "retry": {"bootstrap_attempts": "many"},
                }
            )

        error = exc_info.value
        assert error.kind == "CONFIGURATION_ERROR"
        assert len(error.issues) == 4
        assert error.message.startswith("Invalid database configuration")

    def test_section_must_be_mapping(self) -> None:
        """섹션이 매핑이 아니면 에러"""
        with pytest.raises(ConfigurationError):
            parse_config({"database": ["not", "a", "mapping"]})


class TestLoadConfig:
    """load_config 테스트"""

    def test_load_from_file(self, temp_settings_file: Path) -> None:
        """파일 로드"""
        config = load_config(temp_settings_file)

        assert config.database.path == temp_settings_file.parent / "ledger.db"
        assert config.database.busy_timeout_ms == 2000
        assert config.retry.bootstrap_attempts == 2

    def test_missing_file_uses_defaults(self, temp_dir: Path) -> None:
        """파일이 없으면 기본값"""
        config = load_config(temp_dir / "nonexistent.yaml")

        assert config.database.path == Paths.LEDGER_DB

    def test_empty_file_uses_defaults(self, temp_dir: Path) -> None:
        """빈 파일이면 기본값"""
        settings_path = temp_dir / "empty.yaml"
        settings_path.write_text("", encoding="utf-8")

        config = load_config(settings_path)

        assert config.timeouts.read_sec == Timeouts.READ_SEC

    def test_malformed_yaml(self, temp_dir: Path) -> None:
        """YAML 파싱 실패 시 ConfigurationError"""
        settings_path = temp_dir / "broken.yaml"
        settings_path.write_text("database: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(settings_path)

    def test_top_level_must_be_mapping(self, temp_dir: Path) -> None:
        """최상위가 리스트면 ConfigurationError"""
        settings_path = temp_dir / "list.yaml"
        settings_path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(settings_path)

    def test_env_override(
        self, temp_settings_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """환경 변수로 설정 파일 경로 지정"""
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(temp_settings_file))

        config = load_config()

        assert config.database.busy_timeout_ms == 2000


class TestSettings:
    """Settings 싱글턴 테스트"""

    def test_singleton(self, temp_settings_file: Path) -> None:
        """같은 인스턴스 반환"""
        first = get_settings(temp_settings_file)
        second = get_settings()

        assert first is second
        assert second.db_path == temp_settings_file.parent / "ledger.db"

    def test_reset(self, temp_settings_file: Path, temp_dir: Path) -> None:
        """reset 후 다시 로드"""
        first = get_settings(temp_settings_file)
        Settings.reset()
        second = get_settings(temp_dir / "nonexistent.yaml")

        assert first is not second
        assert second.db_path == Paths.LEDGER_DB

    def test_properties(self, temp_settings_file: Path) -> None:
        """편의 속성"""
        settings = get_settings(temp_settings_file)

        assert settings.timeouts.write_sec == 5
        assert settings.retry.base_delay_sec == 0.01
        assert settings.accounting_enabled is True
