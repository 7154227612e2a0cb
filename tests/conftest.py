"""
pytest 공통 fixture 정의
"""

import tempfile
from pathlib import Path

import pytest

from core.config.loader import Settings


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings():
    """테스트 간 Settings 싱글턴 격리"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성 (임시 DB 경로)"""
    db_path = temp_dir / "ledger.db"
    settings_content = f"""# 테스트용 settings.yaml
database:
  path: "{db_path.as_posix()}"
  busy_timeout_ms: 2000

timeouts:
  read_sec: 5
  write_sec: 5
  bootstrap_sec: 10

retry:
  bootstrap_attempts: 2
  base_delay_sec: 0.01

modules:
  accounting: true
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path
