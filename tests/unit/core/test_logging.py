"""
core/logging.py 테스트
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from core.logging import NOISY_LOGGERS, get_log_file_path, setup_logging


@pytest.fixture
def restore_root_logger():
    """테스트 후 루트 로거 핸들러 복원"""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_log_file_path(temp_dir: Path) -> None:
    assert get_log_file_path("web", temp_dir) == temp_dir / "web.log"


def test_setup_logging(temp_dir: Path, restore_root_logger) -> None:
    """콘솔 + daily 파일 핸들러, 불필요한 로거는 WARNING"""
    root = setup_logging("web", log_dir=temp_dir)

    assert (temp_dir / "web.log").exists()
    assert any(isinstance(h, TimedRotatingFileHandler) for h in root.handlers)
    assert len(root.handlers) == 2
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
