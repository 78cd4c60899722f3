"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime

import pytest

from container_monitor.config import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings with all file paths under tmp_path."""
    return Settings(
        state_file_path=str(tmp_path / "state" / "last_notification.txt"),
        log_file_path=str(tmp_path / "logs" / "container_monitor.log"),
        warning_threshold_percent=80,
        critical_threshold_percent=95,
        cooldown_hours=8,
    )


@pytest.fixture
def t0():
    return datetime(2024, 3, 4, 8, 30, 0)
