import os
from pathlib import Path
from typing import List, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.host_config import get_hostname_settings_file


def _default_state_dir() -> Path:
    local_app_data = os.environ.get("LOCALAPPDATA")
    base = Path(local_app_data) if local_app_data else Path.home() / ".local" / "state"
    return base / "ContainerSizeMonitor"


class Settings(BaseSettings):
    # Thresholds (percent of the configured container maximum)
    warning_threshold_percent: float = Field(default=80.0, ge=0)
    critical_threshold_percent: float = Field(default=95.0, ge=0)

    # Cooldown between two notifications to the same user
    cooldown_hours: float = Field(default=8.0, ge=0)
    state_file_path: str = Field(
        default_factory=lambda: str(_default_state_dir() / "last_notification.txt")
    )

    # Logging
    log_level: str = "INFO"
    log_file_path: str = Field(
        default_factory=lambda: str(_default_state_dir() / "logs" / "container_monitor.log")
    )
    log_retention_days: int = 14

    # Policy lookup
    default_max_size_mb: int = Field(default=30720, gt=0)
    profile_policy_keys: List[str] = [
        r"SOFTWARE\Policies\FSLogix\Profiles",
        r"SOFTWARE\FSLogix\Profiles",
    ]
    office_policy_keys: List[str] = [
        r"SOFTWARE\Policies\FSLogix\ODFC",
        r"SOFTWARE\FSLogix\ODFC",
    ]

    # Optional overrides, consulted before the registry
    profile_enabled: Optional[bool] = None
    profile_max_size_mb: Optional[int] = None
    office_enabled: Optional[bool] = None
    office_max_size_mb: Optional[int] = None

    # Candidate volume band
    min_volume_size_mb: int = Field(default=512, ge=1)
    max_volume_size_mb: int = 2 * 1024 * 1024  # 2 TB

    # Label heuristics (case-insensitive regex)
    profile_label_pattern: str = r"profile"
    office_label_pattern: str = r"odfc|office|o365"

    # Notifications, tried in this order
    notification_backends: List[str] = ["toast", "popup", "msg"]
    notification_timeout_seconds: int = 60
    toast_app_id: str = (
        r"{1AC14E77-02E7-4E5D-B744-2EB1AE5198B7}\WindowsPowerShell\v1.0\powershell.exe"
    )

    # PowerShell invocation
    powershell_executable: str = "powershell.exe"
    powershell_timeout_seconds: int = 30

    model_config = SettingsConfigDict(
        env_file=get_hostname_settings_file(),
        env_ignore_empty=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _thresholds_are_monotonic(self) -> "Settings":
        if self.critical_threshold_percent < self.warning_threshold_percent:
            raise ValueError(
                f"critical_threshold_percent ({self.critical_threshold_percent}) "
                f"must be >= warning_threshold_percent ({self.warning_threshold_percent})"
            )
        if self.max_volume_size_mb < self.min_volume_size_mb:
            raise ValueError("max_volume_size_mb must be >= min_volume_size_mb")
        return self

    @property
    def log_directory(self) -> Path:
        return Path(self.log_file_path).parent

    @property
    def config_file_info(self) -> dict:
        """Return information about which configuration file is being used."""
        from .utils.host_config import get_hostname, list_all_settings_files

        return {
            "hostname": get_hostname(),
            "active_config_file": get_hostname_settings_file(),
            "all_available_configs": list_all_settings_files(),
        }
