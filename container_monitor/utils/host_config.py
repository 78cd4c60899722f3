"""
Host-specific configuration lookup.

Session hosts in the same pool usually share one settings.env, but a single
host can carry its own {hostname}-settings.env next to it to override values.
The monitor runs as the logged-on user, so it never creates these files.
"""

import logging
import socket
from pathlib import Path
from typing import Optional


BASE_SETTINGS_FILE = "settings.env"


def get_hostname() -> str:
    """Get the current hostname (without domain)."""
    return socket.gethostname().split('.')[0]


def get_hostname_settings_file(directory: Optional[Path] = None) -> str:
    """
    Get the settings file to load for this host.

    Returns {hostname}-settings.env if it exists, otherwise settings.env
    (which pydantic-settings silently ignores when it is missing too).
    """
    base_dir = directory or Path(".")
    host_settings = base_dir / f"{get_hostname()}-settings.env"

    if host_settings.exists():
        logging.debug(f"Using host-specific configuration: {host_settings}")
        return str(host_settings)

    return str(base_dir / BASE_SETTINGS_FILE)


def list_all_settings_files(directory: Optional[Path] = None) -> list[str]:
    """List all available settings files (base + host-specific)."""
    base_dir = directory or Path(".")
    settings_files = []

    if (base_dir / BASE_SETTINGS_FILE).exists():
        settings_files.append(str(base_dir / BASE_SETTINGS_FILE))

    for file_path in sorted(base_dir.glob("*-settings.env")):
        settings_files.append(str(file_path))

    return settings_files
