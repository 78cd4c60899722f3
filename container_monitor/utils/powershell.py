"""Blocking PowerShell invocation with JSON output."""

import json
import logging
import subprocess
from typing import Any, Dict, List, Optional

from ..core.exceptions import PowerShellError

# Hide the console window when launched from a logon task
_CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0)


def run_powershell(
    script: str,
    executable: str = "powershell.exe",
    timeout: int = 30,
    command_name: Optional[str] = None,
) -> str:
    """Run a PowerShell script and return stdout. Raises PowerShellError on failure."""
    name = command_name or script.strip().splitlines()[0][:60]
    cmd = [executable, "-NoProfile", "-NonInteractive", "-ExecutionPolicy", "Bypass", "-Command", script]

    try:
        completed = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            creationflags=_CREATE_NO_WINDOW,
        )
    except subprocess.TimeoutExpired:
        raise PowerShellError(name, f"timed out after {timeout}s")
    except OSError as e:
        raise PowerShellError(name, f"could not start {executable}: {e}")

    if completed.returncode != 0:
        error_msg = completed.stderr.strip() if completed.stderr else "Unknown error"
        raise PowerShellError(name, f"exit code {completed.returncode}: {error_msg}")

    logging.debug(f"PowerShell '{name}' returned {len(completed.stdout)} chars")
    return completed.stdout


def parse_json_records(output: str, command_name: str = "powershell") -> List[Dict[str, Any]]:
    """
    Normalise ConvertTo-Json output to a list of dicts.

    ConvertTo-Json emits nothing for an empty pipeline and a bare object
    (not a one-element array) for a single result.
    """
    text = output.strip()
    if not text:
        return []

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PowerShellError(command_name, f"invalid JSON output: {e}")

    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]

    raise PowerShellError(command_name, f"unexpected JSON type {type(data).__name__}")


def run_powershell_json(
    script: str,
    executable: str = "powershell.exe",
    timeout: int = 30,
    command_name: Optional[str] = None,
) -> List[Dict[str, Any]]:
    name = command_name or "powershell"
    output = run_powershell(script, executable=executable, timeout=timeout, command_name=name)
    return parse_json_records(output, command_name=name)


def quote_ps_string(value: str) -> str:
    """Quote a value as a single-quoted PowerShell literal."""
    return "'" + value.replace("'", "''") + "'"
