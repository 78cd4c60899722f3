"""Notification backends. Each one delivers a message or reports failure."""

import getpass
import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Optional
from xml.sax.saxutils import escape

from ...core.exceptions import NotificationDeliveryError, PowerShellError
from ...models import ContainerClassification, NotificationMessage
from ...utils.powershell import quote_ps_string, run_powershell


class BaseNotifier(ABC):
    name: str = "notifier"

    @abstractmethod
    def send(self, message: NotificationMessage) -> bool:
        """Deliver the message. Returns True on success."""


class PowerShellNotifier(BaseNotifier):
    def __init__(self, executable: str = "powershell.exe", timeout: int = 30):
        self._executable = executable
        self._timeout = timeout

    @abstractmethod
    def build_script(self, message: NotificationMessage) -> str:
        pass

    def send(self, message: NotificationMessage) -> bool:
        try:
            run_powershell(
                self.build_script(message),
                executable=self._executable,
                timeout=self._timeout,
                command_name=self.name,
            )
        except PowerShellError as e:
            raise NotificationDeliveryError(str(e))
        return True


class ToastNotifier(PowerShellNotifier):
    name = "toast"

    def __init__(self, app_id: str, executable: str = "powershell.exe", timeout: int = 30):
        super().__init__(executable, timeout)
        self._app_id = app_id

    def build_script(self, message: NotificationMessage) -> str:
        scenario = ' scenario="reminder"' if message.severity == ContainerClassification.CRITICAL else ""
        toast_xml = (
            f"<toast{scenario}><visual><binding template=\"ToastGeneric\">"
            f"<text>{escape(message.title)}</text>"
            f"<text>{escape(message.body)}</text>"
            f"</binding></visual>"
            f"<actions><action content=\"OK\" arguments=\"dismiss\" activationType=\"system\"/></actions>"
            f"</toast>"
        )
        return "\n".join([
            "$ErrorActionPreference = 'Stop'",
            "[Windows.UI.Notifications.ToastNotificationManager, Windows.UI.Notifications, ContentType = WindowsRuntime] | Out-Null",
            "[Windows.Data.Xml.Dom.XmlDocument, Windows.Data.Xml.Dom.XmlDocument, ContentType = WindowsRuntime] | Out-Null",
            "$xml = New-Object Windows.Data.Xml.Dom.XmlDocument",
            f"$xml.LoadXml({quote_ps_string(toast_xml)})",
            "$toast = New-Object Windows.UI.Notifications.ToastNotification $xml",
            f"[Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier({quote_ps_string(self._app_id)}).Show($toast)",
        ])


class PopupNotifier(PowerShellNotifier):
    name = "popup"

    # WScript.Shell Popup icon flags
    ICON_CRITICAL = 16
    ICON_WARNING = 48

    def __init__(self, display_seconds: int = 60, executable: str = "powershell.exe", timeout: int = 30):
        # The popup blocks until dismissed or timed out
        super().__init__(executable, max(timeout, display_seconds + 10))
        self._display_seconds = display_seconds

    def build_script(self, message: NotificationMessage) -> str:
        icon = self.ICON_CRITICAL if message.severity == ContainerClassification.CRITICAL else self.ICON_WARNING
        return "\n".join([
            "$ErrorActionPreference = 'Stop'",
            "$shell = New-Object -ComObject WScript.Shell",
            f"$shell.Popup({quote_ps_string(message.body)}, {self._display_seconds}, "
            f"{quote_ps_string(message.title)}, {icon}) | Out-Null",
        ])


class MsgNotifier(BaseNotifier):
    """msg.exe to the current session user - available on every RDS host."""

    name = "msg"

    def __init__(self, display_seconds: int = 60, timeout: int = 30, username: Optional[str] = None):
        self._display_seconds = display_seconds
        self._timeout = timeout
        self._username = username

    def send(self, message: NotificationMessage) -> bool:
        username = self._username or getpass.getuser()
        cmd = [
            "msg",
            username,
            f"/TIME:{self._display_seconds}",
            f"{message.title}\n\n{message.body}",
        ]
        try:
            completed = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self._timeout
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise NotificationDeliveryError(f"msg.exe failed: {e}")

        if completed.returncode != 0:
            error_msg = completed.stderr.strip() if completed.stderr else "Unknown error"
            logging.debug(f"msg.exe exit code {completed.returncode}: {error_msg}")
            return False
        return True
