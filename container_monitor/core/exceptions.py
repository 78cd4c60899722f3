# container_monitor/core/exceptions.py

class MonitorError(Exception):
    """Base class for all container monitor errors."""


class PowerShellError(MonitorError):
    """Raised when a PowerShell invocation fails, times out or returns bad JSON."""
    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"PowerShell command '{command}' failed: {reason}")


class PolicyReadError(MonitorError):
    """Raised by a policy provider that could not read its source."""


class VolumeEnumerationError(MonitorError):
    """Raised when a volume enumerator cannot list volumes."""


class NotificationDeliveryError(MonitorError):
    """Raised by a notification backend that could not deliver a message."""


class CooldownStoreError(MonitorError):
    """Raised when the persisted cooldown timestamp cannot be read or written."""
