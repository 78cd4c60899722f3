"""
Notification - message composition and backend chain.

Components:
- build_message: turns container statuses into title/body/severity
- NotificationSink: walks the configured backends until one delivers
- ToastNotifier / PopupNotifier / MsgNotifier: the Windows backends
"""

from .message_builder import build_message, describe_status
from .notification_sink import NotificationSink, create_notifiers
from .notifiers import BaseNotifier, MsgNotifier, PopupNotifier, ToastNotifier

__all__ = [
    "BaseNotifier",
    "MsgNotifier",
    "NotificationSink",
    "PopupNotifier",
    "ToastNotifier",
    "build_message",
    "create_notifiers",
    "describe_status",
]
