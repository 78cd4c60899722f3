import logging
from typing import Callable, Dict, List

from ...config import Settings
from ...models import NotificationMessage
from ...utils.fallback import first_success
from .notifiers import BaseNotifier, MsgNotifier, PopupNotifier, ToastNotifier


class NotificationSink:
    def __init__(self, notifiers: List[BaseNotifier]):
        self._notifiers = notifiers

    @property
    def notifiers(self) -> List[BaseNotifier]:
        return list(self._notifiers)

    def send(self, message: NotificationMessage) -> bool:
        outcome = first_success(
            self._notifiers,
            lambda notifier: notifier.send(message),
            accept=lambda delivered: delivered is True,
            label="notification",
        )

        if outcome is None:
            logging.error(
                f"Notification could not be delivered by any backend "
                f"({', '.join(n.name for n in self._notifiers) or 'none configured'})",
                extra={"operation": "notification_failed", "severity": message.severity.value},
            )
            return False

        logging.info(
            f"{message.severity.value} notification delivered via {outcome.provider.name}",
            extra={
                "operation": "notification_sent",
                "backend": outcome.provider.name,
                "severity": message.severity.value,
            },
        )
        return True


def create_notifiers(settings: Settings) -> List[BaseNotifier]:
    factories: Dict[str, Callable[[], BaseNotifier]] = {
        "toast": lambda: ToastNotifier(
            settings.toast_app_id,
            settings.powershell_executable,
            settings.powershell_timeout_seconds,
        ),
        "popup": lambda: PopupNotifier(
            settings.notification_timeout_seconds,
            settings.powershell_executable,
            settings.powershell_timeout_seconds,
        ),
        "msg": lambda: MsgNotifier(
            settings.notification_timeout_seconds,
            settings.powershell_timeout_seconds,
        ),
    }

    notifiers = []
    for backend in settings.notification_backends:
        factory = factories.get(backend.strip().lower())
        if factory is None:
            logging.warning(f"Unknown notification backend '{backend}' ignored")
            continue
        notifiers.append(factory())
    return notifiers
