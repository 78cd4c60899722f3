from typing import Optional

from .config import Settings
from .services.cooldown import CooldownGate, CooldownStore, FileCooldownStore
from .services.monitor_service import ContainerMonitorService
from .services.notification import NotificationSink, create_notifiers
from .services.policy import PolicySource, create_policy_providers
from .services.resolver import ContainerResolver, default_matchers
from .services.volumes import create_volume_source


def get_policy_source(settings: Settings) -> PolicySource:
    return PolicySource(create_policy_providers(settings), settings.default_max_size_mb)


def get_resolver(settings: Settings) -> ContainerResolver:
    return ContainerResolver(
        default_matchers(settings.profile_label_pattern, settings.office_label_pattern)
    )


def get_cooldown_gate(
    settings: Settings, override: bool = False, store: Optional[CooldownStore] = None
) -> CooldownGate:
    return CooldownGate(
        store or FileCooldownStore(settings.state_file_path),
        window_hours=settings.cooldown_hours,
        override=override,
    )


def get_notification_sink(settings: Settings) -> NotificationSink:
    return NotificationSink(create_notifiers(settings))


def build_monitor_service(
    settings: Settings,
    force: bool = False,
    dry_run: bool = False,
    cooldown_store: Optional[CooldownStore] = None,
) -> ContainerMonitorService:
    """Wire the monitor from settings. Each invocation builds a fresh graph."""
    return ContainerMonitorService(
        settings=settings,
        policy_source=get_policy_source(settings),
        volume_source=create_volume_source(settings),
        resolver=get_resolver(settings),
        cooldown_gate=get_cooldown_gate(settings, override=force, store=cooldown_store),
        notification_sink=get_notification_sink(settings),
        dry_run=dry_run,
    )
