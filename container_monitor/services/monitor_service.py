import logging
from datetime import datetime
from typing import Optional

from ..config import Settings
from ..models import ContainerClassification, ContainerKind, MonitorRunResult
from .cooldown import CooldownGate
from .notification import NotificationSink, build_message
from .policy import PolicySource
from .resolver import ContainerResolver
from .threshold_evaluator import evaluate
from .volumes import VolumeSource


class ContainerMonitorService:
    """
    One monitor pass per logon: cooldown -> policies -> volumes -> resolve
    -> evaluate -> notify. Collaborator failures degrade to "no data".
    """

    def __init__(
        self,
        settings: Settings,
        policy_source: PolicySource,
        volume_source: VolumeSource,
        resolver: ContainerResolver,
        cooldown_gate: CooldownGate,
        notification_sink: NotificationSink,
        dry_run: bool = False,
    ):
        self._settings = settings
        self._policy_source = policy_source
        self._volume_source = volume_source
        self._resolver = resolver
        self._cooldown_gate = cooldown_gate
        self._notification_sink = notification_sink
        self._dry_run = dry_run

    def run(self, now: Optional[datetime] = None) -> MonitorRunResult:
        now = now or datetime.now()
        result = MonitorRunResult(started_at=now, dry_run=self._dry_run)

        if self._cooldown_gate.is_suppressed(now):
            logging.info(
                f"Notification cooldown active until {self._cooldown_gate.next_allowed()}, skipping"
            )
            result.suppressed = True
            return result

        result.policies = self._policy_source.get_all()
        if not result.enabled_kinds:
            logging.info("No container kind enabled by policy, nothing to monitor")
            return result

        volumes = self._volume_source.list()
        result.volume_count = len(volumes)
        if not volumes:
            logging.info(
                f"No candidate container volumes found for enabled kinds: "
                f"{', '.join(kind.value for kind in result.enabled_kinds)}"
            )
            result.unmatched_kinds = list(result.enabled_kinds)
            return result

        result.assignment = self._resolver.resolve(
            volumes,
            result.policies[ContainerKind.PROFILE],
            result.policies[ContainerKind.OFFICE_DATA],
        )

        for kind in result.enabled_kinds:
            volume = result.assignment.get(kind)
            if volume is None:
                logging.warning(
                    f"{kind.value} container is enabled but no volume could be matched "
                    f"({len(volumes)} candidate(s))",
                    extra={"operation": "container_unmatched", "kind": kind.value},
                )
                result.unmatched_kinds.append(kind)
                continue

            status = evaluate(
                volume.used_mb,
                result.policies[kind].max_size_mb,
                self._settings.warning_threshold_percent,
                self._settings.critical_threshold_percent,
                kind=kind,
            )
            result.statuses.append(status)
            logging.info(
                f"{kind.value} container: {status.used_mb} MB of {status.max_mb} MB "
                f"({status.pct}%, {status.remaining_mb} MB remaining) -> {status.classification.value}",
                extra={
                    "operation": "container_status",
                    "kind": kind.value,
                    "volume_id": volume.id,
                    "pct": status.pct,
                    "classification": status.classification.value,
                },
            )

        result.worst_classification = ContainerClassification.worst(
            [status.classification for status in result.statuses]
        )
        result.message = build_message(result.statuses)
        if result.message is None:
            logging.info("All monitored containers are healthy")
            return result

        if self._dry_run:
            logging.info(f"Dry run - would send {result.message.severity.value} notification")
            return result

        result.notified = self._notification_sink.send(result.message)
        if result.notified:
            self._cooldown_gate.arm(now)
        else:
            logging.warning("Notification not delivered, cooldown left unarmed")

        return result
