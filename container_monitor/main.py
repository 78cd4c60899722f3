import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import Settings
from .dependencies import build_monitor_service, get_notification_sink
from .logging_config import setup_logging
from .models import ContainerClassification, MonitorRunResult, NotificationMessage

TEST_MESSAGE = NotificationMessage(
    title="Container size monitor test",
    body="This is a test notification. No action is needed.",
    severity=ContainerClassification.WARNING,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="container_monitor",
        description="Warn the logged-on user when a profile or Office data container is nearly full.",
    )
    parser.add_argument("--force", action="store_true", help="Ignore the notification cooldown")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Evaluate and print the decision without notifying or arming the cooldown",
    )
    parser.add_argument(
        "--test-notification",
        action="store_true",
        help="Send a test notification through the backend chain and exit",
    )
    parser.add_argument("--warning-pct", type=float, dest="warning_threshold_percent")
    parser.add_argument("--critical-pct", type=float, dest="critical_threshold_percent")
    parser.add_argument("--cooldown-hours", type=float, dest="cooldown_hours")
    parser.add_argument("--log-level", dest="log_level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", dest="log_file_path")
    parser.add_argument("--state-file", dest="state_file_path")
    return parser


SETTINGS_ARGS = [
    "warning_threshold_percent",
    "critical_threshold_percent",
    "cooldown_hours",
    "log_level",
    "log_file_path",
    "state_file_path",
]


def load_settings(args: argparse.Namespace) -> Settings:
    overrides = {
        name: getattr(args, name)
        for name in SETTINGS_ARGS
        if getattr(args, name, None) is not None
    }
    return Settings(**overrides)


def print_summary(result: MonitorRunResult, console: Optional[Console] = None) -> None:
    console = console or Console()

    if result.suppressed:
        console.print("[yellow]Cooldown active - run skipped[/]")
        return

    table = Table(title="Container size monitor")
    table.add_column("Container")
    table.add_column("Policy")
    table.add_column("Volume")
    table.add_column("Used / Max (MB)", justify="right")
    table.add_column("Usage", justify="right")
    table.add_column("Status")

    statuses = {status.kind: status for status in result.statuses}
    for kind, policy in result.policies.items():
        volume = result.assignment.get(kind)
        status = statuses.get(kind)
        table.add_row(
            kind.value,
            f"{'enabled' if policy.enabled else 'disabled'} ({policy.max_size_mb} MB)",
            volume.label or volume.id if volume else "-",
            f"{status.used_mb} / {status.max_mb}" if status else "-",
            f"{status.pct}%" if status else "-",
            status.classification.value if status else ("unmatched" if kind in result.unmatched_kinds else "-"),
        )

    console.print(table)
    if result.message:
        console.print(f"[bold]{result.message.title}[/]\n{result.message.body}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as e:
        parser.error(f"invalid configuration: {e}")

    setup_logging(settings)
    config_info = settings.config_file_info
    logging.info(f"Configuration loaded from: {config_info['active_config_file']}")

    if args.test_notification:
        delivered = get_notification_sink(settings).send(TEST_MESSAGE)
        logging.info(f"Test notification delivered: {delivered}")
        return 0

    try:
        service = build_monitor_service(settings, force=args.force, dry_run=args.dry_run)
        result = service.run()
    except Exception as e:
        # A logon script must never fail the logon
        logging.error(f"Container monitor run failed: {e}", exc_info=True)
        return 0

    if args.dry_run:
        print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
