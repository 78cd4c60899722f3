"""
Tests for the CLI entry point. Logging setup and the service graph are patched.
"""

import io
from unittest.mock import Mock, patch

import pytest
from rich.console import Console

from container_monitor import main as cli
from container_monitor.models import (
    ContainerClassification,
    ContainerKind,
    MonitorRunResult,
    ResolvedAssignment,
)
from container_monitor.services.threshold_evaluator import evaluate

from factories import make_volume, office_policy, profile_policy


@pytest.fixture
def no_logging_setup():
    with patch.object(cli, "setup_logging") as setup:
        yield setup


def base_args(tmp_path):
    return ["--log-file", str(tmp_path / "monitor.log"), "--state-file", str(tmp_path / "state.txt")]


class TestArguments:
    def test_flags_parsed(self):
        args = cli.build_parser().parse_args(["--force", "--dry-run", "--warning-pct", "70", "--cooldown-hours", "2"])

        assert args.force is True
        assert args.dry_run is True
        assert args.warning_threshold_percent == 70
        assert args.cooldown_hours == 2
        assert args.critical_threshold_percent is None

    def test_cli_values_override_settings(self, tmp_path):
        args = cli.build_parser().parse_args(base_args(tmp_path) + ["--critical-pct", "99"])

        settings = cli.load_settings(args)

        assert settings.critical_threshold_percent == 99
        assert settings.state_file_path == str(tmp_path / "state.txt")


class TestMain:
    def test_run_returns_zero(self, tmp_path, no_logging_setup):
        service = Mock()
        service.run.return_value = MonitorRunResult()
        with patch.object(cli, "build_monitor_service", return_value=service) as build:
            assert cli.main(base_args(tmp_path) + ["--force"]) == 0

        assert build.call_args.kwargs == {"force": True, "dry_run": False}
        service.run.assert_called_once()

    def test_unexpected_failure_still_returns_zero(self, tmp_path, no_logging_setup):
        service = Mock()
        service.run.side_effect = RuntimeError("boom")
        with patch.object(cli, "build_monitor_service", return_value=service):
            assert cli.main(base_args(tmp_path)) == 0

    def test_invalid_thresholds_exit_with_usage_error(self, tmp_path, no_logging_setup):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(base_args(tmp_path) + ["--warning-pct", "90", "--critical-pct", "50"])

        assert exc_info.value.code == 2

    def test_test_notification(self, tmp_path, no_logging_setup):
        sink = Mock()
        sink.send.return_value = True
        with patch.object(cli, "get_notification_sink", return_value=sink), \
                patch.object(cli, "build_monitor_service") as build:
            assert cli.main(base_args(tmp_path) + ["--test-notification"]) == 0

        sink.send.assert_called_once_with(cli.TEST_MESSAGE)
        build.assert_not_called()

    def test_dry_run_prints_summary(self, tmp_path, no_logging_setup):
        service = Mock()
        service.run.return_value = MonitorRunResult(dry_run=True)
        with patch.object(cli, "build_monitor_service", return_value=service), \
                patch.object(cli, "print_summary") as summary:
            cli.main(base_args(tmp_path) + ["--dry-run"])

        summary.assert_called_once_with(service.run.return_value)


class TestPrintSummary:
    def render(self, result):
        buffer = io.StringIO()
        cli.print_summary(result, Console(file=buffer, width=200))
        return buffer.getvalue()

    def test_suppressed(self):
        assert "Cooldown active" in self.render(MonitorRunResult(suppressed=True))

    def test_table_rows(self):
        volume = make_volume("vol-1", total_mb=20480, used_mb=19000, label="Profile-jdoe")
        status = evaluate(19000, 20480, 80, 95, ContainerKind.PROFILE)
        result = MonitorRunResult(
            policies={
                ContainerKind.PROFILE: profile_policy(max_size_mb=20480),
                ContainerKind.OFFICE_DATA: office_policy(),
            },
            assignment=ResolvedAssignment(assignments={ContainerKind.PROFILE: volume}),
            unmatched_kinds=[ContainerKind.OFFICE_DATA],
            statuses=[status],
            worst_classification=ContainerClassification.WARNING,
        )

        output = self.render(result)

        assert "Profile-jdoe" in output
        assert "92.8%" in output
        assert "unmatched" in output
