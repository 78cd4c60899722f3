"""Composes the user-facing notification text from container statuses."""

from typing import List, Optional

from ...models import (
    ContainerClassification,
    ContainerKind,
    ContainerStatus,
    NotificationMessage,
)

DISPLAY_NAMES = {
    ContainerKind.PROFILE: "Profile",
    ContainerKind.OFFICE_DATA: "Office data (Outlook/OneDrive/Teams cache)",
}

TITLES = {
    ContainerClassification.WARNING: "Your storage container is getting full",
    ContainerClassification.CRITICAL: "Your storage container is almost full",
}

CRITICAL_HINT = (
    "Please delete or archive files now. When the container is full, "
    "applications can fail to save data and sign-in may be affected."
)
WARNING_HINT = "Please clean up files you no longer need."


def format_mb(mb: int) -> str:
    if abs(mb) >= 1024:
        return f"{mb / 1024:.1f} GB"
    return f"{mb} MB"


def describe_status(status: ContainerStatus) -> str:
    name = DISPLAY_NAMES[status.kind]
    usage = (
        f"{name}: {status.pct:.1f}% used "
        f"({format_mb(status.used_mb)} of {format_mb(status.max_mb)}"
    )
    if status.is_over_limit:
        return f"{usage}, {format_mb(-status.remaining_mb)} over the limit)"
    return f"{usage}, {format_mb(status.remaining_mb)} free)"


def build_message(statuses: List[ContainerStatus]) -> Optional[NotificationMessage]:
    """Returns None when every container is healthy."""
    flagged = [
        status
        for status in statuses
        if status.classification != ContainerClassification.HEALTHY
    ]
    if not flagged:
        return None

    severity = ContainerClassification.worst([s.classification for s in flagged])
    # Most severe container first
    flagged.sort(key=lambda s: (-s.classification.severity, -s.pct))

    lines = [describe_status(status) for status in flagged]
    lines.append("")
    lines.append(CRITICAL_HINT if severity == ContainerClassification.CRITICAL else WARNING_HINT)

    return NotificationMessage(title=TITLES[severity], body="\n".join(lines), severity=severity)
