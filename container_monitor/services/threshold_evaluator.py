from ..models import ContainerClassification, ContainerKind, ContainerStatus


def classify(pct: float, warning_pct: float, critical_pct: float) -> ContainerClassification:
    if pct >= critical_pct:
        return ContainerClassification.CRITICAL
    if pct >= warning_pct:
        return ContainerClassification.WARNING
    return ContainerClassification.HEALTHY


def evaluate(
    used_mb: int,
    max_mb: int,
    warning_pct: float,
    critical_pct: float,
    kind: ContainerKind = ContainerKind.PROFILE,
) -> ContainerStatus:
    """
    Classify a single resolved container against its configured maximum.

    remaining_mb is not clamped: a negative value means the container has
    grown past the configured maximum.
    """
    if max_mb <= 0:
        raise ValueError(f"max_mb must be > 0, got {max_mb}")

    pct = round(used_mb / max_mb * 100, 1)

    return ContainerStatus(
        kind=kind,
        used_mb=used_mb,
        max_mb=max_mb,
        pct=pct,
        remaining_mb=max_mb - used_mb,
        classification=classify(pct, warning_pct, critical_pct),
    )
