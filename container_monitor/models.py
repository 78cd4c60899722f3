from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ContainerKind(str, Enum):
    """The two per-user container kinds managed by the profile-virtualization system."""

    PROFILE = "Profile"
    OFFICE_DATA = "OfficeData"  # ODFC - Office Data File Containers


class ContainerClassification(str, Enum):
    """Utilization buckets, ordered by severity"""

    HEALTHY = "Healthy"
    WARNING = "Warning"
    CRITICAL = "Critical"

    @property
    def severity(self) -> int:
        return _SEVERITY_ORDER.index(self)

    @classmethod
    def worst(
        cls, classifications: List["ContainerClassification"]
    ) -> "ContainerClassification":
        worst = cls.HEALTHY
        for classification in classifications:
            if classification.severity > worst.severity:
                worst = classification
        return worst


_SEVERITY_ORDER = [
    ContainerClassification.HEALTHY,
    ContainerClassification.WARNING,
    ContainerClassification.CRITICAL,
]


class CooldownState(str, Enum):
    SUPPRESSED = "Suppressed"
    CLEAR = "Clear"


class ContainerPolicy(BaseModel):
    """Administrator policy for one container kind, read fresh every run."""

    model_config = ConfigDict(frozen=True)

    kind: ContainerKind
    enabled: bool = False
    max_size_mb: int = Field(..., gt=0, description="Configured maximum size in MB")
    source: str = Field(default="default", description="Provider that answered")


class RawVolume(BaseModel):
    """
    A volume exactly as an enumerator reported it.

    Backing-disk metadata (bus_type, disk_model) is only available from the
    Storage module; the legacy WMI query leaves both as None.
    """

    id: str
    label: str = ""
    drive_letter: Optional[str] = None
    size_bytes: int = Field(default=0, ge=0)
    size_remaining_bytes: int = Field(default=0, ge=0)
    bus_type: Optional[str] = None
    disk_model: Optional[str] = None

    @property
    def size_mb(self) -> int:
        return self.size_bytes // (1024 * 1024)

    @property
    def used_mb(self) -> int:
        used_bytes = max(self.size_bytes - self.size_remaining_bytes, 0)
        return used_bytes // (1024 * 1024)

    def to_candidate(self) -> "CandidateVolume":
        return CandidateVolume(
            id=self.id,
            label=self.label or "",
            used_mb=self.used_mb,
            total_mb=self.size_mb,
        )


class CandidateVolume(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque volume identifier")
    label: str = Field(default="", description="File system label, may be empty")
    used_mb: int = Field(..., ge=0)
    total_mb: int = Field(..., gt=0)


class ResolvedAssignment(BaseModel):
    """
    Container kind -> volume mapping produced once per run by the resolver.

    A kind missing from the mapping is "absent". No volume id appears twice.
    """

    model_config = ConfigDict(frozen=True)

    assignments: Dict[ContainerKind, CandidateVolume] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _no_double_assignment(self) -> "ResolvedAssignment":
        ids = [volume.id for volume in self.assignments.values()]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Volume assigned to more than one container kind: {ids}")
        return self

    def get(self, kind: ContainerKind) -> Optional[CandidateVolume]:
        return self.assignments.get(kind)

    def is_assigned(self, kind: ContainerKind) -> bool:
        return kind in self.assignments

    @property
    def kinds(self) -> List[ContainerKind]:
        return [kind for kind in ContainerKind if kind in self.assignments]


class ContainerStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ContainerKind
    used_mb: int
    max_mb: int
    pct: float
    remaining_mb: int  # negative when usage exceeds the configured maximum
    classification: ContainerClassification

    @property
    def is_over_limit(self) -> bool:
        return self.remaining_mb < 0


class NotificationMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    severity: ContainerClassification

    @model_validator(mode="after")
    def _severity_warrants_notice(self) -> "NotificationMessage":
        if self.severity == ContainerClassification.HEALTHY:
            raise ValueError("Notification severity must be Warning or Critical")
        return self


class MonitorRunResult(BaseModel):
    """Everything one monitor pass observed and decided."""

    started_at: datetime = Field(default_factory=datetime.now)
    suppressed: bool = False
    dry_run: bool = False
    policies: Dict[ContainerKind, ContainerPolicy] = Field(default_factory=dict)
    volume_count: int = 0
    assignment: ResolvedAssignment = Field(default_factory=ResolvedAssignment)
    unmatched_kinds: List[ContainerKind] = Field(default_factory=list)
    statuses: List[ContainerStatus] = Field(default_factory=list)
    worst_classification: ContainerClassification = ContainerClassification.HEALTHY
    message: Optional[NotificationMessage] = None
    notified: bool = False

    @property
    def enabled_kinds(self) -> List[ContainerKind]:
        return [kind for kind, policy in self.policies.items() if policy.enabled]
