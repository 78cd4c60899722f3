"""
Matcher strategies for the container resolver.

Each matcher looks at one candidate volume and either claims it for a
container kind or passes. The resolver runs them in priority order, so
every matcher only has to decide whether its own signal applies.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...models import CandidateVolume, ContainerKind, ContainerPolicy

# Profile takes priority over OfficeData wherever a tie has to be broken
KIND_PRIORITY = [ContainerKind.PROFILE, ContainerKind.OFFICE_DATA]


@dataclass
class ResolutionContext:
    """Policies plus the assignments made so far in one resolve() call."""

    policies: Dict[ContainerKind, ContainerPolicy]
    assigned: Dict[ContainerKind, CandidateVolume] = field(default_factory=dict)

    @property
    def enabled_kinds(self) -> List[ContainerKind]:
        return [
            kind
            for kind in KIND_PRIORITY
            if kind in self.policies and self.policies[kind].enabled
        ]

    @property
    def unassigned_kinds(self) -> List[ContainerKind]:
        return [kind for kind in self.enabled_kinds if kind not in self.assigned]

    @property
    def both_enabled(self) -> bool:
        return len(self.enabled_kinds) == 2

    @property
    def limits_differ(self) -> bool:
        return (
            self.both_enabled
            and self.policies[ContainerKind.PROFILE].max_size_mb
            != self.policies[ContainerKind.OFFICE_DATA].max_size_mb
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.enabled_kinds) and not self.unassigned_kinds

    def is_free(self, kind: ContainerKind) -> bool:
        return kind in self.unassigned_kinds


class VolumeMatcher(ABC):
    name: str = "matcher"

    @abstractmethod
    def applies(self, context: ResolutionContext) -> bool:
        """Whether this matcher's signal is meaningful for the given policies."""

    @abstractmethod
    def match(
        self, volume: CandidateVolume, context: ResolutionContext
    ) -> Optional[ContainerKind]:
        """Return the kind that should claim the volume, or None to pass."""


class SizeRatioMatcher(VolumeMatcher):
    """
    Backing volumes are created at roughly their configured maximum, so when
    the two limits differ the relative size distance identifies the kind.
    """

    name = "size_ratio"

    def applies(self, context: ResolutionContext) -> bool:
        return context.limits_differ

    def match(self, volume, context):
        best_kind: Optional[ContainerKind] = None
        best_ratio: Optional[float] = None

        for kind in context.unassigned_kinds:
            max_mb = context.policies[kind].max_size_mb
            ratio = abs(volume.total_mb - max_mb) / max_mb
            if best_ratio is None or ratio < best_ratio:
                best_kind, best_ratio = kind, ratio

        return best_kind


class LabelMatcher(VolumeMatcher):
    name = "label"

    def __init__(self, profile_pattern: str = r"profile", office_pattern: str = r"odfc|office|o365"):
        self._profile_re = re.compile(profile_pattern, re.IGNORECASE)
        self._office_re = re.compile(office_pattern, re.IGNORECASE)

    def applies(self, context: ResolutionContext) -> bool:
        return context.both_enabled and not context.limits_differ

    def match(self, volume, context):
        label = volume.label or ""
        if not label:
            return None

        if self._profile_re.search(label) and context.is_free(ContainerKind.PROFILE):
            return ContainerKind.PROFILE
        if self._office_re.search(label) and context.is_free(ContainerKind.OFFICE_DATA):
            return ContainerKind.OFFICE_DATA
        return None


class PositionalMatcher(VolumeMatcher):
    name = "positional"

    def applies(self, context: ResolutionContext) -> bool:
        return context.both_enabled and not context.limits_differ

    def match(self, volume, context):
        unassigned = context.unassigned_kinds
        return unassigned[0] if unassigned else None


class SingleKindMatcher(VolumeMatcher):
    name = "single_kind"

    def applies(self, context: ResolutionContext) -> bool:
        return len(context.enabled_kinds) == 1

    def match(self, volume, context):
        unassigned = context.unassigned_kinds
        return unassigned[0] if unassigned else None


def default_matchers(
    profile_pattern: str = r"profile", office_pattern: str = r"odfc|office|o365"
) -> List[VolumeMatcher]:
    return [
        SizeRatioMatcher(),
        LabelMatcher(profile_pattern, office_pattern),
        PositionalMatcher(),
        SingleKindMatcher(),
    ]
