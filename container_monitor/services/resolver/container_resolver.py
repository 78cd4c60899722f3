import logging
from typing import List, Optional, Sequence

from ...models import (
    CandidateVolume,
    ContainerKind,
    ContainerPolicy,
    ResolvedAssignment,
)
from .matchers import ResolutionContext, VolumeMatcher, default_matchers


class ContainerResolver:
    """
    Maps letterless candidate volumes to container kinds.

    The operating system gives no direct tag linking a mounted VHD(X) to
    the profile or the Office container, so each volume is offered to a
    ranked chain of matchers until one claims it.
    """

    def __init__(self, matchers: Optional[List[VolumeMatcher]] = None):
        self._matchers = matchers if matchers is not None else default_matchers()

    @property
    def matchers(self) -> List[VolumeMatcher]:
        return list(self._matchers)

    def resolve(
        self,
        volumes: Sequence[CandidateVolume],
        profile_policy: ContainerPolicy,
        office_policy: ContainerPolicy,
    ) -> ResolvedAssignment:
        context = ResolutionContext(
            policies={
                ContainerKind.PROFILE: profile_policy,
                ContainerKind.OFFICE_DATA: office_policy,
            }
        )
        enabled = context.enabled_kinds

        if not enabled or not volumes:
            return ResolvedAssignment()

        # Single-candidate shortcut: nothing to disambiguate
        if len(enabled) == 1 and len(volumes) == 1:
            logging.debug(
                f"Single candidate {volumes[0].id} assigned to {enabled[0].value}"
            )
            return ResolvedAssignment(assignments={enabled[0]: volumes[0]})

        active = [matcher for matcher in self._matchers if matcher.applies(context)]

        for volume in volumes:
            if context.is_complete:
                break

            for matcher in active:
                kind = matcher.match(volume, context)
                if kind is None:
                    continue
                if not context.is_free(kind):
                    # A matcher may never hand out a disabled or taken kind
                    logging.debug(f"{matcher.name} proposed unavailable kind {kind.value}")
                    continue

                context.assigned[kind] = volume
                logging.debug(
                    f"Volume {volume.id} ({volume.total_mb} MB, label='{volume.label}') "
                    f"assigned to {kind.value} by {matcher.name}",
                    extra={
                        "operation": "container_resolve",
                        "volume_id": volume.id,
                        "kind": kind.value,
                        "matcher": matcher.name,
                    },
                )
                break

        return ResolvedAssignment(assignments=dict(context.assigned))
