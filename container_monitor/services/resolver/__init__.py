"""
Container Resolver - assigns candidate volumes to container kinds.

Components:
- ContainerResolver: walks the candidates and runs the matcher chain
- SizeRatioMatcher / LabelMatcher / PositionalMatcher / SingleKindMatcher:
  one identity signal each, in priority order
"""

from .container_resolver import ContainerResolver
from .matchers import (
    LabelMatcher,
    PositionalMatcher,
    ResolutionContext,
    SingleKindMatcher,
    SizeRatioMatcher,
    VolumeMatcher,
    default_matchers,
)

__all__ = [
    "ContainerResolver",
    "LabelMatcher",
    "PositionalMatcher",
    "ResolutionContext",
    "SingleKindMatcher",
    "SizeRatioMatcher",
    "VolumeMatcher",
    "default_matchers",
]
