import logging
from typing import Dict, List

from ...models import ContainerKind, ContainerPolicy
from ...utils.fallback import first_success
from .policy_providers import PolicyProvider


class PolicySource:
    """First provider with a value wins; otherwise the container is disabled."""

    def __init__(self, providers: List[PolicyProvider], default_max_size_mb: int = 30720):
        self._providers = providers
        self._default_max_size_mb = default_max_size_mb

    def get(self, kind: ContainerKind) -> ContainerPolicy:
        outcome = first_success(
            self._providers,
            lambda provider: provider.read(kind),
            label=f"{kind.value} policy",
        )

        if outcome is None:
            logging.debug(f"No policy found for {kind.value}, container treated as disabled")
            return ContainerPolicy(
                kind=kind,
                enabled=False,
                max_size_mb=self._default_max_size_mb,
                source="default",
            )

        policy = outcome.result
        logging.info(
            f"{kind.value} policy: enabled={policy.enabled}, "
            f"max={policy.max_size_mb} MB (from {policy.source})"
        )
        return policy

    def get_all(self) -> Dict[ContainerKind, ContainerPolicy]:
        return {kind: self.get(kind) for kind in ContainerKind}
