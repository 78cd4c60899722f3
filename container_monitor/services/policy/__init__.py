from .policy_providers import (
    PolicyProvider,
    RegistryPolicyProvider,
    SettingsPolicyProvider,
    create_policy_providers,
)
from .policy_source import PolicySource

__all__ = [
    "PolicyProvider",
    "PolicySource",
    "RegistryPolicyProvider",
    "SettingsPolicyProvider",
    "create_policy_providers",
]
