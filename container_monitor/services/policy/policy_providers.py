"""Policy providers - each one answers for a container kind or passes."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from ...config import Settings
from ...core.exceptions import PolicyReadError
from ...models import ContainerKind, ContainerPolicy


class PolicyProvider(ABC):
    name: str = "policy"

    @abstractmethod
    def read(self, kind: ContainerKind) -> Optional[ContainerPolicy]:
        """Return the policy for kind, or None when this provider has no value."""


class SettingsPolicyProvider(PolicyProvider):
    """Explicit overrides from settings.env / environment, checked before the registry."""

    name = "settings"

    def __init__(self, settings: Settings):
        self._settings = settings

    def read(self, kind: ContainerKind) -> Optional[ContainerPolicy]:
        if kind == ContainerKind.PROFILE:
            enabled = self._settings.profile_enabled
            max_size_mb = self._settings.profile_max_size_mb
        else:
            enabled = self._settings.office_enabled
            max_size_mb = self._settings.office_max_size_mb

        if enabled is None:
            return None

        if not max_size_mb or max_size_mb <= 0:
            max_size_mb = self._settings.default_max_size_mb

        return ContainerPolicy(
            kind=kind, enabled=enabled, max_size_mb=max_size_mb, source=self.name
        )


class RegistryPolicyProvider(PolicyProvider):
    """
    Reads Enabled / SizeInMBs DWORDs below HKEY_LOCAL_MACHINE.

    One provider per kind and key path, so the Group Policy key and the
    product key become two entries in the fallback chain.
    """

    ENABLED_VALUE = "Enabled"
    SIZE_VALUE = "SizeInMBs"

    def __init__(self, kind: ContainerKind, key_path: str, default_max_size_mb: int = 30720):
        self._kind = kind
        self._key_path = key_path
        self._default_max_size_mb = default_max_size_mb

    @property
    def name(self) -> str:
        return f"registry:HKLM\\{self._key_path}"

    @property
    def kind(self) -> ContainerKind:
        return self._kind

    def read(self, kind: ContainerKind) -> Optional[ContainerPolicy]:
        if kind != self._kind:
            return None

        values = self._read_values()
        if values is None or self.ENABLED_VALUE not in values:
            return None

        enabled = int(values[self.ENABLED_VALUE]) == 1
        max_size_mb = int(values.get(self.SIZE_VALUE) or 0)
        if max_size_mb <= 0:
            logging.debug(
                f"{self.name}: {self.SIZE_VALUE} missing or invalid, "
                f"using default {self._default_max_size_mb} MB"
            )
            max_size_mb = self._default_max_size_mb

        return ContainerPolicy(
            kind=kind, enabled=enabled, max_size_mb=max_size_mb, source=self.name
        )

    def _read_values(self) -> Optional[Dict[str, int]]:
        try:
            import winreg
        except ImportError:
            raise PolicyReadError("Windows registry is not available on this platform")

        try:
            key = winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, self._key_path)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PolicyReadError(f"Cannot open HKLM\\{self._key_path}: {e}")

        values: Dict[str, int] = {}
        with key:
            for value_name in (self.ENABLED_VALUE, self.SIZE_VALUE):
                try:
                    data, _value_type = winreg.QueryValueEx(key, value_name)
                except FileNotFoundError:
                    continue
                try:
                    values[value_name] = int(data)
                except (TypeError, ValueError):
                    logging.warning(f"{self.name}: ignoring non-numeric {value_name}={data!r}")
        return values


def create_policy_providers(settings: Settings) -> List[PolicyProvider]:
    providers: List[PolicyProvider] = [SettingsPolicyProvider(settings)]

    key_sets: List[Tuple[ContainerKind, List[str]]] = [
        (ContainerKind.PROFILE, settings.profile_policy_keys),
        (ContainerKind.OFFICE_DATA, settings.office_policy_keys),
    ]
    for kind, key_paths in key_sets:
        for key_path in key_paths:
            providers.append(
                RegistryPolicyProvider(kind, key_path, settings.default_max_size_mb)
            )

    return providers
