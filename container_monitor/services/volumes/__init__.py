from .enumerators import (
    PowerShellVolumeEnumerator,
    StorageModuleEnumerator,
    VolumeEnumerator,
    WmiVolumeEnumerator,
)
from .volume_source import VolumeSource, create_volume_source, is_virtual_disk

__all__ = [
    "PowerShellVolumeEnumerator",
    "StorageModuleEnumerator",
    "VolumeEnumerator",
    "VolumeSource",
    "WmiVolumeEnumerator",
    "create_volume_source",
    "is_virtual_disk",
]
