"""
Volume enumerators.

StorageModuleEnumerator is the primary path: Get-Volume joined with the
partition's disk, which tells us whether the volume sits on a mounted
VHD(X). WmiVolumeEnumerator is the legacy path for hosts without the
Storage module; it has no backing-disk metadata.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ...core.exceptions import PowerShellError, VolumeEnumerationError
from ...models import RawVolume
from ...utils.powershell import run_powershell_json


STORAGE_MODULE_SCRIPT = r"""
$ErrorActionPreference = 'Stop'
Get-Volume | Where-Object { -not $_.DriveLetter } | ForEach-Object {
    $volume = $_
    $disk = $null
    try { $disk = $volume | Get-Partition -ErrorAction Stop | Get-Disk -ErrorAction Stop } catch { }
    [pscustomobject]@{
        Id            = $volume.UniqueId
        Label         = $volume.FileSystemLabel
        DriveLetter   = if ($volume.DriveLetter) { [string]$volume.DriveLetter } else { $null }
        Size          = [int64]$volume.Size
        SizeRemaining = [int64]$volume.SizeRemaining
        BusType       = if ($disk) { [string]$disk.BusType } else { $null }
        Model         = if ($disk) { [string]$disk.Model } else { $null }
    }
} | ConvertTo-Json -Compress -Depth 3
"""

WMI_VOLUME_SCRIPT = r"""
$ErrorActionPreference = 'Stop'
Get-WmiObject -Class Win32_Volume | Where-Object { -not $_.DriveLetter } | ForEach-Object {
    [pscustomobject]@{
        Id            = $_.DeviceID
        Label         = $_.Label
        DriveLetter   = $_.DriveLetter
        Size          = [int64]$_.Capacity
        SizeRemaining = [int64]$_.FreeSpace
    }
} | ConvertTo-Json -Compress -Depth 3
"""


class VolumeEnumerator(ABC):
    name: str = "enumerator"

    @abstractmethod
    def enumerate(self) -> List[RawVolume]:
        """List raw volumes. Raises VolumeEnumerationError on failure."""


class PowerShellVolumeEnumerator(VolumeEnumerator):
    script: str = ""

    def __init__(self, executable: str = "powershell.exe", timeout: int = 30):
        self._executable = executable
        self._timeout = timeout

    def enumerate(self) -> List[RawVolume]:
        try:
            records = run_powershell_json(
                self.script,
                executable=self._executable,
                timeout=self._timeout,
                command_name=self.name,
            )
        except PowerShellError as e:
            raise VolumeEnumerationError(str(e))

        volumes = []
        for record in records:
            volume = self._to_raw_volume(record)
            if volume is not None:
                volumes.append(volume)

        logging.debug(f"{self.name}: {len(volumes)} letterless volume(s) reported")
        return volumes

    def _to_raw_volume(self, record: Dict[str, Any]) -> Optional[RawVolume]:
        volume_id = record.get("Id")
        if not volume_id:
            logging.debug(f"{self.name}: skipping volume without identifier: {record}")
            return None

        try:
            return RawVolume(
                id=str(volume_id),
                label=record.get("Label") or "",
                drive_letter=record.get("DriveLetter") or None,
                size_bytes=int(record.get("Size") or 0),
                size_remaining_bytes=int(record.get("SizeRemaining") or 0),
                bus_type=record.get("BusType") or None,
                disk_model=record.get("Model") or None,
            )
        except (TypeError, ValueError) as e:
            logging.warning(f"{self.name}: skipping malformed volume record {volume_id}: {e}")
            return None


class StorageModuleEnumerator(PowerShellVolumeEnumerator):
    name = "Get-Volume"
    script = STORAGE_MODULE_SCRIPT


class WmiVolumeEnumerator(PowerShellVolumeEnumerator):
    name = "Win32_Volume"
    script = WMI_VOLUME_SCRIPT
