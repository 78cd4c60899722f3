import logging
from typing import List

from ...config import Settings
from ...models import CandidateVolume, RawVolume
from ...utils.fallback import first_success
from .enumerators import StorageModuleEnumerator, VolumeEnumerator, WmiVolumeEnumerator

VIRTUAL_BUS_TYPES = {"file backed virtual", "15"}
VIRTUAL_MODEL_MARKER = "virtual disk"


def is_virtual_disk(volume: RawVolume) -> bool:
    """True when backing-disk metadata says VHD(X); None metadata is not a 'no'."""
    if volume.bus_type and volume.bus_type.strip().lower() in VIRTUAL_BUS_TYPES:
        return True
    if volume.disk_model and VIRTUAL_MODEL_MARKER in volume.disk_model.lower():
        return True
    return False


def has_disk_metadata(volume: RawVolume) -> bool:
    return bool(volume.bus_type or volume.disk_model)


class VolumeSource:
    """
    Lists volumes that plausibly back a container: no drive letter, size
    inside the configured band and, when known, sitting on a virtual disk.
    """

    def __init__(
        self,
        enumerators: List[VolumeEnumerator],
        min_size_mb: int = 512,
        max_size_mb: int = 2 * 1024 * 1024,
    ):
        self._enumerators = enumerators
        self._min_size_mb = min_size_mb
        self._max_size_mb = max_size_mb

    def list(self) -> List[CandidateVolume]:
        # An empty list from the primary enumerator is an answer, not a failure
        outcome = first_success(
            self._enumerators,
            lambda enumerator: enumerator.enumerate(),
            label="volume enumeration",
        )
        if outcome is None:
            logging.warning("All volume enumerators failed, no candidate volumes this run")
            return []

        candidates = [
            volume.to_candidate()
            for volume in outcome.result
            if self.is_candidate(volume)
        ]

        logging.info(
            f"Volume enumeration via {outcome.provider.name}: "
            f"{len(outcome.result)} volume(s), {len(candidates)} candidate(s)",
            extra={
                "operation": "volume_enumeration",
                "enumerator": outcome.provider.name,
                "candidate_count": len(candidates),
            },
        )
        return candidates

    def is_candidate(self, volume: RawVolume) -> bool:
        if volume.drive_letter:
            return False

        # Sub-megabyte volumes have no usable total
        if volume.size_mb <= 0:
            logging.debug(f"Volume {volume.id} reports no usable size")
            return False

        if not (self._min_size_mb <= volume.size_mb <= self._max_size_mb):
            logging.debug(f"Volume {volume.id} outside size band ({volume.size_mb} MB)")
            return False

        if has_disk_metadata(volume) and not is_virtual_disk(volume):
            logging.debug(
                f"Volume {volume.id} not on a virtual disk "
                f"(bus={volume.bus_type}, model={volume.disk_model})"
            )
            return False

        return True


def create_volume_source(settings: Settings) -> VolumeSource:
    enumerators: List[VolumeEnumerator] = [
        StorageModuleEnumerator(settings.powershell_executable, settings.powershell_timeout_seconds),
        WmiVolumeEnumerator(settings.powershell_executable, settings.powershell_timeout_seconds),
    ]
    return VolumeSource(
        enumerators,
        min_size_mb=settings.min_volume_size_mb,
        max_size_mb=settings.max_volume_size_mb,
    )
