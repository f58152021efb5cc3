from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class Generation(IntEnum):
    """Revision of the recording equipment data layout."""

    GEN1 = 1
    GEN2 = 2
    GEN2V2 = 3

    @property
    def label(self) -> str:
        return {1: "Gen1", 2: "Gen2", 3: "Gen2V2"}[self.value]

    def lineage(self) -> tuple[Generation, ...]:
        """This generation followed by the ones whose layouts it inherits."""
        if self is Generation.GEN2V2:
            return (Generation.GEN2V2, Generation.GEN2)
        return (self,)


class DeviceClass(Enum):
    CARD = "card"
    VEHICLE_UNIT = "vehicle-unit"


@dataclass(frozen=True)
class FileType:
    """Classification of a download file."""

    device: DeviceClass
    generation: Generation

    def __str__(self) -> str:
        return f"{self.device.value} {self.generation.label}"
