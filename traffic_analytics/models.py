"""Data model shared by the per-frame aggregation and summary stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple


BoundingBox = Tuple[float, float, float, float]


class CongestionLevel(str, Enum):
    """Coarse three-tier traffic density classification."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True, slots=True)
class RawDetection:
    """Single object reported by the external detector.

    Attributes
    ----------
    class_label:
        Label as reported by the model (``"car"``, ``"person"``, ...).
    score:
        Confidence score.  Nominally in ``[0, 1]`` but never validated here;
        out-of-range scores simply fail the confidence check.
    bbox:
        ``(x, y, width, height)`` in pixels.
    """

    class_label: str
    score: float
    bbox: BoundingBox = (0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True, slots=True)
class ObjectCount:
    """Per-category tally for one sampled frame.

    ``types`` is exposed as a read-only mapping so a built count cannot be
    modified after it has been placed in a log entry.
    """

    total: int = 0
    types: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        types = dict(self.types)
        if self.total < 0 or any(value < 0 for value in types.values()):
            raise ValueError("ObjectCount values must be non-negative")
        if self.total != sum(types.values()):
            raise ValueError(
                f"ObjectCount total {self.total} does not match type breakdown {types}"
            )
        object.__setattr__(self, "types", MappingProxyType(types))


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One sampled frame's aggregated and classified result.

    ``frame_index`` is derived from the elapsed video time and a nominal
    frame rate; it approximates, but is not, the decoded frame number.
    """

    frame_index: int
    timestamp: datetime
    relative_time: float
    vehicles: ObjectCount
    humans: ObjectCount
    animals: ObjectCount
    congestion: CongestionLevel
    incident: bool

    def __post_init__(self) -> None:
        if self.frame_index < 0:
            raise ValueError("frame_index must be non-negative")
        if self.relative_time < 0:
            raise ValueError("relative_time must be non-negative")


@dataclass(frozen=True, slots=True)
class SummaryStats:
    """End-of-run statistics folded from the complete log."""

    average_vehicle_count: float = 0.0
    average_human_count: float = 0.0
    average_animal_count: float = 0.0
    total_incidents: int = 0
    final_congestion_level: CongestionLevel = CongestionLevel.LOW


@dataclass(frozen=True, slots=True)
class DistributionItem:
    """Named value in one of the summary distribution tables."""

    name: str
    value: int


@dataclass(frozen=True, slots=True)
class CurrentFrameStats:
    """Snapshot of the most recently logged frame, for live displays."""

    vehicle_count: int = 0
    human_count: int = 0
    animal_count: int = 0
    congestion: CongestionLevel = CongestionLevel.LOW
    incident: bool = False
    frame_number: int = 0

    @classmethod
    def from_entry(cls, entry: LogEntry) -> "CurrentFrameStats":
        return cls(
            vehicle_count=entry.vehicles.total,
            human_count=entry.humans.total,
            animal_count=entry.animals.total,
            congestion=entry.congestion,
            incident=entry.incident,
            frame_number=entry.frame_index,
        )
