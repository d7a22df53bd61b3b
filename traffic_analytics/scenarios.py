"""Predefined detection scenarios for running the pipeline without a model."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from .models import RawDetection


@dataclass(frozen=True)
class DetectionScenario:
    """Repeatable sequence of per-frame object counts.

    Each step becomes one list of :class:`RawDetection`; labels are cycled
    from the corresponding ``*_labels`` tuple so vehicle subtypes vary.
    """

    name: str
    description: str
    vehicle_counts: List[int]
    human_counts: List[int] = field(default_factory=list)
    animal_counts: List[int] = field(default_factory=list)
    step_seconds: float = 0.1
    score: float = 0.9
    vehicle_labels: Tuple[str, ...] = ("car", "truck", "bus", "motorcycle")
    human_labels: Tuple[str, ...] = ("person",)
    animal_labels: Tuple[str, ...] = ("dog", "cat")

    def __post_init__(self) -> None:  # type: ignore[override]
        if not self.vehicle_counts:
            raise ValueError("A scenario must contain at least one step")
        for counts in (self.human_counts, self.animal_counts):
            if counts and len(counts) != len(self.vehicle_counts):
                raise ValueError("All count series must have the same number of steps")
        if self.step_seconds <= 0:
            raise ValueError("step_seconds must be positive")

    def __len__(self) -> int:
        return len(self.vehicle_counts)

    @staticmethod
    def _detections(count: int, labels: Sequence[str], score: float) -> List[RawDetection]:
        return [
            RawDetection(
                class_label=labels[index % len(labels)],
                score=score,
                bbox=(float(index * 40), 0.0, 32.0, 32.0),
            )
            for index in range(count)
        ]

    def frames(self) -> Iterator[Tuple[float, List[RawDetection]]]:
        """Yield ``(elapsed_seconds, detections)`` for each step."""

        for step, vehicles in enumerate(self.vehicle_counts):
            humans = self.human_counts[step] if self.human_counts else 0
            animals = self.animal_counts[step] if self.animal_counts else 0
            detections = (
                self._detections(vehicles, self.vehicle_labels, self.score)
                + self._detections(humans, self.human_labels, self.score)
                + self._detections(animals, self.animal_labels, self.score)
            )
            yield step * self.step_seconds, detections


def load_predefined_scenarios() -> List[DetectionScenario]:
    """Return curated scenarios that cover common traffic patterns."""

    sudden_surge = DetectionScenario(
        name="sudden-surge",
        description=(
            "Light, steady traffic interrupted by a single sharp spike, as when a "
            "queue is released onto the monitored road."
        ),
        vehicle_counts=[1, 2, 1, 2, 15, 2, 1],
        human_counts=[0, 1, 0, 0, 2, 1, 0],
        animal_counts=[0, 0, 0, 1, 0, 0, 0],
    )

    rush_hour = DetectionScenario(
        name="rush-hour",
        description=(
            "Traffic builds up gradually to heavy congestion and then eases off; "
            "useful for checking congestion tiers without abrupt incidents."
        ),
        vehicle_counts=[3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 12, 11, 10, 9, 8, 7, 6, 5],
        human_counts=[2, 2, 3, 3, 4, 4, 4, 5, 5, 5, 5, 4, 4, 3, 3, 2, 2, 2],
    )

    quiet_street = DetectionScenario(
        name="quiet-street",
        description="Almost empty residential street with pedestrians and pets.",
        vehicle_counts=[0, 1, 0, 0, 1, 0, 0, 1],
        human_counts=[1, 2, 2, 1, 0, 1, 2, 1],
        animal_counts=[1, 1, 0, 0, 1, 2, 1, 0],
    )

    return [sudden_surge, rush_hour, quiet_street]
