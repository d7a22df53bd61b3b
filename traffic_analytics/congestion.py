"""Congestion classification from the vehicle count of a frame."""

from __future__ import annotations

from dataclasses import dataclass

from .models import CongestionLevel


@dataclass(frozen=True, slots=True)
class CongestionClassifier:
    """Map a vehicle count to a :class:`CongestionLevel`.

    Both thresholds are exclusive: a count equal to a threshold stays in the
    lower tier.
    """

    high_threshold: int = 10
    medium_threshold: int = 6

    def classify(self, vehicle_count: int) -> CongestionLevel:
        if vehicle_count > self.high_threshold:
            return CongestionLevel.HIGH
        if vehicle_count > self.medium_threshold:
            return CongestionLevel.MEDIUM
        return CongestionLevel.LOW
