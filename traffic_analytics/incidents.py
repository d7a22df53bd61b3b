"""Rolling-window incident detection over sampled vehicle counts."""

from __future__ import annotations

from collections import deque
import logging
from typing import Deque, Tuple

logger = logging.getLogger(__name__)


class IncidentDetector:
    """Flag sudden jumps or drops in vehicle density.

    The detector keeps the ``window_size`` most recent vehicle counts.  Once
    the window is full, the newest count is compared with the mean of the
    counts that precede it in the window; the newest sample is excluded from
    its own baseline.  A deviation of at least ``deviation_threshold`` is an
    incident.  Nothing is flagged during warm-up, and a single-slot window has
    no baseline and never flags.

    Observations must arrive in frame order from a single caller.
    """

    def __init__(self, window_size: int = 5, deviation_threshold: float = 4) -> None:
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        self.window_size = window_size
        self.deviation_threshold = deviation_threshold
        self._window: Deque[int] = deque(maxlen=window_size)

    @property
    def window(self) -> Tuple[int, ...]:
        """Read-only copy of the current window, oldest first."""

        return tuple(self._window)

    @property
    def is_warm(self) -> bool:
        return len(self._window) == self.window_size

    def observe(self, vehicle_count: int) -> bool:
        """Record ``vehicle_count`` and return whether it is an incident."""

        self._window.append(vehicle_count)
        if not self.is_warm:
            return False

        baseline_size = self.window_size - 1
        if baseline_size == 0:
            return False

        baseline = list(self._window)[:-1]
        window_average = sum(baseline) / baseline_size
        deviation = abs(vehicle_count - window_average)
        if deviation >= self.deviation_threshold:
            logger.info(
                "Incident: vehicle count %d deviates %.2f from rolling average %.2f",
                vehicle_count,
                deviation,
                window_average,
            )
            return True
        return False

    def reset(self) -> None:
        """Empty the window at the start of a new run."""

        self._window.clear()
