"""Append-only analysis log and the per-frame entry builder."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import math
import time
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from .aggregator import aggregate
from .congestion import CongestionClassifier
from .incidents import IncidentDetector
from .models import LogEntry, RawDetection

logger = logging.getLogger(__name__)


class AnalysisLog:
    """Ordered, append-only sequence of :class:`LogEntry` for one run."""

    def __init__(self, entries: Iterable[LogEntry] = ()) -> None:
        self._entries: List[LogEntry] = []
        for entry in entries:
            self.append(entry)

    def check_time(self, relative_time: float) -> None:
        """Raise ``ValueError`` unless ``relative_time`` may follow the last entry."""

        if relative_time < 0:
            raise ValueError(f"relative_time {relative_time} must be non-negative")
        if self._entries and relative_time < self._entries[-1].relative_time:
            raise ValueError(
                f"relative_time {relative_time} precedes previous entry "
                f"({self._entries[-1].relative_time})"
            )

    def append(self, entry: LogEntry) -> None:
        self.check_time(entry.relative_time)
        self._entries.append(entry)

    def snapshot(self) -> Tuple[LogEntry, ...]:
        """Frozen copy safe to hand to readers while the run continues."""

        return tuple(self._entries)

    def preview(self, count: int) -> Tuple[List[LogEntry], List[LogEntry]]:
        """Return the first ``count`` entries and the non-overlapping last ``count``."""

        head = self._entries[:count]
        tail = self._entries[max(count, len(self._entries) - count):]
        return head, tail

    @property
    def last(self) -> Optional[LogEntry]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> LogEntry:
        return self._entries[index]


class LogEntryBuilder:
    """Turn one frame's detections into a :class:`LogEntry` and log it.

    Each call to :meth:`build` advances the incident window once and appends
    exactly one entry to ``log``.  A frame whose time precedes the last
    entry is rejected with ``ValueError`` before any state changes.  Calls
    must be sequential and in frame order.
    """

    def __init__(
        self,
        log: AnalysisLog,
        confidence_threshold: float,
        congestion: CongestionClassifier,
        incidents: IncidentDetector,
        nominal_frame_rate: float = 30.0,
        time_func: Callable[[], float] | None = None,
    ) -> None:
        self.log = log
        self.confidence_threshold = confidence_threshold
        self.congestion = congestion
        self.incidents = incidents
        self.nominal_frame_rate = nominal_frame_rate
        self.time_func = time_func or time.time

    def frame_index(self, relative_time: float, playback_rate: float = 1.0) -> int:
        """Approximate frame number from elapsed video time.

        This is ``floor(time * rate * nominal_fps)``; variable frame rate
        sources and frame skipping make it drift from the decoded frame.
        """

        return math.floor(relative_time * playback_rate * self.nominal_frame_rate)

    def build(
        self,
        detections: Sequence[RawDetection],
        relative_time: float,
        playback_rate: float = 1.0,
    ) -> LogEntry:
        # Rejected frames must leave the incident window untouched
        self.log.check_time(relative_time)

        counts = aggregate(detections, self.confidence_threshold)
        vehicle_count = counts.vehicles.total
        congestion = self.congestion.classify(vehicle_count)
        incident = self.incidents.observe(vehicle_count)

        entry = LogEntry(
            frame_index=self.frame_index(relative_time, playback_rate),
            timestamp=datetime.fromtimestamp(self.time_func(), tz=timezone.utc),
            relative_time=relative_time,
            vehicles=counts.vehicles,
            humans=counts.humans,
            animals=counts.animals,
            congestion=congestion,
            incident=incident,
        )
        self.log.append(entry)
        logger.debug(
            "Frame %d @ %.2fs | vehicles=%d humans=%d animals=%d congestion=%s incident=%s",
            entry.frame_index,
            relative_time,
            counts.vehicles.total,
            counts.humans.total,
            counts.animals.total,
            congestion.value,
            incident,
        )
        return entry
