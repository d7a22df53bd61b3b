"""Run controller tying the per-frame pipeline to a frame source."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .config import AnalysisConfig
from .congestion import CongestionClassifier
from .incidents import IncidentDetector
from .log import AnalysisLog, LogEntryBuilder
from .models import CurrentFrameStats, LogEntry, RawDetection
from .summary import SummaryReducer, SummaryReport

logger = logging.getLogger(__name__)

DetectFunc = Callable[[], Sequence[RawDetection]]


class AnalysisSession:
    """Own the state of one analysis run.

    A session holds the log, the incident window and the tick counter used
    for frame skipping.  Independent sessions share nothing, so several
    feeds can be analysed side by side.
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        time_func: Callable[[], float] | None = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.config.validate()

        self.log = AnalysisLog()
        self.incidents = IncidentDetector(
            window_size=self.config.incident_window_size,
            deviation_threshold=self.config.incident_deviation_threshold,
        )
        self.builder = LogEntryBuilder(
            log=self.log,
            confidence_threshold=self.config.confidence_threshold,
            congestion=CongestionClassifier(
                high_threshold=self.config.congestion_high_threshold,
                medium_threshold=self.config.congestion_medium_threshold,
            ),
            incidents=self.incidents,
            nominal_frame_rate=self.config.nominal_frame_rate,
            time_func=time_func,
        )
        self.reducer = SummaryReducer()

        self.ticks = 0
        self.current_stats = CurrentFrameStats()
        self.summary: Optional[SummaryReport] = None

    @property
    def has_processed(self) -> bool:
        return self.summary is not None

    def reset(self) -> None:
        """Clear all run state so a new run starts from scratch."""

        self.log.clear()
        self.incidents.reset()
        self.ticks = 0
        self.current_stats = CurrentFrameStats()
        self.summary = None
        logger.info("Analysis session reset")

    def start(self) -> None:
        """Begin a run, discarding the results of a finished one."""

        if self.has_processed:
            self.reset()
        logger.info(
            "Analysis started (confidence=%.2f, frame_skip=%d)",
            self.config.confidence_threshold,
            self.config.frame_skip,
        )

    def should_sample(self) -> bool:
        return self.ticks % self.config.frame_skip == 0

    def tick(
        self,
        video_time: float,
        detect: DetectFunc,
        playback_rate: float = 1.0,
    ) -> Optional[LogEntry]:
        """Advance one rendered frame.

        ``detect`` is only called on sampled ticks.  Returns the new log entry,
        or ``None`` when the tick was skipped.
        """

        sampled = self.should_sample()
        self.ticks += 1
        if not sampled:
            return None
        return self.process(detect(), video_time, playback_rate)

    def process(
        self,
        detections: Sequence[RawDetection],
        video_time: float,
        playback_rate: float = 1.0,
    ) -> LogEntry:
        """Log one frame's detections, bypassing frame skipping."""

        entry = self.builder.build(detections, video_time, playback_rate)
        self.current_stats = CurrentFrameStats.from_entry(entry)
        return entry

    def preview(self) -> Tuple[List[LogEntry], List[LogEntry]]:
        return self.log.preview(self.config.log_preview_count)

    def summarize(self) -> SummaryReport:
        """Summary of the log so far without finishing the run."""

        return self.reducer.reduce(self.log.snapshot())

    def finish(self) -> SummaryReport:
        """Finalise the run and return its summary."""

        report = self.summarize()
        self.summary = report
        stats = report.stats
        logger.info(
            "Run complete: %d entries | avg vehicles=%.2f humans=%.2f animals=%.2f | "
            "incidents=%d | final congestion=%s",
            len(self.log),
            stats.average_vehicle_count,
            stats.average_human_count,
            stats.average_animal_count,
            stats.total_incidents,
            stats.final_congestion_level.value,
        )
        return report
