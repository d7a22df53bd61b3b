"""Configuration dataclasses for the traffic analytics pipeline."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class AnalysisConfig:
    """Runtime configuration for :class:`traffic_analytics.session.AnalysisSession`.

    Parameters
    ----------
    confidence_threshold:
        Minimum detection score (inclusive) for an object to be counted.
    iou_threshold:
        Non-maximum suppression overlap passed through to the detector.
    frame_skip:
        Analyse every ``frame_skip``-th rendered frame; ``1`` analyses all.
    congestion_high_threshold, congestion_medium_threshold:
        Vehicle counts strictly above which congestion is High / Medium.
    incident_window_size:
        Number of recent vehicle counts kept for incident detection.
    incident_deviation_threshold:
        Minimum deviation from the rolling average that is flagged.
    nominal_frame_rate:
        Frames per second assumed when deriving frame numbers from time.
    log_preview_count:
        Number of entries shown at each end of the log preview.
    """

    confidence_threshold: float = 0.5
    iou_threshold: float = 0.45
    frame_skip: int = 3
    congestion_high_threshold: int = 10
    congestion_medium_threshold: int = 6
    incident_window_size: int = 5
    incident_deviation_threshold: float = 4
    nominal_frame_rate: float = 30.0
    log_preview_count: int = 5

    def validate(self) -> None:
        """Reject out-of-range values before they reach the pipeline."""

        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must be within [0, 1]")
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be within [0, 1]")
        if self.frame_skip < 1:
            raise ValueError("frame_skip must be at least 1")
        if self.incident_window_size < 1:
            raise ValueError("incident_window_size must be at least 1")
        if self.incident_deviation_threshold < 0:
            raise ValueError("incident_deviation_threshold must be non-negative")
        if self.congestion_medium_threshold < 0 or self.congestion_high_threshold < 0:
            raise ValueError("congestion thresholds must be non-negative")
        if self.congestion_medium_threshold > self.congestion_high_threshold:
            raise ValueError(
                "congestion_medium_threshold must not exceed congestion_high_threshold"
            )
        if self.nominal_frame_rate <= 0:
            raise ValueError("nominal_frame_rate must be positive")
        if self.log_preview_count < 0:
            raise ValueError("log_preview_count must be non-negative")
