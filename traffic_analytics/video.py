"""Drive an analysis session from a video file using OpenCV."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .detection import ObjectDetector
from .export import export_filename, save_log
from .session import AnalysisSession
from .summary import SummaryReport

logger = logging.getLogger(__name__)

try:  # pragma: no cover - optional runtime dependency
    import cv2
except ImportError as exc:  # pragma: no cover - gracefully degrade when OpenCV missing
    cv2 = None  # type: ignore[assignment]
    _CV2_IMPORT_ERROR = exc
else:  # pragma: no cover - environment dependent
    _CV2_IMPORT_ERROR = None

try:  # pragma: no cover - optional runtime dependency
    import numpy as np
except ImportError as exc:  # pragma: no cover - gracefully degrade when numpy missing
    np = None  # type: ignore[assignment]
    _NUMPY_IMPORT_ERROR = exc
else:  # pragma: no cover - environment dependent
    _NUMPY_IMPORT_ERROR = None


class VideoAnalysisRunner:
    """Read frames from a video file and feed them through a session."""

    def __init__(
        self,
        video_path: str | Path,
        session: AnalysisSession,
        detector: ObjectDetector,
        playback_rate: float = 1.0,
    ) -> None:
        if cv2 is None:  # pragma: no cover - executed when dependency missing
            raise ImportError(
                "OpenCV is required for VideoAnalysisRunner but could not be imported"
            ) from _CV2_IMPORT_ERROR
        if np is None:  # pragma: no cover - executed when dependency missing
            raise ImportError(
                "NumPy is required for VideoAnalysisRunner but could not be imported"
            ) from _NUMPY_IMPORT_ERROR

        self.video_path = Path(video_path).expanduser().resolve()
        if not self.video_path.exists():
            raise FileNotFoundError(f"Video file not found: {self.video_path}")

        self.session = session
        self.detector = detector
        self.playback_rate = playback_rate
        self.capture = cv2.VideoCapture(str(self.video_path))
        if not self.capture.isOpened():  # pragma: no cover - depends on runtime files
            raise FileNotFoundError(f"Unable to open video source: {self.video_path}")

    def _elapsed_seconds(self) -> float:
        return max(0.0, self.capture.get(cv2.CAP_PROP_POS_MSEC) / 1000.0)

    def run(self, max_frames: Optional[int] = None) -> SummaryReport:  # pragma: no cover - needs video
        """Process the video until it ends or ``max_frames`` frames were read."""

        self.session.start()
        frames_read = 0
        try:
            while max_frames is None or frames_read < max_frames:
                ok, frame = self.capture.read()
                if not ok:
                    logger.warning("End of stream reached for %s", self.video_path)
                    break
                frames_read += 1
                # frame is bound per iteration; the lambda runs before the next read
                self.session.tick(
                    self._elapsed_seconds(),
                    lambda: self.detector.detect(frame),
                    playback_rate=self.playback_rate,
                )
        except Exception:
            logger.exception("Error occurred while analysing %s", self.video_path)
            raise
        finally:
            self.close()

        logger.info("Read %d frames, logged %d entries", frames_read, len(self.session.log))
        return self.session.finish()

    def export(self, output: str | Path | None = None) -> Path:
        """Write the session log, defaulting to a name derived from the video."""

        target = Path(output) if output is not None else Path(export_filename(self.video_path.name))
        return save_log(self.session.log, target)

    def close(self) -> None:
        if self.capture is not None:
            self.capture.release()
