"""Object detector backed by Ultralytics YOLO models."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, List, Optional

from .models import RawDetection

logger = logging.getLogger(__name__)

try:  # pragma: no cover - exercised at runtime when YOLO is used
    from ultralytics import YOLO
except ImportError as exc:  # pragma: no cover - handled lazily in ObjectDetector
    YOLO = None  # type: ignore[assignment]
    _YOLO_IMPORT_ERROR = exc
else:  # pragma: no cover - import success path depends on runtime environment
    _YOLO_IMPORT_ERROR = None


@dataclass(slots=True)
class DetectorConfig:
    """Configuration options for the YOLO object detector."""

    model_path: str | Path = "yolov8n.pt"
    confidence: float = 0.5
    iou: float = 0.45
    device: str | None = None
    max_detections: Optional[int] = 100


def detections_from_result(result: Any, names: dict) -> List[RawDetection]:
    """Convert one Ultralytics result into :class:`RawDetection` objects.

    Boxes are reported as ``(x, y, width, height)``.  Class ids missing from
    ``names`` keep their numeric id as label and are later ignored by the
    classifier.
    """

    boxes = getattr(result, "boxes", None)
    if boxes is None:
        return []

    detections: List[RawDetection] = []
    for cls, conf, xyxy in zip(boxes.cls, boxes.conf, boxes.xyxy):
        class_id = int(cls)
        x1, y1, x2, y2 = (float(value) for value in xyxy.tolist())
        detections.append(
            RawDetection(
                class_label=str(names.get(class_id, class_id)),
                score=float(conf),
                bbox=(x1, y1, x2 - x1, y2 - y1),
            )
        )
    return detections


class ObjectDetector:
    """Run a YOLO model on frames and report every detected object."""

    def __init__(self, config: DetectorConfig | None = None) -> None:
        if YOLO is None:  # pragma: no cover - requires optional dependency
            raise ImportError(
                "ultralytics is required for YOLO object detection. "
                "Install it with `pip install ultralytics`."
            ) from _YOLO_IMPORT_ERROR

        self.config = config or DetectorConfig()
        logger.info("Loading YOLO model from %s", self.config.model_path)
        # YOLO accepts either a local path or a model name it can download
        self.model = YOLO(str(self.config.model_path))

    def detect(self, frame: Any) -> List[RawDetection]:  # pragma: no cover - needs model weights
        """Detect objects on ``frame`` (a BGR :class:`numpy.ndarray`)."""

        kwargs = {
            "verbose": False,
            "conf": self.config.confidence,
            "iou": self.config.iou,
        }
        if self.config.device is not None:
            kwargs["device"] = self.config.device
        if self.config.max_detections is not None:
            kwargs["max_det"] = self.config.max_detections

        result = self.model(frame, **kwargs)[0]
        return detections_from_result(result, self.model.names)
