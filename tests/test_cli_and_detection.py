"""Tests for the command line entry point and the detector adapters."""

import sys
from pathlib import Path
from types import SimpleNamespace

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

try:
    import cv2
    import numpy as np
except ImportError:
    cv2 = None
    np = None

from main import build_parser, main
from traffic_analytics import AnalysisSession
from traffic_analytics.detection import detections_from_result
from traffic_analytics.export import load_log


class FakeTensor:
    def __init__(self, values):
        self.values = values

    def tolist(self):
        return list(self.values)


def test_parser_defaults():
    args = build_parser().parse_args([])

    assert args.mode == "simulation"
    assert args.confidence == 0.5
    assert args.iou == 0.45
    assert args.frame_skip == 3
    assert args.scenario == "sudden-surge"


def test_simulation_mode_writes_log(tmp_path):
    output = tmp_path / "log.json"

    report = main(["--mode", "simulation", "--scenario", "sudden-surge", "--output", str(output)])

    assert report.stats.total_incidents == 2
    entries = load_log(output)
    assert len(entries) == 7
    assert [entry.vehicles.total for entry in entries] == [1, 2, 1, 2, 15, 2, 1]


def test_invalid_configuration_exits_with_usage_error():
    with pytest.raises(SystemExit):
        main(["--frame-skip", "0"])


def test_detections_from_result_converts_boxes():
    result = SimpleNamespace(
        boxes=SimpleNamespace(
            cls=[2, 0, 99],
            conf=[0.91, 0.42, 0.77],
            xyxy=[
                FakeTensor([10.0, 20.0, 50.0, 80.0]),
                FakeTensor([0.0, 0.0, 5.0, 15.0]),
                FakeTensor([1.0, 1.0, 2.0, 2.0]),
            ],
        )
    )

    detections = detections_from_result(result, {0: "person", 2: "car"})

    assert [d.class_label for d in detections] == ["car", "person", "99"]
    assert detections[0].bbox == (10.0, 20.0, 40.0, 60.0)
    assert detections[1].score == pytest.approx(0.42)


def test_detections_from_result_without_boxes():
    assert detections_from_result(SimpleNamespace(boxes=None), {}) == []


def test_converted_detections_feed_the_session():
    result = SimpleNamespace(
        boxes=SimpleNamespace(
            cls=[2, 7, 0, 16, 2],
            conf=[0.9, 0.8, 0.7, 0.6, 0.3],
            xyxy=[FakeTensor([0.0, 0.0, 1.0, 1.0])] * 5,
        )
    )
    names = {0: "person", 2: "car", 7: "truck", 16: "dog"}
    session = AnalysisSession()

    entry = session.process(detections_from_result(result, names), video_time=0.0)

    assert entry.vehicles.types == {"car": 1, "truck": 1}
    assert entry.humans.total == 1
    assert entry.animals.total == 1


@pytest.mark.skipif(cv2 is None or np is None, reason="Requires cv2 and numpy")
def test_video_runner_rejects_missing_file(tmp_path):
    from traffic_analytics.video import VideoAnalysisRunner

    with pytest.raises(FileNotFoundError):
        VideoAnalysisRunner(tmp_path / "missing.mp4", AnalysisSession(), detector=None)


def test_video_runner_reports_missing_opencv_as_import_error(monkeypatch, tmp_path):
    from traffic_analytics import video

    monkeypatch.setattr(video, "cv2", None)

    with pytest.raises(ImportError):
        video.VideoAnalysisRunner(tmp_path / "clip.mp4", AnalysisSession(), detector=None)
