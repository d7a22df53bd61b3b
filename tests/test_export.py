from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import json

import pytest

from traffic_analytics import AnalysisConfig, AnalysisSession, RawDetection
from traffic_analytics.export import (
    export_filename,
    load_log,
    log_from_json,
    log_to_json,
    save_log,
    summary_to_dict,
)
from traffic_analytics.scenarios import load_predefined_scenarios
from traffic_analytics.summary import reduce_log


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.current = start

    def __call__(self) -> float:
        self.current += 0.25
        return self.current


def recorded_session() -> AnalysisSession:
    session = AnalysisSession(AnalysisConfig(frame_skip=1), time_func=FakeClock(1_715_000_000.0))
    scenario = load_predefined_scenarios()[0]
    for elapsed, detections in scenario.frames():
        session.process(detections, elapsed)
    return session


def test_exported_log_uses_documented_field_names():
    session = recorded_session()

    payload = json.loads(log_to_json(session.log))

    assert len(payload) == len(session.log)
    first = payload[0]
    assert set(first) == {
        "frameIndex",
        "timestamp",
        "relativeTime",
        "vehicles",
        "humans",
        "animals",
        "congestion",
        "incident",
    }
    assert first["vehicles"] == {"total": 1, "types": {"car": 1}}
    assert first["congestion"] == "Low"
    assert payload[4]["incident"] is True
    assert payload[4]["congestion"] == "High"


def test_log_round_trips_through_json():
    session = recorded_session()

    restored = log_from_json(log_to_json(session.log))

    assert restored == list(session.log)


def test_save_and_load_log(tmp_path):
    session = recorded_session()
    target = tmp_path / "exports" / export_filename("surge.mp4")

    written = save_log(session.log, target)

    assert written.exists()
    assert load_log(written) == list(session.log)


def test_loading_rejects_malformed_exports():
    with pytest.raises(ValueError):
        log_from_json('{"frameIndex": 1}')
    with pytest.raises(ValueError):
        log_from_json('[{"frameIndex": 1}]')

    session = recorded_session()
    payload = json.loads(log_to_json(session.log))
    payload[0]["vehicles"]["total"] = 99
    with pytest.raises(ValueError):
        log_from_json(json.dumps(payload))

    with pytest.raises(json.JSONDecodeError):
        log_from_json("not json")


@pytest.mark.parametrize(
    "field, value",
    [
        ("incident", "false"),
        ("incident", 1),
        ("vehicles", 5),
        ("humans", {"total": 0, "types": ["person"]}),
        ("timestamp", 1715000000),
        ("congestion", "Gridlock"),
        ("timestamp", "yesterday"),
    ],
)
def test_loading_rejects_mistyped_fields(field, value):
    payload = json.loads(log_to_json(recorded_session().log))
    payload[2][field] = value

    with pytest.raises(ValueError):
        log_from_json(json.dumps(payload))


def test_loading_rejects_non_object_entries():
    with pytest.raises(ValueError):
        log_from_json("[1, 2]")


def test_summary_to_dict_lists_statistics_and_distributions():
    session = recorded_session()

    summary = summary_to_dict(reduce_log(session.log))

    assert summary["averageVehicleCount"] == 3.43
    assert summary["averageHumanCount"] == 0.57
    assert summary["averageAnimalCount"] == 0.14
    assert summary["totalIncidents"] == 2
    assert summary["finalCongestionLevel"] == "Low"
    assert {item["name"]: item["value"] for item in summary["vehicleTypeDistribution"]} == {
        "car": 10,
        "truck": 7,
        "bus": 4,
        "motorcycle": 3,
    }
    assert summary["overallDistribution"] == [
        {"name": "Vehicles", "value": 24},
        {"name": "Humans", "value": 4},
        {"name": "Animals", "value": 1},
    ]


@pytest.mark.parametrize(
    "source, expected",
    [
        ("highway.mp4", "traffic_analysis_log_highway.json"),
        ("rush hour.v2.mp4", "traffic_analysis_log_rush_hour.json"),
        ("/videos/cam-01.avi", "traffic_analysis_log_cam_01.json"),
        (None, "traffic_analysis_log_data.json"),
        ("", "traffic_analysis_log_data.json"),
    ],
)
def test_export_filename(source, expected):
    assert export_filename(source) == expected


def test_raw_detection_is_immutable():
    detection = RawDetection("car", 0.9, (1.0, 2.0, 3.0, 4.0))

    with pytest.raises(AttributeError):
        detection.score = 0.1  # type: ignore[misc]
