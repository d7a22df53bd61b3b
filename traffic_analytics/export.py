"""JSON export and import of analysis logs and summaries."""

from __future__ import annotations

from datetime import datetime
import json
import logging
from pathlib import Path
import re
from typing import Any, Dict, Iterable, List, Optional

from .models import CongestionLevel, LogEntry, ObjectCount
from .summary import SummaryReport

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def _count_to_dict(count: ObjectCount) -> Dict[str, Any]:
    return {"total": count.total, "types": dict(count.types)}


def _count_from_dict(data: Dict[str, Any]) -> ObjectCount:
    return ObjectCount(
        total=int(data["total"]),
        types={str(name): int(value) for name, value in data.get("types", {}).items()},
    )


def entry_to_dict(entry: LogEntry) -> Dict[str, Any]:
    return {
        "frameIndex": entry.frame_index,
        "timestamp": entry.timestamp.isoformat(),
        "relativeTime": entry.relative_time,
        "vehicles": _count_to_dict(entry.vehicles),
        "humans": _count_to_dict(entry.humans),
        "animals": _count_to_dict(entry.animals),
        "congestion": entry.congestion.value,
        "incident": entry.incident,
    }


def entry_from_dict(data: Dict[str, Any]) -> LogEntry:
    """Rebuild a :class:`LogEntry`, raising ``ValueError`` for malformed data."""

    try:
        incident = data["incident"]
        if not isinstance(incident, bool):
            raise ValueError(f"incident must be a boolean, got {incident!r}")
        return LogEntry(
            frame_index=int(data["frameIndex"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            relative_time=float(data["relativeTime"]),
            vehicles=_count_from_dict(data["vehicles"]),
            humans=_count_from_dict(data["humans"]),
            animals=_count_from_dict(data["animals"]),
            congestion=CongestionLevel(data["congestion"]),
            incident=incident,
        )
    except KeyError as exc:
        raise ValueError(f"Log entry is missing field {exc.args[0]!r}") from exc
    except (TypeError, AttributeError) as exc:
        raise ValueError(f"Malformed log entry: {exc}") from exc


def log_to_json(log: Iterable[LogEntry], indent: Optional[int] = 2) -> str:
    """Serialise ``log`` to a JSON array, preserving entry order."""

    return json.dumps([entry_to_dict(entry) for entry in log], indent=indent)


def log_from_json(text: str) -> List[LogEntry]:
    payload = json.loads(text)
    if not isinstance(payload, list):
        raise ValueError("Exported log must be a JSON array")
    return [entry_from_dict(item) for item in payload]


def save_log(log: Iterable[LogEntry], path: str | Path) -> Path:
    """Write ``log`` as JSON to ``path`` and return the resolved path."""

    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(log_to_json(log), encoding="utf-8")
    logger.info("Analysis log written to %s", target)
    return target


def load_log(path: str | Path) -> List[LogEntry]:
    return log_from_json(Path(path).expanduser().read_text(encoding="utf-8"))


def summary_to_dict(report: SummaryReport) -> Dict[str, Any]:
    stats = report.stats
    return {
        "averageVehicleCount": stats.average_vehicle_count,
        "averageHumanCount": stats.average_human_count,
        "averageAnimalCount": stats.average_animal_count,
        "totalIncidents": stats.total_incidents,
        "finalCongestionLevel": stats.final_congestion_level.value,
        "vehicleTypeDistribution": [
            {"name": item.name, "value": item.value} for item in report.vehicle_type_distribution
        ],
        "overallDistribution": [
            {"name": item.name, "value": item.value} for item in report.overall_distribution
        ],
    }


def export_filename(source_name: str | None) -> str:
    """Suggested download name for the log of ``source_name``.

    ``"rush hour.v2.mp4"`` becomes ``traffic_analysis_log_rush_hour.json``.
    """

    stem = ""
    if source_name:
        stem = _UNSAFE_FILENAME_CHARS.sub("_", Path(source_name).name.split(".")[0])
    return f"traffic_analysis_log_{stem or 'data'}.json"
