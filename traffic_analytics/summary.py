"""End-of-run reduction of the analysis log."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Sequence

from .models import DistributionItem, LogEntry, SummaryStats


OVERALL_CATEGORY_NAMES = ("Vehicles", "Humans", "Animals")


def _average(total: int, count: int) -> float:
    """Mean rounded half away from zero to two decimal places."""

    if count == 0:
        return 0.0
    value = Decimal(total) / Decimal(count)
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True, slots=True)
class SummaryReport:
    """Summary statistics plus the two distribution tables."""

    stats: SummaryStats = field(default_factory=SummaryStats)
    vehicle_type_distribution: List[DistributionItem] = field(default_factory=list)
    overall_distribution: List[DistributionItem] = field(default_factory=list)


class SummaryReducer:
    """Fold a complete log into a :class:`SummaryReport`.

    The reduction is recomputed from scratch on every call and never touches
    the log, so it can be run repeatedly on a growing log.
    """

    def reduce(self, log: Iterable[LogEntry]) -> SummaryReport:
        entries: Sequence[LogEntry] = tuple(log)
        if not entries:
            return SummaryReport()

        total_vehicles = sum(entry.vehicles.total for entry in entries)
        total_humans = sum(entry.humans.total for entry in entries)
        total_animals = sum(entry.animals.total for entry in entries)

        stats = SummaryStats(
            average_vehicle_count=_average(total_vehicles, len(entries)),
            average_human_count=_average(total_humans, len(entries)),
            average_animal_count=_average(total_animals, len(entries)),
            total_incidents=sum(1 for entry in entries if entry.incident),
            final_congestion_level=entries[-1].congestion,
        )

        vehicle_types: Counter = Counter()
        for entry in entries:
            vehicle_types.update(entry.vehicles.types)

        return SummaryReport(
            stats=stats,
            vehicle_type_distribution=[
                DistributionItem(name=name, value=value) for name, value in vehicle_types.items()
            ],
            overall_distribution=[
                DistributionItem(name=name, value=value)
                for name, value in zip(
                    OVERALL_CATEGORY_NAMES, (total_vehicles, total_humans, total_animals)
                )
            ],
        )


def reduce_log(log: Iterable[LogEntry]) -> SummaryReport:
    """Convenience wrapper around :meth:`SummaryReducer.reduce`."""

    return SummaryReducer().reduce(log)


__all__ = [
    "OVERALL_CATEGORY_NAMES",
    "SummaryReducer",
    "SummaryReport",
    "reduce_log",
]
