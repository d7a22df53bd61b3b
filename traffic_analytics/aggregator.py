"""Per-frame object counting grouped by category."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, NamedTuple

from .categories import Category, classify
from .models import ObjectCount, RawDetection


__all__ = ["FrameCounts", "aggregate"]


class FrameCounts(NamedTuple):
    """Counts for the three categories of one sampled frame."""

    vehicles: ObjectCount
    humans: ObjectCount
    animals: ObjectCount


def aggregate(detections: Iterable[RawDetection], confidence_threshold: float) -> FrameCounts:
    """Tally ``detections`` per category and per exact class label.

    Detections that do not classify are ignored, so the result depends only on
    the multiset of detections and an empty input gives all-zero counts.
    """

    per_category: Dict[Category, Counter] = {category: Counter() for category in Category}
    for detection in detections:
        category = classify(detection, confidence_threshold)
        if category is not None:
            per_category[category][detection.class_label] += 1

    def _count(category: Category) -> ObjectCount:
        types = per_category[category]
        return ObjectCount(total=sum(types.values()), types=dict(types))

    return FrameCounts(
        vehicles=_count(Category.VEHICLE),
        humans=_count(Category.HUMAN),
        animals=_count(Category.ANIMAL),
    )
