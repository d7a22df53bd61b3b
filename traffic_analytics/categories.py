"""Mapping from detector class labels to coarse object categories."""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional

from .models import RawDetection


class Category(str, Enum):
    """Coarse grouping of detector labels."""

    VEHICLE = "Vehicle"
    HUMAN = "Human"
    ANIMAL = "Animal"


# COCO label names as emitted by the detector.
VEHICLE_CLASS_NAMES: FrozenSet[str] = frozenset(
    {"bicycle", "car", "motorcycle", "bus", "truck", "train", "boat", "airplane"}
)
HUMAN_CLASS_NAMES: FrozenSet[str] = frozenset({"person"})
ANIMAL_CLASS_NAMES: FrozenSet[str] = frozenset(
    {"bird", "cat", "dog", "horse", "sheep", "cow", "elephant", "bear", "zebra", "giraffe"}
)

CATEGORY_LABELS: Dict[Category, FrozenSet[str]] = {
    Category.VEHICLE: VEHICLE_CLASS_NAMES,
    Category.HUMAN: HUMAN_CLASS_NAMES,
    Category.ANIMAL: ANIMAL_CLASS_NAMES,
}


def build_label_index(tables: Dict[Category, FrozenSet[str]]) -> Dict[str, Category]:
    """Invert category label tables, rejecting labels listed under two categories."""

    index: Dict[str, Category] = {}
    for category, labels in tables.items():
        for label in labels:
            if label in index:
                raise ValueError(
                    f"Label {label!r} belongs to both {index[label].value} and {category.value}"
                )
            index[label] = category
    return index


_LABEL_TO_CATEGORY = build_label_index(CATEGORY_LABELS)


def classify(detection: RawDetection, confidence_threshold: float) -> Optional[Category]:
    """Return the category of ``detection`` or ``None`` when it is not counted.

    A detection is counted when its score reaches ``confidence_threshold``
    (inclusive) and its label belongs to one of the category tables.
    Unknown labels and low or malformed scores yield ``None``.
    """

    if not detection.score >= confidence_threshold:
        return None
    return _LABEL_TO_CATEGORY.get(detection.class_label)
