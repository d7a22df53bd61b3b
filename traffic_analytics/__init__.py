"""Streaming traffic analytics over per-frame object detections."""

from .categories import Category, classify
from .config import AnalysisConfig
from .models import (
    CongestionLevel,
    CurrentFrameStats,
    DistributionItem,
    LogEntry,
    ObjectCount,
    RawDetection,
    SummaryStats,
)
from .session import AnalysisSession
from .summary import SummaryReducer, SummaryReport

__all__ = [
    "AnalysisConfig",
    "AnalysisSession",
    "Category",
    "CongestionLevel",
    "CurrentFrameStats",
    "DistributionItem",
    "LogEntry",
    "ObjectCount",
    "RawDetection",
    "SummaryReducer",
    "SummaryReport",
    "SummaryStats",
    "classify",
]
