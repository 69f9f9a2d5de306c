"""
Data models for the activity README updater.

This module contains the shared data structures used across all modules.
"""

import datetime
from dataclasses import dataclass, field
from typing import Dict, List

TIME_OF_DAY_LABELS = ("Morning", "Daytime", "Evening", "Night")
WEEKDAY_LABELS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Ordered label -> count mapping, always holding every label of its group.
BucketCounts = Dict[str, int]


def empty_buckets(labels) -> BucketCounts:
    """Return a bucket mapping with every label set to zero."""
    return {label: 0 for label in labels}


@dataclass
class CommitEvent:
    """A single contribution node from the commit-history API."""
    occurred_at: datetime.datetime
    commit_count: int = 1


@dataclass
class UsageEntry:
    """Time spent on a language or an editor."""
    name: str
    seconds: float


@dataclass
class WakaStats:
    """Per-language and per-editor usage for the trailing week."""
    languages: List[UsageEntry] = field(default_factory=list)
    editors: List[UsageEntry] = field(default_factory=list)


@dataclass
class RenderRow:
    """One chart line: label, raw value, share of the group and its bar."""
    label: str
    value: float
    percentage: float
    bar: str = ""


@dataclass
class CommitSummary:
    """Commit activity bucketed by time of day and weekday."""
    hours: BucketCounts
    weekdays: BucketCounts
    total: int
    most_productive_day: str
    early_or_productive: str


@dataclass
class UsageSummary:
    """Top languages and editors with their shares."""
    languages: List[RenderRow]
    editors: List[RenderRow]
