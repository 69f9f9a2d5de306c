"""
Commit and usage aggregation module.

Buckets commit timestamps by time of day and weekday in the configured
timezone, and turns WakaTime usage into percentage-annotated rows.
"""

import datetime
import logging
from typing import Dict, Iterable, List, Sequence, Tuple

from .models import (
    TIME_OF_DAY_LABELS,
    WEEKDAY_LABELS,
    BucketCounts,
    CommitEvent,
    CommitSummary,
    RenderRow,
    UsageEntry,
    UsageSummary,
    WakaStats,
    empty_buckets,
)

logger = logging.getLogger("activity-readme.aggregator")

TOP_USAGE_LIMIT = 5
NOT_APPLICABLE = "N/A"
EARLY_LABEL = "I'm an Early 🐤"
PRODUCTIVE_LABEL = "I'm Productive"


def time_of_day(hour: int) -> str:
    """
    Classify a local hour (0-23) into one of the four time-of-day buckets.

    [6, 12) is Morning, [12, 18) Daytime, [18, 24) Evening and the rest Night.
    """
    if not 0 <= hour <= 23:
        raise ValueError(f"hour out of range: {hour}")
    if 6 <= hour < 12:
        return "Morning"
    if 12 <= hour < 18:
        return "Daytime"
    if 18 <= hour < 24:
        return "Evening"
    return "Night"


def to_local(moment: datetime.datetime, tz: datetime.tzinfo) -> datetime.datetime:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    return moment.astimezone(tz)


def weekday_name(moment: datetime.datetime) -> str:
    return WEEKDAY_LABELS[moment.weekday()]


def bucket_commits(events: Iterable[CommitEvent], tz: datetime.tzinfo) -> Tuple[BucketCounts, BucketCounts, int]:
    """
    Accumulate commit counts per time-of-day and per weekday bucket.

    Args:
        events: Commit events from the fetcher.
        tz: Timezone the hour and weekday are read in.

    Returns:
        (hour buckets, weekday buckets, total commits)
    """
    hours = empty_buckets(TIME_OF_DAY_LABELS)
    weekdays = empty_buckets(WEEKDAY_LABELS)
    total = 0
    for event in events:
        count = event.commit_count if event.commit_count and event.commit_count > 0 else 1
        local = to_local(event.occurred_at, tz)
        hours[time_of_day(local.hour)] += count
        weekdays[weekday_name(local)] += count
        total += count
    return hours, weekdays, total


def percentages(counts: BucketCounts, total: float) -> Dict[str, float]:
    """Share of ``total`` per bucket, in percent; all zero when total is zero."""
    if not total:
        return {label: 0.0 for label in counts}
    return {label: count / total * 100 for label, count in counts.items()}


def most_productive_day(weekdays: BucketCounts) -> str:
    """
    Weekday with the strictly greatest count.

    Ties go to the earliest day in Monday..Sunday order. Returns "N/A" when
    there are no commits at all.
    """
    best_day = NOT_APPLICABLE
    best = 0
    for day in WEEKDAY_LABELS:
        if weekdays.get(day, 0) > best:
            best = weekdays[day]
            best_day = day
    return best_day


def early_or_productive(hours: BucketCounts, total: int) -> str:
    shares = percentages(hours, total)
    return EARLY_LABEL if shares["Morning"] > shares["Daytime"] else PRODUCTIVE_LABEL


def top_usage(entries: Sequence[UsageEntry], limit: int = TOP_USAGE_LIMIT) -> List[RenderRow]:
    """
    Keep the first ``limit`` entries and compute their shares.

    Entries arrive sorted by WakaTime and are not re-sorted. Percentages are
    relative to the sum of the kept entries only.
    """
    kept = list(entries)[:limit]
    total = sum(entry.seconds for entry in kept)
    return [
        RenderRow(label=entry.name, value=entry.seconds, percentage=entry.seconds / total * 100 if total else 0.0)
        for entry in kept
    ]


def summarize_commits(events: Iterable[CommitEvent], tz: datetime.tzinfo) -> CommitSummary:
    hours, weekdays, total = bucket_commits(events, tz)
    logger.info("Aggregated %d commits", total)
    return CommitSummary(
        hours=hours,
        weekdays=weekdays,
        total=total,
        most_productive_day=most_productive_day(weekdays),
        early_or_productive=early_or_productive(hours, total),
    )


def summarize_usage(stats: WakaStats, limit: int = TOP_USAGE_LIMIT) -> UsageSummary:
    return UsageSummary(languages=top_usage(stats.languages, limit), editors=top_usage(stats.editors, limit))
