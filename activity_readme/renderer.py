"""
Report rendering module.

This module contains the ReportRenderer class responsible for turning the
aggregated commit and usage figures into the fixed-width text block that is
spliced into the README.
"""

import datetime
import math
from email.utils import format_datetime
from typing import List, Sequence

from .models import TIME_OF_DAY_LABELS, WEEKDAY_LABELS, BucketCounts, CommitSummary, RenderRow, UsageSummary
from .aggregator import percentages

FILLED = "█"
EMPTY = "░"
DEFAULT_WIDTH = 24

HOUR_EMOJI = {
    "Morning": "🌞",
    "Daytime": "🌆",
    "Evening": "🌃",
    "Night": "🌙",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def make_bar(value: float, max_value: float, width: int = DEFAULT_WIDTH) -> str:
    """
    Proportional bar of exactly ``width`` glyphs.

    ``round_half_up(value / max_value * width)`` filled glyphs followed by
    empty ones. A zero maximum gives an all-empty bar.
    """
    if not max_value:
        return EMPTY * width
    filled = min(max(round_half_up(value / max_value * width), 0), width)
    return FILLED * filled + EMPTY * (width - filled)


def format_minutes(minutes: float) -> str:
    hours, mins = divmod(round_half_up(minutes), 60)
    if hours > 0:
        return f"{hours} hrs {mins} mins"
    return f"{mins} mins"


def pad_right(text: str, width: int) -> str:
    """Space-fill or truncate ``text`` to exactly ``width`` characters."""
    return (text + " " * max(0, width - len(text)))[:width]


def _chart_line(label: str, value: str, bar: str, pct: float) -> str:
    return f"{label} {value} {bar}   {pct:.2f} % "


class ReportRenderer:
    """
    Compose the activity report from commit and usage summaries.

    Args:
        bar_width: Number of glyphs in every bar.
    """

    def __init__(self, bar_width: int = DEFAULT_WIDTH) -> None:
        self.bar_width = bar_width

    def bucket_rows(self, counts: BucketCounts, total: int, labels: Sequence[str]) -> List[RenderRow]:
        """Rows for a bucket group in ``labels`` order, bars scaled to the group maximum."""
        shares = percentages(counts, total)
        group_max = max([counts.get(label, 0) for label in labels] + [1])
        return [
            RenderRow(
                label=label,
                value=counts.get(label, 0),
                percentage=shares.get(label, 0.0),
                bar=make_bar(counts.get(label, 0), group_max, self.bar_width),
            )
            for label in labels
        ]

    def usage_rows(self, rows: Sequence[RenderRow]) -> List[RenderRow]:
        """Copy of ``rows`` with their bars filled in."""
        group_max = max([row.value for row in rows] + [1])
        return [
            RenderRow(row.label, row.value, row.percentage, make_bar(row.value, group_max, self.bar_width))
            for row in rows
        ]

    def hour_lines(self, summary: CommitSummary) -> List[str]:
        return [
            _chart_line(
                f"{HOUR_EMOJI[row.label]} {row.label}",
                pad_right(f"{row.value} commits", 18),
                row.bar,
                row.percentage,
            )
            for row in self.bucket_rows(summary.hours, summary.total, TIME_OF_DAY_LABELS)
        ]

    def weekday_lines(self, summary: CommitSummary) -> List[str]:
        return [
            _chart_line(pad_right(row.label, 24), pad_right(f"{row.value} commits", 8), row.bar, row.percentage)
            for row in self.bucket_rows(summary.weekdays, summary.total, WEEKDAY_LABELS)
        ]

    def usage_lines(self, rows: Sequence[RenderRow]) -> List[str]:
        lines = []
        for row in self.usage_rows(rows):
            mins = round_half_up(row.value / 60)
            lines.append(_chart_line(pad_right(row.label, 24), pad_right(format_minutes(mins), 18), row.bar, row.percentage))
        return lines

    def render(self, commits: CommitSummary, usage: UsageSummary, now: datetime.datetime) -> str:
        """
        Build the full report block.

        Args:
            commits: Bucketed commit activity.
            usage: Top languages and editors.
            now: Time of the run, shown in the trailing "Last Updated" line.

        Returns:
            The report text, without the surrounding section markers.
        """
        if now.tzinfo is None:
            now = now.replace(tzinfo=datetime.timezone.utc)

        lines: List[str] = []
        lines.append(f"**{commits.early_or_productive}**")
        lines.append("")
        lines.append("```text")
        lines.extend(self.hour_lines(commits))
        lines.append("```")
        lines.append(f"📅 **I'm Most Productive on {commits.most_productive_day}**")
        lines.append("")
        lines.append("```text")
        lines.extend(self.weekday_lines(commits))
        lines.append("```")
        lines.append("")
        lines.append("📊 **This Week I Spent My Time On**")
        lines.append("")
        lines.append("```text")
        lines.append("💬 Programming Languages: ")
        lines.extend(self.usage_lines(usage.languages))
        lines.append("")
        lines.append("🔥 Editors: ")
        lines.extend(self.usage_lines(usage.editors))
        lines.append("```")
        lines.append("")
        lines.append(f" Last Updated on {format_datetime(now.astimezone(datetime.timezone.utc), usegmt=True)}")

        return "\n".join(lines)
