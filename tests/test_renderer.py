"""
tests/test_renderer.py

Bars, durations, padding and the assembled report block.
"""

import datetime

import pytest

from activity_readme.aggregator import summarize_commits, summarize_usage
from activity_readme.models import CommitEvent, UsageEntry, WakaStats
from activity_readme.renderer import EMPTY, FILLED, ReportRenderer, format_minutes, make_bar, pad_right, round_half_up

UTC = datetime.timezone.utc
NOW = datetime.datetime(2026, 10, 19, 3, 24, 0, tzinfo=UTC)


@pytest.mark.parametrize("value, max_value, width", [(0, 10, 24), (3, 7, 24), (7, 7, 10), (1, 3, 5), (2, 3, 1)])
def test_bar_always_has_exact_width(value, max_value, width):
    bar = make_bar(value, max_value, width)

    assert len(bar) == width
    assert bar == FILLED * bar.count(FILLED) + EMPTY * bar.count(EMPTY)


def test_bar_with_zero_max_is_empty():
    assert make_bar(0, 0, 24) == EMPTY * 24


def test_bar_rounds_halves_up():
    # 1/48 * 24 == 0.5 and 5/48 * 24 == 2.5
    assert make_bar(1, 48, 24).count(FILLED) == 1
    assert make_bar(5, 48, 24).count(FILLED) == 3


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert round_half_up(-0.5) == -1


@pytest.mark.parametrize("minutes, expected", [
    (0, "0 mins"),
    (59, "59 mins"),
    (60, "1 hrs 0 mins"),
    (125, "2 hrs 5 mins"),
    (59.6, "1 hrs 0 mins"),
    (119.5, "2 hrs 0 mins"),
    (29.4, "29 mins"),
])
def test_format_minutes(minutes, expected):
    assert format_minutes(minutes) == expected


def test_pad_right():
    assert pad_right("Go", 5) == "Go   "
    assert pad_right("TypeScript", 4) == "Type"
    assert pad_right("", 3) == "   "


def test_render_report_layout():
    commits = summarize_commits([
        CommitEvent(datetime.datetime(2026, 10, 19, 8, 0, tzinfo=UTC), 2),
        CommitEvent(datetime.datetime(2026, 10, 19, 13, 0, tzinfo=UTC), 1),
    ], UTC)
    usage = summarize_usage(WakaStats(
        languages=[UsageEntry("Python", 7500.0), UsageEntry("Go", 2500.0)],
        editors=[UsageEntry("VS Code", 600.0)],
    ))

    block = ReportRenderer().render(commits, usage, NOW)
    lines = block.split("\n")

    assert lines[0] == "**I'm an Early 🐤**"
    assert lines[2] == "```text"
    assert lines[3] == "🌞 Morning " + pad_right("2 commits", 18) + " " + FILLED * 24 + "   66.67 % "
    assert lines[4] == "🌆 Daytime " + pad_right("1 commits", 18) + " " + FILLED * 12 + EMPTY * 12 + "   33.33 % "
    assert lines[6] == "🌙 Night " + pad_right("0 commits", 18) + " " + EMPTY * 24 + "   0.00 % "
    assert lines[8] == "📅 **I'm Most Productive on Monday**"
    # weekday count column is 8 characters wide
    assert lines[11] == pad_right("Monday", 24) + " 3 commit " + FILLED * 24 + "   100.00 % "
    assert lines[17] == pad_right("Sunday", 24) + " 0 commit " + EMPTY * 24 + "   0.00 % "
    assert "📊 **This Week I Spent My Time On**" in lines
    assert "💬 Programming Languages: " in lines
    assert pad_right("Python", 24) + " " + pad_right("2 hrs 5 mins", 18) + " " + FILLED * 24 + "   75.00 % " in lines
    assert pad_right("Go", 24) + " " + pad_right("42 mins", 18) + " " + FILLED * 8 + EMPTY * 16 + "   25.00 % " in lines
    assert pad_right("VS Code", 24) + " " + pad_right("10 mins", 18) + " " + FILLED * 24 + "   100.00 % " in lines
    assert lines[-1] == " Last Updated on Mon, 19 Oct 2026 03:24:00 GMT"
    assert sum(1 for line in lines if line.startswith("```")) == 6


def test_render_without_any_activity():
    block = ReportRenderer(bar_width=10).render(summarize_commits([], UTC), summarize_usage(WakaStats()), NOW)

    assert block.startswith("**I'm Productive**")
    assert "📅 **I'm Most Productive on N/A**" in block
    assert FILLED not in block
    assert "💬 Programming Languages: \n\n🔥 Editors: \n```" in block
