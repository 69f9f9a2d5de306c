#!/usr/bin/env python3
"""
Main driver script for the activity README updater.

This script provides the command-line interface and runs the stages in
order: document check, fetch, aggregate, render, splice.

Usage (example):
    GH_TOKEN=ghp_xxx WAKATIME_API_KEY=waka_xxx GH_USERNAME=octocat python -m activity_readme.main --readme README.md
"""

import argparse
import datetime
import logging
import sys
from typing import List, Optional

from .aggregator import summarize_commits, summarize_usage
from .config import Config
from .document import ensure_document, update_document
from .errors import ActivityReadmeError, ConfigurationError
from .fetcher import ActivityWindow, GitHubActivityFetcher, WakaTimeFetcher
from .renderer import ReportRenderer

logger = logging.getLogger("activity-readme")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Update a README section with weekly commit and WakaTime activity.")
    parser.add_argument("--readme", "-r", default=None, help="Path of the README to update (default: README_PATH or README.md)")
    parser.add_argument("--timezone", "-z", default=None, help="Timezone for bucketing, e.g. +09:00 or Asia/Tokyo (default: TIMEZONE or +09:00)")
    parser.add_argument("--dry-run", action="store_true", help="Print the rendered block instead of writing the README")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def run(config: Config, now: Optional[datetime.datetime] = None) -> bool:
    """
    Execute one update.

    Args:
        config: Validated run configuration.
        now: Time of the run (defaults to the current UTC time).

    Returns:
        True if the README was changed.

    Raises:
        ActivityReadmeError: On any fatal error.
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    window = ActivityWindow.last_days(config.days, now)

    if not config.dry_run:
        ensure_document(config.readme_path, config.branch)

    github = GitHubActivityFetcher(config.github_token, config.username)
    waka = WakaTimeFetcher(config.wakatime_api_key)
    try:
        events = github.fetch_commit_events(window)
        commit_summary = summarize_commits(events, config.tzinfo)
        stats = waka.fetch_stats()
    finally:
        waka.close()
    usage_summary = summarize_usage(stats)

    block = ReportRenderer(bar_width=config.bar_width).render(commit_summary, usage_summary, now)

    if config.dry_run:
        print(block)
        return False

    changed = update_document(config.readme_path, block)
    if changed:
        logger.info("README updated: %s", config.readme_path)
    else:
        logger.info("No changes")
    return changed


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point: parse arguments, load configuration and run.

    Returns the process exit status (0 on success, 1 on any fatal error).
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = Config.from_env(readme_path=args.readme, timezone=args.timezone, dry_run=args.dry_run or None)
        logger.info("Updating activity for %s", config.username)
        run(config)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ActivityReadmeError as e:
        logger.error("README update failed: %s", e)
        print(f"Error: README update failed - {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("README update interrupted by user")
        return 1
    except Exception as e:
        logger.error("README update failed: %s", e)
        print(f"Error: README update failed - {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
