"""
Upstream data fetching module.

This module handles the two API interactions of a run: commit contributions
from the GitHub GraphQL API (through PyGithub) and coding-time statistics
from the WakaTime API (through requests). Raw JSON is parsed into typed
records here, so the rest of the package never sees untyped payloads.
"""

import datetime
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .errors import ConfigurationError, ResponseSchemaError, UpstreamFetchError
from .models import CommitEvent, UsageEntry, WakaStats

# External libs
try:
    from github import Auth, Github, GithubException
except Exception as e:
    raise RuntimeError("PyGithub is required. Install with: pip install PyGithub") from e

# Set up logging
logger = logging.getLogger("activity-readme.fetcher")

GITHUB_SOURCE = "GitHub GraphQL"
WAKATIME_SOURCE = "WakaTime API"
WAKATIME_STATS_URL = "https://wakatime.com/api/v1/users/current/stats/last_7_days"
REQUEST_TIMEOUT = 30

COMMITS_QUERY = """
query($login:String!,$from:DateTime!,$to:DateTime!){
  user(login:$login){
    contributionsCollection(from:$from, to:$to){
      commitContributionsByRepository(maxRepositories: 100) {
        repository { name url }
        contributions(first: 100) {
          nodes { occurredAt commitCount }
        }
      }
    }
  }
}
"""


@dataclass(frozen=True)
class ActivityWindow:
    """Closed time range the commit query covers."""
    start: datetime.datetime
    end: datetime.datetime

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Window end {self.end.isoformat()} is before start {self.start.isoformat()}")

    @classmethod
    def last_days(cls, days: int, now: Optional[datetime.datetime] = None) -> "ActivityWindow":
        """Window covering the ``days`` days up to ``now`` (UTC by default)."""
        end = now or datetime.datetime.now(datetime.timezone.utc)
        return cls(start=end - datetime.timedelta(days=days), end=end)


def parse_timestamp(value: Any) -> datetime.datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not isinstance(value, str) or not value:
        raise ValueError(f"not a timestamp: {value!r}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def _expect(value: Any, kind: type, what: str, source: str) -> Any:
    if not isinstance(value, kind):
        raise ResponseSchemaError(source, f"{what} should be {kind.__name__}, got {type(value).__name__}")
    return value


def parse_commit_contributions(payload: Dict[str, Any]) -> List[CommitEvent]:
    """
    Flatten a ``commitContributionsByRepository`` response into commit events.

    Args:
        payload: Full GraphQL response body (with the top level ``data`` key).

    Returns:
        One CommitEvent per contribution node, in response order.

    Raises:
        ResponseSchemaError: If the payload does not have the expected shape.
    """
    _expect(payload, dict, "response", GITHUB_SOURCE)
    data = payload.get("data") or {}
    _expect(data, dict, "data", GITHUB_SOURCE)
    user = data.get("user")
    if user is None:
        return []
    _expect(user, dict, "data.user", GITHUB_SOURCE)
    collection = _expect(user.get("contributionsCollection") or {}, dict, "contributionsCollection", GITHUB_SOURCE)
    repos = _expect(
        collection.get("commitContributionsByRepository") or [], list, "commitContributionsByRepository", GITHUB_SOURCE
    )

    events: List[CommitEvent] = []
    for repo in repos:
        _expect(repo, dict, "repository entry", GITHUB_SOURCE)
        contributions = _expect(repo.get("contributions") or {}, dict, "contributions", GITHUB_SOURCE)
        nodes = _expect(contributions.get("nodes") or [], list, "contributions.nodes", GITHUB_SOURCE)
        for node in nodes:
            _expect(node, dict, "contribution node", GITHUB_SOURCE)
            try:
                occurred_at = parse_timestamp(node.get("occurredAt"))
            except ValueError as e:
                raise ResponseSchemaError(GITHUB_SOURCE, f"bad occurredAt: {e}") from e
            count = node.get("commitCount")
            if count is not None and (isinstance(count, bool) or not isinstance(count, int)):
                raise ResponseSchemaError(GITHUB_SOURCE, f"commitCount should be int, got {count!r}")
            # Absent, zero or negative counts still mean one commit happened.
            events.append(CommitEvent(occurred_at=occurred_at, commit_count=count if count and count > 0 else 1))
    return events


def _parse_usage(items: Any, what: str) -> List[UsageEntry]:
    _expect(items, list, what, WAKATIME_SOURCE)
    entries: List[UsageEntry] = []
    for item in items:
        _expect(item, dict, f"{what} entry", WAKATIME_SOURCE)
        name = item.get("name")
        seconds = item.get("total_seconds", 0)
        if not isinstance(name, str):
            raise ResponseSchemaError(WAKATIME_SOURCE, f"{what} entry without a name: {item!r}")
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise ResponseSchemaError(WAKATIME_SOURCE, f"total_seconds of {name} should be a number, got {seconds!r}")
        entries.append(UsageEntry(name=name, seconds=float(seconds)))
    return entries


def parse_wakatime_stats(payload: Dict[str, Any]) -> WakaStats:
    """
    Extract languages and editors from a WakaTime stats response.

    Raises:
        ResponseSchemaError: If the payload does not have the expected shape.
    """
    _expect(payload, dict, "response", WAKATIME_SOURCE)
    data = _expect(payload.get("data") or {}, dict, "data", WAKATIME_SOURCE)
    return WakaStats(
        languages=_parse_usage(data.get("languages") or [], "languages"),
        editors=_parse_usage(data.get("editors") or [], "editors"),
    )


class GitHubActivityFetcher:
    """
    Fetch commit contributions for a user from the GitHub GraphQL API.

    Args:
        token: Personal access token with read access to the user's repositories.
        username: Login whose contributions are queried.
        client: Optional pre-built PyGithub client (mainly for tests).
    """

    def __init__(self, token: str, username: str, client: Optional[Github] = None) -> None:
        if not token:
            raise ConfigurationError("GitHub token must not be empty")
        if not username:
            raise ConfigurationError("GitHub username must not be empty")
        self.username = username
        self._g = client if client is not None else Github(auth=Auth.Token(token), retry=None)
        logger.debug("GitHub client initialized for %s", username)

    def fetch_commit_events(self, window: ActivityWindow) -> List[CommitEvent]:
        """
        Query commit contributions made inside ``window``.

        Raises:
            UpstreamFetchError: If GitHub answers with an error.
            ResponseSchemaError: If the answer cannot be parsed.
        """
        variables = {
            "login": self.username,
            "from": window.start.isoformat(),
            "to": window.end.isoformat(),
        }
        logger.info("Querying commits from %s to %s", variables["from"], variables["to"])
        try:
            _, payload = self._g.requester.graphql_query(COMMITS_QUERY, variables)
        except GithubException as e:
            body = e.data if isinstance(e.data, str) else json.dumps(e.data)
            raise UpstreamFetchError(GITHUB_SOURCE, "query failed", status=e.status, body=body) from e
        except requests.RequestException as e:
            raise UpstreamFetchError(GITHUB_SOURCE, str(e)) from e

        events = parse_commit_contributions(payload)
        logger.info("Fetched %d contribution nodes for %s", len(events), self.username)
        return events


class WakaTimeFetcher:
    """
    Fetch last-7-days coding statistics from WakaTime.

    Args:
        api_key: WakaTime secret API key.
        session: Optional requests session (mainly for tests).
    """

    def __init__(self, api_key: str, session: Optional[requests.Session] = None) -> None:
        if not api_key:
            raise ConfigurationError("WakaTime API key must not be empty")
        self._api_key = api_key
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "activity-readme"})

    def fetch_stats(self) -> WakaStats:
        """
        Fetch per-language and per-editor totals for the trailing week.

        Raises:
            UpstreamFetchError: On a transport failure or non-2xx answer.
            ResponseSchemaError: If the answer cannot be parsed.
        """
        logger.info("Fetching WakaTime stats")
        try:
            resp = self.session.get(WAKATIME_STATS_URL, params={"api_key": self._api_key}, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise UpstreamFetchError(WAKATIME_SOURCE, str(e)) from e
        if not resp.ok:
            raise UpstreamFetchError(WAKATIME_SOURCE, "request failed", status=resp.status_code, body=resp.text)
        try:
            payload = resp.json()
        except ValueError as e:
            raise ResponseSchemaError(WAKATIME_SOURCE, f"body is not JSON: {e}") from e

        stats = parse_wakatime_stats(payload)
        logger.info("Fetched %d languages and %d editors", len(stats.languages), len(stats.editors))
        return stats

    def close(self) -> None:
        self.session.close()
