"""
Run configuration for the activity README updater.

All settings are resolved once at startup into a frozen ``Config`` that is
passed explicitly to every component.
"""

import datetime
import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigurationError

DEFAULT_README = "README.md"
DEFAULT_TIMEZONE = "+09:00"
DEFAULT_DAYS = 7
DEFAULT_BAR_WIDTH = 24

USERNAME_VARS = ("GH_USERNAME", "GITHUB_ACTOR", "USER")
BRANCH_VARS = ("GITHUB_REF", "GITHUB_BASE_REF", "GITHUB_HEAD_REF")

_OFFSET_RE = re.compile(r"^(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$")


def parse_timezone(value: str) -> datetime.tzinfo:
    """
    Turn a timezone setting into a tzinfo.

    Accepts fixed offsets such as ``+09:00``, ``-0530`` or ``+9`` as well as
    IANA names (``Asia/Tokyo``). ``UTC`` and ``Z`` map to UTC.

    Raises:
        ConfigurationError: If the value is neither a valid offset nor a known zone.
    """
    text = (value or "").strip()
    if not text:
        raise ConfigurationError("Empty TIMEZONE setting")
    if text.upper() in ("UTC", "Z"):
        return datetime.timezone.utc

    m = _OFFSET_RE.match(text)
    if m:
        hours = int(m.group("hours"))
        minutes = int(m.group("minutes") or 0)
        if hours > 23 or minutes > 59:
            raise ConfigurationError(f"Invalid timezone offset: {value}")
        offset = datetime.timedelta(hours=hours, minutes=minutes)
        if m.group("sign") == "-":
            offset = -offset
        return datetime.timezone(offset)

    try:
        return ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown timezone: {value}") from e


def branch_from_ref(ref: Optional[str]) -> Optional[str]:
    """Return the last path segment of a ref such as ``refs/heads/main``."""
    if not ref:
        return None
    name = ref.rstrip("/").split("/")[-1]
    return name or None


@dataclass(frozen=True)
class Config:
    """Validated settings for one run."""
    github_token: str
    wakatime_api_key: str
    username: str
    readme_path: str = DEFAULT_README
    timezone: str = DEFAULT_TIMEZONE
    days: int = DEFAULT_DAYS
    bar_width: int = DEFAULT_BAR_WIDTH
    dry_run: bool = False
    branch_ref: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.github_token:
            raise ConfigurationError("Missing GH_TOKEN env")
        if not self.wakatime_api_key:
            raise ConfigurationError("Missing WAKATIME_API_KEY env")
        if not self.username:
            raise ConfigurationError(
                "Missing GH_USERNAME env (or GITHUB_ACTOR). Set GH_USERNAME to the account whose activity is shown."
            )
        if self.days <= 0:
            raise ConfigurationError(f"days must be positive, got {self.days}")
        if self.bar_width <= 0:
            raise ConfigurationError(f"bar_width must be positive, got {self.bar_width}")
        parse_timezone(self.timezone)

    @property
    def tzinfo(self) -> datetime.tzinfo:
        return parse_timezone(self.timezone)

    @property
    def branch(self) -> Optional[str]:
        return branch_from_ref(self.branch_ref)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Config":
        """
        Build a configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``).
            **overrides: Values that take precedence over the environment,
                         typically coming from command line flags. ``None``
                         values are ignored.

        Raises:
            ConfigurationError: If a required value is missing.
        """
        env = os.environ if environ is None else environ

        def first(names) -> str:
            for name in names:
                if env.get(name):
                    return env[name]
            return ""

        values = {
            "github_token": env.get("GH_TOKEN", ""),
            "wakatime_api_key": env.get("WAKATIME_API_KEY", ""),
            "username": first(USERNAME_VARS),
            "readme_path": env.get("README_PATH") or DEFAULT_README,
            "timezone": env.get("TIMEZONE") or DEFAULT_TIMEZONE,
            "branch_ref": first(BRANCH_VARS) or None,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
