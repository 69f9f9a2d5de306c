"""
Activity README - refresh a README section with weekly commit and WakaTime activity.
"""

from .models import CommitEvent, UsageEntry, WakaStats, RenderRow, CommitSummary, UsageSummary
from .config import Config
from .errors import ActivityReadmeError, ConfigurationError, UpstreamFetchError, ResponseSchemaError, DocumentAccessError
from .fetcher import ActivityWindow, GitHubActivityFetcher, WakaTimeFetcher
from .aggregator import summarize_commits, summarize_usage
from .renderer import ReportRenderer
from .document import splice_section, ensure_document, update_document
from .main import main, run

__all__ = [
    'CommitEvent',
    'UsageEntry',
    'WakaStats',
    'RenderRow',
    'CommitSummary',
    'UsageSummary',
    'Config',
    'ActivityReadmeError',
    'ConfigurationError',
    'UpstreamFetchError',
    'ResponseSchemaError',
    'DocumentAccessError',
    'ActivityWindow',
    'GitHubActivityFetcher',
    'WakaTimeFetcher',
    'summarize_commits',
    'summarize_usage',
    'ReportRenderer',
    'splice_section',
    'ensure_document',
    'update_document',
    'main',
    'run',
]
