"""
EOD Tracker - summarize a day's GitHub push activity across repositories and branches.
"""

from .models import Commit, Contribution, EventCommit, RawEvent, RemoteCommit
from .config import AppConfig, ConfigError, load_config
from .fetcher import GitHubAPIError, GitHubFetcher
from .aggregator import CommitAggregator, sample_branches
from .processor import EODProcessor
from .reporter import Reporter, sort_and_dedup
from .pipeline import build_contributions, collect_events

__all__ = [
    'Commit',
    'Contribution',
    'EventCommit',
    'RawEvent',
    'RemoteCommit',
    'AppConfig',
    'ConfigError',
    'load_config',
    'GitHubAPIError',
    'GitHubFetcher',
    'CommitAggregator',
    'sample_branches',
    'EODProcessor',
    'Reporter',
    'sort_and_dedup',
    'build_contributions',
    'collect_events'
]
