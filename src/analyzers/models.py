"""
Repository Analytics Data Models.

Defines the aggregated views produced by the commit analyzer.
Uses Pydantic for validation and serialization; fields serialize with
camelCase aliases (``commitCount``, ``weekStart``) for JSON export.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SortDimension(Enum):
    """
    Ranking dimension for file statistics.

    Attributes:
        COMMITS: Number of commits touching the file
        ADDITIONS: Lines added to the file
        DELETIONS: Lines deleted from the file
    """

    COMMITS = "commits"
    ADDITIONS = "additions"
    DELETIONS = "deletions"


class AnalyticsModel(BaseModel):
    """Base model for snapshot data with camelCase serialization."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileStats(AnalyticsModel):
    """Change statistics of a single file path."""

    path: str
    commit_count: int = 0
    total_additions: int = 0
    total_deletions: int = 0
    contributors: List[str] = Field(default_factory=list)
    last_modified: str


class ContributorStats(AnalyticsModel):
    """Activity of one author identity."""

    login: str
    avatar_url: str = ""
    commit_count: int = 0
    additions: int = 0
    deletions: int = 0
    files_owned: List[str] = Field(default_factory=list)
    last_active: str


class WeeklyBucket(AnalyticsModel):
    """Commit activity of the week starting on ``week_start`` (a Monday)."""

    week_start: str
    commits: int = 0
    additions: int = 0
    deletions: int = 0
    contributors: int = 0


class DateRange(AnalyticsModel):
    """First and last commit date, ISO dates, empty when there are no commits."""

    start: str = ""
    end: str = ""


class AnalyticsSnapshot(AnalyticsModel):
    """Analytics of one repository.

    ``total_commits`` and ``date_range`` cover the full commit list, while
    files, contributors and weekly activity only cover the commits that
    were fetched in detail.
    """

    repo_name: str
    total_commits: int
    date_range: DateRange
    files: List[FileStats]
    contributors: List[ContributorStats]
    weekly_activity: List[WeeklyBucket]
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RepositorySummary(BaseModel):
    """Headline numbers of a snapshot."""

    repository_name: str
    total_commits: int
    detailed_commits: int
    active_contributors: int
    hot_files: int
    commit_trend_percent: Optional[float]

    @property
    def is_partial(self) -> bool:
        """True when per-file and per-contributor views cover fewer commits than the total."""
        return self.detailed_commits < self.total_commits
