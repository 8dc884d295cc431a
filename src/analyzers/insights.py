"""
Snapshot Insights.

Derived views on top of an analytics snapshot: file rankings by a chosen
dimension, hot files, active contributors and the recent commit trend.
"""

from typing import Callable, Dict, List, Optional

from analyzers.models import (
    AnalyticsSnapshot,
    ContributorStats,
    FileStats,
    RepositorySummary,
    SortDimension,
    WeeklyBucket,
)

_FILE_SORT_KEYS: Dict[SortDimension, Callable[[FileStats], int]] = {
    SortDimension.COMMITS: lambda f: f.commit_count,
    SortDimension.ADDITIONS: lambda f: f.total_additions,
    SortDimension.DELETIONS: lambda f: f.total_deletions,
}


def rank_files(
    files: List[FileStats],
    by: SortDimension = SortDimension.COMMITS,
    limit: Optional[int] = None,
) -> List[FileStats]:
    """
    Rank files in descending order of a dimension, keeping input order on ties.

    Args:
        files (List[FileStats]): Files to rank
        by (SortDimension): Ranking dimension
        limit (Optional[int]): Keep only the first ``limit`` files

    Returns:
        List[FileStats]: Ranked files
    """
    ranked = sorted(files, key=_FILE_SORT_KEYS[by], reverse=True)
    return ranked[:limit] if limit is not None else ranked


def hot_files(files: List[FileStats], threshold: int = 5) -> List[FileStats]:
    """Files touched by at least ``threshold`` commits."""
    return [f for f in files if f.commit_count >= threshold]


def active_contributors(contributors: List[ContributorStats]) -> List[ContributorStats]:
    return [c for c in contributors if c.commit_count > 0]


def commit_trend(weekly: List[WeeklyBucket], window: int = 4) -> Optional[float]:
    """
    Percent change of commits in the last ``window`` weeks against the ``window`` before.

    Args:
        weekly (List[WeeklyBucket]): Buckets in chronological order
        window (int): Number of buckets per side

    Returns:
        Optional[float]: Percent change, None when the earlier window has no commits
    """
    recent = sum(w.commits for w in weekly[-window:])
    prior = sum(w.commits for w in weekly[-2 * window : -window])
    if prior == 0:
        return None
    return (recent - prior) / prior * 100


def summarize(snapshot: AnalyticsSnapshot, hot_file_threshold: int = 5) -> RepositorySummary:
    """
    Headline numbers of a snapshot.

    ``detailed_commits`` counts the commits behind the per-file, per-contributor
    and weekly views, which is lower than ``total_commits`` when only the most
    recent commits were fetched in detail.

    Args:
        snapshot (AnalyticsSnapshot): Snapshot to summarize
        hot_file_threshold (int): Commit count at which a file counts as hot

    Returns:
        RepositorySummary: Summary of the snapshot
    """
    trend = commit_trend(snapshot.weekly_activity)
    return RepositorySummary(
        repository_name=snapshot.repo_name,
        total_commits=snapshot.total_commits,
        detailed_commits=sum(w.commits for w in snapshot.weekly_activity),
        active_contributors=len(active_contributors(snapshot.contributors)),
        hot_files=len(hot_files(snapshot.files, hot_file_threshold)),
        commit_trend_percent=round(trend, 1) if trend is not None else None,
    )
