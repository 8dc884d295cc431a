"""
Commit History Analysis Module.

Reduces a repository's commit summaries and commit details into the three
views of an analytics snapshot:
- Per-file change statistics (hot files)
- Per-contributor activity and file ownership
- Weekly activity buckets

Aggregation is a single synchronous pass over the commit details. Totals and
the date range come from the full commit list, all other views only from the
commits that were fetched in detail.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Set

from config import logger
from miners.models import CommitDetail, CommitSummary, RepositoryData
from analyzers.models import (
    AnalyticsSnapshot,
    ContributorStats,
    DateRange,
    FileStats,
    WeeklyBucket,
)

FILES_OWNED_LIMIT = 5


def week_start(timestamp: str) -> str:
    """
    Monday on or before the (UTC) date of an ISO 8601 timestamp.

    Args:
        timestamp (str): e.g. ``2024-01-03T10:00:00Z`` or ``2024-01-03``

    Returns:
        str: ISO date of the Monday, e.g. ``2024-01-01``
    """
    moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    day = moment.date()
    return (day - timedelta(days=day.weekday())).isoformat()


@dataclass
class AggregationContext:
    """Working state of one aggregation pass, keyed by path, login and week."""

    files: Dict[str, FileStats] = field(default_factory=dict)
    contributors: Dict[str, ContributorStats] = field(default_factory=dict)
    weeks: Dict[str, WeeklyBucket] = field(default_factory=dict)
    week_authors: Dict[str, Set[str]] = field(default_factory=dict)


def _record_week(
    context: AggregationContext, commit: CommitSummary, detail: CommitDetail
) -> None:
    # Commits without an author date cannot be placed in a week
    if not commit.date:
        return
    key = week_start(commit.date)
    bucket = context.weeks.get(key)
    if bucket is None:
        bucket = context.weeks[key] = WeeklyBucket(week_start=key)
        context.week_authors[key] = set()

    bucket.commits += 1
    bucket.additions += detail.stats.additions
    bucket.deletions += detail.stats.deletions
    context.week_authors[key].add(commit.author_identity)


def _record_contributor(
    context: AggregationContext, commit: CommitSummary, detail: CommitDetail
) -> None:
    login = commit.author_identity
    contributor = context.contributors.get(login)
    if contributor is None:
        contributor = context.contributors[login] = ContributorStats(
            login=login,
            avatar_url=commit.author_avatar_url,
            last_active=commit.date,
        )

    contributor.commit_count += 1
    contributor.additions += detail.stats.additions
    contributor.deletions += detail.stats.deletions
    if commit.date > contributor.last_active:
        contributor.last_active = commit.date


def _record_files(
    context: AggregationContext, commit: CommitSummary, detail: CommitDetail
) -> None:
    login = commit.author_identity
    for change in detail.files:
        stats = context.files.get(change.filename)
        if stats is None:
            stats = context.files[change.filename] = FileStats(
                path=change.filename, last_modified=commit.date
            )

        stats.commit_count += 1
        stats.total_additions += change.additions
        stats.total_deletions += change.deletions
        if login not in stats.contributors:
            stats.contributors.append(login)
        if commit.date > stats.last_modified:
            stats.last_modified = commit.date


def _assign_file_ownership(context: AggregationContext) -> None:
    """Top files per contributor by commit count; ties keep first-seen order."""
    touched: Dict[str, List[FileStats]] = {login: [] for login in context.contributors}
    for stats in context.files.values():
        for login in stats.contributors:
            touched[login].append(stats)

    for login, contributor in context.contributors.items():
        ranked = sorted(touched[login], key=lambda f: f.commit_count, reverse=True)
        contributor.files_owned = [f.path for f in ranked[:FILES_OWNED_LIMIT]]


def _date_range(commits: List[CommitSummary]) -> DateRange:
    dates = sorted(commit.date for commit in commits if commit.date)
    if not dates:
        return DateRange()
    return DateRange(start=dates[0].split("T")[0], end=dates[-1].split("T")[0])


def aggregate(
    repo_name: str, commits: List[CommitSummary], details: List[CommitDetail]
) -> AnalyticsSnapshot:
    """
    Aggregate commit summaries and details into an analytics snapshot.

    Args:
        repo_name (str): ``owner/repo`` of the analyzed repository
        commits (List[CommitSummary]): Full commit list, authoritative for author and date
        details (List[CommitDetail]): Details of a subset of ``commits``

    Returns:
        AnalyticsSnapshot: Ranked files and contributors, chronological weeks
    """
    context = AggregationContext()
    commits_by_sha = {commit.sha: commit for commit in commits}

    for detail in details:
        commit = commits_by_sha.get(detail.sha)
        if commit is None:
            continue

        _record_week(context, commit, detail)
        _record_contributor(context, commit, detail)
        _record_files(context, commit, detail)

    for key, bucket in context.weeks.items():
        bucket.contributors = len(context.week_authors[key])

    _assign_file_ownership(context)

    return AnalyticsSnapshot(
        repo_name=repo_name,
        total_commits=len(commits),
        date_range=_date_range(commits),
        files=sorted(
            context.files.values(), key=lambda f: f.commit_count, reverse=True
        ),
        contributors=sorted(
            context.contributors.values(), key=lambda c: c.commit_count, reverse=True
        ),
        weekly_activity=sorted(context.weeks.values(), key=lambda w: w.week_start),
    )


class CommitAnalyzer:
    """
    Commit history analyzer.

    Turns mined repository data into an analytics snapshot and logs the
    outcome of every analysis.
    """

    def analyze_repository(self, repo_data: RepositoryData) -> AnalyticsSnapshot:
        """
        Perform the analysis of mined repository data.

        Args:
            repo_data (RepositoryData): Commit summaries and details of a repository

        Returns:
            AnalyticsSnapshot: Aggregated analysis results

        Raises:
            Exception: If aggregation fails
        """
        logger.info(
            {
                "message": "Starting repository analysis",
                "repository": repo_data.repository_name,
                "commits": len(repo_data.commits),
                "details": len(repo_data.details),
            }
        )
        try:
            if not repo_data.details:
                logger.warning(
                    {
                        "message": "No commit details available for repository",
                        "repository": repo_data.repository_name,
                    }
                )

            snapshot = aggregate(
                repo_data.repository_name, repo_data.commits, repo_data.details
            )

            logger.info(
                {
                    "message": "Repository analysis completed",
                    "repository": repo_data.repository_name,
                    "files": len(snapshot.files),
                    "contributors": len(snapshot.contributors),
                    "weeks": len(snapshot.weekly_activity),
                }
            )
            return snapshot

        except Exception as e:
            logger.error(
                {
                    "message": "Repository analysis failed",
                    "repository": repo_data.repository_name,
                    "error": str(e),
                    "error_line": e.__traceback__.tb_lineno,
                }
            )
            raise e
