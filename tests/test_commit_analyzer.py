"""
Commit Analyzer Test Suite.

This module contains tests for commit aggregation, covering:
- File, contributor and weekly statistics
- Rankings and file ownership
- Totals and date range over the full commit list
- Edge cases (no details, orphan details, commits without files)
"""

import pytest

from analyzers.models import AnalyticsSnapshot
from analyzers.repository import CommitAnalyzer, aggregate, week_start
from miners.models import CommitDetail, CommitSummary, RepositoryData


def make_commit(sha, date, login="bob", name=None):
    """Create a commit summary."""
    return CommitSummary(
        sha=sha,
        author_login=login,
        author_name=name or f"{login} name",
        author_avatar_url=f"https://avatars/{login}" if login else "",
        date=date,
        message=f"commit {sha}",
    )


def make_detail(sha, files=(), additions=None, deletions=None):
    """Create a commit detail from ``(filename, additions, deletions)`` tuples."""
    changes = [
        {"filename": name, "status": "modified", "additions": add, "deletions": dele}
        for name, add, dele in files
    ]
    return CommitDetail.model_validate(
        {
            "sha": sha,
            "files": changes,
            "stats": {
                "additions": additions if additions is not None else sum(c["additions"] for c in changes),
                "deletions": deletions if deletions is not None else sum(c["deletions"] for c in changes),
            },
        }
    )


@pytest.fixture
def sample_commits():
    """Create commits spread over two weeks and three authors."""
    return [
        make_commit("c1", "2024-01-10T09:00:00Z", "alice"),
        make_commit("c2", "2024-01-09T09:00:00Z", "bob"),
        make_commit("c3", "2024-01-08T09:00:00Z", "alice"),
        make_commit("c4", "2024-01-03T09:00:00Z", "carol"),
        make_commit("c5", "2024-01-02T09:00:00Z", "alice"),
    ]


@pytest.fixture
def sample_details():
    """Create details for the sample commits."""
    return [
        make_detail("c1", [("src/app.py", 5, 1), ("README.md", 1, 0)]),
        make_detail("c2", [("src/app.py", 2, 2)]),
        make_detail("c3", [("src/app.py", 1, 1), ("src/util.py", 10, 0)]),
        make_detail("c4", [("src/util.py", 3, 3)]),
        make_detail("c5", [("docs/index.md", 7, 0)]),
    ]


def test_week_start():
    """Test week start is the Monday on or before the date."""
    assert week_start("2024-01-03T10:00:00Z") == "2024-01-01"
    assert week_start("2024-01-01T00:00:00Z") == "2024-01-01"
    assert week_start("2024-01-07T23:59:59Z") == "2024-01-01"
    assert week_start("2024-01-03") == "2024-01-01"
    assert week_start("2024-01-01T01:00:00+02:00") == "2023-12-25"


def test_single_commit_scenario():
    """Test one commit touching one file."""
    commits = [make_commit("a", "2024-01-03", "bob")]
    details = [make_detail("a", [("x.ts", 10, 2)], additions=10, deletions=2)]

    snapshot = aggregate("octo/repo", commits, details)

    assert len(snapshot.files) == 1
    assert snapshot.files[0].path == "x.ts"
    assert snapshot.files[0].commit_count == 1
    assert snapshot.files[0].total_additions == 10
    assert snapshot.files[0].total_deletions == 2
    assert len(snapshot.contributors) == 1
    assert snapshot.contributors[0].login == "bob"
    assert snapshot.contributors[0].commit_count == 1
    assert snapshot.contributors[0].files_owned == ["x.ts"]
    assert len(snapshot.weekly_activity) == 1
    week = snapshot.weekly_activity[0]
    assert week.week_start == "2024-01-01"
    assert week.commits == 1
    assert week.contributors == 1
    assert week.additions == 10


def test_two_authors_same_week_same_file():
    """Test distinct authors are counted on the file and the week."""
    commits = [
        make_commit("a", "2024-01-03T10:00:00Z", "bob"),
        make_commit("b", "2024-01-04T10:00:00Z", "eve"),
    ]
    details = [make_detail("a", [("x.ts", 1, 0)]), make_detail("b", [("x.ts", 2, 0)])]

    snapshot = aggregate("octo/repo", commits, details)

    assert snapshot.files[0].contributors == ["bob", "eve"]
    assert snapshot.files[0].last_modified == "2024-01-04T10:00:00Z"
    assert snapshot.weekly_activity[0].contributors == 2
    assert snapshot.weekly_activity[0].commits == 2


def test_aggregate_sample(sample_commits, sample_details):
    """Test rankings, weekly buckets and contributor counters."""
    snapshot = aggregate("octo/repo", sample_commits, sample_details)

    assert [f.path for f in snapshot.files][:2] == ["src/app.py", "src/util.py"]
    assert snapshot.files[0].commit_count == 3
    assert snapshot.files[0].contributors == ["alice", "bob"]

    alice = snapshot.contributors[0]
    assert alice.login == "alice"
    assert alice.commit_count == 3
    assert alice.additions == 6 + 11 + 7
    assert alice.last_active == "2024-01-10T09:00:00Z"
    assert alice.avatar_url == "https://avatars/alice"
    assert alice.files_owned[0] == "src/app.py"

    assert [w.week_start for w in snapshot.weekly_activity] == [
        "2024-01-01",
        "2024-01-08",
    ]
    assert snapshot.weekly_activity[0].commits == 2
    assert snapshot.weekly_activity[0].contributors == 2
    assert snapshot.weekly_activity[1].commits == 3
    assert snapshot.weekly_activity[1].contributors == 2


def test_totals_cover_full_commit_list(sample_commits, sample_details):
    """Test totals and date range use all commits, not only detailed ones."""
    snapshot = aggregate("octo/repo", sample_commits, sample_details[:2])

    assert snapshot.total_commits == 5
    assert snapshot.date_range.start == "2024-01-02"
    assert snapshot.date_range.end == "2024-01-10"
    assert sum(w.commits for w in snapshot.weekly_activity) == 2


def test_empty_details(sample_commits):
    """Test no details yields empty views but keeps totals."""
    snapshot = aggregate("octo/repo", sample_commits, [])

    assert snapshot.files == []
    assert snapshot.contributors == []
    assert snapshot.weekly_activity == []
    assert snapshot.total_commits == len(sample_commits)
    assert snapshot.date_range.start == "2024-01-02"


def test_empty_commits():
    """Test an empty commit list yields an empty date range."""
    snapshot = aggregate("octo/repo", [], [])

    assert snapshot.total_commits == 0
    assert snapshot.date_range.start == ""
    assert snapshot.date_range.end == ""


def test_orphan_detail_is_skipped():
    """Test details without a matching summary are ignored."""
    commits = [make_commit("a", "2024-01-03T10:00:00Z")]
    details = [make_detail("a", [("x.ts", 1, 0)]), make_detail("zzz", [("y.ts", 1, 0)])]

    snapshot = aggregate("octo/repo", commits, details)

    assert [f.path for f in snapshot.files] == ["x.ts"]
    assert snapshot.contributors[0].commit_count == 1


def test_commit_without_files_counts_for_contributor_and_week():
    """Test a detail with no files still counts toward contributor and weekly stats."""
    commits = [make_commit("a", "2024-01-03T10:00:00Z")]
    details = [make_detail("a", [], additions=4, deletions=1)]

    snapshot = aggregate("octo/repo", commits, details)

    assert snapshot.files == []
    assert snapshot.contributors[0].commit_count == 1
    assert snapshot.contributors[0].additions == 4
    assert snapshot.contributors[0].files_owned == []
    assert snapshot.weekly_activity[0].deletions == 1


def test_author_name_fallback():
    """Test commits not linked to a GitHub user are keyed by author name."""
    commits = [make_commit("a", "2024-01-03T10:00:00Z", login=None, name="Jane Doe")]
    details = [make_detail("a", [("x.ts", 1, 0)])]

    snapshot = aggregate("octo/repo", commits, details)

    assert snapshot.contributors[0].login == "Jane Doe"
    assert snapshot.files[0].contributors == ["Jane Doe"]


def test_files_owned_is_top_five_by_commit_count():
    """Test ownership keeps at most five files in non-increasing commit order."""
    commits = []
    details = []
    # file_i is touched i+1 times
    for i in range(7):
        for n in range(i + 1):
            sha = f"f{i}-{n}"
            commits.append(make_commit(sha, "2024-01-03T10:00:00Z", "alice"))
            details.append(make_detail(sha, [(f"file_{i}", 1, 0)]))

    snapshot = aggregate("octo/repo", commits, details)
    alice = snapshot.contributors[0]
    counts = {f.path: f.commit_count for f in snapshot.files}

    assert alice.files_owned == ["file_6", "file_5", "file_4", "file_3", "file_2"]
    owned_counts = [counts[path] for path in alice.files_owned]
    assert owned_counts == sorted(owned_counts, reverse=True)


def test_ties_keep_encounter_order():
    """Test equal commit counts keep first-seen order."""
    commits = [make_commit("a", "2024-01-03T10:00:00Z", "bob")]
    details = [make_detail("a", [("z.ts", 1, 0), ("a.ts", 1, 0), ("m.ts", 1, 0)])]

    snapshot = aggregate("octo/repo", commits, details)

    assert [f.path for f in snapshot.files] == ["z.ts", "a.ts", "m.ts"]
    assert snapshot.contributors[0].files_owned == ["z.ts", "a.ts", "m.ts"]


def test_rankings_are_non_increasing(sample_commits, sample_details):
    """Test ranked lists never increase in commit count."""
    snapshot = aggregate("octo/repo", sample_commits, sample_details)

    for ranked in (snapshot.files, snapshot.contributors):
        counts = [item.commit_count for item in ranked]
        assert counts == sorted(counts, reverse=True)
    for week in snapshot.weekly_activity:
        assert week.contributors <= week.commits


def test_aggregate_is_idempotent(sample_commits, sample_details):
    """Test re-aggregation yields identical content apart from fetched_at."""
    first = aggregate("octo/repo", sample_commits, sample_details)
    second = aggregate("octo/repo", sample_commits, sample_details)

    assert first.model_dump(exclude={"fetched_at"}) == second.model_dump(
        exclude={"fetched_at"}
    )


def test_analyze_repository(sample_commits, sample_details):
    """Test the analyzer wraps aggregation of mined data."""
    repo_data = RepositoryData(
        repository_name="octo/repo", commits=sample_commits, details=sample_details
    )

    snapshot = CommitAnalyzer().analyze_repository(repo_data)

    assert isinstance(snapshot, AnalyticsSnapshot)
    assert snapshot.repo_name == "octo/repo"
    assert snapshot.total_commits == 5


def test_undated_commit_skips_weekly_activity():
    """Test a commit without author date still counts for contributor and files."""
    commits = [
        make_commit("a", "", "bob"),
        make_commit("b", "2024-01-03T10:00:00Z", "bob"),
    ]
    details = [make_detail("a", [("x.ts", 1, 0)]), make_detail("b", [("x.ts", 2, 0)])]

    snapshot = aggregate("octo/repo", commits, details)

    assert snapshot.contributors[0].commit_count == 2
    assert snapshot.files[0].commit_count == 2
    assert snapshot.files[0].last_modified == "2024-01-03T10:00:00Z"
    assert len(snapshot.weekly_activity) == 1
    assert snapshot.weekly_activity[0].commits == 1
    assert snapshot.date_range.start == "2024-01-03"
