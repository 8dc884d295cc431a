"""
Repository Mining Data Models.

Defines the data models produced by repository miners: commit summaries from
the list endpoint, commit details from the single-commit endpoint, and the
progress events emitted while fetching.
Uses Pydantic for validation and serialization.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FetchPhase(Enum):
    """Stage of an analysis run reported through progress callbacks."""

    COMMITS = "commits"
    DETAILS = "details"
    STATS = "stats"


class FetchProgress(BaseModel):
    """Progress event handed to the caller supplied progress sink."""

    phase: FetchPhase
    current: int
    total: int
    message: str = ""


ProgressCallback = Callable[[FetchProgress], None]


class RepositoryReference(BaseModel):
    """Owner and name of a GitHub repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class CommitSummary(BaseModel):
    """Lightweight commit metadata from the commit list endpoint."""

    model_config = ConfigDict(frozen=True)

    sha: str
    author_login: Optional[str] = None
    author_name: str = ""
    author_avatar_url: str = ""
    date: str  # ISO 8601, compared lexicographically
    message: str = ""

    @property
    def author_identity(self) -> str:
        """Platform login when GitHub linked the commit to a user, else the git author name."""
        return self.author_login or self.author_name

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "CommitSummary":
        """
        Build a summary from a GitHub commit list item.

        Args:
            payload (Dict[str, Any]): Item of ``GET /repos/{owner}/{repo}/commits``

        Returns:
            CommitSummary: The parsed summary
        """
        commit = payload.get("commit") or {}
        git_author = commit.get("author") or {}
        user = payload.get("author") or {}
        return cls(
            sha=payload["sha"],
            author_login=user.get("login"),
            author_name=git_author.get("name") or "",
            author_avatar_url=user.get("avatar_url") or "",
            date=git_author.get("date") or "",
            message=commit.get("message") or "",
        )


class FileChange(BaseModel):
    """A single file touched by a commit."""

    filename: str
    status: str = "modified"
    additions: int = 0
    deletions: int = 0
    changes: int = 0


class CommitStats(BaseModel):
    """Line totals of a commit."""

    additions: int = 0
    deletions: int = 0
    total: int = 0


class CommitDetail(BaseModel):
    """Per-file change set and totals of one commit."""

    sha: str
    files: List[FileChange] = Field(default_factory=list)
    stats: CommitStats = Field(default_factory=CommitStats)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "CommitDetail":
        """Build a detail from ``GET /repos/{owner}/{repo}/commits/{sha}``, defaulting missing parts."""
        return cls(
            sha=payload["sha"],
            files=[FileChange(**item) for item in payload.get("files") or []],
            stats=CommitStats(**(payload.get("stats") or {})),
        )


class RepositoryData(BaseModel):
    """Container for all mined repository data."""

    repository_name: str
    collection_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    commits: List[CommitSummary]
    details: List[CommitDetail]
