"""
Repository Analysis Errors.

Every failure that ends the analysis of a repository derives from
RepositoryAnalysisError and carries a message that can be shown to the user
as-is.
"""

from typing import Optional


class RepositoryAnalysisError(Exception):
    """Base class for terminal analysis failures."""


class InvalidRepositoryReference(RepositoryAnalysisError):
    """The repository identifier could not be parsed."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(
            f"Invalid GitHub repository '{reference}'. "
            "Use format: https://github.com/owner/repo or owner/repo"
        )


class RepositoryNotFound(RepositoryAnalysisError):
    """The remote API answered 404."""

    def __init__(self, url: str):
        self.url = url
        super().__init__("Repository not found")


class RateLimitExceeded(RepositoryAnalysisError):
    """The remote API rate limit is exhausted and will not reset soon."""

    def __init__(self, reset_at: Optional[int] = None):
        self.reset_at = reset_at
        super().__init__(
            "Rate limit exceeded. Please try again later or add a GitHub token."
        )


class RemoteAPIError(RepositoryAnalysisError):
    """Any other non-success answer, or a transport failure when status is None."""

    def __init__(self, status: Optional[int], detail: Optional[str] = None):
        self.status = status
        message = (
            f"GitHub API error: {status}"
            if status is not None
            else "GitHub API unreachable"
        )
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class RetriesExhausted(RepositoryAnalysisError):
    """The retry budget was consumed without a successful answer."""

    def __init__(self, url: str, attempts: int):
        self.url = url
        self.attempts = attempts
        super().__init__(f"Max retries exceeded ({attempts} attempts)")


class NoCommitsFound(RepositoryAnalysisError):
    """Listing succeeded but the repository has no commits."""

    def __init__(self, repository: str):
        self.repository = repository
        super().__init__("No commits found in this repository.")
