"""
GitHub Repository Data Mining Module.

This module handles the extraction of raw commit history from the GitHub REST
API. It pages through the commit list sequentially, then fetches per-commit
file changes for the most recent commits with a bounded worker pool.
Type safety is maintained through Pydantic models.
"""

import asyncio
from typing import Dict, List, Optional

import httpx

from config import logger
from miners.base import RepositoryMiner
from miners.errors import NoCommitsFound
from miners.fetcher import RateLimitedFetcher
from miners.models import (
    CommitDetail,
    CommitSummary,
    FetchPhase,
    FetchProgress,
    ProgressCallback,
    RepositoryData,
    RepositoryReference,
)


def has_next_page(response: httpx.Response) -> bool:
    """Whether the ``Link`` header advertises a ``rel="next"`` page."""
    return 'rel="next"' in response.headers.get("Link", "")


class GitHubMiner(RepositoryMiner):
    """
    GitHubMiner is responsible for mining commit history from GitHub repositories.
    It lists commit summaries, fetches commit details and transforms both into
    Pydantic models.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        github_token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        max_commits: int = 500,
        detail_commit_limit: int = 200,
        concurrency: int = 25,
        page_size: int = 100,
        fetcher: Optional[RateLimitedFetcher] = None,
    ):
        """Initialize GitHub miner with authentication and configuration.

        Args:
            client (httpx.AsyncClient): HTTP client shared by every request.
            github_token (Optional[str]): GitHub API token, anonymous when None.
            api_url (str): Base URL of the GitHub REST API.
            max_commits (int): Maximum number of commit summaries to list.
            detail_commit_limit (int): Number of leading commits fetched in detail.
            concurrency (int): Maximum in-flight commit detail requests.
            page_size (int): Commits requested per list page.
            fetcher (Optional[RateLimitedFetcher]): Fetcher to use instead of a default one.
        """
        self.client = client
        self.github_token = github_token
        self.api_url = api_url.rstrip("/")
        self.max_commits = max_commits
        self.detail_commit_limit = detail_commit_limit
        self.concurrency = concurrency
        self.page_size = page_size
        self.fetcher = fetcher or RateLimitedFetcher(client)

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.github_token:
            headers["Authorization"] = f"Bearer {self.github_token}"
        return headers

    async def list_commits(
        self,
        owner: str,
        repo: str,
        max_commits: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[CommitSummary]:
        """Page through the commit list endpoint.

        Pages are requested one at a time since each continuation depends on
        the previous page's ``Link`` header.

        Args:
            owner (str): Repository owner.
            repo (str): Repository name.
            max_commits (Optional[int]): Upper bound on returned commits, defaults to the miner's.
            on_progress (Optional[ProgressCallback]): Called before each page request.

        Returns:
            List[CommitSummary]: At most ``max_commits`` summaries in API order (newest first).

        Raises:
            RepositoryAnalysisError: If any page request fails.
        """
        limit = max_commits if max_commits is not None else self.max_commits
        url = f"{self.api_url}/repos/{owner}/{repo}/commits"
        commits: List[CommitSummary] = []
        page = 1

        while len(commits) < limit:
            if on_progress:
                on_progress(
                    FetchProgress(
                        phase=FetchPhase.COMMITS,
                        current=len(commits),
                        total=limit,
                        message=f"Fetching commit list (page {page})...",
                    )
                )

            response = await self.fetcher.fetch(
                url,
                headers=self.headers,
                params={"per_page": str(self.page_size), "page": str(page)},
            )
            items = response.json()
            if not items:
                break

            commits.extend(CommitSummary.from_api(item) for item in items)

            if not has_next_page(response):
                break
            page += 1

        logger.debug(
            {
                "message": "Commit list fetched",
                "repository": f"{owner}/{repo}",
                "commits": min(len(commits), limit),
                "pages": page,
            }
        )
        return commits[:limit]

    async def fetch_details(
        self,
        owner: str,
        repo: str,
        shas: List[str],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[CommitDetail]:
        """Fetch file-level details for the given commits.

        At most ``concurrency`` requests are in flight; a failed commit is
        logged and left out of the result instead of failing the batch.

        Args:
            owner (str): Repository owner.
            repo (str): Repository name.
            shas (List[str]): Commits to fetch.
            on_progress (Optional[ProgressCallback]): Called after each successful fetch.

        Returns:
            List[CommitDetail]: Details in completion order, one per successful sha.
        """
        semaphore = asyncio.Semaphore(self.concurrency)
        details: List[CommitDetail] = []
        completed = 0
        total = len(shas)

        async def fetch_one(sha: str) -> None:
            nonlocal completed
            async with semaphore:
                url = f"{self.api_url}/repos/{owner}/{repo}/commits/{sha}"
                try:
                    response = await self.fetcher.fetch(url, headers=self.headers)
                    detail = CommitDetail.from_api(response.json())
                except Exception as e:
                    completed += 1
                    logger.error(
                        {
                            "message": "Failed to fetch commit detail",
                            "repository": f"{owner}/{repo}",
                            "sha": sha,
                            "error": str(e),
                        }
                    )
                    return

                completed += 1
                details.append(detail)
                if on_progress:
                    on_progress(
                        FetchProgress(
                            phase=FetchPhase.DETAILS,
                            current=completed,
                            total=total,
                            message=f"Fetching commit details ({completed}/{total})...",
                        )
                    )

        await asyncio.gather(*(fetch_one(sha) for sha in shas))

        if len(details) < total:
            logger.warning(
                {
                    "message": "Some commit details could not be fetched",
                    "repository": f"{owner}/{repo}",
                    "requested": total,
                    "fetched": len(details),
                }
            )
        return details

    async def mine_repository(
        self,
        reference: RepositoryReference,
        on_progress: Optional[ProgressCallback] = None,
    ) -> RepositoryData:
        """
        Extract commit summaries and details from a GitHub repository.

        Args:
            reference (RepositoryReference): The repository to mine.
            on_progress (Optional[ProgressCallback]): Synchronous progress sink.

        Returns:
            RepositoryData: A Pydantic model containing the mined repository data.

        Raises:
            NoCommitsFound: If the repository has no commits.
            RepositoryAnalysisError: Raised if listing commits fails.
        """
        repo_name = reference.full_name
        logger.info({"message": "Starting repository mining", "repository": repo_name})

        try:
            commits = await self.list_commits(
                reference.owner, reference.repo, self.max_commits, on_progress
            )
            if not commits:
                raise NoCommitsFound(repo_name)

            # Only the most recent commits are fetched in detail
            shas = [commit.sha for commit in commits[: self.detail_commit_limit]]
            details = await self.fetch_details(
                reference.owner, reference.repo, shas, on_progress
            )

            logger.info(
                {
                    "message": "Repository mining completed",
                    "repository": repo_name,
                    "commits": len(commits),
                    "details": len(details),
                }
            )
            return RepositoryData(
                repository_name=repo_name, commits=commits, details=details
            )

        except Exception as e:
            logger.error(
                {
                    "message": "Repository mining failed",
                    "repository": repo_name,
                    "error": str(e),
                }
            )
            raise
