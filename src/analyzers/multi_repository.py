"""
Repository Analysis Coordination Module.

This module runs the fetch-and-aggregate pipeline for each configured
repository. Every repository is analyzed on its own, handling:

- Repository reference parsing
- Snapshot cache lookups and writes
- Mining the commit history and aggregating it
- Error handling and logging

Snapshots of different repositories are never merged.
"""

from typing import Dict, List, Optional

from config import logger
from analyzers.models import AnalyticsSnapshot
from analyzers.repository import CommitAnalyzer
from miners.base import RepositoryMiner
from miners.models import FetchPhase, FetchProgress, ProgressCallback
from miners.reference import parse_repository_reference
from storage.snapshot_cache import SnapshotCache


class MultiRepositoryAnalyzer:
    """
    Coordinates the analysis of the configured GitHub repositories.

    Attributes:
        analyzer (CommitAnalyzer): Instance for aggregating mined commit data.
        cache (SnapshotCache): Instance for caching snapshots.
        miner (RepositoryMiner): Instance for mining repository data.
        repository_urls (List[str]): Repository URLs or owner/repo names to analyze.
    """

    def __init__(
        self,
        cache: SnapshotCache,
        analyzer: CommitAnalyzer,
        miner: RepositoryMiner,
        repository_urls: List[str],
        on_progress: Optional[ProgressCallback] = None,
    ):
        """Initialize the coordinator.

        Args:
            cache (SnapshotCache): Instance for caching snapshots.
            analyzer (CommitAnalyzer): Instance for aggregating mined commit data.
            miner (RepositoryMiner): Instance for mining repository data.
            repository_urls (List[str]): Repository URLs or owner/repo names to analyze.
            on_progress (Optional[ProgressCallback]): Synchronous progress sink.
        """
        self.analyzer = analyzer
        self.cache = cache
        self.miner = miner
        self.repository_urls = repository_urls
        self.on_progress = on_progress

    async def analyze_repository(self, repo_url: str) -> AnalyticsSnapshot:
        """
        Analyze a single repository, serving it from the cache when fresh.

        Args:
            repo_url (str): Repository URL or owner/repo name.

        Returns:
            AnalyticsSnapshot: Analytics of the repository.

        Raises:
            RepositoryAnalysisError: If the reference is invalid or fetching fails.
        """
        reference = parse_repository_reference(repo_url)
        repo_name = reference.full_name

        cached = self.cache.get(reference.owner, reference.repo)
        if cached is not None:
            logger.info(
                {
                    "message": "Using cached analysis, skipping mining",
                    "repository": repo_name,
                }
            )
            return cached

        repo_data = await self.miner.mine_repository(reference, self.on_progress)

        if self.on_progress:
            self.on_progress(
                FetchProgress(
                    phase=FetchPhase.STATS,
                    current=1,
                    total=1,
                    message="Computing analytics...",
                )
            )
        snapshot = self.analyzer.analyze_repository(repo_data)

        self.cache.set(reference.owner, reference.repo, snapshot)
        return snapshot

    async def analyze_repositories(self) -> Dict[str, AnalyticsSnapshot]:
        """
        Analyze all configured repositories.

        Returns:
            Dict[str, AnalyticsSnapshot]: Mapping of ``owner/repo`` names to
                their snapshots, for the repositories that succeeded.

        Note:
            If analysis fails for a repository, it logs the error and continues
            with remaining repositories.
        """
        results = {}
        for repo_url in self.repository_urls:
            logger.info({"message": "Analyzing repository", "repository": repo_url})
            try:
                snapshot = await self.analyze_repository(repo_url)
                results[snapshot.repo_name] = snapshot
            except Exception as e:
                logger.error(
                    {
                        "message": "Failed to analyze repository",
                        "repository": repo_url,
                        "error": str(e),
                    }
                )

        return results
