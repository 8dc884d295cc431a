"""
Main Application Entry Point.

This module serves as the primary entry point for the commit analytics system.
It orchestrates the analysis workflow, including:
- HTTP client and miner initialization
- Snapshot cache management
- Analysis execution
- Summary logging and export
- Error handling and logging

The application can be run directly to analyze the configured repositories
and export their analytics.
"""

import asyncio
import os

import httpx

from config import settings, logger
from analyzers.insights import summarize
from analyzers.multi_repository import MultiRepositoryAnalyzer
from analyzers.repository import CommitAnalyzer
from export.exporters import write_exports
from miners.github_miner import GitHubMiner
from miners.fetcher import RateLimitedFetcher
from miners.models import FetchProgress
from storage.snapshot_cache import SnapshotCache


def log_progress(progress: FetchProgress) -> None:
    logger.debug(
        {
            "message": progress.message,
            "phase": progress.phase.value,
            "current": progress.current,
            "total": progress.total,
        }
    )


async def main() -> None:
    """
    Execute the main application workflow.

    Performs the following steps:
    1. Creates output directory for exports if it doesn't exist
    2. Initializes the GitHub miner, analyzer and snapshot cache
    3. Analyzes every configured repository
    4. Logs a summary and writes the exports of each analyzed repository

    Note:
        - Configured repositories are read from settings
        - Exports are saved to the configured output directory
        - Failed repository analyses are logged but don't stop execution
    """
    logger.info("Starting repository analysis...")

    if not settings.repository_urls:
        logger.warning("No repositories configured, set GITHUB_REPO_URLS")
        return

    # Create output directory for exports
    os.makedirs(settings.report_output_dir, exist_ok=True)

    async with httpx.AsyncClient(
        timeout=settings.request_timeout, follow_redirects=True
    ) as client:
        logger.debug("initializing github miner...")
        miner = GitHubMiner(
            client,
            github_token=settings.token,
            api_url=settings.github_api_url,
            max_commits=settings.max_commits,
            detail_commit_limit=settings.detail_commit_limit,
            concurrency=settings.detail_concurrency,
            page_size=settings.page_size,
            fetcher=RateLimitedFetcher(client, settings.max_fetch_attempts),
        )

        cache = SnapshotCache(
            settings.cache_dir,
            prefix=settings.cache_key_prefix,
            ttl_seconds=settings.cache_ttl_seconds,
        )
        multi_analyzer = MultiRepositoryAnalyzer(
            cache,
            CommitAnalyzer(),
            miner,
            settings.repository_urls,
            on_progress=log_progress,
        )

        logger.info("analyzing repositories...")
        snapshots = await multi_analyzer.analyze_repositories()

    logger.info("exporting analytics...")
    for repo_name, snapshot in snapshots.items():
        summary = summarize(snapshot, settings.hot_file_threshold)
        logger.info({"message": "Repository summary", **summary.model_dump()})
        if summary.is_partial:
            logger.warning(
                {
                    "message": "File, contributor and weekly statistics cover only "
                    "the most recent commits",
                    "repository": repo_name,
                    "total_commits": summary.total_commits,
                    "detailed_commits": summary.detailed_commits,
                }
            )
        write_exports(snapshot, settings.report_output_dir, settings.formats)

    logger.info("application finished")


def run() -> None:
    """Console script entry point."""
    logger.info("Starting application ...")
    asyncio.run(main())


if __name__ == "__main__":
    run()
