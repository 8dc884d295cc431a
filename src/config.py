"""
Application Configuration Module.

Manages application settings and environment variables using Pydantic for validation.
Provides centralized configuration management with type safety and validation.

Features:
- Environment variable loading and validation
- Secure credential management
- Fetch, cache and export tuning knobs
- Path normalization for output directories
"""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import os
from logger import LogManager


class Settings(BaseSettings):
    """
    Application configuration settings with validation.

    Manages and validates all application settings including:
    - Application identification
    - GitHub authentication and API tuning
    - Repository configurations
    - Snapshot cache settings
    - Logging settings
    - Output directory configurations

    Attributes:
        app_name (str): Name of the application
        dev (bool): Debug mode flag
        log_dir (str): Directory for log files
        log_level (int): Logging level (default: debug)
        github_token (Optional[SecretStr]): GitHub API token, anonymous access when unset
        github_api_url (str): Base URL of the GitHub REST API
        github_repo_urls (str): Comma-separated repository URLs or owner/repo names
        max_commits (int): Maximum number of commit summaries to list
        detail_commit_limit (int): Number of most recent commits fetched in detail
        detail_concurrency (int): Maximum in-flight commit detail requests
        page_size (int): Commits requested per list page
        max_fetch_attempts (int): Attempts per request before giving up
        request_timeout (float): HTTP timeout in seconds
        cache_dir (str): Directory of the snapshot cache
        cache_key_prefix (str): Prefix of every snapshot cache key
        cache_ttl_seconds (int): Snapshot cache time-to-live
        hot_file_threshold (int): Commit count at which a file counts as hot
        report_output_dir (str): Directory for exported snapshots
        export_formats (str): Comma-separated export formats
    """

    # Application settings
    app_name: str = Field(default="RepoPulse", description="Application name")
    dev: bool = Field(default=False, description="Debug mode")
    log_dir: str = Field(default="logs", description="Logging directory")

    # Optional configuration with defaults
    log_level: int = Field(default=10, description="Logging level, default debug")

    # GitHub configuration
    github_token: Optional[SecretStr] = Field(
        default=None, description="GitHub token, anonymous access when unset"
    )
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub REST API base URL"
    )
    github_repo_urls: str = Field(
        default="", description="Comma-separated GitHub repository URLs to analyze"
    )

    # Fetch configuration
    max_commits: int = Field(default=500, gt=0, description="Commits to list")
    detail_commit_limit: int = Field(
        default=200, gt=0, description="Most recent commits fetched in detail"
    )
    detail_concurrency: int = Field(
        default=25, gt=0, description="Concurrent commit detail requests"
    )
    page_size: int = Field(default=100, gt=0, le=100, description="List page size")
    max_fetch_attempts: int = Field(
        default=3, gt=0, description="Attempts per GitHub request"
    )
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout")

    # Cache configuration
    cache_dir: str = Field(default="data/cache", description="Snapshot cache directory")
    cache_key_prefix: str = Field(
        default="repo-analytics-", description="Snapshot cache key prefix"
    )
    cache_ttl_seconds: int = Field(
        default=3600, gt=0, description="Snapshot cache time-to-live in seconds"
    )

    # Analysis and export configuration
    hot_file_threshold: int = Field(
        default=5, gt=0, description="Commit count at which a file is hot"
    )

    report_output_dir: str = Field(
        default="reports", description="Report output directory"
    )

    export_formats: str = Field(
        default="json,csv", description="Comma-separated export formats"
    )

    @property
    def repository_urls(self) -> List[str]:
        """
        Get list of repository URLs from configuration.

        Splits and cleans the comma-separated repository URLs string.

        Returns:
            List[str]: List of cleaned repository URLs
        """
        return [url.strip() for url in self.github_repo_urls.split(",") if url.strip()]

    @property
    def formats(self) -> List[str]:
        """Export formats, lower-cased, empty entries dropped."""
        return [
            fmt.strip().lower() for fmt in self.export_formats.split(",") if fmt.strip()
        ]

    @property
    def token(self) -> Optional[str]:
        """Plain GitHub token or None for anonymous access."""
        return self.github_token.get_secret_value() if self.github_token else None

    @field_validator("report_output_dir")
    def ensure_absolute_path(cls, v: str) -> str:
        """
        Ensure report directory path is absolute.

        Converts relative paths to absolute paths based on current working directory.

        Args:
            v (str): Directory path to validate

        Returns:
            str: Absolute path to report directory
        """
        if not os.path.isabs(v):
            return os.path.abspath(v)
        return v

    # Configure env file loading
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
    )


# Create global settings instance
settings = Settings()

# Initialize logging configuration
logger = LogManager(
    app_name=settings.app_name.lower(),
    log_dir=settings.log_dir,
    development=settings.dev,
    level=settings.log_level,
).logger
