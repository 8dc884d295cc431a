"""
Abstract Base Class for Repository Miners.

Defines the interface for repository data mining implementations.
All repository miners (GitHub, GitLab, etc.) should implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from miners.models import ProgressCallback, RepositoryData, RepositoryReference


class RepositoryMiner(ABC):
    """
    Abstract base class for repository miners.

    Defines the contract for mining commit history from different sources.
    Implementations should handle:
    - Authentication with the repository service
    - Paginated and concurrent data extraction
    - Data transformation to common models
    - Progress reporting
    """

    @abstractmethod
    async def mine_repository(
        self,
        reference: RepositoryReference,
        on_progress: Optional[ProgressCallback] = None,
    ) -> RepositoryData:
        """
        Extract the commit list and commit details of a repository.

        Args:
            reference (RepositoryReference): Repository to mine
            on_progress (Optional[ProgressCallback]): Synchronous progress sink

        Returns:
            RepositoryData: Collected repository data

        Raises:
            RepositoryAnalysisError: If mining fails
        """
        pass
