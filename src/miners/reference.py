"""Parse user supplied repository identifiers into owner/repo references."""

from typing import List
from urllib.parse import urlparse

from miners.errors import InvalidRepositoryReference
from miners.models import RepositoryReference


def _to_reference(parts: List[str], value: str) -> RepositoryReference:
    owner, repo = parts[0], parts[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not owner or not repo:
        raise InvalidRepositoryReference(value)
    return RepositoryReference(owner=owner, repo=repo)


def parse_repository_reference(value: str) -> RepositoryReference:
    """
    Turn a GitHub URL or an ``owner/repo`` string into a reference.

    Args:
        value (str): ``https://github.com/owner/repo[/...]`` or ``owner/repo``

    Returns:
        RepositoryReference: Parsed owner and repository name

    Raises:
        InvalidRepositoryReference: If no owner and repository can be extracted
    """
    candidate = (value or "").strip()
    parsed = urlparse(candidate)

    if parsed.scheme and parsed.netloc:
        parts = [part for part in parsed.path.split("/") if part]
        if len(parts) >= 2:
            return _to_reference(parts, value)
        raise InvalidRepositoryReference(value)

    parts = candidate.split("/")
    if len(parts) == 2:
        return _to_reference(parts, value)

    raise InvalidRepositoryReference(value)
