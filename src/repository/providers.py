"""Repository hosting providers and client selection."""
from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol, Dict


class ProviderType(Enum):
    """Supported repository hosting providers."""
    GITHUB = "github"
    GITLAB = "gitlab"
    UNKNOWN = "unknown"


class ProviderClient(Protocol):
    """Operations the audit needs from a hosting provider."""

    def get_license(self, owner: str, repo: str) -> Optional[Dict[str, Optional[str]]]:
        ...

    def get_file_text(self, owner: str, repo: str, path: str) -> Optional[str]:
        ...


def map_host_to_type(host: Optional[str]) -> ProviderType:
    """Map a repository host name to its provider type."""
    host = (host or "").lower()
    if host == "github.com":
        return ProviderType.GITHUB
    if host == "gitlab.com":
        return ProviderType.GITLAB
    return ProviderType.UNKNOWN


def client_for_host(host: Optional[str]) -> Optional[ProviderClient]:
    """Return a provider client for ``host``, or None for unsupported hosts."""
    # pylint: disable=import-outside-toplevel
    ptype = map_host_to_type(host)
    if ptype == ProviderType.GITHUB:
        from repository.github import GitHubClient
        return GitHubClient()
    if ptype == ProviderType.GITLAB:
        from repository.gitlab import GitLabClient
        return GitLabClient()
    return None
