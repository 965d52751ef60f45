"""Repository URL normalization.

Turns the many shapes a ``repository`` field can take in an extension
manifest into a single RepoRef with a canonical https URL.
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse

from models import RepoRef

_SHORTHAND_HOSTS = {
    "github": "github.com",
    "gitlab": "gitlab.com",
    "bitbucket": "bitbucket.org",
}
_SHORTHAND_RE = re.compile(r"^(?P<provider>github|gitlab|bitbucket):(?P<path>[^/].*)$")
_BARE_RE = re.compile(r"^[\w.-]+/[\w.-]+$")
_SCP_RE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+\.[a-z]{2,}):(?!//)(?P<path>.+)$", re.IGNORECASE)

# Path segments after which the remainder points inside the repository
_PATH_MARKERS = {"tree", "blob", "-", "src", "issues", "wiki", "releases"}


def _strip_git_suffix(name: str) -> str:
    return name[:-4] if name.lower().endswith(".git") else name


def _split_path(host: str, path: str):
    segments = [s for s in path.split("/") if s]
    for idx, seg in enumerate(segments):
        if idx >= 2 and seg in _PATH_MARKERS:
            segments = segments[:idx]
            break
    if len(segments) < 2:
        return None
    if host == "gitlab.com":
        # GitLab supports nested groups: everything but the last segment is the namespace
        owner = "/".join(segments[:-1])
        name = segments[-1]
    else:
        owner, name = segments[0], segments[1]
    name = _strip_git_suffix(name)
    if not owner or not name:
        return None
    return owner, name


def normalize_repo_url(url: str) -> Optional[RepoRef]:
    """Normalize a repository URL into a RepoRef.

    Args:
        url: Raw repository URL (https, git+https, git://, scp-style,
            ``github:owner/repo`` shorthand or bare ``owner/repo``).

    Returns:
        RepoRef, or None when the URL cannot be interpreted.
    """
    if not isinstance(url, str):
        return None
    text = url.strip()
    if not text:
        return None

    shorthand = _SHORTHAND_RE.match(text)
    if shorthand:
        host = _SHORTHAND_HOSTS[shorthand.group("provider")]
        path = shorthand.group("path")
    elif _BARE_RE.match(text):
        host, path = "github.com", text
    else:
        if text.startswith("git+"):
            text = text[4:]
        if "://" in text:
            parsed = urlparse(text)
            host = (parsed.hostname or "").lower()
            path = parsed.path
        else:
            scp = _SCP_RE.match(text)
            if not scp:
                return None
            host = scp.group("host").lower()
            path = scp.group("path")

    if host.startswith("www."):
        host = host[4:]
    if not host:
        return None
    parts = _split_path(host, path.split("#", 1)[0].split("?", 1)[0])
    if not parts:
        return None
    owner, name = parts
    return RepoRef(host=host, owner=owner, name=name, url=f"https://{host}/{owner}/{name}")
