"""GitHub API client for repository information.

Provides a lightweight REST client for fetching repository metadata,
license information and file contents.
"""
from __future__ import annotations

import base64
import binascii
import logging
import os
from typing import Any, Dict, Optional

from constants import Constants
from common.http_client import get_json

logger = logging.getLogger(__name__)


def decode_base64_content(content: Any) -> Optional[str]:
    """Validate and decode base64 file content as returned by the contents API.

    Returns:
        Decoded UTF-8 text, or None when the payload is not valid base64.
    """
    if not isinstance(content, str) or not content.strip():
        return None
    compact = "".join(content.split())
    try:
        raw = base64.b64decode(compact, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError):
        return None


class GitHubClient:
    """Lightweight REST client for GitHub API operations.

    Supports optional authentication via GITHUB_TOKEN environment variable.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        """Initialize GitHub client.

        Args:
            base_url: Base URL for GitHub API (defaults to Constants.GITHUB_API_BASE)
            token: GitHub personal access token (defaults to GITHUB_TOKEN env var)
        """
        self.base_url = base_url or Constants.GITHUB_API_BASE
        self.token = token or os.environ.get(Constants.ENV_GITHUB_TOKEN)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authorization if token is available."""
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers['Authorization'] = f"token {self.token}"
        return headers

    def get_repository(self, owner: str, repo: str) -> Optional[Dict[str, Any]]:
        """Fetch raw repository metadata, or None on error."""
        url = f"{self.base_url}/repos/{owner}/{repo}"
        status, _, data = get_json(url, headers=self._get_headers())
        if status == 200 and isinstance(data, dict):
            return data
        if status:
            logger.debug("GitHub repository lookup for %s/%s returned %s", owner, repo, status)
        return None

    def get_license(self, owner: str, repo: str) -> Optional[Dict[str, Optional[str]]]:
        """Fetch the detected repository license.

        Returns:
            Dict with spdx_id and html_url, or None when the repository has no
            detected license or the lookup failed.
        """
        data = self.get_repository(owner, repo)
        if not data:
            return None
        lic = data.get("license")
        if not isinstance(lic, dict):
            return None
        return {
            "spdx_id": lic.get("spdx_id"),
            "html_url": lic.get("html_url") or lic.get("url"),
        }

    def get_file_text(self, owner: str, repo: str, path: str) -> Optional[str]:
        """Fetch a file from the default branch via the contents API.

        Returns:
            Decoded file text, or None if missing or not valid base64.
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/contents/{path}"
        status, _, data = get_json(url, headers=self._get_headers())
        if status != 200 or not isinstance(data, dict):
            return None
        return decode_base64_content(data.get("content"))
