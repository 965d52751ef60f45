"""GitLab API client for repository information.

Provides a lightweight REST client for fetching GitLab project metadata,
license information and raw file contents.
"""
from __future__ import annotations

import logging
import os
from typing import Optional, Dict, Any
from urllib.parse import quote

from constants import Constants
from common.http_client import get_json, robust_get
from common.licenses import canonical_license_id

logger = logging.getLogger(__name__)


class GitLabClient:
    """Lightweight REST client for GitLab API operations.

    Supports optional authentication via GITLAB_TOKEN environment variable.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        """Initialize GitLab client.

        Args:
            base_url: Base URL for GitLab API (defaults to Constants.GITLAB_API_BASE)
            token: GitLab personal access token (defaults to GITLAB_TOKEN env var)
        """
        self.base_url = base_url or Constants.GITLAB_API_BASE
        self.token = token or os.environ.get(Constants.ENV_GITLAB_TOKEN)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authorization if token is available."""
        headers = {}
        if self.token:
            headers['Private-Token'] = self.token
        return headers

    def _project_url(self, owner: str, repo: str) -> str:
        # URL encode the project path
        project_path = quote(f"{owner}/{repo}", safe='')
        return f"{self.base_url}/projects/{project_path}"

    def get_project(self, owner: str, repo: str) -> Optional[Dict[str, Any]]:
        """Fetch project metadata including the detected license.

        Args:
            owner: Project owner/namespace
            repo: Project name

        Returns:
            Dict with default_branch, last_activity_at and license, or None on error
        """
        url = f"{self._project_url(owner, repo)}?license=true"

        status, _, data = get_json(url, headers=self._get_headers())

        if status == 200 and isinstance(data, dict):
            return {
                'default_branch': data.get('default_branch'),
                'last_activity_at': data.get('last_activity_at'),
                'license': data.get('license'),
            }
        return None

    def get_license(self, owner: str, repo: str) -> Optional[Dict[str, Optional[str]]]:
        """Fetch the detected project license.

        GitLab reports lower-case license keys (``mit``); they are mapped onto
        the SPDX id casing when the key is a known SPDX id.

        Returns:
            Dict with spdx_id and html_url, or None on error
        """
        project = self.get_project(owner, repo)
        if not project:
            return None
        lic = project.get('license')
        if not isinstance(lic, dict):
            return None
        key = lic.get('key')
        spdx_id = canonical_license_id(key)
        if spdx_id is None and key:
            logger.debug("GitLab license key %r for %s/%s is not an SPDX id", key, owner, repo)
        return {
            'spdx_id': spdx_id or key,
            'html_url': lic.get('html_url') or lic.get('source_url'),
        }

    def get_file_text(self, owner: str, repo: str, path: str) -> Optional[str]:
        """Fetch a raw file from the project's default branch.

        Args:
            owner: Project owner/namespace
            repo: Project name
            path: File path inside the repository

        Returns:
            File text or None on error
        """
        project = self.get_project(owner, repo)
        ref = (project or {}).get('default_branch') or 'HEAD'
        file_path = quote(path, safe='')
        url = f"{self._project_url(owner, repo)}/repository/files/{file_path}/raw?ref={quote(ref, safe='')}"
        status, _, text = robust_get(url, headers=self._get_headers())
        if status == 200 and text:
            return text
        return None
