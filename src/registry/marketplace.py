"""Visual Studio Marketplace client: extension search and manifest lookup."""

from __future__ import annotations

import logging
from typing import Any, Dict

from constants import AssetTypes, Constants
from common.errors import MalformedManifestError, NotFoundError, TransportError
from common.http_client import get_json, post_json
from common.logging_utils import extra_context, is_debug_enabled, Timer

logger = logging.getLogger(__name__)


def _build_query(identifier: str) -> Dict[str, Any]:
    return {
        "assetTypes": None,
        "filters": [
            {
                "criteria": [
                    {
                        "filterType": Constants.MARKETPLACE_FILTER_EXTENSION_NAME,
                        "value": identifier,
                    },
                ],
                "direction": 2,
                "pageSize": Constants.MARKETPLACE_PAGE_SIZE,
                "pageNumber": 1,
                "sortBy": 0,
                "sortOrder": 0,
                "pagingToken": None,
            },
        ],
        "flags": Constants.MARKETPLACE_QUERY_FLAGS,
    }


def query_extension(identifier: str) -> Dict[str, Any]:
    """Look up an extension by ``publisher.name`` in the marketplace.

    The gallery returns the most relevant match last, so the last extension
    of the last result set is taken.

    Raises:
        TransportError: the request failed or returned a non-200 status.
        NotFoundError: the search returned no extension.
    """
    with Timer() as t:
        status, _, data = post_json(
            Constants.MARKETPLACE_QUERY_URL,
            payload=_build_query(identifier),
            headers=Constants.MARKETPLACE_HEADERS,
        )
    if status != 200:
        raise TransportError(
            f"Marketplace query for {identifier} failed"
            + (f" with status {status}" if status else "")
        )

    results = (data or {}).get("results") or []
    extensions = (results[-1].get("extensions") or []) if results else []
    if not extensions:
        raise NotFoundError(f"Extension ({identifier}) not found")

    if is_debug_enabled(logger):
        logger.debug(
            "Marketplace match",
            extra=extra_context(
                event="lookup", component="marketplace", action="query_extension",
                target=identifier, outcome="found", duration_ms=t.duration_ms()
            )
        )
    return extensions[-1]


def manifest_asset_url(extension: Dict[str, Any]) -> str:
    """Return the package.json asset URL from the newest (first listed) version.

    Raises:
        MalformedManifestError: no version or no manifest asset is listed.
    """
    if not extension:
        raise MalformedManifestError("Extension should not be empty")
    versions = extension.get("versions") or []
    files = (versions[0].get("files") or []) if versions else []
    for item in files:
        if item.get("assetType") == AssetTypes.CODE_MANIFEST.value and item.get("source"):
            return item["source"]
    raise MalformedManifestError("assetUrl should be valid url to ext manifest")


def fetch_repository_field(url: str) -> str:
    """Fetch an extension manifest and return its repository URL.

    The manifest's ``repository`` may be a plain string or an object with a
    ``url`` key; both are reduced to the URL string here.

    Raises:
        MalformedManifestError: the manifest is missing or has no usable repository.
    """
    status, _, manifest = get_json(url, headers={"Content-Type": "application/json; charset=utf-8"})
    if status != 200 or not isinstance(manifest, dict):
        raise MalformedManifestError(f"Extension manifest could not be loaded from {url}")

    repository = manifest.get("repository")
    if isinstance(repository, dict):
        repository = repository.get("url")
    if isinstance(repository, str) and repository.strip():
        return repository.strip()
    raise MalformedManifestError(
        "repoUrl should be valid url, for instance https://github.com/microsoft/vscode-docker"
    )


def last_updated(extension: Dict[str, Any]) -> str:
    """Return the extension's lastUpdated timestamp, or empty string."""
    value = extension.get("lastUpdated") if extension else None
    return value if isinstance(value, str) else ""
