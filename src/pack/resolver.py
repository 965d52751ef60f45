"""Resolver: marketplace entry -> repository -> extension pack members."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from constants import Constants
from common.errors import MalformedManifestError
from common.logging_utils import extra_context, is_debug_enabled
from models import ExtensionPackManifest, RepoRef, canonical_id
from registry import marketplace
from repository.providers import client_for_host
from repository.url_normalize import normalize_repo_url

logger = logging.getLogger(__name__)


def resolve_repository(extension: Dict[str, Any]) -> RepoRef:
    """Resolve the source repository of a marketplace extension entry.

    Raises:
        MalformedManifestError: the manifest asset or its repository field is unusable.
    """
    asset_url = marketplace.manifest_asset_url(extension)
    repo_url = marketplace.fetch_repository_field(asset_url)
    repo = normalize_repo_url(repo_url)
    if repo is None:
        raise MalformedManifestError(f"Repository url '{repo_url}' could not be parsed")
    return repo


def fetch_package_json(repo: RepoRef) -> Dict[str, Any]:
    """Fetch and parse package.json from the repository's default branch.

    Missing, undecodable or unparsable content yields an empty dict.
    """
    client = client_for_host(repo.host)
    if client is None:
        logger.warning("Unsupported repository host %s for %s", repo.host, repo.url)
        return {}
    text = client.get_file_text(repo.owner, repo.name, Constants.PACKAGE_JSON_FILE)
    if not text:
        return {}
    try:
        pkg = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("package.json in %s is not valid JSON", repo.url)
        return {}
    return pkg if isinstance(pkg, dict) else {}


def extract_members(package_json: Dict[str, Any]) -> List[str]:
    """Return lower-cased pack members from ``extensionPack`` or ``extensionDependencies``.

    https://code.visualstudio.com/api/references/extension-manifest#fields
    """
    if not isinstance(package_json, dict):
        return []
    members = package_json.get("extensionPack") or package_json.get("extensionDependencies") or []
    if not isinstance(members, list):
        return []
    return [canonical_id(m) for m in members if isinstance(m, str) and m.strip()]


def resolve_pack(identifier: str) -> ExtensionPackManifest:
    """Resolve an extension pack's repository and member list.

    Raises:
        NotFoundError, MalformedManifestError, TransportError
    """
    ident = canonical_id(identifier)
    extension = marketplace.query_extension(ident)
    repo = resolve_repository(extension)
    members = tuple(dict.fromkeys(extract_members(fetch_package_json(repo))))
    if is_debug_enabled(logger):
        logger.debug(
            "Pack resolved",
            extra=extra_context(
                event="resolve", component="resolver", action="resolve_pack",
                target=ident, count=len(members), outcome="success"
            )
        )
    return ExtensionPackManifest(identifier=ident, repository=repo, members=members)


def is_extension_pack(identifier: str) -> bool:
    """True when the extension declares at least one pack member."""
    return len(resolve_pack(identifier).members) > 0
