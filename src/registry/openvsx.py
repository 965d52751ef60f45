"""Open VSX client: per-extension lookups and the cached registry snapshot."""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Dict, Optional, Union

from constants import Constants, ExitCodes
from common.http_client import get_json, safe_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from models import OpenVsxIndex, canonical_id

logger = logging.getLogger(__name__)

ExtensionLookup = Dict[str, Any]


def not_found_record(publisher: str, name: str) -> Dict[str, Union[str, bool]]:
    """Typed marker for an extension that is absent from Open VSX."""
    return {"publisherName": publisher.lower(), "name": name.lower(), "notFound": True}


def is_not_found(record: Any) -> bool:
    return not isinstance(record, dict) or bool(record.get("notFound"))


def find_extension(publisher: str, name: str) -> ExtensionLookup:
    """Look up ``publisher.name`` via the Open VSX API.

    Any failure (transport error, non-200 status, ``error`` in the body) is
    reported as a not-found record rather than raised.
    """
    url = f"{Constants.OPENVSX_API_URL}/{publisher}/{name}"
    status, _, data = get_json(url, headers={"Content-Type": "application/json; charset=utf-8"})
    if status != 200 or not isinstance(data, dict) or "error" in data:
        if is_debug_enabled(logger):
            logger.debug(
                "Open VSX lookup miss",
                extra=extra_context(
                    event="lookup", component="openvsx", action="find_extension",
                    target=safe_url(url), status_code=status, outcome="not_found"
                )
            )
        return not_found_record(publisher, name)
    return data


def download_snapshot(url: Optional[str] = None) -> Dict[str, Any]:
    """Download the registry listing used to seed the local snapshot."""
    url = url or Constants.OPENVSX_SNAPSHOT_URL
    res = safe_get(url, context="openvsx")
    if res.status_code != 200:
        logger.error("Unexpected status code (%s) downloading %s", res.status_code, safe_url(url))
        sys.exit(ExitCodes.CONNECTION_ERROR.value)
    try:
        return json.loads(res.text)
    except json.JSONDecodeError:
        logger.error("Couldn't decode Open VSX registry listing from %s", safe_url(url))
        sys.exit(ExitCodes.CONNECTION_ERROR.value)


def index_from_listing(listing: Any) -> OpenVsxIndex:
    """Build an id -> entry index from a registry listing.

    Accepts ``{"extensions": [{"id": ...}, ...]}`` as well as a mapping keyed
    by extension id.
    """
    index: Dict[str, dict] = {}
    if not isinstance(listing, dict):
        return index
    entries = listing.get("extensions")
    if isinstance(entries, list):
        for entry in entries:
            if isinstance(entry, dict) and isinstance(entry.get("id"), str):
                index[canonical_id(entry["id"])] = entry
        return index
    for key, entry in listing.items():
        if isinstance(key, str) and "." in key:
            index[canonical_id(key)] = entry if isinstance(entry, dict) else {"id": key}
    return index


def load_index(path: str) -> OpenVsxIndex:
    """Load a snapshot file from disk into an index."""
    with open(path, "r", encoding="utf-8") as fh:
        return index_from_listing(json.load(fh))


def ensure_snapshot(path: Optional[str] = None) -> OpenVsxIndex:
    """Return the snapshot index, downloading it once when the file is missing.

    The snapshot is never refreshed automatically; live lookups cover entries
    that were published after it was taken.
    """
    path = path or Constants.OPENVSX_SNAPSHOT_FILE
    if not os.path.exists(path):
        logger.info("Open VSX snapshot not found at %s, downloading.", path)
        listing = download_snapshot()
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(listing, fh)
    index = load_index(path)
    logger.info("Open VSX snapshot loaded: %d extensions.", len(index))
    return index
