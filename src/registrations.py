"""Registrations file used by the Open VSX publishing pipeline.

The file is a JSON document ``{"extensions": [{"id": ..., "repository": ...}]}``.
New entries are derived from a shallow clone of each candidate's source
repository so the id recorded is the one its package.json declares.
"""
from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from constants import Constants
from common.errors import RegistrationError
from common.logging_utils import safe_url
from models import CandidateRecord, canonical_id

logger = logging.getLogger(__name__)

Entry = Dict[str, Any]
FetchInfo = Callable[[str, Optional[str]], Tuple[Entry, Dict[str, Any]]]


def read_extensions_file(path: str) -> Dict[str, Any]:
    """Read the registrations file.

    Raises:
        OSError: the file cannot be read.
        RegistrationError: the file is not a JSON object.
    """
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise RegistrationError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise RegistrationError(f"{path} must contain a JSON object")
    if not isinstance(data.get("extensions"), list):
        data["extensions"] = []
    return data


def write_extensions_file(data: Dict[str, Any], path: str) -> None:
    """Rewrite the registrations file."""
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2, ensure_ascii=False)
        fh.write("\n")


def _read_package(path: str) -> Optional[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            pkg = json.load(fh)
    except (OSError, json.JSONDecodeError):
        return None
    return pkg if isinstance(pkg, dict) else None


def _package_id(pkg: Dict[str, Any]) -> Optional[str]:
    publisher, name = pkg.get("publisher"), pkg.get("name")
    if isinstance(publisher, str) and isinstance(name, str) and publisher and name:
        return f"{publisher}.{name}"
    return None


def find_extension_package(checkout: str, expected_id: Optional[str] = None):
    """Locate the extension's package.json inside a checkout.

    The repository root is used when it declares an extension; otherwise
    first-level sub-directories are searched (monorepos), preferring the one
    whose ``publisher.name`` equals ``expected_id``.

    Returns:
        Tuple of (package dict, location relative to the checkout or None).
    """
    root_pkg = _read_package(os.path.join(checkout, Constants.PACKAGE_JSON_FILE))
    if root_pkg and _package_id(root_pkg):
        if expected_id is None or canonical_id(_package_id(root_pkg)) == canonical_id(expected_id):
            return root_pkg, None

    fallback = None
    for entry in sorted(os.listdir(checkout)):
        sub = os.path.join(checkout, entry)
        if entry.startswith(".") or not os.path.isdir(sub):
            continue
        pkg = _read_package(os.path.join(sub, Constants.PACKAGE_JSON_FILE))
        if not pkg or not _package_id(pkg):
            continue
        if expected_id and canonical_id(_package_id(pkg)) == canonical_id(expected_id):
            return pkg, entry
        fallback = fallback or (pkg, entry)

    if root_pkg and _package_id(root_pkg):
        return root_pkg, None
    if fallback:
        return fallback
    raise RegistrationError(f"No extension package.json found in {checkout}")


def fetch_extension_info(repository: str, expected_id: Optional[str] = None) -> Tuple[Entry, Dict[str, Any]]:
    """Clone ``repository`` and build its registrations entry.

    Raises:
        RegistrationError: cloning failed or no extension manifest was found.
    """
    with tempfile.TemporaryDirectory(prefix="vsxaudit-") as tmp:
        checkout = os.path.join(tmp, "repo")
        try:
            subprocess.run(
                ["git", "clone", "--depth", "1", "--quiet", repository, checkout],
                check=True,
                capture_output=True,
                text=True,
                timeout=Constants.GIT_CLONE_TIMEOUT,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as exc:
            raise RegistrationError(f"Could not clone {safe_url(repository)}: {exc}") from exc
        pkg, location = find_extension_package(checkout, expected_id)

    entry: Entry = {"id": _package_id(pkg), "repository": repository}
    if location:
        entry["location"] = location
    return entry, pkg


def add_new_extension(entry: Entry, package: Dict[str, Any], extensions: List[Entry]) -> bool:
    """Insert ``entry`` into ``extensions`` keeping ids sorted.

    Returns:
        False when an entry with the same id is already present.
    """
    ident = canonical_id(entry["id"])
    if any(canonical_id(str(e.get("id", ""))) == ident for e in extensions):
        logger.info("%s is already registered, skipping.", entry["id"])
        return False
    if package.get("version"):
        logger.debug("Registering %s at version %s", entry["id"], package["version"])
    extensions.append(entry)
    extensions.sort(key=lambda e: canonical_id(str(e.get("id", ""))))
    return True


def on_did_add_extension(entry: Entry) -> None:
    """Post-add notification for a newly registered extension."""
    logger.info(
        "Added %s (%s). Commit the updated extensions file to publish it to Open VSX.",
        entry.get("id"),
        entry.get("repository"),
    )


class RegistrationStore:
    """Read/append/rewrite access to one registrations file."""

    def __init__(
        self,
        path: str,
        fetch_info: FetchInfo = fetch_extension_info,
        notify: Callable[[Entry], None] = on_did_add_extension,
    ):
        self.path = path
        self._fetch_info = fetch_info
        self._notify = notify

    def registered_ids(self) -> List[str]:
        """Canonical ids already present in the file."""
        data = read_extensions_file(self.path)
        return [canonical_id(str(e["id"])) for e in data["extensions"] if isinstance(e, dict) and e.get("id")]

    def add(self, candidates: Iterable[CandidateRecord]) -> List[Entry]:
        """Append candidates to the file.

        A candidate whose repository cannot be cloned or read is logged and
        skipped. The post-add hook runs for every added entry before the file
        is rewritten.
        """
        candidates = list(candidates)
        if not candidates:
            return []
        data = read_extensions_file(self.path)
        extensions = data["extensions"]
        added: List[Entry] = []
        for candidate in candidates:
            if not candidate.repository_url:
                logger.warning("No repository known for %s, skipping.", candidate.identifier)
                continue
            try:
                entry, package = self._fetch_info(candidate.repository_url, candidate.identifier)
            except RegistrationError as exc:
                logger.error("Could not register %s: %s", candidate.identifier, exc)
                continue
            if add_new_extension(entry, package, extensions):
                added.append(entry)
        for entry in added:
            self._notify(entry)
        if added:
            write_extensions_file(data, self.path)
        return added
