"""Configuration loading and overrides for runtime tunables.

Values come from a YAML (or JSON) file and are applied onto ``Constants``;
CLI flags are applied last and take precedence.
"""

from __future__ import annotations

import json
import logging
import os
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

import yaml

from constants import Constants, DEPRECATED_EXTENSIONS, INELIGIBLE_EXTENSIONS
from models import canonical_id

logger = logging.getLogger(__name__)

# section -> {config key: Constants attribute}
_SETTINGS = {
    "http": {
        "request_timeout": "REQUEST_TIMEOUT",
        "max_concurrency": "MAX_CONCURRENCY",
        "cache_ttl": "HTTP_CACHE_TTL_SEC",
    },
    "marketplace": {
        "query_url": "MARKETPLACE_QUERY_URL",
    },
    "openvsx": {
        "api_url": "OPENVSX_API_URL",
        "snapshot_url": "OPENVSX_SNAPSHOT_URL",
        "cache_file": "OPENVSX_SNAPSHOT_FILE",
    },
    "github": {
        "api_url": "GITHUB_API_BASE",
    },
    "gitlab": {
        "api_url": "GITLAB_API_BASE",
    },
}
_INT_SETTINGS = {"REQUEST_TIMEOUT", "MAX_CONCURRENCY", "HTTP_CACHE_TTL_SEC"}


def _read_config_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        if path.lower().endswith(".json"):
            data = json.load(fh)
        else:
            data = yaml.safe_load(fh)
    return data if isinstance(data, dict) else {}


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from ``path`` or the first default location found.

    An explicit path that cannot be read or parsed is logged and ignored.
    """
    candidates = [path] if path else [os.path.expanduser(p) for p in Constants.CONFIG_LOCATIONS]
    for candidate in candidates:
        if not os.path.isfile(candidate):
            if path:
                logger.warning("Config file not found: %s", candidate)
            continue
        try:
            cfg = _read_config_file(candidate)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as exc:
            logger.warning("Could not load config file %s: %s", candidate, exc)
            return {}
        logger.debug("Loaded configuration from %s", candidate)
        return cfg
    return {}


def apply_config(cfg: Mapping[str, Any]) -> None:
    """Apply configuration values onto Constants; invalid values are skipped."""
    for section, keys in _SETTINGS.items():
        values = cfg.get(section)
        if not isinstance(values, dict):
            continue
        for key, attr in keys.items():
            if values.get(key) is None:
                continue
            value = values[key]
            if attr in _INT_SETTINGS:
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    logger.warning("Ignoring invalid %s.%s value: %r", section, key, value)
                    continue
            setattr(Constants, attr, value)


def build_tables(cfg: Mapping[str, Any]) -> Tuple[Mapping[str, str], FrozenSet[str]]:
    """Return (deprecation table, ineligibility list) extended by configuration."""
    deprecated = dict(DEPRECATED_EXTENSIONS)
    extra = cfg.get("deprecated")
    if isinstance(extra, dict):
        for old, new in extra.items():
            if isinstance(old, str) and isinstance(new, str):
                deprecated[canonical_id(old)] = canonical_id(new)

    ineligible = set(INELIGIBLE_EXTENSIONS)
    extra_list = cfg.get("ineligible")
    if isinstance(extra_list, list):
        ineligible.update(canonical_id(i) for i in extra_list if isinstance(i, str))

    return MappingProxyType(deprecated), frozenset(ineligible)


def apply_cli_overrides(args) -> None:
    """Apply CLI flags with highest precedence."""
    if getattr(args, "CACHE_FILE", None):
        Constants.OPENVSX_SNAPSHOT_FILE = args.CACHE_FILE
