"""SPDX license identifier lookups backed by the license-expression index."""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, FrozenSet, Optional

from license_expression import get_spdx_licensing


@lru_cache(maxsize=1)
def spdx_license_ids() -> FrozenSet[str]:
    """Return the canonical SPDX license-id set (license ids only, no exceptions)."""
    licensing = get_spdx_licensing()
    ids = set()
    for key, symbol in licensing.known_symbols.items():
        if key.startswith("LicenseRef-"):
            continue
        if getattr(symbol, "is_exception", False):
            continue
        ids.add(key)
    return frozenset(ids)


@lru_cache(maxsize=1)
def _lowercase_index() -> Dict[str, str]:
    return {key.lower(): key for key in spdx_license_ids()}


def is_spdx_license_id(value: Optional[str], license_ids: Optional[FrozenSet[str]] = None) -> bool:
    """Exact, case-sensitive membership test against the SPDX id set."""
    if not isinstance(value, str) or not value:
        return False
    ids = spdx_license_ids() if license_ids is None else license_ids
    return value in ids


def canonical_license_id(value: Optional[str]) -> Optional[str]:
    """Map a license key onto its SPDX id casing (``mit`` -> ``MIT``), else None."""
    if not isinstance(value, str) or not value.strip():
        return None
    return _lowercase_index().get(value.strip().lower())
