"""Extension pack audit stages.

- resolver.py: marketplace entry, repository and member list of a pack
- membership.py: presence of members in Open VSX (snapshot + live lookups)
- enrich.py: license and last-updated data for absent members
- classifier.py: partitioning and registration selection
- audit.py: the stages chained for one pack
"""

from .resolver import resolve_pack, is_extension_pack  # noqa: F401
from .membership import check_membership  # noqa: F401
from .enrich import enrich  # noqa: F401
from .classifier import classify, select_for_registration  # noqa: F401
from .audit import audit_pack  # noqa: F401

__all__ = [
    "resolve_pack",
    "is_extension_pack",
    "check_membership",
    "enrich",
    "classify",
    "select_for_registration",
    "audit_pack",
]
