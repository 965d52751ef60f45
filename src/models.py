"""Data models shared by the audit stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from constants import Constants


def canonical_id(identifier: str) -> str:
    """Return the canonical (lower-cased, trimmed) form of an extension id."""
    return identifier.strip().lower()


def split_identifier(identifier: str) -> Tuple[str, str]:
    """Split ``publisher.name`` into its two parts.

    Raises:
        ValueError: if either part is missing.
    """
    publisher, sep, name = identifier.strip().partition(".")
    if not sep or not publisher or not name:
        raise ValueError(f"Invalid extension identifier '{identifier}', expected 'publisher.name'")
    return publisher, name


@dataclass(frozen=True)
class RepoRef:
    """Normalized source repository coordinates."""
    host: str
    owner: str
    name: str
    url: str  # https://host/owner/name, never ends with .git


@dataclass(frozen=True)
class ExtensionPackManifest:
    """An extension pack and its ordered, de-duplicated member ids."""
    identifier: str
    repository: RepoRef
    members: Tuple[str, ...]


# Mapping canonical id -> snapshot entry; presence in the mapping is what matters.
OpenVsxIndex = Mapping[str, dict]


@dataclass
class CandidateRecord:
    """A pack member that is not yet present in Open VSX."""
    identifier: str
    marketplace_url: str
    openvsx_url: str
    repository_url: Optional[str] = None
    license: Optional[str] = None
    license_url: Optional[str] = None
    last_updated: str = ""

    @classmethod
    def for_identifier(cls, identifier: str) -> "CandidateRecord":
        """Create a record with marketplace and Open VSX links for ``identifier``."""
        ident = canonical_id(identifier)
        publisher, _, name = ident.partition(".")
        return cls(
            identifier=ident,
            marketplace_url=Constants.MARKETPLACE_ITEM_URL + ident,
            openvsx_url=f"{Constants.OPENVSX_ITEM_URL}/{publisher}/{name}",
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "name": self.identifier,
            "msmarketplace": self.marketplace_url,
            "openvsx": self.openvsx_url,
            "repoUrl": self.repository_url,
            "license": self.license,
            "licenseUrl": self.license_url,
            "lastUpdated": self.last_updated,
        }


@dataclass
class MembershipResult:
    """Outcome of checking pack members against Open VSX."""
    present: List[str] = field(default_factory=list)
    absent: List[CandidateRecord] = field(default_factory=list)
    pack: Optional[CandidateRecord] = None  # the pack's own record when it is absent
    pack_present: bool = False


@dataclass(frozen=True)
class ClassificationResult:
    """Final partition of a pack's members."""
    identifier: str
    candidates: Mapping[str, CandidateRecord]
    present: Tuple[str, ...]
    deprecated: Tuple[str, ...]
    ineligible: Tuple[str, ...]
    licensed: Tuple[CandidateRecord, ...]
    unlicensed: Tuple[CandidateRecord, ...]
    pack: Optional[CandidateRecord] = None
    pack_present: bool = False
    replacements: Mapping[str, str] = field(default_factory=dict)

    @property
    def all_conditions_met(self) -> bool:
        """True when nothing blocks publishing the whole pack."""
        return not self.deprecated and not self.ineligible and not self.unlicensed
