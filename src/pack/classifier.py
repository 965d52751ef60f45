"""Classifier: partition absent pack members and decide what to register."""
from __future__ import annotations

import logging
from typing import Collection, Dict, FrozenSet, Iterable, List, Mapping, Optional

from common.licenses import is_spdx_license_id, spdx_license_ids
from common.timestamps import sort_key_ms
from constants import DEPRECATED_EXTENSIONS, INELIGIBLE_EXTENSIONS
from models import (
    CandidateRecord,
    ClassificationResult,
    ExtensionPackManifest,
    MembershipResult,
    canonical_id,
)

logger = logging.getLogger(__name__)


def _by_last_updated(records: Iterable[CandidateRecord]) -> tuple:
    # sorted() is stable: equal timestamps keep input order
    return tuple(sorted(records, key=lambda r: sort_key_ms(r.last_updated)))


def classify(
    manifest: ExtensionPackManifest,
    membership: MembershipResult,
    deprecated: Mapping[str, str] = DEPRECATED_EXTENSIONS,
    ineligible: Collection[str] = INELIGIBLE_EXTENSIONS,
    license_ids: Optional[FrozenSet[str]] = None,
) -> ClassificationResult:
    """Assign every pack member to exactly one bucket.

    Per member, first match wins: present in Open VSX, deprecated,
    ineligible, licensed (exact SPDX id), unlicensed.
    """
    ids = spdx_license_ids() if license_ids is None else license_ids
    present = set(membership.present)
    candidates: Dict[str, CandidateRecord] = {c.identifier: c for c in membership.absent}

    present_out: List[str] = []
    deprecated_out: List[str] = []
    ineligible_out: List[str] = []
    licensed: List[CandidateRecord] = []
    unlicensed: List[CandidateRecord] = []

    for ident in dict.fromkeys(canonical_id(m) for m in manifest.members):
        if ident in present:
            present_out.append(ident)
            if ident in deprecated:
                logger.warning(
                    '%s is deprecated, update the extension id from "%s" to "%s".',
                    ident, ident, deprecated[ident]
                )
        elif ident in deprecated:
            deprecated_out.append(ident)
        elif ident in ineligible:
            ineligible_out.append(ident)
        else:
            record = candidates.get(ident) or CandidateRecord.for_identifier(ident)
            candidates[ident] = record
            if is_spdx_license_id(record.license, ids):
                licensed.append(record)
            else:
                unlicensed.append(record)

    return ClassificationResult(
        identifier=manifest.identifier,
        candidates=candidates,
        present=tuple(present_out),
        deprecated=tuple(deprecated_out),
        ineligible=tuple(ineligible_out),
        licensed=_by_last_updated(licensed),
        unlicensed=_by_last_updated(unlicensed),
        pack=membership.pack,
        pack_present=membership.pack_present,
        replacements={i: deprecated[i] for i in deprecated_out},
    )


def pack_license_valid(result: ClassificationResult, license_ids: Optional[FrozenSet[str]] = None) -> bool:
    """True when the pack's own record carries a valid SPDX license id."""
    if result.pack is None:
        return False
    ids = spdx_license_ids() if license_ids is None else license_ids
    return is_spdx_license_id(result.pack.license, ids)


def select_for_registration(
    result: ClassificationResult,
    registered: Collection[str],
    include_pack: bool = False,
    license_ids: Optional[FrozenSet[str]] = None,
) -> List[CandidateRecord]:
    """Return licensed candidates not yet in the registrations file.

    With ``include_pack`` the pack's own record is appended when it is absent
    from Open VSX, every condition is met and it has a valid license.
    """
    known = {canonical_id(r) for r in registered}
    selected = [c for c in result.licensed if c.identifier not in known]
    if (
        include_pack
        and result.pack is not None
        and result.all_conditions_met
        and pack_license_valid(result, license_ids)
        and result.pack.identifier not in known
        and all(c.identifier != result.pack.identifier for c in selected)
    ):
        selected.append(result.pack)
    return selected
