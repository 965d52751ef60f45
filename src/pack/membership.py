"""Membership checker: which pack members already exist in Open VSX."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List

from common.concurrency import gather_settled
from common.logging_utils import extra_context, Timer
from models import (
    CandidateRecord,
    ExtensionPackManifest,
    MembershipResult,
    OpenVsxIndex,
    canonical_id,
    split_identifier,
)
from registry.openvsx import find_extension, is_not_found

logger = logging.getLogger(__name__)

Lookup = Callable[[str, str], dict]


def _live_presence(identifiers: List[str], lookup: Lookup) -> Dict[str, bool]:
    """Look up each identifier independently; failures count as absent."""

    def _check(ident: str) -> bool:
        publisher, name = split_identifier(ident)
        return not is_not_found(lookup(publisher, name))

    outcomes = gather_settled(_check, identifiers)
    return {o.item: bool(o.ok and o.value) for o in outcomes}


def check_membership(
    index: OpenVsxIndex,
    manifest: ExtensionPackManifest,
    lookup: Lookup = find_extension,
) -> MembershipResult:
    """Partition the pack's members into present and absent.

    Members missing from the snapshot get one live lookup each; the pack's
    own identifier is checked the same way so it can be registered alongside
    its members.
    """
    with Timer() as t:
        members = [canonical_id(m) for m in manifest.members]
        misses = [m for m in members if m not in index]
        to_check = list(dict.fromkeys(misses + [manifest.identifier]))
        pack_in_index = manifest.identifier in index
        if pack_in_index:
            to_check.remove(manifest.identifier)

        live = _live_presence(to_check, lookup)

        result = MembershipResult()
        for ident in members:
            if ident in index or live.get(ident):
                result.present.append(ident)
            else:
                result.absent.append(CandidateRecord.for_identifier(ident))

        result.pack_present = pack_in_index or bool(live.get(manifest.identifier))
        if not result.pack_present:
            result.pack = CandidateRecord.for_identifier(manifest.identifier)

    logger.info(
        "Open VSX membership: %d present, %d absent.",
        len(result.present),
        len(result.absent),
        extra=extra_context(
            event="complete", component="membership", action="check_membership",
            target=manifest.identifier, count=len(to_check), duration_ms=t.duration_ms()
        )
    )
    return result
