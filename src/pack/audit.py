"""Audit pipeline: membership -> enrichment -> classification."""
from __future__ import annotations

import logging
from typing import Collection, FrozenSet, Mapping, Optional

from constants import DEPRECATED_EXTENSIONS, INELIGIBLE_EXTENSIONS
from models import ClassificationResult, ExtensionPackManifest, OpenVsxIndex
from pack.classifier import classify
from pack.enrich import enrich
from pack.membership import check_membership

logger = logging.getLogger(__name__)


def audit_pack(
    manifest: ExtensionPackManifest,
    index: OpenVsxIndex,
    deprecated: Mapping[str, str] = DEPRECATED_EXTENSIONS,
    ineligible: Collection[str] = INELIGIBLE_EXTENSIONS,
    license_ids: Optional[FrozenSet[str]] = None,
) -> ClassificationResult:
    """Run the membership, enrichment and classification stages for one pack."""
    membership = check_membership(index, manifest)
    to_enrich = list(membership.absent)
    if membership.pack is not None:
        to_enrich.append(membership.pack)
    if to_enrich:
        logger.info("Enriching %d extensions missing from Open VSX.", len(to_enrich))
        enrich(to_enrich)
    return classify(
        manifest,
        membership,
        deprecated=deprecated,
        ineligible=ineligible,
        license_ids=license_ids,
    )
