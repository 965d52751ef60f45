"""Enricher: repository, license and last-updated data for absent members."""
from __future__ import annotations

import logging
from typing import List

from common.concurrency import gather_settled
from common.logging_utils import extra_context, is_debug_enabled, Timer
from models import CandidateRecord
from pack.resolver import resolve_repository
from registry import marketplace
from repository.providers import client_for_host

logger = logging.getLogger(__name__)


def enrich_candidate(candidate: CandidateRecord) -> CandidateRecord:
    """Populate one candidate in place; exceptions propagate to the caller."""
    extension = marketplace.query_extension(candidate.identifier)
    candidate.last_updated = marketplace.last_updated(extension)
    repo = resolve_repository(extension)
    candidate.repository_url = repo.url

    client = client_for_host(repo.host)
    if client is None:
        logger.debug("No license lookup for host %s (%s)", repo.host, candidate.identifier)
        return candidate
    lic = client.get_license(repo.owner, repo.name)
    if lic:
        candidate.license = lic.get("spdx_id")
        candidate.license_url = lic.get("html_url") or None
    return candidate


def enrich(candidates: List[CandidateRecord]) -> List[CandidateRecord]:
    """Enrich all candidates concurrently.

    A failure for one candidate leaves its remaining fields unset and never
    aborts the batch; there are no retries.
    """
    with Timer() as t:
        outcomes = gather_settled(enrich_candidate, candidates)
    failed = [o for o in outcomes if not o.ok]
    for outcome in failed:
        logger.warning("Could not enrich %s: %s", outcome.item.identifier, outcome.error)
    if is_debug_enabled(logger):
        logger.debug(
            "Enrichment finished",
            extra=extra_context(
                event="function_exit", component="enrich", action="enrich",
                count=len(candidates), outcome="partial" if failed else "success",
                duration_ms=t.duration_ms()
            )
        )
    return candidates
