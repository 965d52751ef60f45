"""The ``add`` command: audit an extension pack and register eligible members."""

from __future__ import annotations

import logging
from typing import Collection, Mapping, Optional

from constants import Constants, ExitCodes
from common.errors import LicenseConflictError
from common.logging_utils import extra_context, is_debug_enabled
from pack.audit import audit_pack
from pack.classifier import pack_license_valid, select_for_registration
from pack.resolver import resolve_pack
from registrations import RegistrationStore
from registry.openvsx import ensure_snapshot
from report import export_json, print_report

logger = logging.getLogger(__name__)


def run_add(
    args,
    deprecated: Mapping[str, str],
    ineligible: Collection[str],
    store: Optional[RegistrationStore] = None,
) -> ExitCodes:
    """Audit ``args.EXTENSION_NAME`` and update ``args.EXTENSIONS_FILE``.

    Returns:
        ExitCodes: status for the process.

    Raises:
        VsxAuditError: on fatal resolution errors or a license conflict.
        OSError: when the registrations or snapshot file cannot be accessed.
    """
    store = store or RegistrationStore(args.EXTENSIONS_FILE)
    registered = store.registered_ids()

    manifest = resolve_pack(args.EXTENSION_NAME)
    if not manifest.members:
        print("Adding extension by name is not supported!")
        return ExitCodes.SUCCESS

    logger.info("%s declares %d extensions.", manifest.identifier, len(manifest.members))
    index = ensure_snapshot(Constants.OPENVSX_SNAPSHOT_FILE)
    result = audit_pack(manifest, index, deprecated=deprecated, ineligible=ineligible)

    if not args.QUIET:
        print_report(result)
    if getattr(args, "OUTPUT", None):
        export_json(result, args.OUTPUT)

    if args.ITSELF:
        if result.pack is None:
            logger.info("%s is already present in Open VSX.", manifest.identifier)
        elif not pack_license_valid(result):
            raise LicenseConflictError(
                f"{manifest.identifier} can not be added itself: the extension pack has no license "
                f"(found {result.pack.license!r})"
            )
        elif not result.all_conditions_met:
            logger.warning(
                "%s itself is added only once all of its extensions meet the conditions.",
                manifest.identifier,
            )

    if result.all_conditions_met or args.ADD_WITH_LICENSE:
        to_add = select_for_registration(result, registered, include_pack=args.ITSELF)
        if to_add:
            print(f"Adding extensions with defined license to {store.path}")
            added = store.add(to_add)
            logger.info("%d extensions added to %s.", len(added), store.path)

    if is_debug_enabled(logger):
        logger.debug(
            "Add finished",
            extra=extra_context(
                event="function_exit", component="cli", action="add",
                target=manifest.identifier,
                outcome="met" if result.all_conditions_met else "not_met"
            )
        )

    if not result.all_conditions_met:
        logger.warning("%s does not meet all conditions for Open VSX.", manifest.identifier)
        if getattr(args, "ERROR_ON_WARNINGS", False):
            logger.error("Warnings present, exiting with non-zero status code.")
            return ExitCodes.EXIT_WARNINGS
    return ExitCodes.SUCCESS
