"""Console and JSON reporting of classification results."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from constants import Constants, ExitCodes
from models import ClassificationResult


def _format_candidates(records) -> str:
    return json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)


def print_report(result: ClassificationResult, stream: Optional[TextIO] = None) -> None:
    """Print the human-readable audit report.

    Args:
        result: Classification of one extension pack.
        stream: Output stream, defaults to stdout.
    """
    out = stream or sys.stdout

    if result.ineligible:
        print(
            "Extensions that are not open source can not be published to Open VSX registry "
            "due to license restriction",
            file=out,
        )
        print(f"You can read more at {Constants.INELIGIBLE_REFERENCE_URL}", file=out)
        for ident in result.ineligible:
            print(f"  {ident}", file=out)

    if result.deprecated:
        print(
            "Some of extensions are deprecated, you have to update extension ids "
            "in order to publish the extension pack.",
            file=out,
        )
        for ident in result.deprecated:
            print(
                f'You need to update extension id from "{ident}" to "{result.replacements.get(ident)}"',
                file=out,
            )
        print(" ", file=out)

    if result.licensed:
        print("See below extensions that are not present in Open VSX marketplace:", file=out)
        print(f"extensions with license ({len(result.licensed)}):", file=out)
        print(_format_candidates(result.licensed), file=out)

    if result.unlicensed:
        print(f"extensions without license ({len(result.unlicensed)}):", file=out)
        print(_format_candidates(result.unlicensed), file=out)
        print(
            "Extensions without license CAN NOT BE uploaded to Open VSX registry, LICENSE must be present",
            file=out,
        )

    if result.all_conditions_met and not result.licensed:
        print("All extensions are present in Open VSX marketplace.", file=out)


def result_to_dict(result: ClassificationResult) -> Dict[str, Any]:
    """Machine-readable form of a classification result."""
    return {
        "extensionPack": result.identifier,
        "allConditionsMet": result.all_conditions_met,
        "present": list(result.present),
        "deprecated": [
            {"id": ident, "replacement": result.replacements.get(ident)} for ident in result.deprecated
        ],
        "ineligible": list(result.ineligible),
        "licensed": [r.to_dict() for r in result.licensed],
        "unlicensed": [r.to_dict() for r in result.unlicensed],
        "pack": {
            "presentInOpenVsx": result.pack_present,
            "record": result.pack.to_dict() if result.pack else None,
        },
    }


def export_json(result: ClassificationResult, path: str) -> None:
    """Exports the classification result to a JSON file.

    Args:
        result: Classification of one extension pack.
        path: File path to export the JSON.
    """
    try:
        with open(path, 'w', encoding='utf-8') as file:
            json.dump(result_to_dict(result), file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
