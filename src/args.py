"""Argument parsing functionality for vsxaudit."""

import argparse
from constants import Constants


def _add_common_options(parser):
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not print the audit report to the console.",
                        action="store_true")


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="vsxaudit",
        description=(
            "vsxaudit - check that every extension of a VS Code extension pack "
            "is available in the Open VSX registry"
        ),
        epilog="Example: vsxaudit add vymarkov.nodejs-devops-extension-pack extensions.json",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    add = subparsers.add_parser(
        "add",
        help="add an extension pack's members to the extensions file",
        description=(
            "Add extension pack members to the extensions file to publish them to Open VSX. "
            "By default extensions are added only if the pack meets all conditions."
        ),
    )
    add.add_argument("EXTENSION_NAME",
                     metavar="extension-name",
                     help="Extension pack identifier, i.e. publisher.name",
                     type=str)
    add.add_argument("EXTENSIONS_FILE",
                     metavar="extensions-file",
                     help=f"Registrations file to update (default: {Constants.EXTENSIONS_FILE})",
                     nargs="?",
                     default=Constants.EXTENSIONS_FILE,
                     type=str)
    add.add_argument("--add-extensions-with-license",
                     dest="ADD_WITH_LICENSE",
                     help="Add extensions that have a license even if the pack contains extensions without one",
                     action="store_true")
    add.add_argument("--itself",
                     dest="ITSELF",
                     help="Also add the extension pack itself",
                     action="store_true")
    add.add_argument("--cache-file",
                     dest="CACHE_FILE",
                     help="Path of the cached Open VSX registry snapshot",
                     action="store",
                     type=str)
    add.add_argument("-o", "--output",
                     dest="OUTPUT",
                     help="Path to a JSON file receiving the audit report",
                     action="store",
                     type=str)
    add.add_argument("--error-on-warnings",
                     dest="ERROR_ON_WARNINGS",
                     help="Exit with a non-zero status code if the pack does not meet all conditions.",
                     action="store_true")
    _add_common_options(add)

    return parser.parse_args(argv)
