"""vsxaudit - check extension packs against the Open VSX registry.

    Returns:
        int: Exit code
"""
import logging
import sys

from args import parse_args
from cli_config import apply_cli_overrides, apply_config, build_tables, load_config
from common.errors import VsxAuditError
from common.logging_utils import configure_logging
from constants import ExitCodes


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, getattr(args, "LOG_FILE", None))
    logging.debug("Arguments parsed.")

    cfg = load_config(getattr(args, "CONFIG", None))
    apply_config(cfg)
    apply_cli_overrides(args)
    deprecated, ineligible = build_tables(cfg)

    if args.action == "add":
        from cli_add import run_add  # pylint: disable=import-outside-toplevel
        try:
            code = run_add(args, deprecated, ineligible)
        except VsxAuditError as exc:
            logging.error("%s", exc)
            sys.exit(exc.exit_code.value)
        except OSError as exc:
            logging.error("File error: %s, aborting", exc)
            sys.exit(ExitCodes.FILE_ERROR.value)
        sys.exit(code.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
