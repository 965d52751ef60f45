"""Tests for the CLI entrypoint exit codes."""

from unittest.mock import patch

import pytest

from common.errors import LicenseConflictError, NotFoundError
from constants import Constants, ExitCodes
from vsxaudit import main


def _run(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


@patch("cli_add.run_add", return_value=ExitCodes.SUCCESS)
def test_success(mock_run):
    assert _run(["add", "a.pack"]) == 0
    args, deprecated, ineligible = mock_run.call_args.args
    assert args.EXTENSION_NAME == "a.pack"
    assert "wallabyjs.quokka-vscode" in ineligible
    assert deprecated["peterjausovec.vscode-docker"] == "ms-azuretools.vscode-docker"


@patch("cli_add.run_add", return_value=ExitCodes.EXIT_WARNINGS)
def test_warnings_code(_mock_run):
    assert _run(["add", "a.pack", "--error-on-warnings"]) == 3


@pytest.mark.parametrize(
    "error, code",
    [
        (NotFoundError("Extension (a.pack) not found"), 4),
        (LicenseConflictError("no license"), 6),
        (FileNotFoundError("extensions.json"), 1),
    ],
)
def test_errors_map_to_exit_codes(error, code):
    with patch("cli_add.run_add", side_effect=error):
        assert _run(["add", "a.pack"]) == code


@patch("cli_add.run_add", return_value=ExitCodes.SUCCESS)
def test_cache_file_override(_mock_run):
    _run(["add", "a.pack", "--cache-file", "/tmp/snapshot.json"])
    assert Constants.OPENVSX_SNAPSHOT_FILE == "/tmp/snapshot.json"
