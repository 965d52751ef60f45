"""Tests for CLI argument parsing."""

import pytest

from args import parse_args


def test_add_defaults():
    ns = parse_args(["add", "vymarkov.nodejs-devops-extension-pack"])
    assert ns.action == "add"
    assert ns.EXTENSION_NAME == "vymarkov.nodejs-devops-extension-pack"
    assert ns.EXTENSIONS_FILE == "extensions.json"
    assert ns.ADD_WITH_LICENSE is False
    assert ns.ITSELF is False
    assert ns.ERROR_ON_WARNINGS is False
    assert ns.LOG_LEVEL == "INFO"
    assert ns.CACHE_FILE is None


def test_add_all_flags():
    ns = parse_args(
        [
            "add",
            "a.pack",
            "regs.json",
            "--add-extensions-with-license",
            "--itself",
            "--cache-file",
            "/tmp/snap.json",
            "-o",
            "out.json",
            "--error-on-warnings",
            "--loglevel",
            "debug",
            "-q",
        ]
    )
    assert ns.EXTENSIONS_FILE == "regs.json"
    assert ns.ADD_WITH_LICENSE and ns.ITSELF and ns.ERROR_ON_WARNINGS and ns.QUIET
    assert ns.CACHE_FILE == "/tmp/snap.json"
    assert ns.OUTPUT == "out.json"
    assert ns.LOG_LEVEL == "DEBUG"


def test_action_required():
    with pytest.raises(SystemExit):
        parse_args([])


def test_extension_name_required():
    with pytest.raises(SystemExit):
        parse_args(["add"])
