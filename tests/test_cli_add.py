"""Tests for the add command orchestration."""

from types import SimpleNamespace
from unittest.mock import patch, MagicMock

import pytest

from common.errors import LicenseConflictError
from constants import ExitCodes
from models import CandidateRecord, ClassificationResult, ExtensionPackManifest, RepoRef
from cli_add import run_add

REPO = RepoRef(host="github.com", owner="a", name="pack", url="https://github.com/a/pack")


def _args(**overrides):
    values = dict(
        EXTENSION_NAME="a.pack",
        EXTENSIONS_FILE="extensions.json",
        ADD_WITH_LICENSE=False,
        ITSELF=False,
        OUTPUT=None,
        ERROR_ON_WARNINGS=False,
        QUIET=True,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def _record(ident, license=None):
    record = CandidateRecord.for_identifier(ident)
    record.license = license
    record.repository_url = f"https://github.com/{ident.replace('.', '/')}"
    return record


def _result(licensed=(), unlicensed=(), pack=None):
    return ClassificationResult(
        identifier="a.pack",
        candidates={},
        present=("x.one",),
        deprecated=(),
        ineligible=(),
        licensed=tuple(licensed),
        unlicensed=tuple(unlicensed),
        pack=pack,
        pack_present=pack is None,
    )


def _store(registered=()):
    store = MagicMock()
    store.path = "extensions.json"
    store.registered_ids.return_value = list(registered)
    store.add.side_effect = lambda cands: [{"id": c.identifier} for c in cands]
    return store


@pytest.fixture
def pipeline():
    with patch("cli_add.resolve_pack") as resolve, \
            patch("cli_add.ensure_snapshot", return_value={}) as snapshot, \
            patch("cli_add.audit_pack") as audit:
        resolve.return_value = ExtensionPackManifest("a.pack", REPO, ("x.one", "y.two", "u.nope"))
        yield SimpleNamespace(resolve=resolve, snapshot=snapshot, audit=audit)


def test_plain_extension_is_not_supported(capsys):
    store = _store()
    with patch("cli_add.resolve_pack") as resolve, patch("cli_add.audit_pack") as audit:
        resolve.return_value = ExtensionPackManifest("a.ext", REPO, ())
        code = run_add(_args(EXTENSION_NAME="a.ext"), {}, frozenset(), store=store)
    assert code == ExitCodes.SUCCESS
    assert "Adding extension by name is not supported!" in capsys.readouterr().out
    audit.assert_not_called()
    store.add.assert_not_called()


def test_all_conditions_met_adds_licensed(pipeline, capsys):
    pipeline.audit.return_value = _result(licensed=[_record("y.two", "MIT")])
    store = _store()
    code = run_add(_args(), {}, frozenset(), store=store)
    assert code == ExitCodes.SUCCESS
    added = store.add.call_args.args[0]
    assert [c.identifier for c in added] == ["y.two"]
    assert "Adding extensions with defined license to extensions.json" in capsys.readouterr().out


def test_unlicensed_blocks_registration(pipeline):
    pipeline.audit.return_value = _result(
        licensed=[_record("y.two", "MIT")], unlicensed=[_record("u.nope")]
    )
    store = _store()
    assert run_add(_args(), {}, frozenset(), store=store) == ExitCodes.SUCCESS
    store.add.assert_not_called()


def test_add_with_license_overrides_gate(pipeline):
    pipeline.audit.return_value = _result(
        licensed=[_record("y.two", "MIT")], unlicensed=[_record("u.nope")]
    )
    store = _store()
    run_add(_args(ADD_WITH_LICENSE=True), {}, frozenset(), store=store)
    assert [c.identifier for c in store.add.call_args.args[0]] == ["y.two"]


def test_already_registered_members_skipped(pipeline):
    pipeline.audit.return_value = _result(licensed=[_record("y.two", "MIT")])
    store = _store(registered=["y.two"])
    run_add(_args(), {}, frozenset(), store=store)
    store.add.assert_not_called()


def test_error_on_warnings(pipeline):
    pipeline.audit.return_value = _result(unlicensed=[_record("u.nope")])
    code = run_add(_args(ERROR_ON_WARNINGS=True), {}, frozenset(), store=_store())
    assert code == ExitCodes.EXIT_WARNINGS


def test_itself_without_license_conflicts(pipeline):
    pipeline.audit.return_value = _result(
        licensed=[_record("y.two", "MIT")], pack=_record("a.pack", None)
    )
    store = _store()
    with pytest.raises(LicenseConflictError):
        run_add(_args(ITSELF=True), {}, frozenset(), store=store)
    store.add.assert_not_called()


def test_itself_with_license_is_added(pipeline):
    pipeline.audit.return_value = _result(
        licensed=[_record("y.two", "MIT")], pack=_record("a.pack", "MIT")
    )
    store = _store()
    run_add(_args(ITSELF=True), {}, frozenset(), store=store)
    assert [c.identifier for c in store.add.call_args.args[0]] == ["y.two", "a.pack"]


def test_itself_already_in_open_vsx(pipeline):
    pipeline.audit.return_value = _result(licensed=[_record("y.two", "MIT")])
    store = _store()
    assert run_add(_args(ITSELF=True), {}, frozenset(), store=store) == ExitCodes.SUCCESS
    assert [c.identifier for c in store.add.call_args.args[0]] == ["y.two"]


def test_report_and_export(pipeline, tmp_path, capsys):
    pipeline.audit.return_value = _result()
    out = tmp_path / "report.json"
    run_add(_args(QUIET=False, OUTPUT=str(out)), {}, frozenset(), store=_store())
    assert "All extensions are present in Open VSX marketplace." in capsys.readouterr().out
    assert out.exists()
