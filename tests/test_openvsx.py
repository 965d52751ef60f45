"""Tests for the Open VSX client and snapshot handling."""

import json
from unittest.mock import patch, MagicMock

from registry.openvsx import (
    ensure_snapshot,
    find_extension,
    index_from_listing,
    is_not_found,
    load_index,
)


class TestFindExtension:

    @patch("registry.openvsx.get_json")
    def test_found(self, mock_get):
        mock_get.return_value = (200, {}, {"namespace": "redhat", "name": "java"})
        ext = find_extension("redhat", "java")
        assert ext["name"] == "java"
        assert not is_not_found(ext)
        assert mock_get.call_args.args[0] == "https://open-vsx.org/api/redhat/java"

    @patch("registry.openvsx.get_json")
    def test_error_field_maps_to_not_found(self, mock_get):
        mock_get.return_value = (200, {}, {"error": "Extension not found: Foo.Bar"})
        assert find_extension("Foo", "Bar") == {"publisherName": "foo", "name": "bar", "notFound": True}

    @patch("registry.openvsx.get_json")
    def test_http_404(self, mock_get):
        mock_get.return_value = (404, {}, None)
        assert is_not_found(find_extension("a", "b"))

    @patch("registry.openvsx.get_json")
    def test_transport_failure(self, mock_get):
        mock_get.return_value = (0, {}, None)
        assert is_not_found(find_extension("a", "b"))


class TestIndexFromListing:

    def test_extensions_list_shape(self):
        index = index_from_listing({"extensions": [{"id": "Redhat.Java"}, {"id": "a.b"}, {"nope": 1}]})
        assert set(index) == {"redhat.java", "a.b"}

    def test_mapping_shape(self):
        index = index_from_listing({"Redhat.Java": {"repository": "https://github.com/redhat/java"}})
        assert "redhat.java" in index

    def test_garbage(self):
        assert index_from_listing(None) == {}
        assert index_from_listing([1, 2]) == {}


class TestEnsureSnapshot:

    @patch("registry.openvsx.safe_get")
    def test_downloads_once_when_missing(self, mock_safe_get, tmp_path):
        res = MagicMock()
        res.status_code = 200
        res.text = json.dumps({"extensions": [{"id": "x.one"}]})
        mock_safe_get.return_value = res
        path = tmp_path / "cache" / "extensions.json"

        first = ensure_snapshot(str(path))
        second = ensure_snapshot(str(path))

        assert path.exists()
        assert "x.one" in first and "x.one" in second
        assert mock_safe_get.call_count == 1

    @patch("registry.openvsx.safe_get")
    def test_existing_snapshot_is_not_refreshed(self, mock_safe_get, tmp_path):
        path = tmp_path / "extensions.json"
        path.write_text(json.dumps({"extensions": [{"id": "Old.Entry"}]}), encoding="utf-8")
        index = ensure_snapshot(str(path))
        assert "old.entry" in index
        mock_safe_get.assert_not_called()

    def test_load_index(self, tmp_path):
        path = tmp_path / "extensions.json"
        path.write_text(json.dumps({"extensions": [{"id": "A.B"}]}), encoding="utf-8")
        assert dict(load_index(str(path))) == {"a.b": {"id": "A.B"}}
