"""Tests for the GitHub and GitLab clients and provider selection."""

import base64
import logging
from unittest.mock import patch

from repository.github import GitHubClient, decode_base64_content
from repository.gitlab import GitLabClient
from repository.providers import ProviderType, client_for_host, map_host_to_type


def _b64(text):
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class TestDecodeBase64Content:

    def test_decodes_content_with_line_breaks(self):
        encoded = _b64('{"extensionPack": ["a.b"]}')
        wrapped = "\n".join(encoded[i:i + 10] for i in range(0, len(encoded), 10)) + "\n"
        assert decode_base64_content(wrapped) == '{"extensionPack": ["a.b"]}'

    def test_invalid_payload(self):
        assert decode_base64_content("not base64 !!!") is None

    def test_missing_payload(self):
        assert decode_base64_content(None) is None
        assert decode_base64_content("") is None


class TestGitHubClient:

    @patch("repository.github.get_json")
    def test_get_file_text(self, mock_get):
        mock_get.return_value = (200, {}, {"content": _b64("hello"), "encoding": "base64"})
        client = GitHubClient(token="t")
        assert client.get_file_text("o", "r", "package.json") == "hello"
        url = mock_get.call_args.args[0]
        assert url.endswith("/repos/o/r/contents/package.json")
        assert mock_get.call_args.kwargs["headers"]["Authorization"] == "token t"

    @patch("repository.github.get_json")
    def test_get_file_text_missing(self, mock_get):
        mock_get.return_value = (404, {}, None)
        assert GitHubClient().get_file_text("o", "r", "package.json") is None

    @patch("repository.github.get_json")
    def test_get_license(self, mock_get):
        mock_get.return_value = (200, {}, {
            "license": {"spdx_id": "MIT", "html_url": "https://github.com/o/r/blob/main/LICENSE"}
        })
        assert GitHubClient().get_license("o", "r") == {
            "spdx_id": "MIT",
            "html_url": "https://github.com/o/r/blob/main/LICENSE",
        }

    @patch("repository.github.get_json")
    def test_get_license_without_license(self, mock_get):
        mock_get.return_value = (200, {}, {"license": None})
        assert GitHubClient().get_license("o", "r") is None

    @patch("repository.github.get_json")
    def test_get_license_lookup_failed(self, mock_get):
        mock_get.return_value = (0, {}, None)
        assert GitHubClient().get_license("o", "r") is None


class TestGitLabClient:

    @patch("repository.gitlab.canonical_license_id", return_value="MIT")
    @patch("repository.gitlab.get_json")
    def test_get_license_maps_key(self, mock_get, _mock_canonical):
        mock_get.return_value = (200, {}, {
            "default_branch": "main",
            "license": {"key": "mit", "html_url": "https://gitlab.com/g/p/-/blob/main/LICENSE"},
        })
        lic = GitLabClient().get_license("g", "p")
        assert lic["spdx_id"] == "MIT"
        assert mock_get.call_args.args[0].endswith("/projects/g%2Fp?license=true")

    @patch("repository.gitlab.canonical_license_id", return_value=None)
    @patch("repository.gitlab.get_json")
    def test_unmapped_license_key_is_logged(self, mock_get, _mock_canonical, caplog):
        mock_get.return_value = (200, {}, {"license": {"key": "gpl-3.0", "html_url": None}})
        with caplog.at_level(logging.DEBUG, logger="repository.gitlab"):
            lic = GitLabClient().get_license("g", "p")
        assert lic["spdx_id"] == "gpl-3.0"
        assert "gpl-3.0" in caplog.text
        assert "not an SPDX id" in caplog.text

    @patch("repository.gitlab.robust_get")
    @patch("repository.gitlab.get_json")
    def test_get_file_text_uses_default_branch(self, mock_get, mock_raw):
        mock_get.return_value = (200, {}, {"default_branch": "develop"})
        mock_raw.return_value = (200, {}, '{"name": "x"}')
        assert GitLabClient().get_file_text("g", "p", "package.json") == '{"name": "x"}'
        assert mock_raw.call_args.args[0].endswith("/repository/files/package.json/raw?ref=develop")


class TestProviders:

    def test_map_host_to_type(self):
        assert map_host_to_type("github.com") == ProviderType.GITHUB
        assert map_host_to_type("GitLab.com") == ProviderType.GITLAB
        assert map_host_to_type("bitbucket.org") == ProviderType.UNKNOWN
        assert map_host_to_type(None) == ProviderType.UNKNOWN

    def test_client_for_host(self):
        assert isinstance(client_for_host("github.com"), GitHubClient)
        assert isinstance(client_for_host("gitlab.com"), GitLabClient)
        assert client_for_host("example.org") is None
