"""
Tests for upstream release lookups (debup/collectors.py).
"""

import io
from unittest.mock import MagicMock, patch

import pytest

from debup.collectors import (
    NetworkError,
    ParseError,
    collect_go_latest,
    download_file,
    http_get,
    parse_go_version,
)


def fake_response(body: bytes):
    response = MagicMock()
    response.read.return_value = body
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


class TestHttpGet:
    """Tests for http_get."""

    @patch("urllib.request.urlopen")
    def test_returns_body(self, mock_urlopen):
        mock_urlopen.return_value = fake_response(b"go1.23.2\n")
        assert http_get("https://go.dev/VERSION?m=text") == b"go1.23.2\n"

        request = mock_urlopen.call_args[0][0]
        assert request.get_header("User-agent").startswith("debup/")

    @patch("urllib.request.urlopen", side_effect=OSError("connection refused"))
    def test_wraps_errors(self, mock_urlopen):
        with pytest.raises(NetworkError, match="connection refused"):
            http_get("https://go.dev/VERSION?m=text")


class TestParseGoVersion:
    """Tests for Go version parsing."""

    def test_release_tag(self):
        assert parse_go_version("go1.23.2") == "1.23.2"

    def test_no_version(self):
        with pytest.raises(ParseError):
            parse_go_version("<html>maintenance</html>")


class TestCollectGoLatest:
    """Tests for the latest Go release lookup."""

    @patch("debup.collectors.http_get", return_value=b"go1.23.2\ntime 2024-10-01T16:06:03Z\n")
    def test_first_line(self, mock_get):
        assert collect_go_latest("https://go.dev/VERSION?m=text") == "1.23.2"
        mock_get.assert_called_once_with("https://go.dev/VERSION?m=text", timeout=None)

    @patch("debup.collectors.http_get", side_effect=NetworkError("offline"))
    def test_network_failure_is_empty(self, mock_get):
        assert collect_go_latest("https://go.dev/VERSION?m=text") == ""

    @patch("debup.collectors.http_get", return_value=b"")
    def test_empty_body_is_empty(self, mock_get):
        assert collect_go_latest("https://go.dev/VERSION?m=text") == ""


class TestDownloadFile:
    """Tests for archive downloads."""

    @patch("urllib.request.urlopen")
    def test_writes_file(self, mock_urlopen, tmp_path):
        response = io.BytesIO(b"archive-bytes")
        mock_urlopen.return_value.__enter__.return_value = response

        dest = download_file("https://go.dev/dl/go1.23.2.linux-amd64.tar.gz", str(tmp_path / "dl" / "go.tar.gz"))

        assert dest.read_bytes() == b"archive-bytes"

    @patch("urllib.request.urlopen", side_effect=OSError("HTTP Error 404: Not Found"))
    def test_failure(self, mock_urlopen, tmp_path):
        with pytest.raises(NetworkError, match="Failed to download"):
            download_file("https://go.dev/dl/go.linux-amd64.tar.gz", str(tmp_path / "go.tar.gz"))
