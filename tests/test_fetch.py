"""
Tests for the feature service download.
"""

import pytest
import requests

from fibrewatch import fetch
from fibrewatch.errors import FetchError
from fibrewatch.logger import get_logger

URL = "https://services.example.test/query?f=pbf"


def make_response(status: int, body: bytes = b"") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = URL
    resp._content = body
    return resp


class TestFetchPayload:
    """Test fetch_payload error mapping."""

    def test_returns_body(self, monkeypatch):
        calls = []

        def fake_get(url, timeout):
            calls.append((url, timeout))
            return make_response(200, b"\x12\x00")

        monkeypatch.setattr(fetch.requests, "get", fake_get)

        assert fetch.fetch_payload(URL, timeout=7) == b"\x12\x00"
        assert calls == [(URL, 7)]
        assert get_logger().metrics["fetches"] == 1
        assert get_logger().metrics["bytes_fetched"] == 2

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(fetch.requests, "get", lambda url, timeout: make_response(503))

        with pytest.raises(FetchError, match="503"):
            fetch.fetch_payload(URL)

    def test_timeout(self, monkeypatch):
        def fake_get(url, timeout):
            raise requests.exceptions.Timeout("read timed out")

        monkeypatch.setattr(fetch.requests, "get", fake_get)

        with pytest.raises(FetchError, match="timed out"):
            fetch.fetch_payload(URL, timeout=1)

    def test_connection_error(self, monkeypatch):
        def fake_get(url, timeout):
            raise requests.exceptions.ConnectionError("name resolution failed")

        monkeypatch.setattr(fetch.requests, "get", fake_get)

        with pytest.raises(FetchError, match="name resolution failed"):
            fetch.fetch_payload(URL)

    def test_no_retry(self, monkeypatch):
        calls = [0]

        def fake_get(url, timeout):
            calls[0] += 1
            raise requests.exceptions.ConnectionError("down")

        monkeypatch.setattr(fetch.requests, "get", fake_get)

        with pytest.raises(FetchError):
            fetch.fetch_payload(URL)
        assert calls[0] == 1
