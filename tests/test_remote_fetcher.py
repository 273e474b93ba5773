"""
Unit tests for the remote catalog client.

Tests use mocked network requests.
"""

import pytest
import requests
import responses

from gouse.core.config_manager import DEFAULT_CATALOG_URL
from gouse.core.remote_fetcher import CatalogFormatError, RemoteFetcher

CATALOG = [
    {"version": "go1.22rc1", "stable": False, "files": []},
    {"version": "go1.21.3", "stable": True, "files": []},
    {"version": "go1.20.10", "stable": True, "files": []},
    {"version": "go1.9", "stable": True, "files": []},
]


@pytest.fixture
def fetcher(config_manager):
    return RemoteFetcher(config_manager)


class TestRemoteFetcher:
    """Test RemoteFetcher."""

    @responses.activate
    def test_get_remote_versions_preserves_server_order(self, fetcher):
        responses.add(responses.GET, DEFAULT_CATALOG_URL, json=CATALOG, status=200)

        assert fetcher.get_remote_versions() == ["1.22rc1", "1.21.3", "1.20.10", "1.9"]
        assert len(responses.calls) == 1
        assert responses.calls[0].request.url == DEFAULT_CATALOG_URL

    @responses.activate
    def test_fetch_releases_keeps_stable_flag(self, fetcher):
        responses.add(responses.GET, DEFAULT_CATALOG_URL, json=CATALOG[:2], status=200)

        assert fetcher.fetch_releases() == [
            {"version": "go1.22rc1", "stable": False},
            {"version": "go1.21.3", "stable": True},
        ]

    @responses.activate
    def test_uses_configured_url(self, config_manager):
        config_manager.get_settings()["catalog_url"] = "https://mirror.example.com/dl/?mode=json"
        responses.add(responses.GET, "https://mirror.example.com/dl/?mode=json", json=[], status=200)

        assert RemoteFetcher(config_manager).get_remote_versions() == []

    def test_passes_timeout(self, config_manager):
        config_manager.get_settings()["request_timeout"] = 5

        class Response:
            def raise_for_status(self):
                pass

            def json(self):
                return []

        class Session:
            def __init__(self):
                self.kwargs = None

            def get(self, url, **kwargs):
                self.kwargs = kwargs
                return Response()

        session = Session()
        RemoteFetcher(config_manager, session=session).fetch_releases()
        assert session.kwargs == {"timeout": 5}

    @responses.activate
    def test_http_error_propagates(self, fetcher):
        responses.add(responses.GET, DEFAULT_CATALOG_URL, status=503)

        with pytest.raises(requests.HTTPError):
            fetcher.get_remote_versions()

    @responses.activate
    def test_connection_error_propagates(self, fetcher):
        responses.add(responses.GET, DEFAULT_CATALOG_URL, body=requests.ConnectionError("offline"))

        with pytest.raises(requests.ConnectionError):
            fetcher.get_remote_versions()
        assert len(responses.calls) == 1

    @responses.activate
    def test_invalid_json_propagates(self, fetcher):
        responses.add(responses.GET, DEFAULT_CATALOG_URL, body="<html>", status=200)

        with pytest.raises(ValueError):
            fetcher.get_remote_versions()

    @responses.activate
    @pytest.mark.parametrize("payload", [
        {"version": "go1.21"},
        [{"stable": True}],
        ["go1.21"],
        [{"version": 121}],
    ])
    def test_unexpected_shape(self, fetcher, payload):
        responses.add(responses.GET, DEFAULT_CATALOG_URL, json=payload, status=200)

        with pytest.raises(CatalogFormatError):
            fetcher.get_remote_versions()
