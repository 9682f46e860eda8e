"""Tests for the one-time storm data download.

requests.get is monkeypatched throughout; nothing here touches the network.
"""

import bz2

import pytest
import requests

from storm_impact import download
from storm_impact.errors import DataSourceError

CSV_TEXT = 'STATE__,BGN_DATE,EVTYPE\n1.00,"4/18/1950 0:00:00",TORNADO\n'


class _FakeResponse:
    def __init__(self, payload: bytes):
        self._payload = payload

    def raise_for_status(self):
        return None

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self._payload), chunk_size):
            yield self._payload[start : start + chunk_size]


class TestFetchStormData:
    def test_cached_file_skips_network(self, tmp_path, monkeypatch):
        destination = tmp_path / "StormData.csv"
        destination.write_text(CSV_TEXT)

        def _fail(*args, **kwargs):
            raise AssertionError("network should not be used")

        monkeypatch.setattr(download.requests, "get", _fail)

        assert download.fetch_storm_data("http://example.invalid", destination) == str(
            destination
        )

    def test_downloads_and_decompresses(self, tmp_path, monkeypatch):
        payload = bz2.compress(CSV_TEXT.encode())
        calls = []

        def _get(url, **kwargs):
            calls.append(url)
            return _FakeResponse(payload)

        monkeypatch.setattr(download.requests, "get", _get)
        destination = tmp_path / "raw" / "StormData.csv"

        path = download.fetch_storm_data("http://example.invalid/StormData.csv.bz2", destination)

        assert path == str(destination)
        assert destination.read_text() == CSV_TEXT
        assert calls == ["http://example.invalid/StormData.csv.bz2"]
        # archive removed after decompression
        assert list(destination.parent.iterdir()) == [destination]

    def test_network_failure_raises_data_source_error(self, tmp_path, monkeypatch):
        def _get(url, **kwargs):
            raise requests.ConnectionError("unreachable")

        monkeypatch.setattr(download.requests, "get", _get)
        destination = tmp_path / "StormData.csv"

        with pytest.raises(DataSourceError, match="Could not download"):
            download.fetch_storm_data("http://example.invalid", destination)

        assert not destination.exists()
        assert list(tmp_path.iterdir()) == []

    def test_corrupt_archive_raises_data_source_error(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            download.requests, "get", lambda url, **kwargs: _FakeResponse(b"not bz2")
        )
        destination = tmp_path / "StormData.csv"

        with pytest.raises(DataSourceError, match="decompress"):
            download.fetch_storm_data("http://example.invalid", destination)

        assert list(tmp_path.iterdir()) == []
