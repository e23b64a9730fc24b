"""Tests for the upstream fetch and JSON cache, with the network replaced."""
import json
import urllib.error

import pytest

import fetch_companies
from fetch_companies import DataFetchError, fetch_raw_companies, load_companies, slim_company

RAW = [
    {"id": 1, "name": "Acme", "long_description": "Mobile payments", "batch": "Winter 2012", "tags": []},
    {"id": 2, "name": "Nulls", "long_description": None, "batch": "Summer 2013"},
]


class FakeResponse:
    def __init__(self, body, status=200):
        self.body = body
        self.status = status

    def read(self):
        return self.body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def fake_urlopen(body, status=200, calls=None):
    def _urlopen(req, context=None, timeout=None):
        if calls is not None:
            calls.append(req.full_url)
        return FakeResponse(body, status)
    return _urlopen


def test_fetch_raw_companies(monkeypatch):
    calls = []
    monkeypatch.setattr(fetch_companies.urllib.request, "urlopen",
                        fake_urlopen(json.dumps(RAW).encode("utf-8"), calls=calls))
    assert fetch_raw_companies("https://example.test/all.json") == RAW
    assert calls == ["https://example.test/all.json"]


def test_fetch_bad_status(monkeypatch):
    monkeypatch.setattr(fetch_companies.urllib.request, "urlopen", fake_urlopen(b"[]", status=503))
    with pytest.raises(DataFetchError, match="503"):
        fetch_raw_companies("https://example.test/all.json")


def test_fetch_network_error(monkeypatch):
    def boom(req, context=None, timeout=None):
        raise urllib.error.URLError("unreachable")
    monkeypatch.setattr(fetch_companies.urllib.request, "urlopen", boom)
    with pytest.raises(DataFetchError) as info:
        fetch_raw_companies("https://example.test/all.json")
    assert isinstance(info.value.__cause__, urllib.error.URLError)


def test_fetch_invalid_json(monkeypatch):
    monkeypatch.setattr(fetch_companies.urllib.request, "urlopen", fake_urlopen(b"<html>"))
    with pytest.raises(DataFetchError, match="JSON"):
        fetch_raw_companies("https://example.test/all.json")


def test_fetch_non_list(monkeypatch):
    monkeypatch.setattr(fetch_companies.urllib.request, "urlopen", fake_urlopen(b'{"error": 1}'))
    with pytest.raises(DataFetchError, match="list"):
        fetch_raw_companies("https://example.test/all.json")


def test_slim_company():
    assert slim_company(RAW[0]) == {"name": "Acme", "long_description": "Mobile payments", "batch": "Winter 2012"}
    assert slim_company(RAW[1])["long_description"] == ""


def test_load_companies_fetches_then_uses_cache(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(fetch_companies.urllib.request, "urlopen",
                        fake_urlopen(json.dumps(RAW).encode("utf-8"), calls=calls))
    cache = tmp_path / "sub" / "companies.json"

    first = load_companies(cache, url="https://example.test/all.json")
    assert cache.exists()
    assert first == [slim_company(c) for c in RAW]

    second = load_companies(cache, url="https://example.test/all.json")
    assert second == first
    assert len(calls) == 1

    load_companies(cache, refresh=True, url="https://example.test/all.json")
    assert len(calls) == 2
