"""End-to-end CLI runs against a cached dataset."""
import json

import pytest

import search_word

COMPANIES = [
    {"name": "A", "long_description": "A mobile app", "batch": "Winter 2014"},
    {"name": "B", "long_description": "Payments", "batch": "Winter 2014"},
    {"name": "C", "long_description": "AI for mobile teams", "batch": "Summer 2014"},
    {"name": "D", "long_description": "AI agents", "batch": "Summer 2014"},
    {"name": "E", "long_description": "AI agents, AI ops", "batch": "Winter 2015"},
    {"name": "F", "long_description": "AI/ML", "batch": "Winter 2015"},
    {"name": "G", "long_description": "Bad batch", "batch": "IK12"},
]


@pytest.fixture
def cache(tmp_path):
    path = tmp_path / "companies.json"
    path.write_text(json.dumps(COMPANIES))
    return path


def run(cache, tmp_path, *args):
    out = tmp_path / "chart.html"
    code = search_word.main([*args, "--data", str(cache), "--out", str(out)])
    return code, out


def test_search_writes_chart(cache, tmp_path, capsys):
    code, out = run(cache, tmp_path, "AI")
    assert code == 0
    text = capsys.readouterr().out
    assert "Loaded 6 companies across 3 batches" in text
    assert 'Analysis Results for "ai"' in text
    assert out.exists()
    assert "<svg" in out.read_text()


def test_search_json_output(cache, tmp_path, capsys):
    code, _ = run(cache, tmp_path, "ai", "--json")
    assert code == 0
    text = capsys.readouterr().out
    payload = json.loads(text[text.index("{"):text.index("\n}") + 2])
    assert payload["batchLabels"] == ["Winter 2014", "Summer 2014", "Winter 2015"]
    assert payload["ratios"] == [0.0, 1.0, 1.0]
    assert payload["slope"] > 0
    assert "processingTime" in payload


def test_search_no_results(cache, tmp_path, capsys):
    code, out = run(cache, tmp_path, "blockchain")
    assert code == 0
    assert "not found in any company descriptions" in capsys.readouterr().out
    assert "not found" in out.read_text()


def test_empty_word_prints_help(cache, tmp_path, capsys):
    code, out = run(cache, tmp_path)
    assert code == 0
    assert "Enter any word" in capsys.readouterr().out
    assert not out.exists()


def test_trends_without_enough_companies(cache, tmp_path, capsys):
    code, _ = run(cache, tmp_path, "--trends", "5")
    assert code == 0
    text = capsys.readouterr().out
    assert "Fastest-moving words" in text
    assert "(no words to scan)" in text
    assert "Enter any word" not in text


def test_fetch_failure_exits_nonzero(tmp_path, capsys, monkeypatch):
    def fail(*args, **kwargs):
        raise search_word.DataFetchError("Failed to fetch YC companies: 500")
    monkeypatch.setattr(search_word, "load_companies", fail)
    code, _ = run(tmp_path / "missing.json", tmp_path, "ai")
    assert code == 1
    assert "Failed to fetch YC companies: 500" in capsys.readouterr().err
