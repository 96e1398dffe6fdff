"""Tests for the optional local commune directory."""

import json
from pathlib import Path

from app.adapters.upstream.local_communes import LocalCommuneDirectory


def test_loads_list_and_searches_by_prefix(tmp_path: Path) -> None:
    path = tmp_path / "communes.json"
    path.write_text(
        json.dumps(
            [
                {"nom": "Ambérieu-en-Bugey", "code_insee": "01004", "code_postal": "01500"},
                {"nom": "Bourg-en-Bresse", "code_insee": "01053", "code_postal": "01000"},
                "not-a-record",
            ]
        ),
        encoding="utf-8",
    )

    directory = LocalCommuneDirectory.from_file(path)

    assert directory is not None
    assert len(directory) == 2
    assert [r["nom"] for r in directory.search("01")] == ["Ambérieu-en-Bugey", "Bourg-en-Bresse"]
    assert [r["nom"] for r in directory.search("0100")] == ["Bourg-en-Bresse"]
    assert directory.search("75") == []


def test_numeric_postal_codes_are_matched(tmp_path: Path) -> None:
    path = tmp_path / "communes.json"
    path.write_text(json.dumps([{"nom": "Paris", "code_postal": 75001}]), encoding="utf-8")

    directory = LocalCommuneDirectory.from_file(path)

    assert directory.search("750") == [{"nom": "Paris", "code_postal": 75001}]


def test_missing_file_returns_none(tmp_path: Path) -> None:
    assert LocalCommuneDirectory.from_file(tmp_path / "absent.json") is None


def test_malformed_file_returns_none(tmp_path: Path) -> None:
    path = tmp_path / "communes.json"
    path.write_text("{not json", encoding="utf-8")

    assert LocalCommuneDirectory.from_file(path) is None


def test_non_list_file_returns_none(tmp_path: Path) -> None:
    path = tmp_path / "communes.json"
    path.write_text(json.dumps({"data": []}), encoding="utf-8")

    assert LocalCommuneDirectory.from_file(path) is None
