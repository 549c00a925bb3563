"""Unit tests for the ping-store command-line tool."""

import json

import pytest

from telemetry_ping_store.cli import build_parser, main
from telemetry_ping_store.stores.json_file import JSONFilePingStore


@pytest.fixture()
def root(tmp_path):
    path = tmp_path / "pings"
    store = JSONFilePingStore(path)
    for i in range(1, 6):
        store.store(i, f"url{i}", {"n": i})
    return path


def _stdout_json_lines(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines()]


def test_list_prints_sorted_pings(root, capsys):
    assert main([str(root), "list"]) == 0
    lines = _stdout_json_lines(capsys)
    assert [line["id"] for line in lines] == [1, 2, 3, 4, 5]
    assert lines[0] == {"id": 1, "u": "url1", "p": {"n": 1}}


def test_list_reports_malformed_on_stderr(root, capsys):
    (root / "ping-9.json").write_text("{")
    assert main([str(root), "list"]) == 0
    captured = capsys.readouterr()
    assert len(captured.out.splitlines()) == 5
    assert "ping-9.json" in captured.err


def test_count(root, capsys):
    assert main([str(root), "count"]) == 0
    assert capsys.readouterr().out.strip() == "5"


def test_store(root, capsys):
    assert main([str(root), "store", "6", "url6", '{"k": "v"}']) == 0
    assert (root / "ping-6.json").exists()


def test_store_duplicate_fails(root, capsys):
    assert main([str(root), "store", "3", "url", "{}"]) == 1
    assert "already exists" in capsys.readouterr().err


def test_store_replace(root):
    assert main([str(root), "store", "3", "new", "{}", "--replace"]) == 0
    document = json.loads((root / "ping-3.json").read_text())
    assert document == {"u": "new", "p": {}}


def test_store_invalid_payload(root, capsys):
    assert main([str(root), "store", "6", "url", "{oops"]) == 1
    assert "invalid payload JSON" in capsys.readouterr().err
    assert not (root / "ping-6.json").exists()


def test_prune(root, capsys):
    assert main([str(root), "prune", "--max", "2"]) == 0
    result = _stdout_json_lines(capsys)[0]
    assert result == {"removed": [1, 2, 3], "absent": [], "failed": {}}
    assert sorted(p.name for p in root.iterdir()) == ["ping-4.json", "ping-5.json"]


def test_ack(root, capsys):
    assert main([str(root), "ack", "2", "4", "99"]) == 0
    result = _stdout_json_lines(capsys)[0]
    assert result["removed"] == [2, 4]
    assert result["absent"] == [99]


def test_unusable_root(tmp_path, capsys):
    path = tmp_path / "file"
    path.write_text("")
    assert main([str(path), "count"]) == 1
    assert "unavailable" in capsys.readouterr().err


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["/tmp/x"])
