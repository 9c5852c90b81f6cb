"""Tests for the shaman-cache command-line interface."""

import json

import pytest

from shaman_cache.cli import main


@pytest.fixture
def connect(tmp_path):
    return ["--connect", f"boltdb://{tmp_path}/cli.db"]


def test_add_then_get(connect, capsys):
    assert main(connect + ["add", "Example.com", "--address", "192.0.2.1", "--ttl", "300", "--type", "a"]) == 0
    capsys.readouterr()

    assert main(connect + ["get", "example.com"]) == 0
    resource = json.loads(capsys.readouterr().out)
    assert resource == {
        "domain": "example.com.",
        "records": [{"ttl": 300, "class": "IN", "type": "A", "address": "192.0.2.1"}],
    }


def test_get_missing_exits_nonzero(connect, capsys):
    assert main(connect + ["get", "missing.example.com"]) == 1
    assert "No Record Found" in capsys.readouterr().err


def test_list_and_delete(connect, capsys):
    main(connect + ["add", "a.example.com", "--address", "192.0.2.1"])
    main(connect + ["add", "b.example.com", "--address", "192.0.2.2"])
    main(connect + ["delete", "a.example.com"])
    capsys.readouterr()

    assert main(connect + ["list"]) == 0
    listed = json.loads(capsys.readouterr().out)
    assert [r["domain"] for r in listed] == ["b.example.com."]


def test_reset_from_file(connect, tmp_path, capsys):
    main(connect + ["add", "stale.example.com", "--address", "192.0.2.9"])
    source = tmp_path / "resources.json"
    source.write_text(
        json.dumps(
            [
                {"domain": "one.example.com", "records": [{"address": "192.0.2.1"}]},
                {"domain": "two.example.com", "records": [{"type": "cname", "address": "one.example.com."}]},
            ]
        )
    )

    assert main(connect + ["reset", str(source)]) == 0
    capsys.readouterr()

    main(connect + ["list"])
    listed = json.loads(capsys.readouterr().out)
    assert sorted(r["domain"] for r in listed) == ["one.example.com.", "two.example.com."]


def test_reset_rejects_bad_file(connect, tmp_path):
    source = tmp_path / "bad.json"
    source.write_text('{"not": "a list"}')
    assert main(connect + ["reset", str(source)]) == 2


def test_disabled_storage_warns(capsys):
    assert main(["--connect", "none://", "list"]) == 0
    captured = capsys.readouterr()
    assert "storage is disabled" in captured.err
    assert json.loads(captured.out) == []
