# MIT License
# Copyright (c) 2025 Hashborn

"""
Command line interface tests
"""

import json
import pytest
from locktrace.cli.main import main

from conftest import ALICE, BOB


@pytest.fixture
def snapshot_file(tmp_path, snapshot_data):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_data))
    return path


def test_report_json(snapshot_file, capsys):
    main(["--network", "polkadot", "report", "--snapshot", str(snapshot_file), "--json", ALICE, BOB])

    report = json.loads(capsys.readouterr().out)
    assert report["network"] == "polkadot"
    assert report["denom"] == "DOT"
    assert {a["address"]: a["status"] for a in report["accounts"]} == {ALICE: "ok", BOB: "ok"}

    alice = next(a for a in report["accounts"] if a["address"] == ALICE)
    # Approved at 1000 with Locked2x: 2 * 403200 blocks
    assert alice["voting"]["unlock_block"] == 1000 + 2 * 403200


def test_report_addresses_from_file(snapshot_file, tmp_path, capsys):
    addresses = tmp_path / "addresses.txt"
    addresses.write_text(f"# watched accounts\n{ALICE}\n\n")
    output = tmp_path / "report.json"

    main(["report", "--snapshot", str(snapshot_file), "--file", str(addresses), "--output", str(output)])

    assert "Report written" in capsys.readouterr().out
    report = json.loads(output.read_text())
    assert [a["address"] for a in report["accounts"]] == [ALICE]


def test_report_table(snapshot_file, capsys):
    main(["--network", "polkadot", "report", "--snapshot", str(snapshot_file), ALICE])

    out = capsys.readouterr().out
    assert f"Address: {ALICE}  [ok]" in out
    assert "referendum:5:aye" in out
    assert "Lock ID: pyconvic" in out


def test_report_strict_exit_code(snapshot_file, snapshot_data):
    del snapshot_data["referenda"]["5"]
    snapshot_file.write_text(json.dumps(snapshot_data))

    with pytest.raises(SystemExit) as exc:
        main(["report", "--snapshot", str(snapshot_file), "--json", "--strict", ALICE])
    assert exc.value.code == 2


def test_report_without_addresses(snapshot_file):
    with pytest.raises(SystemExit) as exc:
        main(["report", "--snapshot", str(snapshot_file)])
    assert exc.value.code == 1


def test_report_missing_snapshot(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["report", "--snapshot", str(tmp_path / "nope.json"), ALICE])
    assert exc.value.code == 1


def test_unknown_network_from_env(monkeypatch, capsys):
    monkeypatch.setenv("LOCKTRACE_NETWORK", "nowhere")

    with pytest.raises(SystemExit) as exc:
        main(["params"])
    assert exc.value.code == 1
    assert "Error: Unknown network 'nowhere'" in capsys.readouterr().out


def test_params(capsys):
    main(["--network", "kusama", "params"])

    out = capsys.readouterr().out
    assert "kusama" in out
    assert "KSM (12 decimals)" in out
    assert "100800 blocks" in out
