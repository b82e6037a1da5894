import json
from pathlib import Path

from licensescan.cli.main import EXIT_SCAN_ERROR, main
from licensescan.sources.archive import zip_contents

from license_texts import BSD0_LICENSE, LOREM, MIT_LICENSE


def _write_zip(tmp_path: Path, contents: dict) -> Path:
    path = tmp_path / "module.zip"
    path.write_bytes(zip_contents(contents))
    return path


def test_cli_scan_zip_json(tmp_path: Path, capsys):
    zip_path = _write_zip(tmp_path, {
        "example.com/mod@v1.0.0/LICENSE": MIT_LICENSE,
        "example.com/mod@v1.0.0/sub/COPYING": BSD0_LICENSE,
        "example.com/mod@v1.0.0/main.go": "package main",
    })

    rc = main(["scan", str(zip_path), "--prefix", "example.com/mod@v1.0.0", "--json"])

    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert [lic["file_path"] for lic in payload["licenses"]] == ["LICENSE", "sub/COPYING"]
    assert payload["licenses"][0]["types"] == ["MIT"]
    assert payload["licenses"][1]["coverage"]["matches"][0]["name"] == "BSD-0-Clause"
    assert payload["redistributable"] is True


def test_cli_scan_directory_text(tmp_path: Path, capsys):
    root = tmp_path / "mod"
    root.mkdir()
    (root / "LICENSE").write_text(MIT_LICENSE, encoding="utf-8")

    rc = main(["scan", str(root)])

    assert rc == 0
    assert capsys.readouterr().out.strip() == "LICENSE\tMIT\t100.0%"


def test_cli_scan_reports_missing_licenses(tmp_path: Path, capsys):
    zip_path = _write_zip(tmp_path, {"README.md": "hello"})

    rc = main(["scan", str(zip_path)])

    assert rc == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "No license files found" in captured.err


def test_cli_scan_bad_zip_exits_with_scan_error(tmp_path: Path, capsys):
    bad = tmp_path / "broken.zip"
    bad.write_bytes(b"not a zip at all")

    rc = main(["scan", str(bad)])

    assert rc == EXIT_SCAN_ERROR
    assert "Scan failed" in capsys.readouterr().err


def test_cli_scan_config_threshold(tmp_path: Path, capsys):
    zip_path = _write_zip(tmp_path, {"LICENSE": MIT_LICENSE + LOREM})
    config = tmp_path / "scan.toml"
    config.write_text("[scan]\ncoverage_threshold = 80.0\n\n[logging]\nlevel = \"ERROR\"\n", encoding="utf-8")

    rc = main(["scan", str(zip_path), "-c", str(config), "--json"])

    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["licenses"][0]["types"] == ["MIT"]


def test_cli_invalid_config_returns_error(tmp_path: Path, capsys):
    zip_path = _write_zip(tmp_path, {"LICENSE": MIT_LICENSE})
    config = tmp_path / "scan.json"
    config.write_text(json.dumps({"scan": {"max_workers": 0}}), encoding="utf-8")

    rc = main(["scan", str(zip_path), "-c", str(config)])

    assert rc == 1
    assert "max_workers" in capsys.readouterr().err


def test_cli_classify_json(tmp_path: Path, capsys, mit_license):
    text_file = tmp_path / "LICENSE.txt"
    text_file.write_text(mit_license, encoding="utf-8")

    rc = main(["classify", str(text_file), "--json"])

    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["percent"] == 100.0
    assert [m["name"] for m in payload["matches"]] == ["MIT"]
    assert payload["matches"][0]["type"] == "MIT"


def test_cli_classify_text(tmp_path: Path, capsys, bsd0_license):
    text_file = tmp_path / "COPYING"
    text_file.write_text(bsd0_license, encoding="utf-8")

    rc = main(["classify", str(text_file)])

    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "coverage\t100.0%"
    assert lines[1].startswith("BSD-0-Clause\tBSD\t100.0%\t[")
