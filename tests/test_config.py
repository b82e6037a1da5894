import json
from pathlib import Path

import pytest

from licensescan.core.config import (
    LicenseScanConfig,
    MatcherConfig,
    ScanConfig,
    load_config_from_path,
)


def test_defaults():
    cfg = LicenseScanConfig()

    assert cfg.matcher.match_threshold == 75.0
    assert cfg.scan.coverage_threshold == 90.0
    assert cfg.scan.max_workers == 1
    assert cfg.scan.path_prefix == ""
    cfg.validate()


def test_load_toml(tmp_path: Path):
    path = tmp_path / "scan.toml"
    path.write_text(
        "[matcher]\n"
        "match_threshold = 80\n"
        "\n"
        "[scan]\n"
        'path_prefix = "rsc.io/quote@v1.4.1"\n'
        "max_workers = 2\n"
        "\n"
        "[logging]\n"
        'level = "DEBUG"\n',
        encoding="utf-8",
    )

    cfg = load_config_from_path(path)

    assert cfg.matcher.match_threshold == 80.0
    assert isinstance(cfg.matcher.match_threshold, float)
    assert cfg.scan.path_prefix == "rsc.io/quote@v1.4.1"
    assert cfg.scan.max_workers == 2
    assert cfg.logging.level == "DEBUG"


def test_json_round_trip(tmp_path: Path):
    cfg = LicenseScanConfig()
    cfg.scan.max_file_bytes = 4096
    cfg.matcher.max_gap = 12

    written = cfg.to_json(tmp_path / "scan.json")
    loaded = load_config_from_path(written)

    assert loaded.to_dict() == cfg.to_dict()
    assert json.loads(Path(written).read_text(encoding="utf-8"))["scan"]["max_file_bytes"] == 4096


def test_unknown_keys_are_rejected():
    with pytest.raises(ValueError, match="bogus"):
        LicenseScanConfig.from_dict({"matcher": {"bogus": 1}})
    with pytest.raises(ValueError):
        LicenseScanConfig.from_dict({"sinks": {}})


def test_invalid_values_fail_validation(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"matcher": {"match_threshold": 150}}), encoding="utf-8")

    with pytest.raises(ValueError, match="match_threshold"):
        load_config_from_path(path)


@pytest.mark.parametrize(
    "section",
    [
        MatcherConfig(tie_tolerance=-1),
        MatcherConfig(min_run=0),
        ScanConfig(max_workers=0),
        ScanConfig(coverage_threshold=101),
        ScanConfig(executor_kind="fiber"),
    ],
)
def test_section_validation(section):
    with pytest.raises(ValueError):
        section.validate()


def test_unsupported_extension(tmp_path: Path):
    path = tmp_path / "scan.yaml"
    path.write_text("matcher: {}\n", encoding="utf-8")

    with pytest.raises(ValueError, match="extension"):
        load_config_from_path(path)


def test_effective_window():
    assert ScanConfig(max_workers=3).effective_window() == 12
    assert ScanConfig(max_workers=3, window=1).effective_window() == 3
    assert ScanConfig(max_workers=2, window=5).effective_window() == 5
