import json

from licensescan.core.types import Coverage, License, LicenseType, Match, Metadata


def _metadata() -> Metadata:
    return Metadata(
        file_path="LICENSE",
        types=("BSD-0-Clause", "MIT"),
        coverage=Coverage(
            percent=100.0,
            matches=(
                Match("MIT", LicenseType.MIT, 100.0, 0, 1050),
                Match("BSD-0-Clause", LicenseType.BSD, 100.0, 1051, 1700),
            ),
        ),
    )


def test_metadata_dict_round_trip_through_json():
    meta = _metadata()

    restored = Metadata.from_dict(json.loads(json.dumps(meta.to_dict())))

    assert restored == meta


def test_zero_coverage_is_falsy():
    assert not Coverage()
    assert Coverage.from_dict(None) == Coverage()
    assert Coverage(percent=50.0, matches=(Match("MIT", LicenseType.MIT, 80.0),))


def test_license_exposes_metadata_fields():
    lic = License(metadata=_metadata(), contents=b"text")

    assert lic.file_path == "LICENSE"
    assert lic.types == ("BSD-0-Clause", "MIT")
    assert "contents" not in lic.to_dict()
    assert lic.to_dict(include_contents=True)["contents"] == "text"


def test_license_type_parse():
    assert LicenseType.parse("apache") is LicenseType.APACHE
    assert LicenseType.parse("MIT") is LicenseType.MIT
    assert LicenseType.parse(LicenseType.BSD) is LicenseType.BSD
    assert LicenseType.parse("GPL") is LicenseType.UNKNOWN
    assert LicenseType.parse(None) is LicenseType.UNKNOWN
