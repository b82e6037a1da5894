from licensescan.core.redistributable import (
    is_directory_redistributable,
    is_module_redistributable,
    is_redistributable,
    license_directory,
    licenses_for_directory,
)
from licensescan.core.types import License, Metadata


def _meta(path: str, *types: str) -> Metadata:
    return Metadata(file_path=path, types=tuple(types))


def test_is_redistributable():
    assert is_redistributable(_meta("LICENSE", "MIT"))
    assert is_redistributable(License(_meta("LICENSE", "BSD-0-Clause", "MIT")))
    assert not is_redistributable(_meta("LICENSE"))
    assert not is_redistributable(_meta("LICENSE", "MIT", "Proprietary"))


def test_license_directory():
    assert license_directory(_meta("LICENSE")) == ""
    assert license_directory(_meta("a/b/COPYING")) == "a/b"


def test_licenses_for_directory_includes_ancestors_only():
    metas = [
        _meta("foo/LICENSE", "MIT"),
        _meta("LICENSE", "MIT"),
        _meta("foobar/LICENSE", "MIT"),
        _meta("foo/bar/LICENSE", "MIT"),
    ]

    got = licenses_for_directory(metas, "foo/bar/baz")

    assert [m.file_path for m in got] == ["LICENSE", "foo/LICENSE", "foo/bar/LICENSE"]


def test_module_without_root_license_is_not_redistributable():
    assert not is_module_redistributable([])
    assert not is_module_redistributable([_meta("sub/LICENSE", "MIT")])


def test_unclassified_nested_license_blocks_its_directory_only():
    metas = [_meta("LICENSE", "MIT"), _meta("internal/LICENSE")]

    assert is_module_redistributable(metas)
    assert is_directory_redistributable(metas, "cmd")
    assert not is_directory_redistributable(metas, "internal/x")
