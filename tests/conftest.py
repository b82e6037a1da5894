import pytest

from license_texts import BSD0_LICENSE, MIT_LICENSE


@pytest.fixture
def mit_license() -> str:
    return MIT_LICENSE


@pytest.fixture
def bsd0_license() -> str:
    return BSD0_LICENSE
