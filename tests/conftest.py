"""Shared element sets and catalog helpers for the test suite."""
import pytest

from sattrack.tle_parser import ElementSet

ISS = (
    "ISS (ZARYA)",
    "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927",
    "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537",
)
POLAR = (
    "POLAR TEST",
    "1 12345U 87001A   08264.50000000  .00000123  00000-0  45678-4 0  9996",
    "2 12345  98.7000 120.5000 0012000  80.0000 280.2000 14.20000000 10000",
)
HUBBLE = (
    "HST",
    "1 20580U 90037B   08264.50000000  .00000764  00000-0  34340-4 0  9994",
    "2 20580  28.4700 100.2000 0002500 300.0000  60.0000 15.09000000400006",
)
GEO = (
    "GEO TEST",
    "1 28884U 05041A   08264.50000000 -.00000100  00000-0  00000-0 0  9997",
    "2 28884   0.0500 100.0000 0002000 200.0000 150.0000  1.00270000 10009",
)
MOLNIYA = (
    "MOLNIYA TEST",
    "1 40000U 14001A   08264.50000000  .00000010  00000-0  00000-0 0  9996",
    "2 40000  63.4000 300.0000 7000000 270.0000  10.0000  2.00600000 10008",
)


def corrupt_checksum(line: str) -> str:
    """Replace the checksum digit of a TLE line with a wrong one."""
    return line[:68] + str((int(line[68]) + 1) % 10)


@pytest.fixture
def write_catalog(tmp_path):
    """Factory writing three-line groups into ``tmp_path/<filename>``."""

    def _write(groups, filename="test.tle", trailer=""):
        text = "".join(f"{name}\n{l1}\n{l2}\n" for name, l1, l2 in groups) + trailer
        path = tmp_path / filename
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def iss():
    return ElementSet.parse(ISS[1], ISS[2], name=ISS[0])


@pytest.fixture
def geo():
    return ElementSet.parse(GEO[1], GEO[2], name=GEO[0])


@pytest.fixture
def molniya():
    return ElementSet.parse(MOLNIYA[1], MOLNIYA[2], name=MOLNIYA[0])


@pytest.fixture
def polar():
    return ElementSet.parse(POLAR[1], POLAR[2], name=POLAR[0])
