import pytest

from conftest import GEO, HUBBLE, ISS, POLAR, corrupt_checksum
from sattrack.catalog import CatalogIndex, ScanStatus, iter_groups, scan_catalog
from sattrack.config import CatalogConfig
from sattrack.tle_parser import compute_checksum


class TestScanCatalog:
    def test_finds_record_in_middle(self, write_catalog):
        path = write_catalog([POLAR, ISS, HUBBLE])
        result = scan_catalog(path, 25544)
        assert result.status is ScanStatus.FOUND
        assert result.found
        assert result.tle.catnum == 25544
        assert result.tle.valid
        assert result.groups_scanned == 2
        assert result.path == path

    def test_absent_number_visits_every_group(self, write_catalog):
        path = write_catalog([ISS, POLAR])
        result = scan_catalog(path, 99999)
        assert result.status is ScanStatus.NOT_FOUND
        assert result.tle is None
        assert result.groups_scanned == 2

    def test_first_match_wins(self, write_catalog):
        second = ("ISS DUPLICATE", ISS[1], ISS[2])
        path = write_catalog([ISS, POLAR, second])
        result = scan_catalog(path, 25544)
        assert result.tle.name == "ISS (ZARYA)"
        assert result.groups_scanned == 1

    def test_later_corrupt_duplicate_never_reached(self, write_catalog):
        bad = ("ISS BAD", corrupt_checksum(ISS[1]), ISS[2])
        path = write_catalog([ISS, bad])
        assert scan_catalog(path, 25544).status is ScanStatus.FOUND

    def test_invalid_checksum_stops_search(self, write_catalog):
        bad = ("ISS BAD", corrupt_checksum(ISS[1]), ISS[2])
        path = write_catalog([bad, ISS])
        result = scan_catalog(path, 25544)
        assert result.status is ScanStatus.INVALID_DATA
        assert result.tle is not None
        assert not result.tle.valid
        assert result.groups_scanned == 1

    def test_malformed_matched_group_is_invalid(self, write_catalog):
        bad = ("ISS SHORT", ISS[1], ISS[2][:30])
        path = write_catalog([bad])
        result = scan_catalog(path, 25544)
        assert result.status is ScanStatus.INVALID_DATA
        assert result.tle is None

    def test_non_numeric_catalog_field_is_skipped(self, write_catalog):
        alpha = ("ALPHA5", "1 A0001" + POLAR[1][7:], "2 A0001" + POLAR[2][7:])
        path = write_catalog([alpha, ISS])
        result = scan_catalog(path, 25544)
        assert result.status is ScanStatus.FOUND
        assert result.groups_scanned == 2

    def test_short_line_ends_scan(self, write_catalog):
        short = ("X", "1 2", "")
        path = write_catalog([short, ISS])
        result = scan_catalog(path, 25544)
        assert result.status is ScanStatus.NOT_FOUND
        assert result.tle is None
        assert result.groups_scanned == 1

    @pytest.mark.parametrize("field", ["     nan", "     inf", "    -inf"])
    def test_non_finite_field_is_invalid(self, write_catalog, field):
        line2 = ISS[2][:8] + field + ISS[2][16:68]
        line2 += str(compute_checksum(line2))
        path = write_catalog([("ISS NAN", ISS[1], line2)])
        result = scan_catalog(path, 25544)
        assert result.status is ScanStatus.INVALID_DATA
        assert result.tle is None

    def test_truncated_group_ends_scan(self, write_catalog):
        path = write_catalog([POLAR], trailer=f"{ISS[0]}\n{ISS[1]}\n")
        result = scan_catalog(path, 25544)
        assert result.status is ScanStatus.NOT_FOUND
        assert result.groups_scanned == 1

    def test_empty_file(self, write_catalog):
        path = write_catalog([])
        result = scan_catalog(path, 25544)
        assert result.status is ScanStatus.NOT_FOUND
        assert result.groups_scanned == 0

    def test_missing_file(self, tmp_path):
        result = scan_catalog(tmp_path / "nope.tle", 25544)
        assert result.status is ScanStatus.FILE_UNREADABLE
        assert result.reason

    def test_directory_is_unreadable(self, tmp_path):
        assert scan_catalog(tmp_path, 25544).status is ScanStatus.FILE_UNREADABLE

    def test_crlf_line_endings(self, tmp_path):
        path = tmp_path / "dos.tle"
        path.write_bytes("\r\n".join(ISS).encode() + b"\r\n")
        result = scan_catalog(path, 25544)
        assert result.status is ScanStatus.FOUND
        assert result.tle.valid


class TestIterGroups:
    def test_groups_of_three(self):
        lines = iter(["a\n", "b\n", "c\n", "d\n", "e\n", "f\n", "g\n"])
        assert list(iter_groups(lines)) == [("a", "b", "c"), ("d", "e", "f")]


class TestCatalogIndex:
    def test_build_from_directory(self, write_catalog, tmp_path):
        write_catalog([ISS, POLAR], filename="a.tle")
        write_catalog([HUBBLE], filename="b.tle")
        write_catalog([GEO], filename="ignored.txt")

        index = CatalogIndex.build(CatalogConfig(tmp_path))
        assert len(index) == 3
        assert index.locate(25544) == "a.tle"
        assert index.locate(20580) == "b.tle"
        assert index.locate(28884) is None
        assert 12345 in index

    def test_first_file_wins(self, write_catalog, tmp_path):
        write_catalog([ISS], filename="b.tle")
        write_catalog([ISS], filename="a.tle")
        index = CatalogIndex.build(CatalogConfig(tmp_path))
        assert index.locate(25544) == "a.tle"

    def test_missing_directory_gives_empty_index(self, tmp_path):
        index = CatalogIndex.build(CatalogConfig(tmp_path / "missing"))
        assert len(index) == 0

    def test_explicit_mapping(self):
        index = CatalogIndex({25544: "stations.tle"})
        assert index.locate(25544) == "stations.tle"
        assert index.locate(1) is None
        assert index.items() == [(25544, "stations.tle")]


class TestCatalogConfig:
    def test_env_fallback(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SATTRACK_TLE_DIR", str(tmp_path))
        assert CatalogConfig.from_env().base_dir == tmp_path

    def test_explicit_dir_beats_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SATTRACK_TLE_DIR", "/nonexistent")
        assert CatalogConfig.from_env(tmp_path).base_dir == tmp_path

    def test_path_for(self, tmp_path):
        config = CatalogConfig(tmp_path)
        assert config.path_for("stations.tle") == tmp_path / "stations.tle"

    @pytest.mark.parametrize("suffix", [".tle", ".txt"])
    def test_catalog_files_by_suffix(self, tmp_path, suffix):
        (tmp_path / f"x{suffix}").write_text("")
        (tmp_path / "y.dat").write_text("")
        files = CatalogConfig(tmp_path, suffix=suffix).catalog_files()
        assert [p.name for p in files] == [f"x{suffix}"]
