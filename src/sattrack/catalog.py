"""Catalog file scanning and lookup.

A catalog file is plain text made of repeating three-line groups: a
free-form name line followed by the two TLE data lines. The scanner reads
the groups in order and stops at the first one whose catalog number
(columns 3-7 of line 1) matches the request.

``CatalogIndex`` answers the question of which file to scan for a given
catalog number.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Iterator, Mapping, Optional

from .config import CatalogConfig
from .tle_parser import CATNUM_SLICE, ElementSet, parse_catalog_number, parse_tle_group

logger = logging.getLogger(__name__)


class ScanStatus(Enum):
    """Outcome of a catalog scan."""

    FOUND = auto()
    NOT_FOUND = auto()
    INVALID_DATA = auto()
    FILE_UNREADABLE = auto()


@dataclass(frozen=True)
class ScanResult:
    """Result of scanning one catalog file.

    Attributes:
        status: Scan outcome.
        tle: The matched element set (FOUND, and INVALID_DATA when only
            the checksum failed).
        groups_scanned: Number of complete groups read, match included.
        path: File that was scanned.
        reason: Human readable detail for non-FOUND outcomes.
    """

    status: ScanStatus
    tle: Optional[ElementSet] = None
    groups_scanned: int = 0
    path: Optional[Path] = None
    reason: str = ""

    @property
    def found(self) -> bool:
        return self.status is ScanStatus.FOUND


def iter_groups(lines: Iterator[str]) -> Iterator[tuple[str, str, str]]:
    """Yield complete (name, line 1, line 2) groups from a line iterator.

    Stops silently at a trailing partial group.
    """
    while True:
        group = []
        for line in lines:
            group.append(line.rstrip("\r\n"))
            if len(group) == 3:
                break
        if len(group) < 3:
            if group:
                logger.debug("Discarding partial group of %d line(s)", len(group))
            return
        yield group[0], group[1], group[2]


def group_catnum(line1: str) -> Optional[int]:
    """Catalog number of a group, or None if the field is not numeric."""
    return parse_catalog_number(line1[CATNUM_SLICE])


def scan_catalog(path: str | Path, catnum: int) -> ScanResult:
    """Find the first group for ``catnum`` in a catalog file.

    The scan ends with NOT_FOUND at a trailing partial group or at a group
    whose line 1 is too short to hold the catalog number field.

    Args:
        path: Catalog file.
        catnum: Catalog number to look for.

    Returns:
        ScanResult with status FOUND, NOT_FOUND, INVALID_DATA or
        FILE_UNREADABLE.
    """
    path = Path(path)
    scanned = 0

    try:
        with path.open("r", encoding="utf-8") as fp:
            for group in iter_groups(iter(fp)):
                scanned += 1
                if len(group[1]) < CATNUM_SLICE.stop:
                    logger.warning(
                        "Line 1 of group %d in %s too short for a catalog number, "
                        "ending scan", scanned, path,
                    )
                    return ScanResult(
                        ScanStatus.NOT_FOUND, None, scanned, path,
                        f"short line in group {scanned} of {path.name}",
                    )
                if group_catnum(group[1]) != catnum:
                    continue

                logger.debug("Found #%d in %s", catnum, path)
                parsed = parse_tle_group(group)
                if not parsed.valid:
                    logger.error("Invalid data for #%d: %s", catnum, parsed.reason)
                    return ScanResult(
                        ScanStatus.INVALID_DATA, parsed.tle, scanned, path, parsed.reason
                    )
                return ScanResult(ScanStatus.FOUND, parsed.tle, scanned, path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read %s: %s", path, exc)
        return ScanResult(ScanStatus.FILE_UNREADABLE, None, scanned, path, str(exc))

    return ScanResult(
        ScanStatus.NOT_FOUND, None, scanned, path, f"#{catnum} not in {path.name}"
    )


class CatalogIndex:
    """Maps catalog numbers to the name of the file containing them."""

    def __init__(self, mapping: Optional[Mapping[int, str]] = None):
        self._files: dict[int, str] = dict(mapping or {})

    @classmethod
    def build(cls, config: CatalogConfig) -> CatalogIndex:
        """Index every catalog file under ``config.base_dir``.

        When a number appears in several files, the first file in name
        order wins, consistent with first-match scanning.
        """
        index = cls()
        for path in config.catalog_files():
            try:
                with path.open("r", encoding="utf-8") as fp:
                    for _, line1, _ in iter_groups(iter(fp)):
                        catnum = group_catnum(line1)
                        if catnum is not None:
                            index._files.setdefault(catnum, path.name)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping unreadable catalog %s: %s", path, exc)
        logger.info("Indexed %d objects from %s", len(index), config.base_dir)
        return index

    def locate(self, catnum: int) -> Optional[str]:
        """File name expected to contain ``catnum``, or None."""
        return self._files.get(catnum)

    def items(self):
        return sorted(self._files.items())

    def __contains__(self, catnum: int) -> bool:
        return catnum in self._files

    def __len__(self) -> int:
        return len(self._files)
