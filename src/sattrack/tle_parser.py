"""TLE parsing and checksum validation.

Parses standard NORAD three-line element sets (a name line followed by
the two fixed-column data lines) into immutable ``ElementSet`` records,
and reports whether the record passed checksum validation.

Column ranges follow the CelesTrak format documentation (1-based columns
are given in comments, slices are 0-based):

    Line 1
        01      Line number (1)
        03-07   Catalog number
        08      Classification
        10-17   International designator
        19-20   Epoch year (two digits, 57 pivot)
        21-32   Epoch day of year with fraction
        34-43   First derivative of mean motion / 2 (rev/day²)
        45-52   Second derivative of mean motion / 6 (implied decimal)
        54-61   B* drag term (implied decimal)
        65-68   Element set number
        69      Checksum

    Line 2
        01      Line number (2)
        03-07   Catalog number
        09-16   Inclination (deg)
        18-25   Right ascension of the ascending node (deg)
        27-33   Eccentricity (implied leading decimal point)
        35-42   Argument of perigee (deg)
        44-51   Mean anomaly (deg)
        53-63   Mean motion (rev/day)
        64-68   Revolution number at epoch
        69      Checksum

References:
    - Kelso, T.S. "CelesTrak TLE Format Documentation"
      https://celestrak.org/columns/v04n03/
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

TLE_LINE_LENGTH = 69
"""Length of a TLE data line including the checksum column."""

NAME_MAX_LENGTH = 24
"""Maximum significant length of the name line."""

CATNUM_SLICE = slice(2, 7)
"""Catalog number field (columns 3-7) on both data lines."""

NUMERIC_FIELD_CHARS = frozenset("0123456789 .+-")
"""Characters allowed in a fixed-column numeric field."""

MU_EARTH = 398600.8
"""Earth gravitational parameter, WGS72 (km³/s²)."""

R_EARTH = 6378.135
"""Earth equatorial radius, WGS72 (km)."""

SOLAR_DAY = 86400.0
"""Seconds in a solar day."""

TWO_PI = 2.0 * math.pi
"""2π constant."""


class TLEFormatError(ValueError):
    """Raised when a TLE line is structurally malformed."""


@dataclass(frozen=True, slots=True)
class ElementSet:
    """A parsed, immutable orbital element record.

    Attributes:
        name: Spacecraft name from line 0 (if present).
        catnum: NORAD catalog number.
        classification: Security classification (U/C/S).
        intl_designator: International designator (launch year/number/piece).
        epoch_year: Full 4-digit epoch year.
        epoch_day: Fractional day of year at epoch (1.0 = Jan 1, 00:00 UTC).
        epoch_dt: Epoch as a Python datetime (UTC, naive).
        mean_motion_dot: First derivative of mean motion / 2 (rev/day²).
        mean_motion_ddot: Second derivative of mean motion / 6 (rev/day³).
        bstar: B* drag term (1/Earth radii).
        elset_number: Element set number.
        inclination: Orbital inclination (degrees).
        raan: Right ascension of ascending node (degrees).
        eccentricity: Orbital eccentricity (dimensionless).
        arg_perigee: Argument of perigee (degrees).
        mean_anomaly: Mean anomaly (degrees).
        mean_motion: Mean motion (revolutions per day).
        rev_number: Revolution number at epoch.
        line1: Raw line 1, as parsed.
        line2: Raw line 2, as parsed.
        line1_checksum_ok: Whether line 1 passed its modulo-10 checksum.
        line2_checksum_ok: Whether line 2 passed its modulo-10 checksum.
    """

    # Identity
    name: Optional[str]
    catnum: int
    classification: str
    intl_designator: str

    # Epoch
    epoch_year: int
    epoch_day: float
    epoch_dt: datetime

    # Line 1 fields
    mean_motion_dot: float
    mean_motion_ddot: float
    bstar: float
    elset_number: int

    # Line 2 fields
    inclination: float
    raan: float
    eccentricity: float
    arg_perigee: float
    mean_anomaly: float
    mean_motion: float
    rev_number: int

    # Raw text and status
    line1: str = ""
    line2: str = ""
    line1_checksum_ok: bool = True
    line2_checksum_ok: bool = True

    @property
    def valid(self) -> bool:
        """True when both data lines passed checksum validation."""
        return self.line1_checksum_ok and self.line2_checksum_ok

    @property
    def period(self) -> float:
        """Orbital period (minutes)."""
        return 1440.0 / self.mean_motion

    @property
    def semi_major_axis(self) -> float:
        """Two-body semi-major axis from mean motion (km)."""
        n_rad_s = self.mean_motion * TWO_PI / SOLAR_DAY
        return (MU_EARTH / n_rad_s**2) ** (1.0 / 3.0)

    @property
    def perigee_altitude(self) -> float:
        """Perigee height above the equatorial radius (km)."""
        return self.semi_major_axis * (1.0 - self.eccentricity) - R_EARTH

    @property
    def apogee_altitude(self) -> float:
        """Apogee height above the equatorial radius (km)."""
        return self.semi_major_axis * (1.0 + self.eccentricity) - R_EARTH

    @staticmethod
    def parse(
        line1: str,
        line2: str,
        name: Optional[str] = None,
    ) -> ElementSet:
        """Parse an element set from line 1 and line 2 strings.

        Checksum mismatches do not raise; they are recorded on the
        returned record (see ``valid``).

        Args:
            line1: TLE line 1 (69 characters, starts with '1').
            line2: TLE line 2 (69 characters, starts with '2').
            name: Optional spacecraft name (from line 0).

        Returns:
            Parsed element set.

        Raises:
            TLEFormatError: If a line is too short, does not start with
                the expected line number, has non-numeric content in a
                numeric field, or the two catalog numbers disagree.
        """
        l1 = line1.rstrip("\r\n")
        l2 = line2.rstrip("\r\n")

        if len(l1) < TLE_LINE_LENGTH:
            raise TLEFormatError(f"Line 1 too short ({len(l1)} characters)")
        if len(l2) < TLE_LINE_LENGTH:
            raise TLEFormatError(f"Line 2 too short ({len(l2)} characters)")
        if l1[0] != "1":
            raise TLEFormatError(f"Line 1 must start with '1', got '{l1[0]}'")
        if l2[0] != "2":
            raise TLEFormatError(f"Line 2 must start with '2', got '{l2[0]}'")

        try:
            # ── Line 1 ──
            catnum = parse_catalog_number(l1[CATNUM_SLICE])
            classification = l1[7]
            intl_designator = l1[9:17].strip()

            epoch_year_2d = int(_numeric(l1[18:20]))
            epoch_year = (
                1900 + epoch_year_2d if epoch_year_2d >= 57 else 2000 + epoch_year_2d
            )
            epoch_day = float(_numeric(l1[20:32]))
            mean_motion_dot = float(_numeric(l1[33:43]))
            mean_motion_ddot = _parse_implied_decimal(_numeric(l1[44:52]))
            bstar = _parse_implied_decimal(_numeric(l1[53:61]))
            elset_number = int(_numeric(l1[64:68]).strip() or "0")

            # ── Line 2 ──
            catnum_2 = parse_catalog_number(l2[CATNUM_SLICE])
            inclination = float(_numeric(l2[8:16]))
            raan = float(_numeric(l2[17:25]))
            eccentricity = float(f"0.{_numeric(l2[26:33]).strip()}")
            arg_perigee = float(_numeric(l2[34:42]))
            mean_anomaly = float(_numeric(l2[43:51]))
            mean_motion = float(_numeric(l2[52:63]))
            rev_number = int(_numeric(l2[63:68]).strip() or "0")
        except (TypeError, ValueError) as exc:
            raise TLEFormatError(f"Malformed numeric field: {exc}") from exc

        values = (epoch_day, mean_motion_dot, mean_motion_ddot, bstar,
                  inclination, raan, eccentricity, arg_perigee, mean_anomaly,
                  mean_motion)
        if not all(math.isfinite(v) for v in values):
            raise TLEFormatError("Non-finite numeric field")

        if catnum is None or catnum_2 is None:
            raise TLEFormatError("Catalog number field is not numeric")
        if catnum != catnum_2:
            raise TLEFormatError(f"Catalog number mismatch: {catnum} vs {catnum_2}")
        if mean_motion <= 0.0:
            raise TLEFormatError(f"Mean motion must be positive, got {mean_motion}")

        ok1 = verify_checksum(l1)
        ok2 = verify_checksum(l2)
        if not ok1:
            logger.warning("Checksum mismatch on line 1 of #%d", catnum)
        if not ok2:
            logger.warning("Checksum mismatch on line 2 of #%d", catnum)

        return ElementSet(
            name=name.strip()[:NAME_MAX_LENGTH] if name and name.strip() else None,
            catnum=catnum,
            classification=classification,
            intl_designator=intl_designator,
            epoch_year=epoch_year,
            epoch_day=epoch_day,
            epoch_dt=_epoch_to_datetime(epoch_year, epoch_day),
            mean_motion_dot=mean_motion_dot,
            mean_motion_ddot=mean_motion_ddot,
            bstar=bstar,
            elset_number=elset_number,
            inclination=inclination,
            raan=raan,
            eccentricity=eccentricity,
            arg_perigee=arg_perigee,
            mean_anomaly=mean_anomaly,
            mean_motion=mean_motion,
            rev_number=rev_number,
            line1=l1[:TLE_LINE_LENGTH],
            line2=l2[:TLE_LINE_LENGTH],
            line1_checksum_ok=ok1,
            line2_checksum_ok=ok2,
        )

    @staticmethod
    def parse_batch(text: str) -> list[ElementSet]:
        """Parse a multi-record string containing 2-line or 3-line groups.

        Groups that fail structural parsing are skipped with a warning.

        Args:
            text: String containing one or more element sets.

        Returns:
            List of parsed element sets, in the order they appear.
        """
        lines = [line.rstrip() for line in text.strip().splitlines() if line.strip()]
        records: list[ElementSet] = []
        i = 0

        while i < len(lines):
            if (
                lines[i].startswith("1")
                and i + 1 < len(lines)
                and lines[i + 1].startswith("2")
            ):
                group, name, step = (lines[i], lines[i + 1]), None, 2
            elif (
                i + 2 < len(lines)
                and lines[i + 1].startswith("1")
                and lines[i + 2].startswith("2")
            ):
                group, name, step = (lines[i + 1], lines[i + 2]), lines[i], 3
            else:
                i += 1
                continue

            try:
                records.append(ElementSet.parse(*group, name=name))
            except TLEFormatError as exc:
                logger.warning("Skipping malformed element set at line %d: %s", i + 1, exc)
            i += step

        return records

    def to_dict(self) -> dict:
        """Convert to a flat dictionary suitable for DataFrame construction."""
        return {
            "catnum": self.catnum,
            "name": self.name,
            "epoch": self.epoch_dt,
            "epoch_year": self.epoch_year,
            "epoch_day": self.epoch_day,
            "inclination_deg": self.inclination,
            "raan_deg": self.raan,
            "eccentricity": self.eccentricity,
            "arg_perigee_deg": self.arg_perigee,
            "mean_anomaly_deg": self.mean_anomaly,
            "mean_motion_rev_day": self.mean_motion,
            "mean_motion_dot": self.mean_motion_dot,
            "bstar": self.bstar,
            "rev_number": self.rev_number,
            "valid": self.valid,
        }


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one three-line group.

    ``tle`` is ``None`` when the group was structurally malformed; it is
    populated but ``valid`` is False when only the checksum failed.
    """

    tle: Optional[ElementSet]
    valid: bool
    reason: str = ""


def parse_tle_group(lines: Sequence[str]) -> ParseResult:
    """Parse a (name, line 1, line 2) group and report its validity.

    Args:
        lines: The three raw lines of one catalog entry.

    Returns:
        ParseResult with the record and its validity flag.
    """
    if len(lines) != 3:
        return ParseResult(None, False, f"expected 3 lines, got {len(lines)}")

    name, line1, line2 = lines
    try:
        tle = ElementSet.parse(line1, line2, name=name)
    except TLEFormatError as exc:
        return ParseResult(None, False, str(exc))

    if not tle.valid:
        return ParseResult(tle, False, "checksum mismatch")
    return ParseResult(tle, True)


def parse_catalog_number(field: str) -> Optional[int]:
    """Strict fixed-width integer parse of a catalog number field.

    Leading and trailing blanks are allowed; any other non-digit content
    (signs, decimal points, Alpha-5 letters) is rejected.

    Returns:
        The catalog number, or ``None`` if the field is not an unsigned
        decimal integer.
    """
    digits = field.strip(" ")
    if not digits or not all("0" <= ch <= "9" for ch in digits):
        return None
    return int(digits)


def compute_checksum(line: str) -> int:
    """Modulo-10 checksum over columns 1-68 (digits count as their value,
    minus signs count as 1, everything else as 0)."""
    total = 0
    for ch in line[: TLE_LINE_LENGTH - 1]:
        if "0" <= ch <= "9":
            total += ord(ch) - ord("0")
        elif ch == "-":
            total += 1
    return total % 10


def verify_checksum(line: str) -> bool:
    """Check column 69 of a TLE line against its computed checksum."""
    if len(line) < TLE_LINE_LENGTH:
        return False
    expected = line[TLE_LINE_LENGTH - 1]
    if not "0" <= expected <= "9":
        return False
    return compute_checksum(line) == int(expected)


# ── Private helpers ──


def _parse_implied_decimal(s: str) -> float:
    """Parse TLE implied-decimal notation into a float.

    The TLE format encodes some fields as ``NNNNN±N`` where the mantissa
    has an implied leading ``0.`` and the final ``±N`` is a base-10
    exponent. For example, ``16538-4`` becomes ``0.16538e-4``.
    """
    s = s.strip()
    if not s or s in ("00000-0", "00000+0"):
        return 0.0

    for i in range(len(s) - 1, 0, -1):
        if s[i] in "+-":
            mantissa = s[:i]
            exponent = s[i:]
            sign = "-" if mantissa.lstrip().startswith("-") else ""
            digits = mantissa.lstrip("+-").lstrip()
            return float(f"{sign}0.{digits}e{exponent}")

    sign = "-" if s.startswith("-") else ""
    digits = s.lstrip("+-").lstrip()
    return float(f"{sign}0.{digits}")


def _epoch_to_datetime(year: int, day_of_year: float) -> datetime:
    """Convert a TLE epoch (year + fractional day-of-year) to a datetime."""
    jan1 = datetime(year, 1, 1)
    return jan1 + timedelta(days=day_of_year - 1.0)


def _numeric(field: str) -> str:
    """Return ``field`` unchanged if it only holds TLE numeric characters."""
    bad = set(field) - NUMERIC_FIELD_CHARS
    if bad:
        raise ValueError(f"invalid characters {''.join(sorted(bad))!r} in {field!r}")
    return field
