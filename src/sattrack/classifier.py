"""Coarse orbit classification."""

from __future__ import annotations

import math
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from .orbit_tools import XKMPER, julian_date_of_epoch

if TYPE_CHECKING:
    from .tle_parser import ElementSet

GEO_MEAN_MOTION = 1.0027
"""Mean motion of a geostationary orbit (rev/day)."""

GEO_TOLERANCE = 0.0002
"""Allowed deviation from ``GEO_MEAN_MOTION`` (rev/day)."""

DECAY_MEAN_MOTION = 16.666666
"""Mean motion at which an object is considered re-entered (rev/day)."""

HEO_ECCENTRICITY = 0.25
LEO_APOGEE_KM = 2000.0
MEO_APOGEE_KM = 35786.0


class OrbitType(Enum):
    """Orbit regime of a tracked object."""

    UNKNOWN = auto()
    LEO = auto()
    MEO = auto()
    GEO = auto()
    HEO = auto()
    DECAYED = auto()


def is_geostationary(tle: ElementSet) -> bool:
    return abs(tle.mean_motion - GEO_MEAN_MOTION) < GEO_TOLERANCE


def decay_epoch(tle: ElementSet) -> float:
    """Rough re-entry date (Julian date) from the mean motion trend.

    Without a decay rate the estimate is minus infinity for an object
    already past the decay mean motion, and plus infinity otherwise.
    """
    epoch = julian_date_of_epoch(tle.epoch_year, tle.epoch_day)
    remaining = DECAY_MEAN_MOTION - tle.mean_motion
    rate = 10.0 * abs(tle.mean_motion_dot)
    if rate == 0.0:
        return -math.inf if remaining < 0.0 else math.inf
    return epoch + remaining / rate


def is_decayed(
    tle: ElementSet,
    jd: Optional[float] = None,
    distance: Optional[float] = None,
) -> bool:
    """Whether the object has (or should have) re-entered by ``jd``.

    Args:
        tle: Element set.
        jd: Evaluation time (Julian date); defaults to the epoch.
        distance: Geocentric distance of the computed state (km).
    """
    if distance is not None and distance <= XKMPER:
        return True
    if tle.perigee_altitude < 0.0:
        return True
    if jd is None:
        jd = julian_date_of_epoch(tle.epoch_year, tle.epoch_day)
    return decay_epoch(tle) < jd


def classify_orbit(
    tle: ElementSet,
    jd: Optional[float] = None,
    distance: Optional[float] = None,
) -> OrbitType:
    """Classify an orbit from its elements and, optionally, a computed state.

    Checks run in order: decayed, geostationary, highly elliptical, then
    by apogee altitude.
    """
    if is_decayed(tle, jd, distance):
        return OrbitType.DECAYED
    if is_geostationary(tle):
        return OrbitType.GEO
    if tle.eccentricity >= HEO_ECCENTRICITY:
        return OrbitType.HEO

    apogee = tle.apogee_altitude
    if apogee < LEO_APOGEE_KM:
        return OrbitType.LEO
    if apogee < MEO_APOGEE_KM:
        return OrbitType.MEO
    return OrbitType.UNKNOWN
