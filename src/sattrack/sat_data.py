"""Reading satellites from the catalog and initializing their epoch state.

``read_satellite`` is the entry point used by trackers: it locates the
catalog file for a catalog number, scans it, validates the element set
and computes the state at epoch. ``initialize_epoch_state`` can also be
called on its own to (re)compute the epoch state of a satellite that
already carries an element set, e.g. after the observer moved.

Example:
    >>> sat = Satellite()
    >>> status = read_satellite(25544, sat, config=CatalogConfig("~/tle"))
    >>> if status is ReadStatus.OK:
    ...     print(sat.ssplat, sat.ssplon, sat.footprint)
"""

from __future__ import annotations

import logging
import math
from enum import Enum, IntEnum, auto
from typing import Optional

import numpy as np

from .catalog import CatalogIndex, ScanStatus, scan_catalog
from .classifier import classify_orbit
from .config import CatalogConfig
from .orbit_tools import (
    Geodetic,
    calculate_lat_lon_alt,
    calculate_obs,
    convert_sat_state,
    footprint,
    julian_date_of_epoch,
    normalize_longitude,
    orbit_number,
    scaled_mean_anomaly,
)
from .propagator import PropagationError, Propagator, Sgp4Propagator, select_ephemeris
from .satellite import Observer, Satellite

logger = logging.getLogger(__name__)


class ReadStatus(IntEnum):
    """Result of ``read_satellite``."""

    OK = 0
    NOT_FOUND = 1
    INVALID_DATA = 2
    FILE_UNREADABLE = 3


class InitStatus(Enum):
    """Result of ``initialize_epoch_state``."""

    OK = auto()
    PRECONDITION_VIOLATION = auto()


_SCAN_TO_READ = {
    ScanStatus.NOT_FOUND: ReadStatus.NOT_FOUND,
    ScanStatus.INVALID_DATA: ReadStatus.INVALID_DATA,
    ScanStatus.FILE_UNREADABLE: ReadStatus.FILE_UNREADABLE,
}


def read_satellite(
    catnum: int,
    sat: Satellite,
    config: Optional[CatalogConfig] = None,
    index: Optional[CatalogIndex] = None,
    observer: Optional[Observer] = None,
    propagator: Optional[Propagator] = None,
) -> ReadStatus:
    """Read the element set of ``catnum`` into ``sat`` and initialize it.

    Args:
        catnum: Catalog number of the satellite.
        sat: State to populate. On any status other than OK its derived
            fields are left zeroed.
        config: Catalog location; defaults to ``CatalogConfig.from_env()``.
        index: Catalog number to file name lookup; built from ``config``
            when omitted.
        observer: Observer for the topocentric fields.
        propagator: Propagation model; defaults to ``Sgp4Propagator``.

    Returns:
        ReadStatus.OK on success, otherwise the failure code.

    Raises:
        ValueError: If ``sat`` is None.
    """
    if sat is None:
        raise ValueError("read_satellite requires a Satellite instance")

    config = config or CatalogConfig.from_env()
    index = index if index is not None else CatalogIndex.build(config)

    filename = index.locate(catnum)
    if filename is None:
        logger.error("Can not find #%d in any catalog file", catnum)
        sat.reset()
        return ReadStatus.NOT_FOUND

    result = scan_catalog(config.path_for(filename), catnum)
    if result.status is not ScanStatus.FOUND:
        if result.status is ScanStatus.NOT_FOUND:
            logger.error("#%d not found in %s", catnum, result.path)
        sat.reset()
        return _SCAN_TO_READ[result.status]

    logger.debug("Good data for #%d", catnum)
    sat.tle = result.tle
    try:
        initialize_epoch_state(sat, observer, propagator)
    except PropagationError as exc:
        logger.error("Cannot compute epoch state of #%d: %s", catnum, exc)
        sat.reset()
        return ReadStatus.INVALID_DATA

    return ReadStatus.OK


def initialize_epoch_state(
    sat: Satellite,
    observer: Optional[Observer] = None,
    propagator: Optional[Propagator] = None,
) -> InitStatus:
    """Compute the state of ``sat`` at its element set epoch (tsince = 0).

    Args:
        sat: Satellite carrying a validated element set.
        observer: Observer location; the (0, 0, 0) reference when omitted.
        propagator: Propagation model; defaults to ``Sgp4Propagator``.

    Returns:
        InitStatus.OK, or PRECONDITION_VIOLATION if ``sat`` is None or has
        no element set.

    Raises:
        PropagationError: If the model cannot produce a state; the state
            is reset before the error propagates.
    """
    if sat is None or sat.tle is None:
        logger.error("Cannot initialize epoch state: no satellite or element set")
        return InitStatus.PRECONDITION_VIOLATION

    tle = sat.tle
    propagator = propagator or Sgp4Propagator()

    # Stale values from an earlier initialization must not survive.
    sat.reset()
    sat.ephemeris = select_ephemeris(tle)

    jul_utc = julian_date_of_epoch(tle.epoch_year, tle.epoch_day)
    sat.jul_epoch = jul_utc
    sat.jul_utc = jul_utc
    sat.tsince = 0.0

    if observer is None:
        obs_geodetic = Geodetic(lat=0.0, lon=0.0, alt=0.0)
    else:
        obs_geodetic = Geodetic(
            lat=math.radians(observer.lat),
            lon=math.radians(observer.lon),
            alt=observer.alt / 1000.0,
        )

    try:
        raw = propagator.propagate(tle, sat.ephemeris, 0.0)
    except PropagationError:
        sat.reset()
        raise
    sat.phase = raw.phase

    pos, vel = convert_sat_state(raw.position, raw.velocity)
    sat.pos = pos
    sat.vel = vel
    sat.velo = float(np.linalg.norm(vel))

    obs_set = calculate_obs(jul_utc, pos, vel, obs_geodetic)
    sat_geodetic = calculate_lat_lon_alt(jul_utc, pos)
    ssplon = normalize_longitude(sat_geodetic.lon)

    sat.az = math.degrees(obs_set.az)
    sat.el = math.degrees(obs_set.el)
    sat.range = obs_set.range
    sat.range_rate = obs_set.range_rate
    sat.ra = math.degrees(obs_set.ra)
    sat.dec = math.degrees(obs_set.dec)
    sat.ssplat = math.degrees(sat_geodetic.lat)
    sat.ssplon = math.degrees(ssplon)
    sat.alt = sat_geodetic.alt
    sat.ma = scaled_mean_anomaly(sat.phase)

    distance = float(np.linalg.norm(pos))
    sat.footprint = footprint(distance)
    if math.isnan(sat.footprint):
        logger.warning(
            "#%d is at %.1f km from the geocenter, inside the Earth; footprint undefined",
            tle.catnum,
            distance,
        )

    age = 0.0
    sat.orbit = orbit_number(
        tle.mean_motion,
        tle.bstar,
        math.radians(tle.mean_anomaly),
        tle.rev_number,
        age,
    )
    sat.otype = classify_orbit(tle, jul_utc, distance)
    sat.initialized = True

    logger.debug(
        "Initialized #%d: %s, lat %.2f lon %.2f alt %.1f km",
        tle.catnum,
        sat.ephemeris.value,
        sat.ssplat,
        sat.ssplon,
        sat.alt,
    )
    return InitStatus.OK
