"""Observation geometry for satellite states.

Time conversions, observer position/velocity in the inertial frame,
topocentric look angles, the geodetic sub-satellite point and the
footprint/orbit-number conventions used by the tracking state.

All positions are in the TEME frame produced by SGP4. Angles are in
radians unless the name says otherwise.

References:
    - Kelso, T.S. "Orbital Coordinate Systems, Part I-III", Satellite
      Times (1995-1996).
    - Hoots, F. & Roehrich, R. (1980). Spacetrack Report #3.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from sgp4.api import jday
from sgp4.earth_gravity import wgs72

XKMPER = wgs72.radiusearthkm
"""Earth equatorial radius, WGS72 (km)."""

FLATTENING = 1.0 / 298.26
"""Earth flattening, WGS72."""

MINUTES_PER_DAY = 1440.0
SECONDS_PER_DAY = 86400.0

OMEGA_E = 1.00273790934
"""Earth rotations per sidereal day."""

AE = 1.0
"""Distance unit of the model (Earth radii)."""

TWO_PI = 2.0 * math.pi

LATITUDE_TOLERANCE = 1e-10
MAX_LATITUDE_ITERATIONS = 50


@dataclass(frozen=True)
class Geodetic:
    """Geodetic position; lat/lon in radians, alt in km.

    ``theta`` is the local sidereal time, filled in by
    ``observer_pos_vel``.
    """

    lat: float
    lon: float
    alt: float
    theta: float = 0.0


@dataclass(frozen=True)
class ObsSet:
    """Topocentric observation of a satellite.

    Attributes:
        az: Azimuth in [0, 2π) (rad).
        el: Elevation in [-π/2, π/2] (rad).
        range: Slant range (km).
        range_rate: Range rate, positive when receding (km/s).
        ra: Topocentric right ascension in [0, 2π) (rad).
        dec: Topocentric declination (rad).
    """

    az: float
    el: float
    range: float
    range_rate: float
    ra: float = 0.0
    dec: float = 0.0


# ── Time ──


def julian_date_of_epoch(epoch_year: int, epoch_day: float) -> float:
    """Julian date of a TLE epoch (4-digit year, fractional day of year)."""
    jd, fr = jday(epoch_year, 1, 1, 0, 0, 0.0)
    return jd + fr + epoch_day - 1.0


def theta_g_jd(jd: float) -> float:
    """Greenwich mean sidereal time (rad) at Julian date ``jd``."""
    ut = math.fmod(jd + 0.5, 1.0)
    jd0 = jd - ut
    tu = (jd0 - 2451545.0) / 36525.0
    gmst = 24110.54841 + tu * (8640184.812866 + tu * (0.093104 - tu * 6.2e-6))
    gmst = math.fmod(gmst + SECONDS_PER_DAY * OMEGA_E * ut, SECONDS_PER_DAY)
    if gmst < 0.0:
        gmst += SECONDS_PER_DAY
    return TWO_PI * gmst / SECONDS_PER_DAY


# ── State conversion ──


def convert_sat_state(
    pos: np.ndarray, vel: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """Scale model-native position/velocity to km and km/s."""
    return (
        np.asarray(pos, dtype=float) * XKMPER,
        np.asarray(vel, dtype=float) * XKMPER * MINUTES_PER_DAY / SECONDS_PER_DAY,
    )


def observer_pos_vel(
    jd: float, observer: Geodetic
) -> tuple[np.ndarray, np.ndarray, Geodetic]:
    """Observer ECI position (km) and velocity (km/s) at ``jd``.

    Returns the observer with its local sidereal time filled in as well.
    """
    theta = math.fmod(theta_g_jd(jd) + observer.lon, TWO_PI)
    if theta < 0.0:
        theta += TWO_PI

    sin_lat = math.sin(observer.lat)
    c = 1.0 / math.sqrt(1.0 + FLATTENING * (FLATTENING - 2.0) * sin_lat * sin_lat)
    sq = (1.0 - FLATTENING) ** 2 * c
    achcp = (XKMPER * c + observer.alt) * math.cos(observer.lat)

    pos = np.array(
        [
            achcp * math.cos(theta),
            achcp * math.sin(theta),
            (XKMPER * sq + observer.alt) * sin_lat,
        ]
    )
    mfactor = TWO_PI * OMEGA_E / SECONDS_PER_DAY
    vel = np.array([-mfactor * pos[1], mfactor * pos[0], 0.0])

    located = Geodetic(observer.lat, observer.lon, observer.alt, theta)
    return pos, vel, located


def calculate_obs(
    jd: float, pos: np.ndarray, vel: np.ndarray, observer: Geodetic
) -> ObsSet:
    """Topocentric azimuth, elevation, range and range rate.

    ``pos``/``vel`` are the satellite's ECI state in km and km/s.
    """
    obs_pos, obs_vel, located = observer_pos_vel(jd, observer)

    rng = np.asarray(pos, dtype=float) - obs_pos
    rgvel = np.asarray(vel, dtype=float) - obs_vel
    distance = float(np.linalg.norm(rng))

    sin_lat = math.sin(observer.lat)
    cos_lat = math.cos(observer.lat)
    sin_theta = math.sin(located.theta)
    cos_theta = math.cos(located.theta)

    # South-East-Zenith components
    top_s = (
        sin_lat * cos_theta * rng[0] + sin_lat * sin_theta * rng[1] - cos_lat * rng[2]
    )
    top_e = -sin_theta * rng[0] + cos_theta * rng[1]
    top_z = (
        cos_lat * cos_theta * rng[0] + cos_lat * sin_theta * rng[1] + sin_lat * rng[2]
    )

    az = math.atan2(top_e, -top_s)
    if az < 0.0:
        az += TWO_PI
    el = math.asin(max(-1.0, min(1.0, top_z / distance)))

    ra = math.atan2(rng[1], rng[0])
    if ra < 0.0:
        ra += TWO_PI
    dec = math.asin(max(-1.0, min(1.0, rng[2] / distance)))

    return ObsSet(
        az=az,
        el=el,
        range=distance,
        range_rate=float(np.dot(rng, rgvel)) / distance,
        ra=ra,
        dec=dec,
    )


def calculate_lat_lon_alt(jd: float, pos: np.ndarray) -> Geodetic:
    """Geodetic sub-satellite point for an ECI position (km).

    Longitude is returned in [0, 2π); latitude is found by fixed-point
    iteration on the WGS72 ellipsoid.
    """
    x, y, z = (float(v) for v in pos)

    theta = math.atan2(y, x)
    lon = math.fmod(theta - theta_g_jd(jd), TWO_PI)
    if lon < 0.0:
        lon += TWO_PI

    r = math.hypot(x, y)
    e2 = FLATTENING * (2.0 - FLATTENING)
    lat = math.atan2(z, r)
    c = 1.0

    for _ in range(MAX_LATITUDE_ITERATIONS):
        phi = lat
        sin_phi = math.sin(phi)
        c = 1.0 / math.sqrt(1.0 - e2 * sin_phi * sin_phi)
        lat = math.atan2(z + XKMPER * c * e2 * sin_phi, r)
        if abs(lat - phi) < LATITUDE_TOLERANCE:
            break

    cos_lat = math.cos(lat)
    if abs(cos_lat) > 1e-12:
        alt = r / cos_lat - XKMPER * c
    else:
        # Over a pole the meridian radius degenerates; use z instead.
        alt = abs(z) - XKMPER * c * (1.0 - e2)
    return Geodetic(lat=lat, lon=lon, alt=alt)


def normalize_longitude(lon: float) -> float:
    """Bring a longitude into (-π, π] by repeated full-turn corrections."""
    while lon <= -math.pi:
        lon += TWO_PI
    while lon > math.pi:
        lon -= TWO_PI
    return lon


# ── Derived quantities ──


def footprint(distance: float) -> float:
    """Footprint radius (km) as ``2·R·acos(R/d)`` for geocentric distance d.

    Returns NaN when ``distance`` does not exceed the Earth radius, since
    the satellite then has no horizon.
    """
    if distance <= XKMPER:
        return math.nan
    return 2.0 * XKMPER * math.acos(XKMPER / distance)


def scaled_mean_anomaly(phase: float) -> float:
    """Orbital phase on the 0-256 scale used by tracking displays."""
    return math.degrees(phase) * 256.0 / 360.0


def orbit_number(
    mean_motion: float,
    bstar: float,
    mean_anomaly: float,
    rev_number: int,
    age: float = 0.0,
) -> int:
    """Orbit number ``age`` days after epoch.

    Args:
        mean_motion: Mean motion (rev/day).
        bstar: B* drag term.
        mean_anomaly: Mean anomaly at epoch (rad).
        rev_number: Revolution number at epoch.
        age: Days since epoch.
    """
    revs = (mean_motion + age * bstar * AE) * age + mean_anomaly / TWO_PI
    return int(math.floor(revs)) + rev_number - 1
