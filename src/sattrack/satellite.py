"""Satellite tracking state and observer location."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Optional

import numpy as np

from .classifier import OrbitType
from .propagator import EphemerisModel
from .tle_parser import ElementSet

DERIVED_FIELDS = (
    "jul_epoch",
    "jul_utc",
    "tsince",
    "az",
    "el",
    "range",
    "range_rate",
    "ra",
    "dec",
    "ssplat",
    "ssplon",
    "alt",
    "velo",
    "ma",
    "footprint",
    "phase",
    "aos",
    "los",
)
"""Scalar fields computed by initialization and zeroed by ``reset``."""


@dataclass(frozen=True)
class Observer:
    """Ground observer location.

    Attributes:
        lat: Geodetic latitude, north positive (degrees).
        lon: Longitude, east positive (degrees).
        alt: Altitude above the ellipsoid (meters).
        name: Optional station name.
    """

    lat: float = 0.0
    lon: float = 0.0
    alt: float = 0.0
    name: str = ""

    @classmethod
    def reference(cls) -> Observer:
        """The fixed location used when no observer is given."""
        return cls(0.0, 0.0, 0.0, name="reference")


@dataclass
class Satellite:
    """Mutable tracking state of one satellite.

    Derived fields are meaningless unless ``initialized`` is True.

    Attributes:
        tle: Element record the state was built from.
        ephemeris: Selected propagation model variant.
        pos: Position vector (km, TEME).
        vel: Velocity vector (km/s, TEME).
        jul_epoch: Julian date of the element set epoch.
        jul_utc: Julian date the state refers to.
        tsince: Minutes since epoch.
        az, el: Azimuth and elevation (degrees).
        range: Slant range (km).
        range_rate: Range rate (km/s).
        ra, dec: Topocentric right ascension and declination (degrees).
        ssplat, ssplon: Sub-satellite point latitude and longitude (degrees).
        alt: Altitude above the ellipsoid (km).
        velo: Speed (km/s).
        ma: Mean anomaly on the 0-256 phase scale.
        footprint: Footprint radius (km).
        phase: Orbital phase (radians).
        orbit: Orbit number.
        otype: Orbit classification.
        aos, los: Next acquisition/loss of signal (Julian date), 0 if unknown.
    """

    tle: Optional[ElementSet] = None
    ephemeris: Optional[EphemerisModel] = None
    pos: np.ndarray = field(default_factory=lambda: np.zeros(3))
    vel: np.ndarray = field(default_factory=lambda: np.zeros(3))

    jul_epoch: float = 0.0
    jul_utc: float = 0.0
    tsince: float = 0.0
    az: float = 0.0
    el: float = 0.0
    range: float = 0.0
    range_rate: float = 0.0
    ra: float = 0.0
    dec: float = 0.0
    ssplat: float = 0.0
    ssplon: float = 0.0
    alt: float = 0.0
    velo: float = 0.0
    ma: float = 0.0
    footprint: float = 0.0
    phase: float = 0.0
    aos: float = 0.0
    los: float = 0.0
    orbit: int = 0
    otype: OrbitType = OrbitType.UNKNOWN
    initialized: bool = False

    @property
    def name(self) -> str:
        if self.tle is None:
            return ""
        return self.tle.name or f"#{self.tle.catnum}"

    @property
    def catnum(self) -> Optional[int]:
        return self.tle.catnum if self.tle is not None else None

    def reset(self) -> None:
        """Zero every derived field and clear the model selection."""
        for name in DERIVED_FIELDS:
            setattr(self, name, 0.0)
        self.pos = np.zeros(3)
        self.vel = np.zeros(3)
        self.orbit = 0
        self.otype = OrbitType.UNKNOWN
        self.ephemeris = None
        self.initialized = False

    def to_dict(self) -> dict:
        """Flatten the state for DataFrame construction."""
        row = {
            "catnum": self.catnum,
            "name": self.name,
            "ephemeris": self.ephemeris.value if self.ephemeris else None,
        }
        for f in fields(self):
            if f.name in DERIVED_FIELDS:
                row[f.name] = getattr(self, f.name)
        row.update(
            {
                "x_km": float(self.pos[0]),
                "y_km": float(self.pos[1]),
                "z_km": float(self.pos[2]),
                "vx_km_s": float(self.vel[0]),
                "vy_km_s": float(self.vel[1]),
                "vz_km_s": float(self.vel[2]),
                "orbit": self.orbit,
                "otype": self.otype.name,
            }
        )
        return row
