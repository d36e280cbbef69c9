"""Boundary to the SGP4/SDP4 propagation model.

The propagation mathematics itself is supplied by the ``sgp4`` library.
This module owns the two decisions the rest of the package depends on:

    1. Which model variant applies to an element set (near-earth SGP4 or
       deep-space SDP4), decided from the recovered mean motion exactly
       as the model's own initialization does.
    2. The unit convention at the boundary: positions come back in Earth
       radii and velocities in Earth radii per minute, the native units
       of the model as published in Spacetrack Report #3.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import numpy as np
from sgp4.api import WGS72, Satrec
from sgp4.earth_gravity import wgs72

from .orbit_tools import MINUTES_PER_DAY, TWO_PI, julian_date_of_epoch
from .tle_parser import ElementSet

logger = logging.getLogger(__name__)

DEEP_SPACE_PERIOD_MIN = 225.0
"""Orbital period at or above which the deep-space model is used (minutes)."""

XKE = wgs72.xke
"""sqrt(GM) in Earth radii^1.5 per minute."""

CK2 = 0.5 * wgs72.j2
"""Second gravitational zonal harmonic times ae²/2."""

SGP4_EPOCH_JD = 2433281.5
"""Julian date of 1949 December 31 00:00 UT, the model's epoch origin."""


class PropagationError(RuntimeError):
    """Raised when the propagation model cannot produce a state."""


class EphemerisModel(Enum):
    """Propagation model variant."""

    NEAR_EARTH = "SGP4"
    DEEP_SPACE = "SDP4"

    @property
    def sgp4_method(self) -> str:
        """Method letter used by the ``sgp4`` library for this variant."""
        return "d" if self is EphemerisModel.DEEP_SPACE else "n"


@dataclass(frozen=True)
class PropagationResult:
    """Raw propagator output in model-native units.

    Attributes:
        position: Position vector (Earth radii).
        velocity: Velocity vector (Earth radii per minute).
        phase: Orbital phase (mean anomaly) at the requested time (radians).
    """

    position: np.ndarray
    velocity: np.ndarray
    phase: float


class Propagator(Protocol):
    def propagate(
        self, tle: ElementSet, model: EphemerisModel, tsince: float
    ) -> PropagationResult:
        ...


def recovered_mean_motion(tle: ElementSet) -> float:
    """Brouwer mean motion recovered from the Kozai mean motion (rad/min)."""
    xno = tle.mean_motion * 2.0 * math.pi / 1440.0
    incl = math.radians(tle.inclination)

    a1 = (XKE / xno) ** (2.0 / 3.0)
    cosio = math.cos(incl)
    beta0 = (1.0 - tle.eccentricity * tle.eccentricity) ** 1.5
    temp = 1.5 * CK2 * (3.0 * cosio * cosio - 1.0) / beta0
    del1 = temp / (a1 * a1)
    ao = a1 * (1.0 - del1 * (0.5 * 2.0 / 3.0 + del1 * (1.0 + 134.0 / 81.0 * del1)))
    delo = temp / (ao * ao)
    return xno / (1.0 + delo)


def select_ephemeris(tle: ElementSet) -> EphemerisModel:
    """Choose the model variant for an element set.

    Orbits with a period of 225 minutes or more use the deep-space model.
    """
    period = 2.0 * math.pi / recovered_mean_motion(tle)
    if period >= DEEP_SPACE_PERIOD_MIN:
        return EphemerisModel.DEEP_SPACE
    return EphemerisModel.NEAR_EARTH


class Sgp4Propagator:
    """Propagator backed by the ``sgp4`` library (WGS72 constants)."""

    def __init__(self):
        self._radius = wgs72.radiusearthkm

    def _satrec(self, tle: ElementSet) -> Satrec:
        """Initialize the model from the element set's own fields."""
        epoch = julian_date_of_epoch(tle.epoch_year, tle.epoch_day) - SGP4_EPOCH_JD
        satrec = Satrec()
        try:
            satrec.sgp4init(
                WGS72,
                "i",
                tle.catnum,
                epoch,
                tle.bstar,
                tle.mean_motion_dot * TWO_PI / MINUTES_PER_DAY**2,
                tle.mean_motion_ddot * TWO_PI / MINUTES_PER_DAY**3,
                tle.eccentricity,
                math.radians(tle.arg_perigee),
                math.radians(tle.inclination),
                math.radians(tle.mean_anomaly),
                tle.mean_motion * TWO_PI / MINUTES_PER_DAY,
                math.radians(tle.raan),
            )
        except (TypeError, ValueError) as exc:
            raise PropagationError(
                f"Cannot initialize model for #{tle.catnum}: {exc}"
            ) from exc
        return satrec

    def propagate(
        self, tle: ElementSet, model: EphemerisModel, tsince: float
    ) -> PropagationResult:
        """Propagate ``tle`` to ``tsince`` minutes after its epoch.

        Raises:
            PropagationError: If the library chose a different variant
                than ``model`` or reported an error code.
        """
        satrec = self._satrec(tle)
        if satrec.method != model.sgp4_method:
            raise PropagationError(
                f"Model mismatch for #{tle.catnum}: selected {model.value}, "
                f"library initialized method '{satrec.method}'"
            )

        error, r_km, v_kms = satrec.sgp4_tsince(tsince)
        if error != 0:
            raise PropagationError(f"SGP4 error code {error} for #{tle.catnum}")

        position = np.array(r_km, dtype=float) / self._radius
        velocity = np.array(v_kms, dtype=float) * 60.0 / self._radius
        phase = float(np.mod(satrec.mm, 2.0 * np.pi))
        logger.debug("Propagated #%d with %s to tsince=%.3f", tle.catnum, model.value, tsince)
        return PropagationResult(position=position, velocity=velocity, phase=phase)
