import math
from dataclasses import replace

import numpy as np
import pytest

from sattrack.classifier import OrbitType, classify_orbit, decay_epoch, is_decayed, is_geostationary
from sattrack.orbit_tools import (
    XKMPER,
    Geodetic,
    calculate_lat_lon_alt,
    calculate_obs,
    convert_sat_state,
    footprint,
    julian_date_of_epoch,
    normalize_longitude,
    observer_pos_vel,
    orbit_number,
    scaled_mean_anomaly,
    theta_g_jd,
)
from sattrack.propagator import (
    EphemerisModel,
    PropagationError,
    Sgp4Propagator,
    recovered_mean_motion,
    select_ephemeris,
)

J2000 = 2451545.0


class TestTime:
    def test_julian_date_of_epoch(self):
        assert julian_date_of_epoch(2008, 264.51782528) == pytest.approx(
            2454730.01782528, abs=1e-8
        )

    def test_julian_date_day_one(self):
        assert julian_date_of_epoch(2000, 1.5) == pytest.approx(J2000)

    def test_gmst_at_j2000(self):
        assert math.degrees(theta_g_jd(J2000)) == pytest.approx(280.46061837, abs=1e-3)

    def test_gmst_range(self):
        for offset in np.linspace(0.0, 3.0, 13):
            assert 0.0 <= theta_g_jd(J2000 + offset) < 2.0 * math.pi


class TestLongitudeNormalization:
    @pytest.mark.parametrize("base", [-3.0, -1.5, 0.0, 0.25, 2.0, 3.1])
    @pytest.mark.parametrize("turns", [-5, -2, -1, 0, 1, 3, 7])
    def test_any_multiple_of_a_turn(self, base, turns):
        lon = normalize_longitude(base + turns * 2.0 * math.pi)
        assert -math.pi < lon <= math.pi
        assert lon == pytest.approx(base, abs=1e-9)

    def test_boundaries(self):
        assert normalize_longitude(math.pi) == math.pi
        assert normalize_longitude(-math.pi) == pytest.approx(math.pi)


class TestObservation:
    def test_convert_units(self):
        pos, vel = convert_sat_state(np.array([1.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0]))
        assert pos[0] == pytest.approx(XKMPER)
        assert vel[1] == pytest.approx(XKMPER / 60.0)

    def test_observer_on_equator(self):
        pos, vel, located = observer_pos_vel(J2000, Geodetic(0.0, 0.0, 0.0))
        assert np.linalg.norm(pos) == pytest.approx(XKMPER)
        assert located.theta == pytest.approx(theta_g_jd(J2000))
        # Earth rotation speed at the equator, ~0.465 km/s
        assert np.linalg.norm(vel) == pytest.approx(0.465, abs=0.002)

    def test_zenith_pass(self):
        theta = theta_g_jd(J2000)
        direction = np.array([math.cos(theta), math.sin(theta), 0.0])
        sat_pos = direction * (XKMPER + 500.0)
        obs = calculate_obs(J2000, sat_pos, np.zeros(3), Geodetic(0.0, 0.0, 0.0))
        assert math.degrees(obs.el) == pytest.approx(90.0, abs=1e-6)
        assert obs.range == pytest.approx(500.0)

    def test_sub_satellite_point_round_trip(self):
        observer = Geodetic(math.radians(40.0), math.radians(-75.0), 1.2)
        pos, _, _ = observer_pos_vel(J2000 + 0.3, observer)
        geo = calculate_lat_lon_alt(J2000 + 0.3, pos)
        assert geo.lat == pytest.approx(observer.lat, abs=1e-9)
        assert normalize_longitude(geo.lon) == pytest.approx(observer.lon, abs=1e-9)
        assert geo.alt == pytest.approx(1.2, abs=1e-6)

    def test_raw_longitude_range(self):
        geo = calculate_lat_lon_alt(J2000, np.array([-7000.0, -10.0, 100.0]))
        assert 0.0 <= geo.lon < 2.0 * math.pi


class TestDerivedQuantities:
    def test_footprint(self):
        distance = XKMPER + 400.0
        assert footprint(distance) == pytest.approx(
            2.0 * XKMPER * math.acos(XKMPER / distance)
        )

    def test_footprint_non_negative(self):
        for alt in (1e-3, 1.0, 400.0, 35786.0):
            assert footprint(XKMPER + alt) >= 0.0

    @pytest.mark.parametrize("distance", [0.0, XKMPER * 0.5, XKMPER])
    def test_footprint_undefined_inside_earth(self, distance):
        assert math.isnan(footprint(distance))

    def test_scaled_mean_anomaly(self):
        assert scaled_mean_anomaly(math.pi) == pytest.approx(128.0)
        assert scaled_mean_anomaly(0.0) == 0.0

    def test_orbit_number_at_epoch(self):
        n = orbit_number(15.72125391, -0.11606e-4, math.radians(325.0288), 56353)
        assert n == 56352

    def test_orbit_number_one_day_later(self):
        n = orbit_number(15.72125391, -0.11606e-4, math.radians(325.0288), 56353, age=1.0)
        assert n == 56368


class TestEphemerisSelection:
    def test_near_earth(self, iss, polar):
        assert select_ephemeris(iss) is EphemerisModel.NEAR_EARTH
        assert select_ephemeris(polar) is EphemerisModel.NEAR_EARTH

    def test_deep_space(self, geo, molniya):
        assert select_ephemeris(geo) is EphemerisModel.DEEP_SPACE
        assert select_ephemeris(molniya) is EphemerisModel.DEEP_SPACE

    def test_recovered_mean_motion_close_to_kozai(self, iss):
        kozai = iss.mean_motion * 2.0 * math.pi / 1440.0
        assert recovered_mean_motion(iss) == pytest.approx(kozai, rel=1e-3)


class TestSgp4Propagator:
    def test_native_units(self, iss):
        result = Sgp4Propagator().propagate(iss, EphemerisModel.NEAR_EARTH, 0.0)
        # ~6730 km from the geocenter, ~7.7 km/s
        assert np.linalg.norm(result.position) == pytest.approx(6730.0 / XKMPER, rel=0.01)
        assert np.linalg.norm(result.velocity) * XKMPER / 60.0 == pytest.approx(7.7, abs=0.1)
        assert 0.0 <= result.phase < 2.0 * math.pi

    def test_phase_is_mean_anomaly_at_epoch(self, iss):
        result = Sgp4Propagator().propagate(iss, EphemerisModel.NEAR_EARTH, 0.0)
        assert math.degrees(result.phase) == pytest.approx(325.0288, abs=0.01)

    def test_deep_space_geo(self, geo):
        result = Sgp4Propagator().propagate(geo, EphemerisModel.DEEP_SPACE, 0.0)
        assert np.linalg.norm(result.position) * XKMPER == pytest.approx(42164.0, rel=0.01)

    def test_model_mismatch_raises(self, iss):
        with pytest.raises(PropagationError, match="Model mismatch"):
            Sgp4Propagator().propagate(iss, EphemerisModel.DEEP_SPACE, 0.0)

    def test_uses_element_fields(self, iss):
        moved = replace(iss, mean_anomaly=10.0)
        result = Sgp4Propagator().propagate(moved, EphemerisModel.NEAR_EARTH, 0.0)
        assert math.degrees(result.phase) == pytest.approx(10.0, abs=0.01)

    def test_edited_record_selects_deep_space(self, iss):
        gps = replace(iss, mean_motion=2.0056, eccentricity=0.01)
        model = select_ephemeris(gps)
        assert model is EphemerisModel.DEEP_SPACE
        result = Sgp4Propagator().propagate(gps, model, 0.0)
        assert np.linalg.norm(result.position) * XKMPER == pytest.approx(26560.0, rel=0.02)

    def test_record_without_source_lines(self, iss):
        bare = replace(iss, line1="", line2="")
        direct = Sgp4Propagator().propagate(iss, EphemerisModel.NEAR_EARTH, 0.0)
        result = Sgp4Propagator().propagate(bare, EphemerisModel.NEAR_EARTH, 0.0)
        np.testing.assert_allclose(result.position, direct.position)


class TestClassifier:
    def test_leo(self, iss, polar):
        assert classify_orbit(iss) is OrbitType.LEO
        assert classify_orbit(polar) is OrbitType.LEO

    def test_geo(self, geo):
        assert is_geostationary(geo)
        assert classify_orbit(geo) is OrbitType.GEO

    def test_heo(self, molniya):
        assert classify_orbit(molniya) is OrbitType.HEO

    def test_meo(self, iss):
        gps = replace(iss, mean_motion=2.0056, eccentricity=0.01)
        assert classify_orbit(gps) is OrbitType.MEO

    def test_decayed_by_distance(self, iss):
        assert is_decayed(iss, distance=XKMPER - 1.0)
        assert classify_orbit(iss, distance=XKMPER * 0.9) is OrbitType.DECAYED

    def test_decayed_by_mean_motion(self, iss):
        fast = replace(iss, mean_motion=16.9)
        assert decay_epoch(fast) < julian_date_of_epoch(fast.epoch_year, fast.epoch_day)
        assert classify_orbit(fast) is OrbitType.DECAYED

    def test_decay_estimate_in_future(self, iss):
        epoch = julian_date_of_epoch(iss.epoch_year, iss.epoch_day)
        assert decay_epoch(iss) > epoch
        assert is_decayed(iss, jd=decay_epoch(iss) + 1.0)
        assert not is_decayed(iss, jd=epoch)

    def test_no_decay_rate(self, geo):
        still = replace(geo, mean_motion_dot=0.0)
        assert decay_epoch(still) == float("inf")

    def test_past_decay_limit_without_rate(self, iss):
        fast = replace(iss, mean_motion=16.9, mean_motion_dot=0.0)
        assert decay_epoch(fast) == -math.inf
        assert is_decayed(fast)
        assert classify_orbit(fast) is OrbitType.DECAYED

    def test_deterministic(self, molniya):
        assert {classify_orbit(molniya) for _ in range(5)} == {OrbitType.HEO}
