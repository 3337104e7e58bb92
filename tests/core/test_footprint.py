from __future__ import annotations

import math
import warnings

import numpy as np
import pytest
from hypothesis import given, settings, HealthCheck, strategies as st

from maparea.core.config_loader import MapAreaConfig
from maparea.core.coords import AstropyResolver
from maparea.core.errors import (
    InvalidFieldError,
    MissingEpochError,
    MissingFieldError,
    UnknownTrackingSystemError,
    UnrecognizedTrackingSystemWarning,
)
from maparea.core.footprint import (
    REQUIRED_FIELDS,
    compute_footprint,
    corner_offsets,
    footprint_radius,
    read_map_geometry,
    resolve_frame_label,
)
from maparea.core.model import FrameLabel, MapGeometry
from maparea.core.projection import AS2R, sphere_to_tangent


# --- Local helpers (avoid function-scoped fixtures in @given tests) ---


def _shoelace_area(xs, ys) -> float:
    n = len(xs)
    s = 0.0
    for i in range(n):
        j = (i + 1) % n
        s += xs[i] * ys[j] - xs[j] * ys[i]
    return abs(s) / 2.0


def _size():
    return st.floats(min_value=1.0, max_value=3600.0, allow_nan=False, allow_infinity=False)


def _offset():
    return st.floats(
        min_value=-3600.0, max_value=3600.0, allow_nan=False, allow_infinity=False
    )


def _pa():
    return st.floats(min_value=-360.0, max_value=360.0, allow_nan=False, allow_infinity=False)


_HEADER_STRAT = st.fixed_dictionaries(
    {
        "BASEC1": st.floats(min_value=0.0, max_value=359.999, allow_nan=False),
        "BASEC2": st.floats(min_value=-80.0, max_value=80.0, allow_nan=False),
        "MAP_X": _offset(),
        "MAP_Y": _offset(),
        "MAP_PA": _pa(),
        "MAP_HGHT": _size(),
        "MAP_WDTH": _size(),
        "TRACKSYS": st.just("J2000"),
    }
)

_RESOLVER = AstropyResolver()


# ---------- Geometry ----------


def test_zero_pa_corners_are_unrotated():
    geom = MapGeometry(
        base_c1=10.0, base_c2=20.0, map_x=0.0, map_y=0.0,
        map_pa=0.0, map_height=40.0, map_width=100.0,
    )
    off = corner_offsets(geom)
    assert off.tolist() == [[50.0, 20.0], [50.0, -20.0], [-50.0, -20.0], [-50.0, 20.0]]


def test_zero_pa_centre_offset_is_added():
    geom = MapGeometry(
        base_c1=10.0, base_c2=20.0, map_x=5.0, map_y=-3.0,
        map_pa=0.0, map_height=40.0, map_width=100.0,
    )
    off = corner_offsets(geom)
    assert off.tolist() == [[55.0, 17.0], [55.0, -23.0], [-45.0, -23.0], [-45.0, 17.0]]


def test_pa_90_rotates_clockwise_in_plane():
    geom = MapGeometry(
        base_c1=0.0, base_c2=0.0, map_x=10.0, map_y=0.0,
        map_pa=90.0, map_height=60.0, map_width=120.0,
    )
    off = corner_offsets(geom)
    # rot = -90 deg: (x, y) -> (y, -x)
    expected = np.array([[30.0, -60.0], [-30.0, -60.0], [-30.0, 60.0], [30.0, 60.0]])
    expected += np.array([0.0, -10.0])
    np.testing.assert_allclose(off, expected, atol=1e-9)


@settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.too_slow])
@given(hdr=_HEADER_STRAT)
def test_rotation_preserves_area(hdr):
    res = compute_footprint(hdr, _RESOLVER)
    xi, eta = sphere_to_tangent(
        np.array(res.corner_ra), np.array(res.corner_dec), res.base_ra, res.base_dec
    )
    area = _shoelace_area(xi / AS2R, eta / AS2R)
    assert area == pytest.approx(hdr["MAP_WDTH"] * hdr["MAP_HGHT"], rel=1e-6)


@settings(max_examples=50, deadline=None)
@given(hdr=_HEADER_STRAT, tracksys=st.sampled_from(["J2000", "B1950", "GAL"]))
def test_equivalent_radius_is_exact(hdr, tracksys):
    hdr = dict(hdr, TRACKSYS=tracksys)
    res = compute_footprint(hdr, _RESOLVER)
    assert res.equivalent_radius == math.sqrt(hdr["MAP_WDTH"] * hdr["MAP_HGHT"]) / 2


def test_centre_of_corners_is_base_position(resolver):
    hdr = {
        "BASEC1": 201.365, "BASEC2": -43.019, "MAP_X": 0, "MAP_Y": 0,
        "MAP_PA": 0, "MAP_HGHT": 600, "MAP_WDTH": 1200, "TRACKSYS": "J2000",
    }
    res = compute_footprint(hdr, resolver)
    ra, dec = res.center()
    assert ra == pytest.approx(res.base_ra, abs=1e-10)
    assert dec == pytest.approx(res.base_dec, abs=1e-10)


def test_crab_scenario(crab_header):
    res = compute_footprint(crab_header)
    assert res.frame_label == FrameLabel("FK5")
    assert res.equivalent_radius == 30.0
    assert math.degrees(res.base_ra) == pytest.approx(83.63, abs=1e-9)
    assert math.degrees(res.base_dec) == pytest.approx(22.01, abs=1e-9)
    assert len(res.corner_positions) == 4

    half_deg = 30.0 / 3600.0
    cos_dec = math.cos(math.radians(22.01))
    signs = [(1, 1), (1, -1), (-1, -1), (-1, 1)]
    for (ra, dec), (sx, sy) in zip(res.corner_positions, signs):
        assert math.degrees(dec) == pytest.approx(22.01 + sy * half_deg, abs=5e-6)
        assert math.degrees(ra) == pytest.approx(83.63 + sx * half_deg / cos_dec, abs=5e-6)


# ---------- Validation ----------


@pytest.mark.parametrize("key", [k for k, _ in REQUIRED_FIELDS])
def test_missing_required_field(crab_header, key):
    del crab_header[key]
    with pytest.raises(MissingFieldError, match=key) as excinfo:
        compute_footprint(crab_header)
    assert excinfo.value.field == key


def test_required_fields_can_come_from_subheaders(crab_header, resolver):
    sub = {"MAP_PA": crab_header.pop("MAP_PA"), "MAP_WDTH": crab_header.pop("MAP_WDTH")}
    crab_header["SUBHEADERS"] = [{"UNRELATED": 1}, sub]
    res = compute_footprint(crab_header, resolver)
    assert res.equivalent_radius == 30.0


def test_app_requires_date_obs(crab_header):
    crab_header["TRACKSYS"] = "APP"
    with pytest.raises(MissingEpochError):
        compute_footprint(crab_header)


def test_app_with_date_obs_succeeds(crab_header):
    crab_header["TRACKSYS"] = "app"
    crab_header["DATE-OBS"] = "2009-10-05T12:00:00"
    res = compute_footprint(crab_header)
    assert res.frame_label == FrameLabel("GAPPT", "2009-10-05T12:00:00")
    assert math.degrees(res.base_ra) == pytest.approx(83.63, abs=1e-9)


def test_app_date_obs_from_subheader(crab_header, resolver):
    crab_header["TRACKSYS"] = "APP"
    crab_header["SUBHEADERS"] = [{"DATE-OBS": "2009-10-05T12:00:00"}]
    res = compute_footprint(crab_header, resolver)
    assert ("apparent", "2009-10-05T12:00:00") in resolver.calls
    assert res.frame_label.epoch == "2009-10-05T12:00:00"


def test_missing_tracksys_defaults_to_j2000_with_warning(crab_header):
    expected = compute_footprint(crab_header)
    del crab_header["TRACKSYS"]
    with pytest.warns(UnrecognizedTrackingSystemWarning, match="J2000"):
        res = compute_footprint(crab_header)
    assert res == expected


def test_unknown_tracksys_lenient_and_strict(crab_header):
    crab_header["TRACKSYS"] = "AZEL"
    with pytest.warns(UnrecognizedTrackingSystemWarning, match="AZEL"):
        res = compute_footprint(crab_header)
    assert res.frame_label.system == "FK5"

    with pytest.raises(UnknownTrackingSystemError):
        compute_footprint(crab_header, config=MapAreaConfig(strict_tracksys=True))


def test_known_tracksys_does_not_warn(crab_header):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compute_footprint(crab_header)


def test_non_numeric_field(crab_header):
    crab_header["MAP_HGHT"] = "wide"
    with pytest.raises(InvalidFieldError, match="MAP_HGHT"):
        compute_footprint(crab_header)


# ---------- Tracking systems ----------


@pytest.mark.parametrize(
    "tracksys, call",
    [
        ("J2000", ("equatorial", "FK5")),
        ("B1950", ("equatorial", "FK4")),
        ("GAL", ("galactic", None)),
        ("GALACTIC", ("galactic", None)),
    ],
)
def test_base_position_dispatch(crab_header, resolver, tracksys, call):
    crab_header["TRACKSYS"] = tracksys
    compute_footprint(crab_header, resolver)
    assert resolver.calls == [call]


def test_galactic_centre_resolves_to_fk5(crab_header):
    crab_header.update(BASEC1=0.0, BASEC2=0.0, TRACKSYS="GAL")
    res = compute_footprint(crab_header)
    assert math.degrees(res.base_ra) == pytest.approx(266.405, abs=1e-3)
    assert math.degrees(res.base_dec) == pytest.approx(-28.936, abs=1e-3)
    assert res.frame_label == FrameLabel("GALACTIC")


def test_b1950_is_kept_in_fk4(crab_header):
    crab_header["TRACKSYS"] = "B1950"
    res = compute_footprint(crab_header)
    assert math.degrees(res.base_ra) == pytest.approx(83.63, abs=1e-9)
    assert res.frame_label == FrameLabel("FK4")


@pytest.mark.parametrize(
    "tracksys, system",
    [("J2000", "FK5"), ("B1950", "FK4"), ("GAL", "GALACTIC"), ("XYZ", "FK5")],
)
def test_resolve_frame_label(tracksys, system):
    label = resolve_frame_label(tracksys, "2009-10-05T12:00:00")
    assert label.system == system
    assert label.epoch is None


def test_read_map_geometry_uppercases(crab_header):
    crab_header["TRACKSYS"] = " b1950 "
    geom = read_map_geometry(crab_header)
    assert geom.tracksys == "B1950"
    assert geom.map_width == 60.0


def test_footprint_radius(crab_header):
    ra, dec, radius = footprint_radius(crab_header)
    assert math.degrees(ra) == pytest.approx(83.63)
    assert math.degrees(dec) == pytest.approx(22.01)
    assert radius == pytest.approx(30.0 * AS2R)


@pytest.mark.parametrize("key", ["MAP_HGHT", "MAP_WDTH"])
def test_negative_map_size(crab_header, key):
    crab_header[key] = -60
    with pytest.raises(InvalidFieldError, match=key) as excinfo:
        compute_footprint(crab_header)
    assert excinfo.value.field == key


def test_zero_map_size_is_allowed(crab_header, resolver):
    crab_header["MAP_WDTH"] = 0
    res = compute_footprint(crab_header, resolver)
    assert res.equivalent_radius == 0.0


def test_latitude_out_of_range(crab_header):
    crab_header["BASEC2"] = 95.0
    with pytest.raises(InvalidFieldError, match="BASEC2"):
        compute_footprint(crab_header)


def test_galactic_corners_are_fk5_positions(crab_header):
    crab_header.update(BASEC1=0.0, BASEC2=0.0, TRACKSYS="GAL")
    res = compute_footprint(crab_header)
    for ra, dec in res.corner_positions:
        assert math.degrees(ra) == pytest.approx(266.405, abs=0.02)
        assert math.degrees(dec) == pytest.approx(-28.936, abs=0.02)
