from __future__ import annotations

"""
footprint.py
============

Requested map area of an observation, computed from its header.

The map is a rectangle of ``MAP_WDTH`` x ``MAP_HGHT`` arcseconds, centred at
offset ``(MAP_X, MAP_Y)`` from the base position ``(BASEC1, BASEC2)`` and
rotated by ``MAP_PA`` (east of north). Its four corners are computed in the
tangent plane at the base position and deprojected onto the sphere.

Tracking systems
----------------
==========  ===========================================  ===========
TRACKSYS    Base position                                Frame
==========  ===========================================  ===========
J2000       FK5 J2000 RA/Dec                             FK5
B1950       FK4 B1950 RA/Dec                             FK4
APP         geocentric apparent RA/Dec at DATE-OBS       GAPPT
GAL         Galactic l/b converted to FK5 J2000 RA/Dec   GALACTIC
==========  ===========================================  ===========

A missing TRACKSYS is treated as J2000 with a warning. Unknown values are
treated as J2000 with a warning, or rejected when ``strict_tracksys`` is set.

For GAL the corners are deprojected about the FK5 J2000 RA/Dec of the base
position, so GALACTIC-labelled corner positions are FK5 RA/Dec values, not
Galactic longitude/latitude.
"""

import logging
import math
import warnings
from typing import Any, Optional, Tuple

import numpy as np

from .config_loader import MapAreaConfig
from .coords import AstropyResolver
from .errors import (
    InvalidFieldError,
    MissingEpochError,
    MissingFieldError,
    UnknownTrackingSystemError,
    UnrecognizedTrackingSystemWarning,
)
from .header import get_header_value
from .model import CoordinateResolver, FootprintResult, FrameLabel, MapGeometry
from .projection import AS2R, rotate, tangent_to_sphere

log = logging.getLogger(__name__)

# Header key -> MapGeometry attribute, in validation order.
REQUIRED_FIELDS = (
    ("BASEC1", "base_c1"),
    ("BASEC2", "base_c2"),
    ("MAP_X", "map_x"),
    ("MAP_Y", "map_y"),
    ("MAP_PA", "map_pa"),
    ("MAP_HGHT", "map_height"),
    ("MAP_WDTH", "map_width"),
)

TRACK_TO_FRAME = {
    "J2000": "FK5",
    "B1950": "FK4",
    "APP": "GAPPT",
    "GAL": "GALACTIC",
}

_TRACK_ALIASES = {"GALACTIC": "GAL"}

# Unit rectangle corners, fixed order: (+,+), (+,-), (-,-), (-,+).
_CORNER_SIGNS = np.array([[1.0, 1.0], [1.0, -1.0], [-1.0, -1.0], [-1.0, 1.0]])


def _to_float(key: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidFieldError(key, value, "expected a number") from e


def read_map_geometry(header: Any, strict_tracksys: bool = False) -> MapGeometry:
    """
    Read and validate the geometry headers.

    Raises
    ------
    MissingFieldError
        A mandatory header is absent (primary and subheaders).
    MissingEpochError
        TRACKSYS is APP and DATE-OBS is absent.
    UnknownTrackingSystemError
        TRACKSYS is unknown and ``strict_tracksys`` is set.
    """
    values = {}
    for key, attr in REQUIRED_FIELDS:
        raw = get_header_value(header, key)
        if raw is None:
            raise MissingFieldError(key)
        values[attr] = _to_float(key, raw)
        if attr in ("map_height", "map_width") and values[attr] < 0:
            raise InvalidFieldError(key, raw, "must be >= 0")

    raw_track = get_header_value(header, "TRACKSYS")
    if raw_track is None:
        warnings.warn(
            "TRACKSYS not defined; defaulting to J2000",
            UnrecognizedTrackingSystemWarning,
            stacklevel=2,
        )
        tracksys = "J2000"
    else:
        tracksys = str(raw_track).strip().upper()
        tracksys = _TRACK_ALIASES.get(tracksys, tracksys)
        if tracksys not in TRACK_TO_FRAME:
            if strict_tracksys:
                raise UnknownTrackingSystemError(tracksys)
            warnings.warn(
                f"Unknown TRACKSYS {tracksys!r}; treating coordinates as J2000",
                UnrecognizedTrackingSystemWarning,
                stacklevel=2,
            )

    date_obs = get_header_value(header, "DATE-OBS")
    if tracksys == "APP" and date_obs is None:
        raise MissingEpochError()

    return MapGeometry(
        tracksys=tracksys,
        date_obs=None if date_obs is None else str(date_obs),
        **values,
    )


def resolve_frame_label(tracksys: str, date_obs: Optional[str] = None) -> FrameLabel:
    system = TRACK_TO_FRAME.get(tracksys.upper(), "FK5")
    if system == "GAPPT":
        return FrameLabel(system, epoch=date_obs)
    return FrameLabel(system)


def resolve_base_position(
    geom: MapGeometry, resolver: CoordinateResolver
) -> Tuple[float, float]:
    """Return the base position (ra, dec) in radians for ``geom.tracksys``."""
    if geom.tracksys == "GAL":
        return resolver.resolve_galactic(geom.base_c1, geom.base_c2)
    if geom.tracksys == "APP":
        return resolver.resolve_apparent(geom.base_c1, geom.base_c2, geom.date_obs)
    if geom.tracksys == "B1950":
        return resolver.resolve_equatorial(geom.base_c1, geom.base_c2, "FK4")
    return resolver.resolve_equatorial(geom.base_c1, geom.base_c2, "FK5")


def corner_offsets(geom: MapGeometry) -> np.ndarray:
    """
    Tangent-plane offsets [arcsec] of the four map corners, shape (4, 2).

    The position angle in the header is east of north; the planar rotation
    uses the opposite sense, hence the sign flip.
    """
    rot = -1.0 * math.radians(geom.map_pa)
    half = np.array([geom.map_width / 2.0, geom.map_height / 2.0])
    mx, my = (_CORNER_SIGNS * half).T
    mrx, mry = rotate(mx, my, rot)
    rx, ry = rotate(geom.map_x, geom.map_y, rot)
    return np.column_stack([mrx + rx, mry + ry])


def footprint_from_geometry(
    geom: MapGeometry, resolver: Optional[CoordinateResolver] = None
) -> FootprintResult:
    """Compute the footprint of already validated geometry inputs."""
    if resolver is None:
        resolver = AstropyResolver()
    base_ra, base_dec = resolve_base_position(geom, resolver)

    offsets = corner_offsets(geom) * AS2R
    ras, decs = tangent_to_sphere(offsets[:, 0], offsets[:, 1], base_ra, base_dec)
    corners = tuple((float(ra), float(dec)) for ra, dec in zip(ras, decs))

    result = FootprintResult(
        base_ra=float(base_ra),
        base_dec=float(base_dec),
        corner_positions=corners,
        equivalent_radius=math.sqrt(geom.map_width * geom.map_height) / 2.0,
        frame_label=resolve_frame_label(geom.tracksys, geom.date_obs),
    )
    log.debug(
        "Footprint %s: base=(%.6f, %.6f) deg, radius=%.3f arcsec",
        result.frame_label,
        math.degrees(result.base_ra),
        math.degrees(result.base_dec),
        result.equivalent_radius,
    )
    return result


def compute_footprint(
    header: Any,
    resolver: Optional[CoordinateResolver] = None,
    config: Optional[MapAreaConfig] = None,
) -> FootprintResult:
    """
    Compute the requested map area of one observation.

    Parameters
    ----------
    header : HeaderLike, mapping or astropy.io.fits.Header
        Observation header; subheaders are searched for missing keys.
    resolver : CoordinateResolver, optional
        Coordinate conversion backend. Defaults to ``AstropyResolver``
        configured from ``config``.
    config : MapAreaConfig, optional
        Runtime options (strict TRACKSYS handling, APP input convention).
    """
    cfg = config or MapAreaConfig()
    if resolver is None:
        resolver = AstropyResolver(apparent_input=cfg.apparent_input)
    geom = read_map_geometry(header, strict_tracksys=cfg.strict_tracksys)
    return footprint_from_geometry(geom, resolver)


def footprint_radius(
    header: Any,
    resolver: Optional[CoordinateResolver] = None,
    config: Optional[MapAreaConfig] = None,
) -> Tuple[float, float, float]:
    """
    Summarise the footprint as a circle.

    Returns
    -------
    (ra, dec, radius) : tuple of float
        Base position and equivalent radius, all in radians.
    """
    circle = compute_footprint(header, resolver, config).to_circle()
    return circle.ra, circle.dec, circle.radius


__all__ = [
    "REQUIRED_FIELDS",
    "TRACK_TO_FRAME",
    "read_map_geometry",
    "resolve_frame_label",
    "resolve_base_position",
    "corner_offsets",
    "footprint_from_geometry",
    "compute_footprint",
    "footprint_radius",
]
