from __future__ import annotations

"""
coords.py
=========

Coordinate-conversion collaborator backed by ``astropy.coordinates``.

The footprint calculator only needs the base position as (ra, dec) radians
in the frame matching TRACKSYS. ``AstropyResolver`` provides it:

- ``resolve_equatorial(c1, c2, "FK5")``: mean J2000 RA/Dec, no conversion.
- ``resolve_equatorial(c1, c2, "FK4")``: mean B1950 RA/Dec, kept in B1950.
- ``resolve_galactic(l, b)``: Galactic to FK5 J2000.
- ``resolve_apparent(ra, dec, epoch)``: geocentric apparent place (TETE) at
  a single epoch. With ``apparent_input="apparent"`` the header values are
  already the apparent place; with ``"mean"`` they are FK5 J2000 and are
  transformed to the apparent place of date.
"""

import logging
from typing import Tuple

import astropy.units as u
from astropy.coordinates import FK4, FK5, TETE, Galactic, SkyCoord
from astropy.time import Time

from .errors import InvalidFieldError

log = logging.getLogger(__name__)

APPARENT_INPUTS = ("apparent", "mean")

_EQUATORIAL_FRAMES = {
    "FK5": lambda: FK5(equinox="J2000"),
    "FK4": lambda: FK4(equinox="B1950"),
}


def _sky_coord(c1: float, c2: float, frame, lon: str = "ra", lat: str = "dec") -> SkyCoord:
    """Build a SkyCoord from header degrees; bad values become InvalidFieldError."""
    try:
        return SkyCoord(**{lon: c1 * u.deg, lat: c2 * u.deg}, frame=frame)
    except ValueError as e:
        raise InvalidFieldError("BASEC2", c2, str(e)) from e


def parse_epoch(epoch: str) -> Time:
    """Parse a DATE-OBS style timestamp as a UTC ``Time``."""
    text = str(epoch).strip()
    if text.endswith("Z"):
        text = text[:-1]
    try:
        return Time(text, scale="utc")
    except ValueError as e:
        raise InvalidFieldError("DATE-OBS", epoch, "not an ISO 8601 timestamp") from e


class AstropyResolver:
    """``CoordinateResolver`` implementation using astropy frames."""

    def __init__(self, apparent_input: str = "apparent"):
        if apparent_input not in APPARENT_INPUTS:
            raise ValueError(
                f"apparent_input must be one of {APPARENT_INPUTS}, got {apparent_input!r}"
            )
        self.apparent_input = apparent_input

    def resolve_equatorial(self, c1: float, c2: float, frame: str) -> Tuple[float, float]:
        try:
            make_frame = _EQUATORIAL_FRAMES[frame.upper()]
        except KeyError:
            raise ValueError(f"Unsupported equatorial frame: {frame}") from None
        sc = _sky_coord(c1, c2, make_frame())
        return float(sc.ra.rad), float(sc.dec.rad)

    def resolve_galactic(self, lon: float, lat: float) -> Tuple[float, float]:
        gal = _sky_coord(lon, lat, Galactic(), lon="l", lat="b")
        eq = gal.transform_to(FK5(equinox="J2000"))
        log.debug("Galactic (%.6f, %.6f) -> FK5 (%.6f, %.6f) deg",
                  lon, lat, eq.ra.deg, eq.dec.deg)
        return float(eq.ra.rad), float(eq.dec.rad)

    def resolve_apparent(self, ra: float, dec: float, epoch: str) -> Tuple[float, float]:
        obstime = parse_epoch(epoch)
        frame = TETE(obstime=obstime)
        if self.apparent_input == "mean":
            mean = _sky_coord(ra, dec, FK5(equinox="J2000"))
            app = mean.transform_to(frame)
            log.debug("FK5 (%.6f, %.6f) -> apparent (%.6f, %.6f) deg at %s",
                      ra, dec, app.ra.deg, app.dec.deg, obstime.isot)
        else:
            app = _sky_coord(ra, dec, frame)
        return float(app.ra.rad), float(app.dec.rad)


__all__ = ["APPARENT_INPUTS", "AstropyResolver", "parse_epoch"]
