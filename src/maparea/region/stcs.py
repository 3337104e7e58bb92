"""
region.stcs
===========

Text serialization of sky regions in an STC-S flavoured format.

Examples
--------
One polygon (four corners, degrees)::

    Polygon FK5 83.63808974 22.01833333 ...

Disjoint union of polygons::

    Union FK5 (Polygon ... Polygon ...)

Circle summary (centre and radius in degrees)::

    Circle FK5 83.63000000 22.01000000 0.00833333

Time dependent frames carry their epoch: ``GAPPT(2009-10-05T12:00:00)``.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from maparea.core.model import CircleSummary, FrameLabel

__all__ = [
    "frame_token",
    "format_polygon",
    "format_union",
    "format_circle",
]


def frame_token(frame: FrameLabel) -> str:
    return str(frame)


def _fmt(value: float, decimals: int) -> str:
    return f"{value:.{decimals}f}"


def _strip_closed(ra: np.ndarray, dec: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    if ra.size >= 4 and np.isclose(ra[0], ra[-1]) and np.isclose(dec[0], dec[-1]):
        return ra[:-1], dec[:-1]
    return ra, dec


def _polygon_body(
    ra_deg: Sequence[float],
    dec_deg: Sequence[float],
    decimals: int,
    frame: Optional[FrameLabel] = None,
) -> str:
    ra = np.mod(np.asarray(ra_deg, dtype=float), 360.0)
    dec = np.asarray(dec_deg, dtype=float)
    ra, dec = _strip_closed(ra, dec)
    coords = " ".join(
        f"{_fmt(a, decimals)} {_fmt(d, decimals)}" for a, d in zip(ra, dec)
    )
    if frame is not None:
        return f"Polygon {frame_token(frame)} {coords}"
    return f"Polygon {coords}"


def format_polygon(
    frame: FrameLabel,
    ra_deg: Sequence[float],
    dec_deg: Sequence[float],
    decimals: int = 8,
) -> str:
    """Serialize one polygon given its vertices in degrees."""
    return _polygon_body(ra_deg, dec_deg, decimals, frame)


def format_union(
    frame: FrameLabel,
    polygons: Iterable[Tuple[Sequence[float], Sequence[float]]],
    decimals: int = 8,
) -> str:
    """Serialize polygons as a single ``Polygon`` or a ``Union`` of them."""
    polys = list(polygons)
    if not polys:
        raise ValueError("cannot serialize an empty region")
    if len(polys) == 1:
        ra, dec = polys[0]
        return format_polygon(frame, ra, dec, decimals)
    bodies = " ".join(_polygon_body(ra, dec, decimals) for ra, dec in polys)
    return f"Union {frame_token(frame)} ({bodies})"


def format_circle(circle: CircleSummary, decimals: int = 8) -> str:
    ra = math.degrees(circle.ra) % 360.0
    dec = math.degrees(circle.dec)
    radius = math.degrees(circle.radius)
    return (
        f"Circle {frame_token(circle.frame_label)} "
        f"{_fmt(ra, decimals)} {_fmt(dec, decimals)} {_fmt(radius, decimals)}"
    )
