"""
region.builder
==============

Thin adapter turning footprint corners into sky regions.

Polygons are held by ``spherical_geometry.polygon.SphericalPolygon``, which
also performs the boolean union. ``spherical-geometry`` has no notion of sky
frames, so each ``SkyRegion`` carries its ``FrameLabel`` and refuses to be
combined with a region in another frame.
"""

from __future__ import annotations

import logging
import math
from functools import reduce
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from spherical_geometry.polygon import SphericalPolygon

from maparea.core.config_loader import MapAreaConfig
from maparea.core.errors import IncompatibleFrameError
from maparea.core.footprint import compute_footprint
from maparea.core.model import CoordinateResolver, FootprintResult, FrameLabel

from .stcs import format_union

log = logging.getLogger(__name__)

__all__ = [
    "SkyRegion",
    "build_region",
    "build_region_from_corners",
    "region_from_header",
    "union_regions",
]


class SkyRegion:
    """A spherical polygon (possibly multi-part) in a given sky frame."""

    def __init__(self, frame_label: FrameLabel, polygon: SphericalPolygon):
        self.frame_label = frame_label
        self.polygon = polygon

    def union(self, other: "SkyRegion") -> "SkyRegion":
        """Return the OR-combination of two regions in the same frame."""
        if self.frame_label != other.frame_label:
            raise IncompatibleFrameError(
                f"Cannot combine regions in {self.frame_label} and {other.frame_label}"
            )
        return SkyRegion(self.frame_label, self.polygon.union(other.polygon))

    __or__ = union

    def contains(self, ra: float, dec: float) -> bool:
        """True if the point (radians) lies inside the region."""
        return bool(
            self.polygon.contains_radec(math.degrees(ra), math.degrees(dec), degrees=True)
        )

    def area_sr(self) -> float:
        return float(self.polygon.area())

    def vertices_deg(self) -> List[Tuple[np.ndarray, np.ndarray]]:
        """(ra, dec) vertex arrays in degrees, one pair per polygon part."""
        return list(self.polygon.to_radec())

    def to_stcs(self, decimals: int = 8) -> str:
        return format_union(self.frame_label, self.vertices_deg(), decimals)

    def __str__(self) -> str:
        return self.to_stcs()

    def __repr__(self) -> str:
        parts = len(self.vertices_deg())
        return f"SkyRegion({self.frame_label}, parts={parts})"


def build_region_from_corners(
    frame_label: FrameLabel,
    ras: Sequence[float],
    decs: Sequence[float],
) -> SkyRegion:
    """Build a region from ordered corner coordinates in radians."""
    if len(ras) != len(decs) or len(ras) < 3:
        raise ValueError("need at least three (ra, dec) vertices of equal length")
    ra_deg = np.degrees(np.asarray(ras, dtype=float))
    dec_deg = np.degrees(np.asarray(decs, dtype=float))
    # spherical-geometry expects a closed outline.
    ra_deg = np.append(ra_deg, ra_deg[0])
    dec_deg = np.append(dec_deg, dec_deg[0])
    poly = SphericalPolygon.from_radec(ra_deg, dec_deg, degrees=True)
    return SkyRegion(frame_label, poly)


def build_region(result: FootprintResult) -> SkyRegion:
    return build_region_from_corners(result.frame_label, result.corner_ra, result.corner_dec)


def region_from_header(
    header: Any,
    resolver: Optional[CoordinateResolver] = None,
    config: Optional[MapAreaConfig] = None,
) -> Optional[SkyRegion]:
    """Compute the map area of ``header`` as a region; ``None`` without header."""
    if header is None:
        return None
    region = build_region(compute_footprint(header, resolver, config))
    log.debug("Built region %r", region)
    return region


def union_regions(regions: Iterable[SkyRegion]) -> Optional[SkyRegion]:
    """OR-combine regions in order; ``None`` for an empty input."""
    items = list(regions)
    if not items:
        return None
    return reduce(SkyRegion.union, items)
