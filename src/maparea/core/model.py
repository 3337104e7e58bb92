from __future__ import annotations

"""
model.py
========
Data models shared by the header accessor, the footprint calculator and the
region builder.

All angles stored on the sky are in radians; map sizes and offsets keep the
header units (arcseconds, degrees for the position angle).
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence, Tuple

# (ra, dec) in radians.
SkyPosition = Tuple[float, float]


class HeaderLike(Protocol):
    """Capability contract for observation metadata containers."""

    def get(self, key: str) -> Optional[Any]: ...

    def subheaders(self) -> Sequence["HeaderLike"]: ...


class CoordinateResolver(Protocol):
    """Turns base pointing coordinates (degrees) into (ra, dec) radians."""

    def resolve_equatorial(self, c1: float, c2: float, frame: str) -> SkyPosition: ...

    def resolve_galactic(self, lon: float, lat: float) -> SkyPosition: ...

    def resolve_apparent(self, ra: float, dec: float, epoch: str) -> SkyPosition: ...


# Geometry inputs read from one observation header.
@dataclass(frozen=True)
class MapGeometry:
    # Base pointing coordinates in degrees (meaning depends on tracksys).
    base_c1: float
    base_c2: float
    # Offset of the map centre from the base position [arcsec].
    map_x: float
    map_y: float
    # Position angle of the map, east of north [deg].
    map_pa: float
    # Map dimensions [arcsec].
    map_height: float
    map_width: float
    # Uppercased tracking system label.
    tracksys: str = "J2000"
    # Observation timestamp, required for APP.
    date_obs: Optional[str] = None


# Sky frame in which corner positions are expressed.
@dataclass(frozen=True)
class FrameLabel:
    # FK5, FK4, GAPPT or GALACTIC.
    system: str
    # Only set for time dependent systems (GAPPT).
    epoch: Optional[str] = None

    def ast_attributes(self) -> str:
        """Return an AST-style attribute string, e.g. ``SYSTEM=FK5``."""
        params = f"SYSTEM={self.system}"
        if self.epoch is not None:
            params += f",EPOCH={self.epoch}"
        return params

    def __str__(self) -> str:
        if self.epoch is not None:
            return f"{self.system}({self.epoch})"
        return self.system


@dataclass(frozen=True)
class CircleSummary:
    """Circular approximation of a footprint."""

    ra: float
    dec: float
    radius: float
    radius_arcsec: float
    frame_label: FrameLabel


@dataclass(frozen=True)
class FootprintResult:
    """
    Requested map area of one observation.

    Attributes
    ----------
    base_ra, base_dec : float
        Resolved base position [rad].
    corner_positions : tuple of (float, float)
        Four (ra, dec) corners [rad], in the order of the rectangle corners
        (+w/2,+h/2), (+w/2,-h/2), (-w/2,-h/2), (-w/2,+h/2) of the rotated map.
    equivalent_radius : float
        ``sqrt(width * height) / 2`` [arcsec].
    frame_label : FrameLabel
        Frame to use when building a region from the corners.
    """

    base_ra: float
    base_dec: float
    corner_positions: Tuple[SkyPosition, SkyPosition, SkyPosition, SkyPosition]
    equivalent_radius: float
    frame_label: FrameLabel

    def __post_init__(self) -> None:
        if len(self.corner_positions) != 4:
            raise ValueError("corner_positions must hold exactly four positions")

    @property
    def corner_ra(self) -> Tuple[float, ...]:
        return tuple(ra for ra, _ in self.corner_positions)

    @property
    def corner_dec(self) -> Tuple[float, ...]:
        return tuple(dec for _, dec in self.corner_positions)

    def center(self) -> SkyPosition:
        """Direction of the vector mean of the four corners, ra in [0, 2pi)."""
        x = y = z = 0.0
        for ra, dec in self.corner_positions:
            x += math.cos(dec) * math.cos(ra)
            y += math.cos(dec) * math.sin(ra)
            z += math.sin(dec)
        ra = math.atan2(y, x) % (2.0 * math.pi)
        dec = math.atan2(z, math.hypot(x, y))
        return ra, dec

    def to_circle(self) -> CircleSummary:
        return CircleSummary(
            ra=self.base_ra,
            dec=self.base_dec,
            radius=math.radians(self.equivalent_radius / 3600.0),
            radius_arcsec=self.equivalent_radius,
            frame_label=self.frame_label,
        )


__all__ = [
    "SkyPosition",
    "HeaderLike",
    "CoordinateResolver",
    "MapGeometry",
    "FrameLabel",
    "CircleSummary",
    "FootprintResult",
]
