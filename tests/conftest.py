from __future__ import annotations

import math

import pytest

# ---------- Shared fixtures ----------


class IdentityResolver:
    """Coordinate resolver that only converts degrees to radians."""

    def __init__(self):
        self.calls = []

    def resolve_equatorial(self, c1, c2, frame):
        self.calls.append(("equatorial", frame))
        return math.radians(c1), math.radians(c2)

    def resolve_galactic(self, lon, lat):
        self.calls.append(("galactic", None))
        return math.radians(lon), math.radians(lat)

    def resolve_apparent(self, ra, dec, epoch):
        self.calls.append(("apparent", epoch))
        return math.radians(ra), math.radians(dec)


@pytest.fixture
def resolver() -> IdentityResolver:
    return IdentityResolver()


@pytest.fixture
def crab_header() -> dict:
    """60x60 arcsec J2000 map centred on the Crab nebula."""
    return {
        "BASEC1": 83.63,
        "BASEC2": 22.01,
        "MAP_X": 0,
        "MAP_Y": 0,
        "MAP_PA": 0,
        "MAP_HGHT": 60,
        "MAP_WDTH": 60,
        "TRACKSYS": "J2000",
    }


