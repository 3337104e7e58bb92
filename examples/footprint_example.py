"""
footprint_example.py
====================

Purpose
-------
Minimal example showing how to compute the requested map area of two
observations from their headers and combine them into a single region.

What this example does
----------------------
1) Computes the footprint of a rotated 5x3 arcmin map on the Crab nebula.
2) Prints its corners (degrees) and its circular summary.
3) Builds a region for it and for a second, offset map and prints the union.

Usage
-----
Run the example:

    python examples/footprint_example.py
"""

import math

from maparea.core.footprint import compute_footprint, footprint_radius
from maparea.region.builder import build_region, region_from_header

header = {
    "BASEC1": 83.63,
    "BASEC2": 22.01,
    "MAP_X": 0.0,
    "MAP_Y": 0.0,
    "MAP_PA": 30.0,
    "MAP_HGHT": 180.0,
    "MAP_WDTH": 300.0,
    "TRACKSYS": "J2000",
}

# 1) Footprint.
result = compute_footprint(header)

# 2) Corners and circle.
print(f"Frame: {result.frame_label}")
for i, (ra, dec) in enumerate(result.corner_positions, start=1):
    print(f"Corner {i}: RA={math.degrees(ra):.6f} Dec={math.degrees(dec):.6f}")
ra, dec, radius = footprint_radius(header)
print(f"Circle: RA={math.degrees(ra):.6f} Dec={math.degrees(dec):.6f} "
      f"r={math.degrees(radius) * 3600.0:.1f} arcsec")

# 3) Union with a second map, offset along both map axes.
first = build_region(result)
second = region_from_header(dict(header, MAP_X=120.0, MAP_Y=45.0))
print((first | second).to_stcs(decimals=6))
