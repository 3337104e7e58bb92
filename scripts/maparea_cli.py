#!/usr/bin/env python3
"""
Compute the requested map area of one or more observations.

For each input FITS file the driver reads the headers (primary HDU plus
extension HDUs as subheaders), computes the map footprint, OR-combines it
with the footprints of the previous files and finally prints the combined
region to standard output.

-------------------------------------------------------------------------------
Command-line usage examples
-------------------------------------------------------------------------------
1) Region of a single observation:
   python scripts/maparea_cli.py obs_0001.fits

2) Union of several observations:
   python scripts/maparea_cli.py obs_0001.fits obs_0002.fits obs_0003.fits

3) Circular summaries instead of polygons (one line per file):
   python scripts/maparea_cli.py --circle obs_0001.fits obs_0002.fits

4) Reject unknown TRACKSYS values and print 5 decimals:
   python scripts/maparea_cli.py --set strict_tracksys=true --set decimals=5 \
       obs_0001.fits

5) Options from a TOML file, with debug logging:
   python scripts/maparea_cli.py --config maparea.toml --verbose obs_0001.fits

-------------------------------------------------------------------------------
Input / output conventions
-------------------------------------------------------------------------------
- Headers used: BASEC1, BASEC2, MAP_X, MAP_Y, MAP_PA, MAP_HGHT, MAP_WDTH,
  TRACKSYS, DATE-OBS.
- Output: STC-S flavoured text (``Polygon FK5 ...``, ``Union FK5 (...)``,
  ``Circle FK5 ...``), angles in degrees.
- Any error on a file aborts the run with ``[ERROR] <file>: <message>`` and
  a non-zero exit status; no combined region is printed.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from maparea.core.config_loader import MapAreaConfig, load_config
from maparea.core.coords import AstropyResolver
from maparea.core.errors import MapAreaError
from maparea.core.footprint import compute_footprint
from maparea.region.builder import SkyRegion, build_region
from maparea.region.fits_reader import read_fits_header
from maparea.region.stcs import format_circle
from maparea.version import __version__

log = logging.getLogger("maparea_cli")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="maparea_cli",
        description="Print the requested map area of observations as a region.",
    )
    p.add_argument("files", nargs="+", metavar="FILE", help="Input FITS files.")
    p.add_argument(
        "--circle",
        action="store_true",
        help="Print a circular summary per file instead of the combined polygon.",
    )
    p.add_argument("--config", help="TOML configuration file.")
    p.add_argument(
        "--set",
        action="append",
        default=[],
        help="Override config key=value (repeatable).",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return p


def _init_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    logging.captureWarnings(True)


def _load_config(args: argparse.Namespace) -> MapAreaConfig:
    try:
        return load_config(args.config, args.set)
    except (OSError, ValueError, TypeError) as e:
        raise SystemExit(f"[ERROR] configuration: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    cfg = _load_config(args)
    _init_logging(args.verbose or cfg.verbose)
    resolver = AstropyResolver(apparent_input=cfg.apparent_input)

    combined: Optional[SkyRegion] = None
    total = len(args.files)
    for idx, fname in enumerate(args.files, start=1):
        try:
            header = read_fits_header(fname)
            result = compute_footprint(header, resolver, cfg)
            log.info("%d/%d: %s -> %s", idx, total, fname, result.frame_label)
            if args.circle:
                print(format_circle(result.to_circle(), cfg.decimals))
                continue
            region = build_region(result)
            combined = region if combined is None else combined | region
        except (MapAreaError, OSError) as e:
            raise SystemExit(f"[ERROR] {fname}: {e}")

    if combined is not None:
        print(combined.to_stcs(cfg.decimals))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
