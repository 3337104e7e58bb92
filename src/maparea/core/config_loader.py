from __future__ import annotations

"""
config_loader.py
================

Runtime configuration for footprint computation and the CLI.

A TOML file may define any of the ``MapAreaConfig`` fields at top level or
inside a ``[maparea]`` table. ``--set key=value`` overrides are applied last.

Example::

    # maparea.toml
    verbose = false
    strict_tracksys = true
    apparent_input = "apparent"
    decimals = 6
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterable, Optional

try:
    import tomllib as toml  # py311+
except ImportError:
    import tomli as toml  # fallback for older envs

from .coords import APPARENT_INPUTS

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MapAreaConfig:
    # Enable DEBUG logging in the CLI.
    verbose: bool = False
    # Reject TRACKSYS values outside J2000/B1950/APP/GAL instead of
    # treating them as J2000.
    strict_tracksys: bool = False
    # How BASEC1/BASEC2 are read for TRACKSYS=APP: "apparent" or "mean".
    apparent_input: str = "apparent"
    # Decimal places for angles in region text output.
    decimals: int = 8

    def __post_init__(self) -> None:
        if self.apparent_input not in APPARENT_INPUTS:
            raise ValueError(
                f"apparent_input must be one of {APPARENT_INPUTS}, "
                f"got {self.apparent_input!r}"
            )
        if self.decimals < 0:
            raise ValueError("decimals must be >= 0")


def load_toml(path: str) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return toml.load(f)


def parse_scalar(s: str):
    sl = s.lower()
    if sl in ("true", "false"):
        return sl == "true"
    try:
        if "." in s:
            return float(s)
        return int(s)
    except ValueError:
        return s


def apply_sets(cfg: Dict[str, Any], sets: Iterable[str]) -> Dict[str, Any]:
    for item in sets:
        if "=" not in item:
            raise ValueError(f"--set requires key=value, got: {item}")
        key, val = item.split("=", 1)
        path = key.strip().split(".")
        cursor = cfg
        for p in path[:-1]:
            if p not in cursor or not isinstance(cursor[p], dict):
                cursor[p] = {}
            cursor = cursor[p]
        cursor[path[-1]] = parse_scalar(val.strip())
    return cfg


def config_from_dict(data: Dict[str, Any]) -> MapAreaConfig:
    """Build a ``MapAreaConfig``; unknown keys are logged and ignored."""
    section = dict(data)
    nested = section.pop("maparea", None)
    if isinstance(nested, dict):
        section.update(nested)

    known = {f.name for f in fields(MapAreaConfig)}
    values: Dict[str, Any] = {}
    for key, value in section.items():
        attr = key.replace("-", "_")
        if attr not in known:
            log.warning("Unknown config key ignored: %s", key)
            continue
        values[attr] = value
    return replace(MapAreaConfig(), **values)


def load_config(
    path: Optional[str] = None,
    set_overrides: Iterable[str] = (),
) -> MapAreaConfig:
    """
    Load configuration from an optional TOML file plus ``--set`` overrides.

    Raises
    ------
    FileNotFoundError
        If ``path`` is given but does not exist.
    ValueError
        If the TOML is invalid or a value fails validation.
    """
    data: Dict[str, Any] = {}
    if path:
        try:
            data = load_toml(path)
        except toml.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML config: {path}\n{e}") from e
        log.debug("Loaded config: %s", path)
    data = apply_sets(data, set_overrides)
    return config_from_dict(data)


__all__ = [
    "MapAreaConfig",
    "load_toml",
    "parse_scalar",
    "apply_sets",
    "config_from_dict",
    "load_config",
]
