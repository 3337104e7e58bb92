from __future__ import annotations

"""
projection.py
=============

Planar rotation and gnomonic (tangent-plane) projection helpers.

Tangent-plane coordinates ``(xi, eta)`` are in radians, ``xi`` towards
increasing RA and ``eta`` towards increasing Dec at the tangent point. The
equations are the classical SLALIB ones (``sla_DTP2S`` / ``sla_DS2TP``).
All functions accept scalars or numpy arrays.
"""

import math
from typing import Tuple

import numpy as np

# Arcseconds to radians.
AS2R = math.pi / (180.0 * 3600.0)
TWO_PI = 2.0 * math.pi


def rotate(x, y, rot: float):
    """Rotate ``(x, y)`` counter-clockwise by ``rot`` radians."""
    c = math.cos(rot)
    s = math.sin(rot)
    return x * c - y * s, x * s + y * c


def tangent_to_sphere(xi, eta, ra0: float, dec0: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Deproject tangent-plane offsets onto the sphere.

    Parameters
    ----------
    xi, eta : float or array
        Tangent-plane coordinates [rad].
    ra0, dec0 : float
        Tangent point [rad].

    Returns
    -------
    (ra, dec) : arrays
        Spherical coordinates [rad], ``ra`` normalised to [0, 2pi).
    """
    xi = np.asarray(xi, dtype=float)
    eta = np.asarray(eta, dtype=float)
    sdec = math.sin(dec0)
    cdec = math.cos(dec0)
    denom = cdec - eta * sdec
    ra = np.mod(np.arctan2(xi, denom) + ra0, TWO_PI)
    dec = np.arctan2(sdec + eta * cdec, np.hypot(xi, denom))
    return ra, dec


def sphere_to_tangent(ra, dec, ra0: float, dec0: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Project spherical coordinates onto the tangent plane at ``(ra0, dec0)``.

    Raises
    ------
    ValueError
        If a point lies 90 degrees or more from the tangent point.
    """
    ra = np.asarray(ra, dtype=float)
    dec = np.asarray(dec, dtype=float)
    sdecz = math.sin(dec0)
    cdecz = math.cos(dec0)
    sdec = np.sin(dec)
    cdec = np.cos(dec)
    radif = ra - ra0
    sradif = np.sin(radif)
    cradif = np.cos(radif)
    denom = sdec * sdecz + cdec * cdecz * cradif
    if np.any(denom <= 0.0):
        raise ValueError("point is not on the visible hemisphere of the tangent point")
    xi = cdec * sradif / denom
    eta = (sdec * cdecz - cdec * sdecz * cradif) / denom
    return xi, eta


__all__ = ["AS2R", "rotate", "tangent_to_sphere", "sphere_to_tangent"]
