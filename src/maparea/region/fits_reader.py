from __future__ import annotations

"""
fits_reader.py
==============

Read observation headers from FITS files.

The primary HDU header is the primary header; the headers of all extension
HDUs become subheaders, searched in file order when the primary lacks a key.
"""

from pathlib import Path
from typing import Union

from astropy.io import fits

from maparea.core.header import FitsHeader


def read_fits_header(path: Union[str, Path]) -> FitsHeader:
    """
    Return a ``FitsHeader`` for the file at ``path``.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    OSError
        If the file is not a readable FITS file.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with fits.open(path) as hdul:
        primary = hdul[0].header.copy()
        extensions = [hdu.header.copy() for hdu in hdul[1:]]
    return FitsHeader(primary, extensions)


__all__ = ["read_fits_header"]
