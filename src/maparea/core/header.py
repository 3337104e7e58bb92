from __future__ import annotations

"""
header.py
=========

Header lookup with fallback to subheaders.

An observation header is anything following the ``HeaderLike`` contract:
``get(key)`` returning ``None`` when the key is absent, and ``subheaders()``
returning an ordered list of objects with the same capabilities. Two
adapters are provided:

- ``MappingHeader`` wraps a plain mapping. The special key ``SUBHEADERS``
  holds a list of mappings (or ``HeaderLike`` objects).
- ``FitsHeader`` wraps an ``astropy.io.fits.Header`` and, optionally, the
  headers of the file extensions, used as subheaders.

Lookup policy
-------------
The primary header wins when it defines the key, even with a falsy value
such as ``0`` or ``""``. Otherwise subheaders are searched in order and the
first defined value is returned. Absence is reported as ``None``.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from astropy.io import fits

from .model import HeaderLike

SUBHEADERS_KEY = "SUBHEADERS"


def _defined(value: Any) -> bool:
    return value is not None and not isinstance(value, fits.card.Undefined)


class MappingHeader:
    """``HeaderLike`` view of a mapping of header keys to values."""

    def __init__(self, data: Mapping[str, Any]):
        self._data = data
        subs = data.get(SUBHEADERS_KEY) or []
        self._subs: List[HeaderLike] = [as_header(s) for s in subs]

    def get(self, key: str) -> Optional[Any]:
        if key == SUBHEADERS_KEY:
            return None
        value = self._data.get(key)
        return value if _defined(value) else None

    def subheaders(self) -> Sequence[HeaderLike]:
        return self._subs

    def __repr__(self) -> str:
        return f"MappingHeader({len(self._data)} keys, {len(self._subs)} subheaders)"


class FitsHeader:
    """``HeaderLike`` view of FITS headers (primary plus extensions)."""

    def __init__(
        self,
        primary: fits.Header,
        extensions: Iterable[fits.Header] = (),
    ):
        self._primary = primary
        self._subs: List[HeaderLike] = [FitsHeader(h) for h in extensions]

    def get(self, key: str) -> Optional[Any]:
        value = self._primary.get(key)
        return value if _defined(value) else None

    def subheaders(self) -> Sequence[HeaderLike]:
        return self._subs


def as_header(obj: Any) -> HeaderLike:
    """
    Adapt ``obj`` to the ``HeaderLike`` contract.

    ``astropy.io.fits.Header`` and mappings are wrapped; objects that already
    expose ``get`` and ``subheaders`` are returned unchanged.

    Raises
    ------
    TypeError
        If the object cannot be adapted.
    """
    if isinstance(obj, fits.Header):
        return FitsHeader(obj)
    if hasattr(obj, "subheaders") and hasattr(obj, "get"):
        return obj
    if isinstance(obj, Mapping):
        return MappingHeader(obj)
    raise TypeError(f"Cannot use {type(obj).__name__} as an observation header")


def get_header_value(header: Any, key: str) -> Optional[Any]:
    """Return the value of ``key`` from the primary header or a subheader."""
    hdr = as_header(header)
    value = hdr.get(key)
    if _defined(value):
        return value
    for sub in hdr.subheaders():
        value = sub.get(key)
        if _defined(value):
            return value
    return None


__all__ = [
    "SUBHEADERS_KEY",
    "MappingHeader",
    "FitsHeader",
    "as_header",
    "get_header_value",
]
