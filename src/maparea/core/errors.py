"""
errors.py
=========

Exceptions and warnings raised while computing a map footprint.

Every fatal condition aborts a single computation; nothing is retried and no
partial result is returned. The only condition that is corrected on the fly
is a missing (or, in non-strict mode, unknown) ``TRACKSYS``, which emits
``UnrecognizedTrackingSystemWarning`` and falls back to J2000.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "MapAreaError",
    "MissingFieldError",
    "MissingEpochError",
    "InvalidFieldError",
    "UnknownTrackingSystemError",
    "IncompatibleFrameError",
    "UnrecognizedTrackingSystemWarning",
]


class MapAreaError(ValueError):
    """Base class for all footprint computation errors."""


class MissingFieldError(MapAreaError):
    """
    Raised when a mandatory geometry header is absent from the primary header
    and from every subheader.

    The missing header name is available as ``field``.
    """

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Must define {field} to calculate map area")


class MissingEpochError(MapAreaError):
    """Raised when TRACKSYS is APP but DATE-OBS is not available."""

    def __init__(self) -> None:
        super().__init__("When TRACKSYS is APP, DATE-OBS must be defined")


class InvalidFieldError(MapAreaError):
    """Raised when a header value is present but cannot be interpreted."""

    def __init__(self, field: str, value: Any, reason: str = "") -> None:
        self.field = field
        self.value = value
        msg = f"Invalid value for {field}: {value!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class UnknownTrackingSystemError(MapAreaError):
    """Raised in strict mode for a TRACKSYS outside J2000/B1950/APP/GAL."""

    def __init__(self, tracksys: str) -> None:
        self.tracksys = tracksys
        super().__init__(
            f"Unknown TRACKSYS {tracksys!r}; expected one of J2000, B1950, APP, GAL"
        )


class IncompatibleFrameError(MapAreaError):
    """Raised when combining regions defined in different sky frames."""


class UnrecognizedTrackingSystemWarning(UserWarning):
    """TRACKSYS was missing or unknown and J2000 was assumed."""
