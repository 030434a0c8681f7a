"""Exception and warning types raised while loading thermal scattering data."""

from __future__ import annotations

from typing import Optional

from sabforge.core.units import nearest_integer


class SabError(Exception):
    """Base class for errors raised by sabforge."""
    pass


class DataNotFoundError(SabError):
    """A required group, dataset or attribute is absent from the store."""
    pass


class TemperatureUnavailableError(DataNotFoundError):
    """No stored temperature lies within tolerance of a requested one.

    Attributes
    ----------
    table_name : str
        Name of the thermal scattering table being loaded
    temperature : float
        Requested temperature in Kelvin
    tolerance : float or None
        Tolerance in Kelvin that was applied
    """

    def __init__(self, table_name: str, temperature: float, tolerance: Optional[float] = None):
        self.table_name = table_name
        self.temperature = temperature
        self.tolerance = tolerance
        message = (
            f"Nuclear data library does not contain cross sections for "
            f"{table_name or '<unnamed table>'} at or near {nearest_integer(temperature)} K."
        )
        if tolerance is not None:
            message += f" (tolerance {tolerance:g} K)"
        super().__init__(message)


class UnrecognizedFormatError(SabError, ValueError):
    """A tag or code in the store has a value the reader does not know."""
    pass


class ShapeMismatchError(SabError, ValueError):
    """Array dimensions or ordering disagree with the expected layout."""
    pass


class MissingOptionalSectionWarning(UserWarning):
    """An optional section (e.g. elastic data) is absent; loading continues."""
    pass
