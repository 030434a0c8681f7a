"""Constants, errors and settings shared across sabforge."""

from sabforge.core.constants import DEFAULT_TEMPERATURE_TOLERANCE, K_BOLTZMANN
from sabforge.core.errors import (
    DataNotFoundError,
    MissingOptionalSectionWarning,
    SabError,
    ShapeMismatchError,
    TemperatureUnavailableError,
    UnrecognizedFormatError,
)
from sabforge.core.settings import LoaderSettings
from sabforge.core.units import kelvin_from_kT, kT_from_kelvin, nearest_integer

__all__ = [
    "DEFAULT_TEMPERATURE_TOLERANCE",
    "K_BOLTZMANN",
    "DataNotFoundError",
    "MissingOptionalSectionWarning",
    "SabError",
    "ShapeMismatchError",
    "TemperatureUnavailableError",
    "UnrecognizedFormatError",
    "LoaderSettings",
    "kelvin_from_kT",
    "kT_from_kelvin",
    "nearest_integer",
]
