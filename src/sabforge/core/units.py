"""Temperature unit conversions."""

from __future__ import annotations

from sabforge.core.constants import K_BOLTZMANN


def kelvin_from_kT(kT: float) -> float:
    """Convert a thermal energy kT in eV to a temperature in Kelvin."""
    return kT / K_BOLTZMANN


def kT_from_kelvin(temperature_K: float) -> float:
    """Convert a temperature in Kelvin to kT in eV."""
    return temperature_K * K_BOLTZMANN


def nearest_integer(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's round() uses banker's rounding, which would map 293.5 K and
    294.5 K onto the same key.
    """
    if value >= 0:
        return int(value + 0.5)
    return -int(-value + 0.5)
