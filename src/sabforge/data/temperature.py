"""
Temperature selection for thermal scattering tables.

Libraries store S(α,β) data at a handful of irregularly spaced
temperatures. A caller asks for nominal temperatures; each is matched to
the nearest stored temperature, and accepted only when it lies within a
tolerance. Matches are keyed by integer Kelvin, so two requests landing
on the same stored temperature load it once.

No interpolation between stored temperatures is attempted.

Author: sabforge Development Team
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Sequence

import h5py

from sabforge.core.errors import TemperatureUnavailableError
from sabforge.core.units import kelvin_from_kT, nearest_integer
from sabforge.io.hdf5 import list_datasets, read_scalar

logger = logging.getLogger(__name__)


def available_temperatures(kTs_group: h5py.Group) -> Dict[str, float]:
    """
    Temperatures stored in a table's 'kTs' group.

    Parameters
    ----------
    kTs_group : h5py.Group
        Group holding one scalar dataset of k*T (eV) per temperature,
        named e.g. "294K".

    Returns
    -------
    dict
        Dataset name -> temperature in Kelvin, ordered by increasing
        temperature (ties by name).
    """
    temps = {name: kelvin_from_kT(read_scalar(kTs_group, name)) for name in list_datasets(kTs_group)}
    return dict(sorted(temps.items(), key=lambda item: (item[1], item[0])))


def resolve_temperatures(
    requested: Iterable[float],
    available: Sequence[float],
    tolerance: float,
    table_name: str = "",
) -> List[int]:
    """
    Select the stored temperatures to load.

    Parameters
    ----------
    requested : iterable of float
        Desired temperatures in Kelvin.
    available : sequence of float
        Stored temperatures in Kelvin.
    tolerance : float
        A stored temperature is accepted when it lies strictly closer
        than this to the requested one (K).
    table_name : str
        Used in error messages.

    Returns
    -------
    list of int
        Integer-Kelvin keys of the selected temperatures, sorted and
        free of duplicates.

    Raises
    ------
    TemperatureUnavailableError
        If a requested temperature has no stored match within tolerance.
    ValueError
        If tolerance is negative.
    """
    labelled = {str(i): float(t) for i, t in enumerate(available)}
    return list(match_temperatures(requested, labelled, tolerance, table_name))


def match_temperatures(
    requested: Iterable[float],
    available: Mapping[str, float],
    tolerance: float,
    table_name: str = "",
) -> Dict[int, str]:
    """
    Select the stored temperatures to load, keeping the matched dataset.

    Same selection as ``resolve_temperatures``, but ``available`` maps
    'kTs' dataset names to temperatures and the result maps each
    integer-Kelvin key to the dataset that was actually matched. When
    two requests land on different datasets with the same key, the first
    match is kept.

    Returns
    -------
    dict
        Key -> dataset name, ordered by increasing key.
    """
    if tolerance < 0:
        raise ValueError(f"Temperature tolerance must be non-negative, got {tolerance}")

    candidates = sorted(available.items(), key=lambda item: (item[1], item[0]))
    selected: Dict[int, str] = {}
    for desired in requested:
        desired = float(desired)
        if not candidates:
            raise TemperatureUnavailableError(table_name, desired, tolerance)

        # min() keeps the first of equally close candidates
        name, actual = min(candidates, key=lambda item: abs(item[1] - desired))
        if abs(actual - desired) < tolerance:
            key = nearest_integer(actual)
            selected.setdefault(key, name)
            logger.debug(
                "%s: requested %.2f K -> stored %.2f K (key %dK)",
                table_name, desired, actual, key,
            )
        else:
            raise TemperatureUnavailableError(table_name, desired, tolerance)

    return dict(sorted(selected.items()))
