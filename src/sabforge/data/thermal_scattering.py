"""
Thermal Scattering Law (S(α,β)) tables.

Builds ScatteringTable objects from HDF5 libraries laid out as:

    /<table name>                 attrs: atomic_weight_ratio, nuclides,
                                         secondary_mode
        kTs/<N>K                  scalar k*T (eV) per stored temperature
        <N>K/elastic/xs           (2, n) energies and values; attr 'type'
        <N>K/elastic/mu_out       (n, n_mu), absent for 'bragg' tables
        <N>K/inelastic/xs         (2, n) energies and cross sections
        <N>K/inelastic/energy_out (n, n_e_out)          equal / skewed
        <N>K/inelastic/mu_out     (n, n_e_out, n_mu)    equal / skewed
        <N>K/inelastic/{energy, energy_out, mu}         continuous

A table is assembled only after every requested temperature has been
parsed, so a failed load never hands back a partial table.

References:
    ENDF-102 Manual, Section 7 (MF7)
    OpenMC documentation, "Thermal Neutron Scattering Data"

Author: sabforge Development Team
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

import h5py

from sabforge.core.constants import DEFAULT_TEMPERATURE_TOLERANCE, KTS_GROUP
from sabforge.core.errors import DataNotFoundError, UnrecognizedFormatError
from sabforge.core.settings import LoaderSettings
from sabforge.data._types import (
    ContinuousEnergyPoint,
    ElasticData,
    ElasticMode,
    InelasticData,
    ScatteringTable,
    SecondaryMode,
    TemperatureData,
)
from sabforge.data.elastic import read_elastic
from sabforge.data.inelastic import read_inelastic
from sabforge.data.temperature import (
    available_temperatures,
    match_temperatures,
)
from sabforge.io.hdf5 import (
    list_groups,
    object_name,
    open_group,
    open_store,
    read_attribute,
    read_scalar,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ContinuousEnergyPoint",
    "ElasticData",
    "ElasticMode",
    "InelasticData",
    "ScatteringTable",
    "SecondaryMode",
    "TemperatureData",
    "secondary_mode_from_tag",
    "table_from_hdf5",
    "list_tables",
    "load_thermal_scattering",
]


def secondary_mode_from_tag(tag: str) -> SecondaryMode:
    """Map the 'secondary_mode' attribute of a table to a SecondaryMode."""
    try:
        return SecondaryMode(tag)
    except ValueError:
        raise UnrecognizedFormatError(
            f"Unrecognized secondary mode '{tag}' (expected 'equal', 'skewed' or 'continuous')"
        ) from None


def _read_nuclides(group: h5py.Group) -> List[str]:
    nuclides = read_attribute(group, "nuclides")
    if isinstance(nuclides, str):
        return [nuclides.strip()]
    return [str(n).strip() for n in nuclides]


def table_from_hdf5(
    group: h5py.Group,
    temperatures: Iterable[float],
    tolerance: float = DEFAULT_TEMPERATURE_TOLERANCE,
    warn_missing_elastic: bool = True,
) -> ScatteringTable:
    """
    Load a thermal scattering table from its HDF5 group.

    Parameters
    ----------
    group : h5py.Group
        Root group of the table, e.g. '/c_H_in_H2O'.
    temperatures : iterable of float
        Requested temperatures in Kelvin.
    tolerance : float
        Largest accepted distance (K) between a requested and a stored
        temperature.
    warn_missing_elastic : bool
        Warn when a temperature has no elastic data.

    Returns
    -------
    ScatteringTable
        Table holding one TemperatureData per selected temperature.

    Raises
    ------
    TemperatureUnavailableError
        If a requested temperature has no stored match within tolerance.
    DataNotFoundError
        If a required group, dataset or attribute is missing.
    UnrecognizedFormatError
        If the secondary mode or elastic type is unknown.
    ShapeMismatchError
        If array dimensions are inconsistent.
    """
    name = object_name(group)
    atomic_weight_ratio = float(read_attribute(group, "atomic_weight_ratio"))
    nuclides = _read_nuclides(group)
    secondary_mode = secondary_mode_from_tag(str(read_attribute(group, "secondary_mode")))

    kT_group = open_group(group, KTS_GROUP)
    available = available_temperatures(kT_group)
    matched = match_temperatures(temperatures, available, tolerance, name)

    data = []
    for temp_str in matched.values():
        kT = read_scalar(kT_group, temp_str)
        T_group = open_group(group, temp_str)
        elastic = read_elastic(T_group, warn_missing=warn_missing_elastic)
        inelastic = read_inelastic(T_group, secondary_mode)
        data.append(TemperatureData(kT=kT, elastic=elastic, inelastic=inelastic))
        logger.debug("%s: parsed %s", name, temp_str)

    table = ScatteringTable(
        name=name,
        atomic_weight_ratio=atomic_weight_ratio,
        nuclides=frozenset(nuclides),
        secondary_mode=secondary_mode,
        data=tuple(data),
    )
    logger.info(
        "Loaded %s (%s) at %s K",
        name, secondary_mode.value, ", ".join(f"{t:.1f}" for t in table.temperatures_K),
    )
    return table


def list_tables(path: Union[str, Path]) -> List[str]:
    """Names of the tables (root groups) in an HDF5 library file."""
    with open_store(path) as f:
        return list_groups(f)


def load_thermal_scattering(
    path: Union[str, Path],
    temperatures: Iterable[float],
    name: Optional[str] = None,
    tolerance: Optional[float] = None,
    settings: Optional[LoaderSettings] = None,
) -> ScatteringTable:
    """
    Load a thermal scattering table from an HDF5 library file.

    Parameters
    ----------
    path : str or Path
        HDF5 library file.
    temperatures : iterable of float
        Requested temperatures in Kelvin.
    name : str, optional
        Table name. May be omitted when the file holds a single table.
    tolerance : float, optional
        Temperature tolerance in K; defaults to the settings value.
    settings : LoaderSettings, optional
        Loader settings; defaults to LoaderSettings().

    Returns
    -------
    ScatteringTable
        Loaded table.
    """
    settings = settings or LoaderSettings()
    if tolerance is None:
        tolerance = settings.temperature_tolerance
    temperatures = list(temperatures)

    with open_store(path) as f:
        if name is None:
            names = list_groups(f)
            if len(names) != 1:
                raise DataNotFoundError(
                    f"{path} holds {len(names)} tables ({', '.join(names) or 'none'}); "
                    "specify which one to load"
                )
            name = names[0]
        group = open_group(f, name.lstrip("/"))
        logger.debug("Loading %s from %s", name, path)
        return table_from_hdf5(
            group,
            temperatures,
            tolerance=tolerance,
            warn_missing_elastic=settings.warn_missing_elastic,
        )
