"""Material-to-table name lookup for thermal scattering libraries.

Material definitions name the moderator (water, graphite, ...) while
HDF5 libraries name their tables after the bound nuclide and its host
(``c_H_in_H2O``). This module maps one onto the other so a caller can
find which table to load for a material.

References
----------
    ENDF/B-VIII.0 thermal scattering sublibrary
    OpenMC data library naming conventions
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class TSLEntry:
    """A known thermal scattering table.

    Attributes
    ----------
    table_name : str
        Table (root group) name in an OpenMC-style HDF5 library
    material : str
        Canonical material name
    nuclides : tuple of str
        Nuclides the table applies to
    description : str
        Human-readable description
    """

    table_name: str
    material: str
    nuclides: Tuple[str, ...]
    description: str = ""


TSL_TABLES: Dict[str, TSLEntry] = {
    entry.material: entry
    for entry in (
        TSLEntry("c_H_in_H2O", "H2O", ("H1",), "Hydrogen bound in light water"),
        TSLEntry("c_D_in_D2O", "D2O", ("H2",), "Deuterium bound in heavy water"),
        TSLEntry("c_O_in_D2O", "O_in_D2O", ("O16", "O17", "O18"), "Oxygen bound in heavy water"),
        TSLEntry("c_Graphite", "graphite", ("C0", "C12", "C13"), "Carbon in crystalline graphite"),
        TSLEntry("c_Be", "Be", ("Be9",), "Beryllium metal"),
        TSLEntry("c_Be_in_BeO", "BeO", ("Be9",), "Beryllium bound in beryllium oxide"),
        TSLEntry("c_O_in_BeO", "O_in_BeO", ("O16", "O17", "O18"), "Oxygen bound in beryllium oxide"),
        TSLEntry("c_H_in_ZrH", "ZrH", ("H1",), "Hydrogen bound in zirconium hydride"),
        TSLEntry("c_Zr_in_ZrH", "Zr_in_ZrH", ("Zr90", "Zr91", "Zr92", "Zr94", "Zr96"),
                 "Zirconium bound in zirconium hydride"),
        TSLEntry("c_H_in_CH2", "polyethylene", ("H1",), "Hydrogen bound in polyethylene"),
        TSLEntry("c_Benzine", "benzene", ("H1", "C0", "C12", "C13"), "Hydrogen and carbon in benzene"),
        TSLEntry("c_H_in_CH4_liquid", "liquid_methane", ("H1",), "Hydrogen in liquid methane"),
        TSLEntry("c_H_in_CH4_solid", "solid_methane", ("H1",), "Hydrogen in solid methane"),
        TSLEntry("c_O_in_UO2", "O_in_UO2", ("O16", "O17", "O18"), "Oxygen bound in uranium dioxide"),
        TSLEntry("c_U_in_UO2", "UO2", ("U235", "U238"), "Uranium bound in uranium dioxide"),
        TSLEntry("c_Al27", "Al", ("Al27",), "Aluminum metal"),
        TSLEntry("c_Fe56", "Fe", ("Fe56",), "Iron metal"),
    )
}

_ALIASES = {
    "water": "H2O",
    "light_water": "H2O",
    "light water": "H2O",
    "lwtr": "H2O",
    "heavy_water": "D2O",
    "heavy water": "D2O",
    "hwtr": "D2O",
    "carbon": "graphite",
    "grph": "graphite",
    "beryllium": "Be",
    "beryllia": "BeO",
    "beryllium_oxide": "BeO",
    "zirconium_hydride": "ZrH",
    "hzr": "ZrH",
    "poly": "polyethylene",
    "ch2": "polyethylene",
    "benz": "benzene",
    "aluminum": "Al",
    "aluminium": "Al",
    "iron": "Fe",
    "uranium_dioxide": "UO2",
}


def get_tsl_entry(material: str) -> Optional[TSLEntry]:
    """
    Find the thermal scattering table registered for a material.

    Parameters
    ----------
    material : str
        Material name or alias (e.g. "H2O", "water", "graphite"), or a
        table name ("c_H_in_H2O").

    Returns
    -------
    TSLEntry or None
        Registered table, None if the material is unknown.
    """
    key = material.strip()
    if key in TSL_TABLES:
        return TSL_TABLES[key]

    lowered = key.lower()
    for entry in TSL_TABLES.values():
        if entry.material.lower() == lowered or entry.table_name.lower() == lowered:
            return entry

    canonical = _ALIASES.get(lowered)
    if canonical is not None:
        return TSL_TABLES.get(canonical)
    return None


def table_name_for_material(material: str) -> Optional[str]:
    """Table name to load for ``material``, or None if unknown."""
    entry = get_tsl_entry(material)
    return None if entry is None else entry.table_name


def requires_thermal_scattering(nuclide: str) -> bool:
    """True if some registered table applies to ``nuclide`` (e.g. "H1")."""
    return any(nuclide in entry.nuclides for entry in TSL_TABLES.values())
