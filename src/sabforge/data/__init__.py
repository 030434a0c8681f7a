"""sabforge data module: S(α,β) table model, readers and name lookup."""

from sabforge.data.correlated import (
    AngularDistribution,
    AngularKind,
    CorrelatedAngleEnergy,
    OutgoingDistribution,
)
from sabforge.data.elastic import elastic_mode_from_tag, read_elastic
from sabforge.data.inelastic import (
    angular_grid_size,
    convert_correlated,
    read_inelastic,
    to_energy_point,
)
from sabforge.data.temperature import (
    available_temperatures,
    match_temperatures,
    resolve_temperatures,
)
from sabforge.data.thermal_scattering import (
    ContinuousEnergyPoint,
    ElasticData,
    ElasticMode,
    InelasticData,
    ScatteringTable,
    SecondaryMode,
    TemperatureData,
    list_tables,
    load_thermal_scattering,
    secondary_mode_from_tag,
    table_from_hdf5,
)
from sabforge.data.tsl_names import (
    TSL_TABLES,
    TSLEntry,
    get_tsl_entry,
    requires_thermal_scattering,
    table_name_for_material,
)

__all__ = [
    # Correlated angle-energy distributions
    'AngularDistribution',
    'AngularKind',
    'CorrelatedAngleEnergy',
    'OutgoingDistribution',
    # Per-temperature readers
    'elastic_mode_from_tag',
    'read_elastic',
    'angular_grid_size',
    'convert_correlated',
    'read_inelastic',
    'to_energy_point',
    # Temperature selection
    'available_temperatures',
    'match_temperatures',
    'resolve_temperatures',
    # Table model and loader
    'ContinuousEnergyPoint',
    'ElasticData',
    'ElasticMode',
    'InelasticData',
    'ScatteringTable',
    'SecondaryMode',
    'TemperatureData',
    'list_tables',
    'load_thermal_scattering',
    'secondary_mode_from_tag',
    'table_from_hdf5',
    # Material lookup
    'TSL_TABLES',
    'TSLEntry',
    'get_tsl_entry',
    'requires_thermal_scattering',
    'table_name_for_material',
]
