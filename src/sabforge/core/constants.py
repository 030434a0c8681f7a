"""Physical constants and store tags shared by the S(α,β) readers.

Values are module-level and never mutated at runtime.
"""

from __future__ import annotations

# Boltzmann constant in eV/K (CODATA 2018)
K_BOLTZMANN = 8.617333262e-5

# Default temperature tolerance in K
DEFAULT_TEMPERATURE_TOLERANCE = 10.0

# Attribute values of 'secondary_mode' on a table group
SECONDARY_MODE_TAGS = ("equal", "skewed", "continuous")

# Attribute values of 'type' on an elastic cross section dataset
ELASTIC_TYPE_TAGS = ("tab1", "bragg")

# Interpolation codes used by tabulated distributions (ENDF convention)
INTERPOLATION_SCHEME = {
    1: "histogram",
    2: "linear-linear",
    3: "linear-log",
    4: "log-linear",
    5: "log-log",
}

# Group and dataset names inside a table group
KTS_GROUP = "kTs"
ELASTIC_GROUP = "elastic"
INELASTIC_GROUP = "inelastic"
XS_DATASET = "xs"
MU_OUT_DATASET = "mu_out"
ENERGY_OUT_DATASET = "energy_out"
