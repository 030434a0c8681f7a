"""Data model for loaded S(α,β) tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

import numpy as np

from sabforge.core.constants import DEFAULT_TEMPERATURE_TOLERANCE
from sabforge.core.errors import ShapeMismatchError
from sabforge.core.units import kelvin_from_kT, nearest_integer


class SecondaryMode(Enum):
    """Secondary energy representation of inelastic scattering."""

    EQUAL = "equal"            # Equally-likely outgoing energy bins
    SKEWED = "skewed"          # Skewed outgoing energy bins
    CONTINUOUS = "continuous"  # Tabulated continuous outgoing energies

    @property
    def is_fixed_grid(self) -> bool:
        return self is not SecondaryMode.CONTINUOUS


class ElasticMode(Enum):
    """Representation of elastic scattering."""

    DISCRETE = "tab1"  # Incoherent elastic, discrete cosines tabulated
    EXACT = "bragg"    # Coherent elastic, Bragg edges; cosines derived analytically


def readonly(array: np.ndarray) -> np.ndarray:
    """Return ``array`` as a contiguous float64 array that rejects writes."""
    out = np.array(array, dtype=np.float64, copy=True)
    out.setflags(write=False)
    return out


def _check_increasing(values: np.ndarray, label: str) -> None:
    if values.size > 1 and not np.all(np.diff(values) > 0):
        raise ShapeMismatchError(f"{label} energies must be strictly increasing")


@dataclass(frozen=True)
class ElasticData:
    """
    Elastic scattering data at one temperature.

    Attributes
    ----------
    mode : ElasticMode
        DISCRETE (tabulated cosines) or EXACT (Bragg edges)
    e_in : np.ndarray
        Incoming energies (eV), strictly increasing
    P : np.ndarray
        Cross section (DISCRETE) or cumulative structure factor (EXACT)
    mu : np.ndarray or None
        Outgoing cosines, shape (n_mu, n_e_in); None for EXACT mode
    """

    mode: ElasticMode
    e_in: np.ndarray
    P: np.ndarray
    mu: Optional[np.ndarray] = None

    def __post_init__(self):
        object.__setattr__(self, "e_in", readonly(self.e_in))
        object.__setattr__(self, "P", readonly(self.P))
        if self.e_in.ndim != 1 or self.e_in.shape != self.P.shape:
            raise ShapeMismatchError(
                f"Elastic e_in {self.e_in.shape} and P {self.P.shape} must be parallel 1D arrays"
            )
        if self.e_in.size == 0:
            raise ShapeMismatchError("Elastic cross section table is empty")
        _check_increasing(self.e_in, "Elastic incoming")
        if self.mode is ElasticMode.EXACT:
            if self.mu is not None:
                raise ShapeMismatchError("Exact (Bragg) elastic data carries no tabulated cosines")
        else:
            if self.mu is None:
                raise ShapeMismatchError("Discrete elastic data requires tabulated cosines")
            mu = readonly(self.mu)
            if mu.ndim != 2 or mu.shape[1] != self.n_e_in:
                raise ShapeMismatchError(
                    f"Elastic mu shape {mu.shape} does not match (n_mu, {self.n_e_in})"
                )
            object.__setattr__(self, "mu", mu)

    @property
    def n_e_in(self) -> int:
        return int(self.e_in.size)

    @property
    def n_mu(self) -> int:
        return 0 if self.mu is None else int(self.mu.shape[0])

    @property
    def threshold(self) -> float:
        """Upper energy limit of the elastic data (last incoming energy)."""
        return float(self.e_in[-1])


@dataclass(frozen=True)
class ContinuousEnergyPoint:
    """
    Outgoing energy/angle distribution for one incoming energy
    (continuous secondary energy representation).

    Attributes
    ----------
    e_out : np.ndarray
        Outgoing energies (eV), length n_e_out
    e_out_pdf : np.ndarray
        Probability density at each outgoing energy
    e_out_cdf : np.ndarray
        Cumulative probability at each outgoing energy
    mu : np.ndarray
        Outgoing cosines, shape (n_mu, n_e_out); column j belongs to e_out[j]
    """

    e_out: np.ndarray
    e_out_pdf: np.ndarray
    e_out_cdf: np.ndarray
    mu: np.ndarray

    def __post_init__(self):
        for name in ("e_out", "e_out_pdf", "e_out_cdf", "mu"):
            object.__setattr__(self, name, readonly(getattr(self, name)))
        n = self.e_out.size
        if self.e_out_pdf.shape != (n,) or self.e_out_cdf.shape != (n,):
            raise ShapeMismatchError(
                f"Outgoing pdf {self.e_out_pdf.shape} / cdf {self.e_out_cdf.shape} "
                f"must match e_out ({n},)"
            )
        if self.mu.ndim != 2 or self.mu.shape[1] != n:
            raise ShapeMismatchError(f"mu shape {self.mu.shape} does not match (n_mu, {n})")

    @property
    def n_e_out(self) -> int:
        return int(self.e_out.size)

    @property
    def n_mu(self) -> int:
        return int(self.mu.shape[0])


@dataclass(frozen=True)
class InelasticData:
    """
    Inelastic scattering data at one temperature.

    Exactly one of the two secondary representations is populated:
    ``e_out``/``mu`` for EQUAL and SKEWED tables, ``points`` for
    CONTINUOUS tables.

    Attributes
    ----------
    e_in : np.ndarray
        Incoming energies (eV), strictly increasing
    sigma : np.ndarray
        Inelastic cross section at each incoming energy (b)
    e_out : np.ndarray or None
        Outgoing energies, shape (n_e_in, n_e_out)
    mu : np.ndarray or None
        Outgoing cosines, shape (n_e_in, n_e_out, n_mu)
    points : tuple of ContinuousEnergyPoint or None
        One entry per incoming energy
    """

    e_in: np.ndarray
    sigma: np.ndarray
    e_out: Optional[np.ndarray] = None
    mu: Optional[np.ndarray] = None
    points: Optional[Tuple[ContinuousEnergyPoint, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "e_in", readonly(self.e_in))
        object.__setattr__(self, "sigma", readonly(self.sigma))
        if self.e_in.ndim != 1 or self.e_in.shape != self.sigma.shape:
            raise ShapeMismatchError(
                f"Inelastic e_in {self.e_in.shape} and sigma {self.sigma.shape} "
                "must be parallel 1D arrays"
            )
        if self.e_in.size == 0:
            raise ShapeMismatchError("Inelastic cross section table is empty")
        _check_increasing(self.e_in, "Inelastic incoming")

        fixed = self.e_out is not None or self.mu is not None
        if fixed and self.points is not None:
            raise ShapeMismatchError(
                "Inelastic data cannot carry both fixed-grid and continuous distributions"
            )
        if fixed:
            if self.e_out is None or self.mu is None:
                raise ShapeMismatchError("Fixed-grid inelastic data requires both e_out and mu")
            e_out = readonly(self.e_out)
            mu = readonly(self.mu)
            if e_out.ndim != 2 or mu.ndim != 3:
                raise ShapeMismatchError(
                    f"Fixed-grid e_out must be 2D and mu 3D, got {e_out.shape} and {mu.shape}"
                )
            if e_out.shape[0] != mu.shape[0] or e_out.shape[1] != mu.shape[1]:
                raise ShapeMismatchError(
                    f"e_out {e_out.shape} and mu {mu.shape} disagree on (n_e_in, n_e_out)"
                )
            if e_out.shape[0] != self.n_e_in:
                raise ShapeMismatchError(
                    f"e_out has {e_out.shape[0]} incoming energies, cross section has {self.n_e_in}"
                )
            object.__setattr__(self, "e_out", e_out)
            object.__setattr__(self, "mu", mu)
        elif self.points is not None:
            points = tuple(self.points)
            if len(points) != self.n_e_in:
                raise ShapeMismatchError(
                    f"{len(points)} continuous distributions for {self.n_e_in} incoming energies"
                )
            object.__setattr__(self, "points", points)
        else:
            raise ShapeMismatchError("Inelastic data carries no secondary distribution")

    @property
    def n_e_in(self) -> int:
        return int(self.e_in.size)

    @property
    def n_e_out(self) -> Optional[int]:
        """Number of outgoing energy bins (fixed-grid data only)."""
        return None if self.e_out is None else int(self.e_out.shape[1])

    @property
    def n_mu(self) -> int:
        """Number of outgoing cosines per outgoing energy."""
        if self.mu is not None:
            return int(self.mu.shape[2])
        if self.points:
            return self.points[0].n_mu
        return 0

    @property
    def is_continuous(self) -> bool:
        return self.points is not None

    @property
    def threshold(self) -> float:
        """Upper energy limit of S(α,β) treatment (last incoming energy)."""
        return float(self.e_in[-1])


@dataclass(frozen=True)
class TemperatureData:
    """
    All S(α,β) data at one material temperature.

    Attributes
    ----------
    kT : float
        Temperature expressed as k*T in eV, as stored in the library
    elastic : ElasticData or None
        Elastic data; None when the library has none at this temperature
    inelastic : InelasticData or None
        Inelastic data
    """

    kT: float
    elastic: Optional[ElasticData] = None
    inelastic: Optional[InelasticData] = None

    @property
    def temperature_K(self) -> float:
        return kelvin_from_kT(self.kT)

    @property
    def threshold_elastic(self) -> float:
        """Last elastic incoming energy, 0.0 without elastic data."""
        return 0.0 if self.elastic is None else self.elastic.threshold

    @property
    def threshold_inelastic(self) -> float:
        """Last inelastic incoming energy, 0.0 without inelastic data."""
        return 0.0 if self.inelastic is None else self.inelastic.threshold


@dataclass(frozen=True)
class ScatteringTable:
    """
    One S(α,β) thermal scattering table at one or more temperatures.

    Attributes
    ----------
    name : str
        Table name, e.g. "c_H_in_H2O"
    atomic_weight_ratio : float
        Mass of the bound nucleus in neutron masses
    nuclides : frozenset of str
        Nuclides the table applies to
    secondary_mode : SecondaryMode
        Secondary energy representation used by every temperature
    data : tuple of TemperatureData
        Data per temperature, ordered by increasing temperature
    """

    name: str
    atomic_weight_ratio: float
    nuclides: FrozenSet[str]
    secondary_mode: SecondaryMode
    data: Tuple[TemperatureData, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.atomic_weight_ratio > 0:
            raise ShapeMismatchError(
                f"{self.name}: atomic weight ratio must be positive, got {self.atomic_weight_ratio}"
            )
        object.__setattr__(self, "nuclides", frozenset(self.nuclides))
        object.__setattr__(self, "data", tuple(self.data))
        kTs = [d.kT for d in self.data]
        if any(b <= a for a, b in zip(kTs, kTs[1:])):
            raise ShapeMismatchError(f"{self.name}: temperatures must be strictly increasing")
        for d in self.data:
            if d.inelastic is None:
                continue
            if d.inelastic.is_continuous == self.secondary_mode.is_fixed_grid:
                raise ShapeMismatchError(
                    f"{self.name}: inelastic data at {d.temperature_K:.1f} K does not match "
                    f"secondary mode '{self.secondary_mode.value}'"
                )

    @classmethod
    def from_hdf5(
        cls,
        group,
        temperatures,
        tolerance: float = DEFAULT_TEMPERATURE_TOLERANCE,
        warn_missing_elastic: bool = True,
    ) -> "ScatteringTable":
        """Load a table from its HDF5 group (see thermal_scattering.table_from_hdf5)."""
        from sabforge.data.thermal_scattering import table_from_hdf5

        return table_from_hdf5(group, temperatures, tolerance, warn_missing_elastic)

    @property
    def n_temperatures(self) -> int:
        return len(self.data)

    @property
    def kTs(self) -> List[float]:
        """Temperatures as k*T in eV."""
        return [d.kT for d in self.data]

    @property
    def temperatures_K(self) -> List[float]:
        """Temperatures in Kelvin, index-aligned with ``data``."""
        return [d.temperature_K for d in self.data]

    def get(self, temperature_K: float) -> Optional[TemperatureData]:
        """Data whose temperature rounds to the same integer Kelvin, or None."""
        key = nearest_integer(temperature_K)
        for d in self.data:
            if nearest_integer(d.temperature_K) == key:
                return d
        return None

    def has_nuclide(self, nuclide: str) -> bool:
        return nuclide in self.nuclides

    def summary(self) -> Dict[str, object]:
        """Plain-dict description of the table, suitable for JSON output."""
        temperatures = []
        for d in self.data:
            entry: Dict[str, object] = {
                "temperature_K": round(d.temperature_K, 3),
                "kT_eV": d.kT,
                "threshold_elastic_eV": d.threshold_elastic,
                "threshold_inelastic_eV": d.threshold_inelastic,
            }
            if d.elastic is not None:
                entry["elastic_mode"] = d.elastic.mode.name
                entry["n_elastic_e_in"] = d.elastic.n_e_in
                entry["n_elastic_mu"] = d.elastic.n_mu
            if d.inelastic is not None:
                entry["n_inelastic_e_in"] = d.inelastic.n_e_in
                entry["n_inelastic_mu"] = d.inelastic.n_mu
                if d.inelastic.n_e_out is not None:
                    entry["n_inelastic_e_out"] = d.inelastic.n_e_out
            temperatures.append(entry)
        return {
            "name": self.name,
            "atomic_weight_ratio": self.atomic_weight_ratio,
            "nuclides": sorted(self.nuclides),
            "secondary_mode": self.secondary_mode.value,
            "temperatures": temperatures,
        }
