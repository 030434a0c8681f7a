"""
Correlated angle-energy distributions.

Reader for the generic correlated angle-energy layout used by OpenMC
HDF5 libraries. A distribution tabulates, for each incoming energy, an
outgoing energy distribution and, for each outgoing energy point, its
own distribution of the scattering cosine.

Store layout of a correlated group:

    energy      (n_e_in,)   incoming energies; attr 'interpolation' (2, R)
    energy_out  (5, N)      rows: e_out, pdf, cdf, mu interpolation code,
                            offset of the point's cosines in 'mu';
                            attrs 'offsets', 'interpolation', 'n_discrete_lines'
    mu          (3, M)      rows: cosine, pdf, cdf

References
----------
- OpenMC data format documentation, "Correlated Angle-Energy"
- ENDF-6 Formats Manual, File 6, LAW=1 and LAW=7

Author: sabforge Development Team
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import h5py
import numpy as np

from sabforge.core.constants import INTERPOLATION_SCHEME
from sabforge.core.errors import ShapeMismatchError, UnrecognizedFormatError
from sabforge.io.hdf5 import get_shape, open_dataset, read_attribute, read_dataset

logger = logging.getLogger(__name__)


class AngularKind(Enum):
    """Kinds of cosine distribution attached to an outgoing energy point."""

    TABULAR = "tabular"    # Piecewise-continuous density over cosine points
    DISCRETE = "discrete"  # Probability mass at discrete cosines


@dataclass
class AngularDistribution:
    """
    Distribution of the scattering cosine at one outgoing energy.

    Attributes
    ----------
    kind : AngularKind
        TABULAR or DISCRETE
    x : np.ndarray
        Cosine points
    p : np.ndarray
        Density (TABULAR) or probability mass (DISCRETE) at each point
    c : np.ndarray
        Cumulative probability at each point
    interpolation : str or None
        Interpolation scheme name for TABULAR distributions
    """

    kind: AngularKind
    x: np.ndarray
    p: np.ndarray
    c: np.ndarray
    interpolation: Optional[str] = None

    def __len__(self):
        return len(self.x)

    @classmethod
    def from_code(cls, code: int, x, p, c) -> "AngularDistribution":
        """Build from an interpolation code: 0 is discrete, 1-5 tabular."""
        if code == 0:
            return cls(AngularKind.DISCRETE, np.asarray(x), np.asarray(p), np.asarray(c))
        if code in INTERPOLATION_SCHEME:
            return cls(
                AngularKind.TABULAR,
                np.asarray(x),
                np.asarray(p),
                np.asarray(c),
                interpolation=INTERPOLATION_SCHEME[code],
            )
        raise UnrecognizedFormatError(f"Unknown angular interpolation code {code}")


@dataclass
class OutgoingDistribution:
    """
    Outgoing energy distribution for one incoming energy.

    Attributes
    ----------
    e_out : np.ndarray
        Outgoing energies (eV); discrete lines first, then continuous points
    p : np.ndarray
        Probability density (or line probability) at each outgoing energy
    c : np.ndarray
        Cumulative probability at each outgoing energy
    interpolation : str or None
        Interpolation scheme of the continuous part, None when every
        point is a discrete line
    n_discrete_lines : int
        Number of leading discrete lines
    angle : list of AngularDistribution
        One cosine distribution per outgoing energy
    """

    e_out: np.ndarray
    p: np.ndarray
    c: np.ndarray
    interpolation: Optional[str] = "linear-linear"
    n_discrete_lines: int = 0
    angle: List[AngularDistribution] = field(default_factory=list)

    def __len__(self):
        return len(self.e_out)


@dataclass
class CorrelatedAngleEnergy:
    """
    Correlated angle-energy distribution.

    Attributes
    ----------
    breakpoints : np.ndarray
        Breakpoints of the incoming energy interpolation regions
    interpolation : np.ndarray
        Interpolation codes of the incoming energy regions
    energy : np.ndarray
        Incoming energies (eV)
    distribution : list of OutgoingDistribution
        One outgoing distribution per incoming energy
    """

    breakpoints: np.ndarray
    interpolation: np.ndarray
    energy: np.ndarray
    distribution: List[OutgoingDistribution] = field(default_factory=list)

    @property
    def n_energy(self) -> int:
        return len(self.energy)

    @classmethod
    def from_hdf5(cls, group: h5py.Group) -> "CorrelatedAngleEnergy":
        """
        Read a correlated angle-energy distribution from an HDF5 group.

        Parameters
        ----------
        group : h5py.Group
            Group holding the 'energy', 'energy_out' and 'mu' datasets.

        Returns
        -------
        CorrelatedAngleEnergy
            Parsed distribution.

        Raises
        ------
        DataNotFoundError
            If a required dataset or attribute is missing.
        ShapeMismatchError
            If the datasets or offsets are inconsistent.
        UnrecognizedFormatError
            If an interpolation code is unknown.
        """
        dset_energy = open_dataset(group, "energy")
        energy = read_dataset(dset_energy).reshape(-1)
        if "interpolation" in dset_energy.attrs:
            interp_data = np.asarray(read_attribute(dset_energy, "interpolation"))
            breakpoints, energy_interp = _split_interpolation(interp_data)
        else:
            breakpoints = np.array([len(energy)], dtype=int)
            energy_interp = np.array([2], dtype=int)

        dset_eout_h5 = open_dataset(group, "energy_out")
        offsets = np.asarray(read_attribute(dset_eout_h5, "offsets"), dtype=int).reshape(-1)
        interpolation = np.asarray(
            read_attribute(dset_eout_h5, "interpolation"), dtype=int
        ).reshape(-1)
        n_discrete_lines = np.asarray(
            read_attribute(dset_eout_h5, "n_discrete_lines"), dtype=int
        ).reshape(-1)
        eout_shape = get_shape(dset_eout_h5)
        if len(eout_shape) != 2 or eout_shape[0] != 5:
            raise ShapeMismatchError(
                f"'{dset_eout_h5.name}' has shape {eout_shape}, expected (5, N)"
            )
        dset_eout = read_dataset(dset_eout_h5)

        dset_mu_h5 = open_dataset(group, "mu")
        mu_shape = get_shape(dset_mu_h5)
        if len(mu_shape) != 2 or mu_shape[0] != 3:
            raise ShapeMismatchError(f"'{dset_mu_h5.name}' has shape {mu_shape}, expected (3, M)")
        dset_mu = read_dataset(dset_mu_h5)

        n_energy = len(energy)
        for label, arr in (
            ("offsets", offsets),
            ("interpolation", interpolation),
            ("n_discrete_lines", n_discrete_lines),
        ):
            if len(arr) != n_energy:
                raise ShapeMismatchError(
                    f"'{dset_eout_h5.name}' attribute '{label}' has {len(arr)} entries "
                    f"for {n_energy} incoming energies"
                )

        n_total = dset_eout.shape[1]
        n_mu_total = dset_mu.shape[1]
        distribution = []
        for i in range(n_energy):
            offset_e = int(offsets[i])
            end_e = int(offsets[i + 1]) if i < n_energy - 1 else n_total
            if not 0 <= offset_e <= end_e <= n_total:
                raise ShapeMismatchError(
                    f"Outgoing energy offsets for incoming energy {i} "
                    f"([{offset_e}, {end_e})) lie outside 'energy_out' ({n_total} points)"
                )
            n = end_e - offset_e
            m = int(n_discrete_lines[i])
            if not 0 <= m <= n:
                raise ShapeMismatchError(
                    f"{m} discrete lines for incoming energy {i} with {n} outgoing points"
                )
            scheme = None
            if m < n:
                code = int(interpolation[i])
                if code not in INTERPOLATION_SCHEME:
                    raise UnrecognizedFormatError(
                        f"Unknown outgoing energy interpolation code {code} at incoming energy {i}"
                    )
                scheme = INTERPOLATION_SCHEME[code]

            angle = []
            for j in range(offset_e, end_e):
                offset_mu = int(dset_eout[4, j])
                if j < n_total - 1:
                    end_mu = int(dset_eout[4, j + 1])
                else:
                    end_mu = n_mu_total
                if not 0 <= offset_mu <= end_mu <= n_mu_total:
                    raise ShapeMismatchError(
                        f"Cosine offsets for outgoing point {j - offset_e} of incoming "
                        f"energy {i} ([{offset_mu}, {end_mu})) lie outside 'mu' "
                        f"({n_mu_total} points)"
                    )
                angle.append(
                    AngularDistribution.from_code(
                        int(dset_eout[3, j]),
                        dset_mu[0, offset_mu:end_mu],
                        dset_mu[1, offset_mu:end_mu],
                        dset_mu[2, offset_mu:end_mu],
                    )
                )

            distribution.append(
                OutgoingDistribution(
                    e_out=dset_eout[0, offset_e:end_e],
                    p=dset_eout[1, offset_e:end_e],
                    c=dset_eout[2, offset_e:end_e],
                    interpolation=scheme,
                    n_discrete_lines=m,
                    angle=angle,
                )
            )

        logger.debug(
            "Read correlated distribution from %s: %d incoming energies, %d outgoing points",
            group.name, n_energy, n_total,
        )
        return cls(
            breakpoints=breakpoints,
            interpolation=energy_interp,
            energy=energy,
            distribution=distribution,
        )


def _split_interpolation(interp_data: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Split an interpolation attribute (2, R) into breakpoints and codes."""
    interp_data = np.atleast_2d(interp_data)
    if interp_data.shape[0] != 2:
        raise ShapeMismatchError(
            f"Interpolation attribute has shape {interp_data.shape}, expected (2, R)"
        )
    return interp_data[0, :].astype(int), interp_data[1, :].astype(int)
