"""
Inelastic thermal scattering data at one temperature.

Fixed-grid tables (equal-probability or skewed outgoing energy bins)
store their outgoing energies and cosines as dense arrays that are
transcribed as-is. Continuous tables store a generic correlated
angle-energy distribution, converted here into one
ContinuousEnergyPoint per incoming energy.

Conversion is done in two phases per incoming energy:

1. ``angular_grid_size`` takes the number of cosines from the first
   outgoing point and checks every other point against it.
2. ``to_energy_point`` copies the outgoing energies, pdf and cdf and
   lays the cosine grids out as columns of an (n_mu, n_e_out) matrix.

Author: sabforge Development Team
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import h5py
import numpy as np

from sabforge.core.constants import ENERGY_OUT_DATASET, INELASTIC_GROUP, MU_OUT_DATASET
from sabforge.core.errors import ShapeMismatchError, UnrecognizedFormatError
from sabforge.data._types import ContinuousEnergyPoint, InelasticData, SecondaryMode
from sabforge.data.correlated import (
    AngularKind,
    CorrelatedAngleEnergy,
    OutgoingDistribution,
)
from sabforge.data.elastic import read_xs_table
from sabforge.io.hdf5 import get_shape, open_dataset, open_group, path_exists, read_dataset

logger = logging.getLogger(__name__)

# Angular distribution kinds that carry a cosine grid usable as a mu column
SUPPORTED_ANGULAR_KINDS = (AngularKind.TABULAR, AngularKind.DISCRETE)


def angular_grid_size(edist: OutgoingDistribution, index: int = 0) -> int:
    """
    Number of cosines shared by every outgoing point of ``edist``.

    Parameters
    ----------
    edist : OutgoingDistribution
        Outgoing distribution for one incoming energy.
    index : int
        Position of the incoming energy, for error messages.

    Returns
    -------
    int
        Cosine count of the first outgoing point (0 without outgoing points).

    Raises
    ------
    UnrecognizedFormatError
        If an outgoing point carries an unsupported kind of distribution.
    ShapeMismatchError
        If the points disagree on the number of cosines.
    """
    n_e_out = len(edist.e_out)
    if len(edist.angle) != n_e_out:
        raise ShapeMismatchError(
            f"Incoming energy {index}: {len(edist.angle)} angular distributions "
            f"for {n_e_out} outgoing energies"
        )
    if n_e_out == 0:
        return 0

    n_mu = None
    for j, adist in enumerate(edist.angle):
        if getattr(adist, "kind", None) not in SUPPORTED_ANGULAR_KINDS:
            raise UnrecognizedFormatError(
                f"Incoming energy {index}, outgoing point {j}: unsupported angular "
                f"distribution {getattr(adist, 'kind', type(adist).__name__)}"
            )
        if n_mu is None:
            n_mu = len(adist.x)
        elif len(adist.x) != n_mu:
            raise ShapeMismatchError(
                f"Incoming energy {index}, outgoing point {j}: {len(adist.x)} cosines, "
                f"expected {n_mu} as at the first outgoing point"
            )
    return n_mu


def to_energy_point(edist: OutgoingDistribution, n_mu: int) -> ContinuousEnergyPoint:
    """Copy one outgoing distribution into a ContinuousEnergyPoint."""
    n_e_out = len(edist.e_out)
    mu = np.empty((n_mu, n_e_out))
    for j, adist in enumerate(edist.angle):
        mu[:, j] = adist.x
    return ContinuousEnergyPoint(
        e_out=edist.e_out,
        e_out_pdf=edist.p,
        e_out_cdf=edist.c,
        mu=mu,
    )


def convert_correlated(dist: CorrelatedAngleEnergy) -> Tuple[ContinuousEnergyPoint, ...]:
    """
    Convert a correlated angle-energy distribution to native form.

    Parameters
    ----------
    dist : CorrelatedAngleEnergy
        Distribution read from a continuous table's inelastic group.

    Returns
    -------
    tuple of ContinuousEnergyPoint
        One entry per incoming energy, in store order.
    """
    if len(dist.distribution) != len(dist.energy):
        raise ShapeMismatchError(
            f"{len(dist.distribution)} outgoing distributions for "
            f"{len(dist.energy)} incoming energies"
        )
    grid_sizes = [angular_grid_size(edist, i) for i, edist in enumerate(dist.distribution)]
    return tuple(
        to_energy_point(edist, n_mu) for edist, n_mu in zip(dist.distribution, grid_sizes)
    )


def read_inelastic(T_group: h5py.Group, secondary_mode: SecondaryMode) -> Optional[InelasticData]:
    """
    Read inelastic data from a temperature group.

    Parameters
    ----------
    T_group : h5py.Group
        Temperature group, e.g. '/c_H_in_H2O/294K'.
    secondary_mode : SecondaryMode
        Secondary energy representation of the table.

    Returns
    -------
    InelasticData or None
        None when the group has no 'inelastic' sub-group.
    """
    if not path_exists(T_group, INELASTIC_GROUP):
        logger.debug("%s: no inelastic data", T_group.name)
        return None

    inelastic_group = open_group(T_group, INELASTIC_GROUP)
    _, e_in, sigma = read_xs_table(inelastic_group)

    if secondary_mode is SecondaryMode.CONTINUOUS:
        dist = CorrelatedAngleEnergy.from_hdf5(inelastic_group)
        if dist.n_energy != len(e_in):
            raise ShapeMismatchError(
                f"{inelastic_group.name}: correlated distribution has {dist.n_energy} "
                f"incoming energies, cross section has {len(e_in)}"
            )
        points = convert_correlated(dist)
        logger.debug(
            "%s: continuous inelastic, %d incoming energies", T_group.name, len(points)
        )
        return InelasticData(e_in=e_in, sigma=sigma, points=points)

    e_out, mu = _read_fixed_grid(inelastic_group, len(e_in))
    logger.debug(
        "%s: %s inelastic, %d x %d outgoing energies, %d cosines",
        T_group.name, secondary_mode.value, e_out.shape[0], e_out.shape[1], mu.shape[2],
    )
    return InelasticData(e_in=e_in, sigma=sigma, e_out=e_out, mu=mu)


def _read_fixed_grid(inelastic_group: h5py.Group, n_e_in: int) -> Tuple[np.ndarray, np.ndarray]:
    eout_dset = open_dataset(inelastic_group, ENERGY_OUT_DATASET)
    eout_shape = get_shape(eout_dset)
    mu_dset = open_dataset(inelastic_group, MU_OUT_DATASET)
    mu_shape = get_shape(mu_dset)

    if len(eout_shape) != 2:
        raise ShapeMismatchError(
            f"'{eout_dset.name}' has shape {eout_shape}, expected (n_e_in, n_e_out)"
        )
    if len(mu_shape) != 3:
        raise ShapeMismatchError(
            f"'{mu_dset.name}' has shape {mu_shape}, expected (n_e_in, n_e_out, n_mu)"
        )
    if eout_shape[:2] != mu_shape[:2]:
        raise ShapeMismatchError(
            f"'{eout_dset.name}' {eout_shape} and '{mu_dset.name}' {mu_shape} "
            "disagree on (n_e_in, n_e_out)"
        )
    if eout_shape[0] != n_e_in:
        raise ShapeMismatchError(
            f"'{eout_dset.name}' has {eout_shape[0]} incoming energies, "
            f"cross section has {n_e_in}"
        )
    return read_dataset(eout_dset), read_dataset(mu_dset)
