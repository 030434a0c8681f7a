"""Elastic thermal scattering data at one temperature."""

from __future__ import annotations

import logging
import warnings
from typing import Optional

import h5py

from sabforge.core.constants import ELASTIC_GROUP, MU_OUT_DATASET, XS_DATASET
from sabforge.core.errors import (
    MissingOptionalSectionWarning,
    ShapeMismatchError,
    UnrecognizedFormatError,
)
from sabforge.data._types import ElasticData, ElasticMode
from sabforge.io.hdf5 import (
    get_shape,
    open_dataset,
    open_group,
    path_exists,
    read_attribute,
    read_dataset,
)

logger = logging.getLogger(__name__)


def elastic_mode_from_tag(tag: str) -> ElasticMode:
    """Map the 'type' attribute of an elastic cross section to an ElasticMode."""
    try:
        return ElasticMode(tag)
    except ValueError:
        raise UnrecognizedFormatError(
            f"Unrecognized elastic type '{tag}' (expected 'tab1' or 'bragg')"
        ) from None


def read_xs_table(group: h5py.Group, name: str = XS_DATASET):
    """
    Read a tabulated cross section stored as two rows (energy, value).

    Returns
    -------
    dataset : h5py.Dataset
        The dataset, for reading its attributes
    energy : np.ndarray
        Row 0
    values : np.ndarray
        Row 1
    """
    dset = open_dataset(group, name)
    shape = get_shape(dset)
    if len(shape) != 2 or shape[0] != 2:
        raise ShapeMismatchError(
            f"'{dset.name}' has shape {shape}, expected (2, n): energies and values"
        )
    table = read_dataset(dset)
    return dset, table[0, :], table[1, :]


def read_elastic(T_group: h5py.Group, warn_missing: bool = True) -> Optional[ElasticData]:
    """
    Read elastic data from a temperature group.

    Parameters
    ----------
    T_group : h5py.Group
        Temperature group, e.g. '/c_H_in_H2O/294K'.
    warn_missing : bool
        Emit a MissingOptionalSectionWarning when there is no elastic data.

    Returns
    -------
    ElasticData or None
        None when the group has no 'elastic' sub-group.
    """
    if not path_exists(T_group, ELASTIC_GROUP):
        logger.debug("%s: no elastic data", T_group.name)
        if warn_missing:
            warnings.warn(
                f"{T_group.name}: no elastic scattering data",
                MissingOptionalSectionWarning,
                stacklevel=2,
            )
        return None

    elastic_group = open_group(T_group, ELASTIC_GROUP)
    dset, e_in, P = read_xs_table(elastic_group)
    mode = elastic_mode_from_tag(str(read_attribute(dset, "type")))

    mu = None
    if mode is not ElasticMode.EXACT:
        # Stored as (n_e_in, n_mu); kept as (n_mu, n_e_in)
        mu_dset = open_dataset(elastic_group, MU_OUT_DATASET)
        shape = get_shape(mu_dset)
        if len(shape) != 2 or shape[0] != len(e_in):
            raise ShapeMismatchError(
                f"'{mu_dset.name}' has shape {shape}, expected ({len(e_in)}, n_mu)"
            )
        mu = read_dataset(mu_dset).T

    logger.debug(
        "%s: elastic %s, %d incoming energies", T_group.name, mode.name, len(e_in)
    )
    return ElasticData(mode=mode, e_in=e_in, P=P, mu=mu)
