"""
HDF5 Store Accessor.

Thin, read-only layer over h5py used by the thermal scattering readers.
Every lookup of a required group, dataset or attribute goes through
these helpers so that a missing entry surfaces as a DataNotFoundError
naming the full store path, instead of a bare KeyError from h5py.

Handles are scope-bound: ``open_store`` is a context manager that closes
the file (and with it every group and dataset handle obtained from it)
when the block exits, whether or not an exception was raised.

Author: sabforge Development Team
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Tuple, Union

import h5py
import numpy as np

from sabforge.core.errors import DataNotFoundError, UnrecognizedFormatError


def _child_path(parent: Union[h5py.Group, h5py.Dataset], name: str) -> str:
    base = parent.name if parent.name else ""
    if base.endswith("/"):
        return f"{base}{name}"
    return f"{base}/{name}"


def _decode(value: Any) -> Any:
    """Convert h5py attribute values into plain Python objects."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    if isinstance(value, np.ndarray):
        if value.dtype.kind in ("S", "O", "U"):
            return [v.decode("utf-8") if isinstance(v, bytes) else str(v) for v in value.ravel()]
        return value
    if isinstance(value, np.generic):
        return value.item()
    return value


@contextmanager
def open_store(path: Union[str, Path]) -> Iterator[h5py.File]:
    """
    Open an HDF5 library file for reading.

    Parameters
    ----------
    path : str or Path
        Path to the HDF5 file.

    Yields
    ------
    h5py.File
        Open file handle, closed when the block exits.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"HDF5 library file not found: {path}")

    with h5py.File(path, "r") as f:
        yield f


def path_exists(group: h5py.Group, relative_path: str) -> bool:
    """Return True if ``relative_path`` resolves to an object under ``group``."""
    try:
        return relative_path in group
    except (KeyError, ValueError):
        return False


def open_group(parent: h5py.Group, name: str) -> h5py.Group:
    """Return the sub-group ``name`` of ``parent``."""
    if name not in parent:
        raise DataNotFoundError(f"Group '{_child_path(parent, name)}' not found")
    obj = parent[name]
    if not isinstance(obj, h5py.Group):
        raise UnrecognizedFormatError(
            f"'{_child_path(parent, name)}' is a {type(obj).__name__}, expected a group"
        )
    return obj


def open_dataset(group: h5py.Group, name: str) -> h5py.Dataset:
    """Return the dataset ``name`` of ``group``."""
    if name not in group:
        raise DataNotFoundError(f"Dataset '{_child_path(group, name)}' not found")
    obj = group[name]
    if not isinstance(obj, h5py.Dataset):
        raise UnrecognizedFormatError(
            f"'{_child_path(group, name)}' is a {type(obj).__name__}, expected a dataset"
        )
    return obj


def read_attribute(obj: Union[h5py.Group, h5py.Dataset], name: str) -> Any:
    """
    Read an attribute from a group or dataset.

    Byte strings are decoded to ``str``, arrays of strings to a list of
    ``str``, numpy scalars to Python scalars. Numeric arrays are returned
    as numpy arrays.
    """
    if name not in obj.attrs:
        raise DataNotFoundError(f"Attribute '{name}' not found on '{obj.name}'")
    return _decode(obj.attrs[name])


def read_dataset(dataset: h5py.Dataset) -> np.ndarray:
    """Read a whole dataset into memory; numeric data comes back as float64."""
    data = dataset[()]
    if isinstance(data, np.ndarray) and data.dtype.kind in ("i", "u", "f"):
        return np.asarray(data, dtype=np.float64)
    return np.asarray(data)


def read_scalar(group: h5py.Group, name: str) -> float:
    """Read a scalar (or single-element) numeric dataset as a float."""
    data = read_dataset(open_dataset(group, name))
    if data.size != 1:
        raise UnrecognizedFormatError(
            f"Dataset '{_child_path(group, name)}' holds {data.size} values, expected a scalar"
        )
    return float(data.reshape(-1)[0])


def get_shape(dataset: h5py.Dataset) -> Tuple[int, ...]:
    """Return the dimensions reported by the store for ``dataset``."""
    return tuple(int(d) for d in dataset.shape)


def list_datasets(group: h5py.Group) -> List[str]:
    """Names of the datasets (not sub-groups) directly under ``group``, sorted."""
    return sorted(
        name for name, obj in group.items() if isinstance(obj, h5py.Dataset)
    )


def list_groups(group: h5py.Group) -> List[str]:
    """Names of the sub-groups directly under ``group``, sorted."""
    return sorted(
        name for name, obj in group.items() if isinstance(obj, h5py.Group)
    )


def object_name(obj: Union[h5py.Group, h5py.Dataset]) -> str:
    """Store path of ``obj`` without the leading separator."""
    name = obj.name or ""
    return name[1:] if name.startswith("/") else name
