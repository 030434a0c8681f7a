"""sabforge I/O module: HDF5 store access and settings files."""

from sabforge.io.artifacts import read_artifact
from sabforge.io.hdf5 import (
    get_shape,
    list_datasets,
    list_groups,
    object_name,
    open_dataset,
    open_group,
    open_store,
    path_exists,
    read_attribute,
    read_dataset,
    read_scalar,
)

__all__ = [
    "read_artifact",
    "get_shape",
    "list_datasets",
    "list_groups",
    "object_name",
    "open_dataset",
    "open_group",
    "open_store",
    "path_exists",
    "read_attribute",
    "read_dataset",
    "read_scalar",
]
