"""Tests for the HDF5 store accessor."""

import h5py
import numpy as np
import pytest

from sabforge.core.errors import DataNotFoundError, UnrecognizedFormatError
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


@pytest.fixture
def store(tmp_path):
    path = tmp_path / "store.h5"
    with h5py.File(path, "w") as f:
        table = f.create_group("c_H_in_H2O")
        table.attrs["secondary_mode"] = "skewed"
        table.attrs["nuclides"] = np.array([b"H1", b"H2"])
        table.attrs["atomic_weight_ratio"] = np.float64(0.999167)
        table.attrs["offsets"] = np.array([0, 3, 6])
        kTs = table.create_group("kTs")
        kTs.create_dataset("294K", data=0.02533)
        kTs.create_dataset("600K", data=0.05170)
        table.create_group("294K").create_dataset("counts", data=np.arange(6, dtype=np.int32).reshape(2, 3))
    return path


class TestOpenStore:

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            with open_store(tmp_path / "absent.h5"):
                pass

    def test_closes_on_exit(self, store):
        with open_store(store) as f:
            group = open_group(f, "c_H_in_H2O")
        assert not f.id.valid
        assert not group.id.valid

    def test_closes_on_error(self, store):
        with pytest.raises(DataNotFoundError):
            with open_store(store) as f:
                open_group(f, "c_Be")
        assert not f.id.valid


class TestLookups:
    """Tests for group, dataset and attribute lookups."""

    def test_groups_and_datasets(self, store):
        with open_store(store) as f:
            table = open_group(f, "c_H_in_H2O")
            assert list_groups(table) == ["294K", "kTs"]
            assert list_datasets(open_group(table, "kTs")) == ["294K", "600K"]
            assert list_datasets(table) == []
            assert object_name(table) == "c_H_in_H2O"

    def test_path_exists(self, store):
        with open_store(store) as f:
            assert path_exists(f, "c_H_in_H2O/kTs/294K")
            assert not path_exists(f, "c_H_in_H2O/elastic")

    def test_missing_group_names_full_path(self, store):
        with open_store(store) as f:
            table = open_group(f, "c_H_in_H2O")
            with pytest.raises(DataNotFoundError, match="/c_H_in_H2O/elastic"):
                open_group(table, "elastic")

    def test_wrong_kind(self, store):
        with open_store(store) as f:
            table = open_group(f, "c_H_in_H2O")
            with pytest.raises(UnrecognizedFormatError):
                open_dataset(table, "kTs")
            with pytest.raises(UnrecognizedFormatError):
                open_group(open_group(table, "kTs"), "294K")

    def test_attributes(self, store):
        with open_store(store) as f:
            table = open_group(f, "c_H_in_H2O")
            assert read_attribute(table, "secondary_mode") == "skewed"
            assert read_attribute(table, "nuclides") == ["H1", "H2"]
            awr = read_attribute(table, "atomic_weight_ratio")
            assert isinstance(awr, float)
            np.testing.assert_array_equal(read_attribute(table, "offsets"), [0, 3, 6])
            with pytest.raises(DataNotFoundError, match="temperature"):
                read_attribute(table, "temperature")

    def test_datasets(self, store):
        with open_store(store) as f:
            dset = open_dataset(f["c_H_in_H2O/294K"], "counts")
            assert get_shape(dset) == (2, 3)
            data = read_dataset(dset)
            assert data.dtype == np.float64
            assert read_scalar(f["c_H_in_H2O/kTs"], "294K") == pytest.approx(0.02533)
            with pytest.raises(UnrecognizedFormatError):
                read_scalar(f["c_H_in_H2O/294K"], "counts")
