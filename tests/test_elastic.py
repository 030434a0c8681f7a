"""Tests for the elastic reader."""

import warnings

import h5py
import numpy as np
import pytest

from sabforge.core.errors import (
    DataNotFoundError,
    MissingOptionalSectionWarning,
    ShapeMismatchError,
    UnrecognizedFormatError,
)
from sabforge.data._types import ElasticData, ElasticMode
from sabforge.data.elastic import elastic_mode_from_tag, read_elastic, read_xs_table

from sab_library import ELASTIC_E, write_elastic


def _read(path, **kwargs):
    with h5py.File(path, "r") as f:
        return read_elastic(f["294K"], **kwargs)


class TestElasticModeFromTag:

    def test_known_tags(self):
        assert elastic_mode_from_tag("tab1") is ElasticMode.DISCRETE
        assert elastic_mode_from_tag("bragg") is ElasticMode.EXACT

    def test_unknown_tag(self):
        with pytest.raises(UnrecognizedFormatError, match="incoherent"):
            elastic_mode_from_tag("incoherent")


class TestReadElastic:
    """Tests for read_elastic."""

    def test_discrete(self, tmp_path):
        path = tmp_path / "el.h5"
        with h5py.File(path, "w") as f:
            write_elastic(f.create_group("294K"), "tab1", n_mu=5)

        elastic = _read(path)

        assert elastic.mode is ElasticMode.DISCRETE
        np.testing.assert_array_equal(elastic.e_in, ELASTIC_E)
        assert elastic.P.shape == ELASTIC_E.shape
        # rows are cosines, columns incoming energies
        assert elastic.mu.shape == (5, len(ELASTIC_E))
        np.testing.assert_allclose(elastic.mu[:, 2], np.linspace(-0.9, 0.9, 5) + 0.02)
        assert elastic.threshold == ELASTIC_E[-1]

    def test_exact_has_no_cosines(self, tmp_path):
        path = tmp_path / "el.h5"
        with h5py.File(path, "w") as f:
            write_elastic(f.create_group("294K"), "bragg")

        elastic = _read(path)

        assert elastic.mode is ElasticMode.EXACT
        assert elastic.mu is None
        assert elastic.n_mu == 0

    def test_exact_ignores_stray_cosines(self, tmp_path):
        path = tmp_path / "el.h5"
        with h5py.File(path, "w") as f:
            group = write_elastic(f.create_group("294K"), "bragg")
            group.create_dataset("mu_out", data=np.zeros((len(ELASTIC_E), 3)))

        assert _read(path).mu is None

    def test_missing_elastic_warns(self, tmp_path):
        path = tmp_path / "el.h5"
        with h5py.File(path, "w") as f:
            f.create_group("294K")

        with pytest.warns(MissingOptionalSectionWarning):
            assert _read(path) is None

    def test_missing_elastic_warning_can_be_disabled(self, tmp_path):
        path = tmp_path / "el.h5"
        with h5py.File(path, "w") as f:
            f.create_group("294K")

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert _read(path, warn_missing=False) is None

    def test_unknown_type(self, tmp_path):
        path = tmp_path / "el.h5"
        with h5py.File(path, "w") as f:
            write_elastic(f.create_group("294K"), "coherent")

        with pytest.raises(UnrecognizedFormatError):
            _read(path)

    def test_missing_type_attribute(self, tmp_path):
        path = tmp_path / "el.h5"
        with h5py.File(path, "w") as f:
            group = f.create_group("294K").create_group("elastic")
            group.create_dataset("xs", data=np.vstack([ELASTIC_E, ELASTIC_E]))

        with pytest.raises(DataNotFoundError, match="type"):
            _read(path)

    def test_missing_cosines(self, tmp_path):
        path = tmp_path / "el.h5"
        with h5py.File(path, "w") as f:
            group = f.create_group("294K").create_group("elastic")
            xs = group.create_dataset("xs", data=np.vstack([ELASTIC_E, ELASTIC_E]))
            xs.attrs["type"] = "tab1"

        with pytest.raises(DataNotFoundError, match="mu_out"):
            _read(path)

    def test_cosines_wrong_length(self, tmp_path):
        path = tmp_path / "el.h5"
        with h5py.File(path, "w") as f:
            group = f.create_group("294K").create_group("elastic")
            xs = group.create_dataset("xs", data=np.vstack([ELASTIC_E, ELASTIC_E]))
            xs.attrs["type"] = "tab1"
            group.create_dataset("mu_out", data=np.zeros((len(ELASTIC_E) + 1, 4)))

        with pytest.raises(ShapeMismatchError):
            _read(path)

    def test_cross_section_must_have_two_rows(self, tmp_path):
        path = tmp_path / "el.h5"
        with h5py.File(path, "w") as f:
            group = f.create_group("294K").create_group("elastic")
            xs = group.create_dataset("xs", data=np.zeros((3, 4)))
            xs.attrs["type"] = "tab1"

        with pytest.raises(ShapeMismatchError, match=r"\(2, n\)"):
            _read(path)


class TestReadXsTable:

    def test_rows(self, tmp_path):
        path = tmp_path / "xs.h5"
        with h5py.File(path, "w") as f:
            f.create_dataset("xs", data=np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]))

        with h5py.File(path, "r") as f:
            _, energy, values = read_xs_table(f)

        np.testing.assert_array_equal(energy, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(values, [4.0, 5.0, 6.0])

    def test_one_dimensional_rejected(self, tmp_path):
        path = tmp_path / "xs.h5"
        with h5py.File(path, "w") as f:
            f.create_dataset("xs", data=np.arange(4.0))

        with h5py.File(path, "r") as f, pytest.raises(ShapeMismatchError):
            read_xs_table(f)


class TestElasticData:
    """Invariants enforced by the ElasticData model."""

    def test_arrays_are_read_only(self):
        data = ElasticData(ElasticMode.EXACT, ELASTIC_E, np.ones(4))
        with pytest.raises(ValueError):
            data.e_in[0] = 1.0

    def test_energies_must_increase(self):
        with pytest.raises(ShapeMismatchError, match="increasing"):
            ElasticData(ElasticMode.EXACT, np.array([1.0, 1.0, 2.0]), np.ones(3))

    def test_discrete_requires_cosines(self):
        with pytest.raises(ShapeMismatchError):
            ElasticData(ElasticMode.DISCRETE, ELASTIC_E, np.ones(4))

    def test_exact_rejects_cosines(self):
        with pytest.raises(ShapeMismatchError):
            ElasticData(ElasticMode.EXACT, ELASTIC_E, np.ones(4), mu=np.zeros((3, 4)))
