"""Fixtures writing one-table S(α,β) libraries into a temporary directory."""

import pytest

from sab_library import make_library


@pytest.fixture
def equal_library(tmp_path):
    return make_library(tmp_path / "c_H_in_H2O.h5", secondary_mode="equal")


@pytest.fixture
def skewed_library(tmp_path):
    return make_library(
        tmp_path / "c_Graphite.h5",
        name="c_Graphite",
        temperatures=(296.0, 400.0, 500.0),
        secondary_mode="skewed",
        elastic_type="bragg",
        atomic_weight_ratio=11.8969,
        nuclides=("C0", "C12", "C13"),
    )


@pytest.fixture
def continuous_library(tmp_path):
    return make_library(
        tmp_path / "c_D_in_D2O.h5",
        name="c_D_in_D2O",
        temperatures=(283.6, 293.6, 350.0),
        secondary_mode="continuous",
        atomic_weight_ratio=1.9968,
        nuclides=("H2",),
    )
