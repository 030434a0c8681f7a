"""
Tests for temperature selection.

Covers nearest-match selection, the strict tolerance comparison,
deduplication of requests and lookup of stored temperatures.
"""

import h5py
import numpy as np
import pytest

from sabforge.core.constants import K_BOLTZMANN
from sabforge.core.errors import DataNotFoundError, TemperatureUnavailableError
from sabforge.core.units import kelvin_from_kT, kT_from_kelvin, nearest_integer
from sabforge.data.temperature import (
    available_temperatures,
    match_temperatures,
    resolve_temperatures,
)


class TestNearestInteger:
    """Tests for half-away-from-zero rounding."""

    def test_halves_round_up(self):
        assert nearest_integer(293.5) == 294
        assert nearest_integer(294.5) == 295

    def test_negative_halves_round_away_from_zero(self):
        assert nearest_integer(-2.5) == -3

    def test_ordinary_values(self):
        assert nearest_integer(293.6) == 294
        assert nearest_integer(293.4) == 293

    def test_kelvin_roundtrip(self):
        assert kelvin_from_kT(kT_from_kelvin(600.0)) == pytest.approx(600.0)
        assert kT_from_kelvin(1.0) == K_BOLTZMANN


class TestResolveTemperatures:
    """Tests for resolve_temperatures."""

    def test_exact_match(self):
        assert resolve_temperatures([294.0], [294.0, 600.0, 900.0], 10.0) == [294]

    def test_nearest_within_tolerance(self):
        assert resolve_temperatures([300.0], [294.0, 600.0], 10.0) == [294]

    def test_picks_closest_candidate(self):
        # 293 is 1 K away, 300 is 6 K away
        assert resolve_temperatures([294.0], [293.0, 300.0, 600.0], 5.0) == [293]

    def test_tight_tolerance_fails(self):
        with pytest.raises(TemperatureUnavailableError):
            resolve_temperatures([294.0], [293.0, 300.0, 600.0], 0.5)

    def test_tolerance_is_strict(self):
        with pytest.raises(TemperatureUnavailableError):
            resolve_temperatures([304.0], [294.0], 10.0)
        assert resolve_temperatures([303.9], [294.0], 10.0) == [294]

    def test_zero_tolerance_rejects_exact_match(self):
        with pytest.raises(TemperatureUnavailableError):
            resolve_temperatures([294.0], [294.0], 0.0)

    def test_duplicates_collapse(self):
        keys = resolve_temperatures([600.0, 295.0, 293.0, 600.0], [294.0, 600.0], 10.0)
        assert keys == [294, 600]

    def test_output_sorted(self):
        keys = resolve_temperatures([900.0, 294.0, 600.0], [294.0, 600.0, 900.0], 1.0)
        assert keys == [294, 600, 900]

    def test_tie_keeps_lower_candidate(self):
        assert resolve_temperatures([297.0], [294.0, 300.0], 10.0) == [294]

    def test_unsorted_candidates(self):
        assert resolve_temperatures([590.0], [900.0, 600.0, 294.0], 20.0) == [600]

    def test_empty_request(self):
        assert resolve_temperatures([], [294.0, 600.0], 10.0) == []

    def test_no_candidates(self):
        with pytest.raises(TemperatureUnavailableError):
            resolve_temperatures([294.0], [], 10.0)

    def test_negative_tolerance(self):
        with pytest.raises(ValueError):
            resolve_temperatures([294.0], [294.0], -1.0)

    def test_fractional_stored_temperature_rounds(self):
        assert resolve_temperatures([293.6], [293.6], 1.0) == [294]

    def test_error_message(self):
        with pytest.raises(TemperatureUnavailableError) as excinfo:
            resolve_temperatures([1200.0], [294.0, 600.0], 10.0, table_name="c_H_in_H2O")

        err = excinfo.value
        assert err.table_name == "c_H_in_H2O"
        assert err.temperature == 1200.0
        assert "c_H_in_H2O" in str(err)
        assert "1200 K" in str(err)

    def test_error_is_data_not_found(self):
        with pytest.raises(DataNotFoundError):
            resolve_temperatures([50.0], [294.0], 10.0)


class TestAvailableTemperatures:
    """Tests for reading the 'kTs' group."""

    def test_sorted_by_temperature(self, tmp_path):
        path = tmp_path / "kts.h5"
        with h5py.File(path, "w") as f:
            kTs = f.create_group("kTs")
            for T in (1000.0, 294.0, 600.0):
                kTs.create_dataset(f"{int(T)}K", data=T * K_BOLTZMANN)

        with h5py.File(path, "r") as f:
            available = available_temperatures(f["kTs"])

        assert list(available) == ["294K", "600K", "1000K"]
        np.testing.assert_allclose(list(available.values()), [294.0, 600.0, 1000.0])

    def test_match_keeps_dataset_names(self):
        matched = match_temperatures([284.0, 294.0], {"284K": 283.6, "294K": 293.6}, 1.0)
        assert matched == {284: "284K", 294: "294K"}


class TestMatchTemperatures:
    """Tests for match_temperatures with stored temperatures sharing a key."""

    def test_matched_dataset_is_returned(self):
        available = {"a": 293.6, "b": 294.4}
        assert match_temperatures([294.4], available, 0.1) == {294: "b"}
        assert match_temperatures([293.6], available, 0.1) == {294: "a"}

    def test_first_match_wins_per_key(self):
        available = {"a": 293.6, "b": 294.4}
        assert match_temperatures([294.4, 293.6], available, 0.1) == {294: "b"}

    def test_ordered_by_key(self):
        available = {"600K": 600.0, "294K": 294.0}
        assert list(match_temperatures([600.0, 294.0], available, 1.0)) == [294, 600]

    def test_unavailable(self):
        with pytest.raises(TemperatureUnavailableError):
            match_temperatures([294.4], {"a": 293.6}, 0.1, table_name="c_H_in_H2O")
