"""
Tests for radial sweeps and distribution statistics.
"""

import numpy as np
import pytest

from thermovisor import aggregate_statistics, radial_sweep, sample_along_angle
from thermovisor.centred_obj import CircleObj
from thermovisor.models.models import DistributionStatistics, EmptyRegionError, ThermovisorConfig
from thermovisor.radial_distribution import (
    angular_distribution_statistics,
    radial_distribution,
    radial_distribution_statistics,
)
from thermovisor.utils.math import student_coefficient


@pytest.fixture
def row_index_image():
    return np.repeat(np.arange(20, dtype=float)[:, None], 20, axis=1)


@pytest.fixture
def circle():
    return CircleObj((10, 10), 10)


class TestRadialDistribution:
    def test_constant_image(self, circle):
        image = np.full((20, 20), 3.0)
        basis, matrix = radial_distribution(image, circle, [0, 45, 90, 135])
        assert matrix.shape == (basis.size, 4)
        assert np.allclose(matrix, 3.0)

    def test_single_angle_matches_line_sample(self, row_index_image, circle):
        basis, matrix = radial_distribution(row_index_image, circle, [0.0], line_length=10)
        along_length, distrib, _ = sample_along_angle(row_index_image, circle, 0.0, 10)
        assert np.allclose(basis, along_length)
        assert np.allclose(matrix[:, 0], distrib)

    def test_columns_are_interpolated_onto_basis(self, row_index_image, circle):
        basis, matrix = radial_distribution(
            row_index_image, circle, [0, 90, 180], config=ThermovisorConfig(max_workers=2)
        )
        assert np.allclose(basis, np.arange(11))
        assert np.allclose(matrix[:, 0], 5 + basis)
        assert np.allclose(matrix[:, 1], 10.0)
        assert np.allclose(matrix[:, 2], 15 - basis)

    def test_short_name(self, row_index_image, circle):
        basis, matrix = radial_sweep(row_index_image, circle, [0, 180])
        assert np.allclose(matrix.mean(axis=1), 10.0)


class TestStatistics:
    @pytest.fixture
    def distrib(self):
        return np.array(
            [
                [1.0, 2.0, 3.0],
                [2.0, 3.0, 4.0],
                [np.nan, 1.0, 1.0],
                [4.0, 4.0, 4.0],
            ]
        )

    def test_nan_rows_are_dropped(self, distrib):
        stats = radial_distribution_statistics([0, 1, 2, 3], distrib)
        assert isinstance(stats, DistributionStatistics)
        assert np.array_equal(stats.coordinate, [0.0, 1.0, 3.0])
        assert np.allclose(stats.mean, [2.0, 3.0, 4.0])
        assert np.allclose(stats.std, [1.0, 1.0, 0.0])

    def test_student_bounds(self, distrib):
        stats = radial_distribution_statistics([0, 1, 2, 3], distrib)
        assert stats.t_value == student_coefficient(3, 0.95) == 3.182
        assert np.allclose(stats.lower_bound, stats.mean - 3.182 * stats.std)
        assert np.allclose(stats.upper_bound, stats.mean + 3.182 * stats.std)

    def test_std_bounds(self, distrib):
        stats = aggregate_statistics([0, 1, 2, 3], distrib, is_use_student=False)
        assert np.allclose(stats.lower_bound, [1.0, 2.0, 4.0])
        assert np.allclose(stats.upper_bound, [3.0, 4.0, 4.0])

    def test_unpacking(self, distrib):
        coordinate, mean, std, lower, upper, t_value = radial_distribution_statistics(
            [0, 1, 2, 3], distrib
        )
        assert len(coordinate) == len(mean) == len(std) == len(lower) == len(upper) == 3
        assert t_value == 3.182

    def test_statistics_are_not_sized(self, distrib):
        # only the unpacked fields have a length
        stats = radial_distribution_statistics([0, 1, 2, 3], distrib)
        assert len(list(stats)) == 6
        with pytest.raises(TypeError):
            len(stats)

    def test_length_mismatch(self, distrib):
        with pytest.raises(ValueError, match="same length"):
            radial_distribution_statistics([0, 1, 2], distrib)

    def test_all_rows_dropped(self):
        with pytest.raises(EmptyRegionError):
            radial_distribution_statistics([0, 1], np.full((2, 3), np.nan))

    @pytest.mark.parametrize(
        "min_length, max_length, expected",
        [
            (-1.0, -1.0, [0, 1, 2, 3, 4]),
            (-1.0, 3.0, [0, 1, 2, 3]),
            (1.0, 3.0, [1, 2, 3]),
            # the window is ignored when max_length covers all coordinates
            (2.0, 10.0, [0, 1, 2, 3, 4]),
        ],
    )
    def test_length_window(self, min_length, max_length, expected):
        distrib = np.tile(np.arange(5, dtype=float)[:, None], (1, 3))
        distrib[:, 1] += 1.0
        stats = radial_distribution_statistics(
            np.arange(5), distrib, min_length=min_length, max_length=max_length
        )
        assert np.array_equal(stats.coordinate, expected)


class TestAngularStatistics:
    def test_per_angle_statistics(self):
        distrib = np.array([[1.0, 5.0, 2.0], [3.0, 5.0, 2.0], [np.nan, 0.0, 0.0]])
        stats = angular_distribution_statistics([0, 90, 180], [0, 1, 2], distrib)
        assert np.array_equal(stats.coordinate, [0.0, 90.0, 180.0])
        assert np.allclose(stats.mean, [2.0, 5.0, 2.0])
        assert np.allclose(stats.std, [np.sqrt(2.0), 0.0, 0.0])
        assert stats.t_value == student_coefficient(2, 0.95)

    def test_angles_mismatch(self):
        with pytest.raises(ValueError, match="angles"):
            angular_distribution_statistics([0, 90], [0, 1], np.ones((2, 3)))
