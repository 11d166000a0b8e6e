"""
Tests for fitting ROIs to binary patterns.
"""

import importlib

import numpy as np
import pytest
from scipy.optimize import OptimizeResult

from thermovisor.centred_obj import CircleObj, RectangleObj, SquareObj
from thermovisor.filter_image import filter_image
from thermovisor.fit_centred_obj import (
    fit_all,
    fit_all_patterns,
    fit_centred_obj,
    fit_centred_obj_to_filtered,
    image_discr,
    image_fill_discr,
)
from thermovisor.models.models import (
    EmptyRegionError,
    FittingOptions,
    OptimizerFailureError,
    ThermovisorConfig,
)

# the package re-exports the function under the module name
fit_module = importlib.import_module("thermovisor.fit_centred_obj")


@pytest.fixture
def random_mask():
    rng = np.random.default_rng(42)
    return rng.random((15, 20)) > 0.5


class TestImageDiscr:
    def test_equal_masks(self, random_mask):
        assert image_discr(random_mask, random_mask) == 0.0

    def test_complementary_masks(self, random_mask):
        # maximal disagreement is 0.5 as the count is divided by 2N
        assert image_discr(random_mask, ~random_mask) == 0.5

    def test_partial_disagreement(self):
        a = np.zeros((2, 5), dtype=bool)
        b = a.copy()
        b[0, :2] = True
        assert image_discr(a, b) == pytest.approx(2 / 20)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="shapes differ"):
            image_discr(np.zeros((2, 2), dtype=bool), np.zeros((3, 2), dtype=bool))

    def test_objective_function(self):
        target = CircleObj((5, 5), 4).within_flag((10, 10))
        objective = image_fill_discr(target, CircleObj())
        assert objective(np.array([5.0, 5.0, 4.0])) == 0.0
        assert objective(np.array([5.0, 5.0, 1.0])) > 0.0


class TestFitCentredObj:
    def test_circle_example(self):
        target = CircleObj((5, 5), 4).within_flag((10, 10))
        c = CircleObj()
        result = fit_centred_obj(c, target)
        assert result.obj is c
        assert result.discrepancy < 1e-6
        assert np.array_equal(c.within_flag((10, 10)), target)
        assert tuple(c.center) == (5, 5)

    def test_square(self):
        target = SquareObj((5, 5), 4).within_flag((12, 12))
        result = fit_centred_obj(SquareObj(), target)
        assert result.discrepancy < 1e-6
        assert result.obj == SquareObj((5, 5), 4) or np.array_equal(
            result.obj.within_flag((12, 12)), target
        )

    def test_rectangle_with_starting_point(self):
        target = RectangleObj((5, 5), (4, 6)).within_flag((12, 12))
        result = fit_centred_obj(RectangleObj(), target, starting_point=[5.2, 5.3, 4.5, 6.5])
        assert result.discrepancy < 1e-6
        assert np.array_equal(result.obj.within_flag((12, 12)), target)

    def test_optimizer_result_is_returned(self):
        target = CircleObj((5, 5), 4).within_flag((10, 10))
        result = fit_centred_obj(CircleObj(), target)
        assert isinstance(result.optimizer_result, OptimizeResult)
        assert result.optimizer_result.fun == result.discrepancy

    def test_powell(self):
        target = SquareObj((5, 5), 4).within_flag((12, 12))
        config = ThermovisorConfig(fitting=FittingOptions(method="Powell", maxiter=50))
        result = fit_centred_obj(SquareObj(), target, config=config)
        assert result.discrepancy < 1e-6

    def test_gradient_method_is_rejected(self):
        target = CircleObj((5, 5), 4).within_flag((10, 10))
        config = ThermovisorConfig(fitting=FittingOptions(method="BFGS"))
        with pytest.raises(ValueError, match="derivative-free"):
            fit_centred_obj(CircleObj(), target, config=config)

    def test_wrong_starting_point(self):
        target = CircleObj((5, 5), 4).within_flag((10, 10))
        with pytest.raises(ValueError, match="Starting point"):
            fit_centred_obj(CircleObj(), target, starting_point=[1.0, 2.0])

    def test_invalid_optimizer_vector(self, monkeypatch):
        def broken_minimize(fun, x0, **kwargs):
            return OptimizeResult(x=np.array([1.0, 2.0]), fun=0.0, success=True, nit=1)

        monkeypatch.setattr(fit_module, "minimize", broken_minimize)
        target = CircleObj((5, 5), 4).within_flag((10, 10))
        with pytest.raises(OptimizerFailureError, match="invalid parameters vector"):
            fit_centred_obj(CircleObj(), target)

    def test_not_converged(self, monkeypatch):
        def stalled_minimize(fun, x0, **kwargs):
            return OptimizeResult(
                x=np.asarray(x0), fun=fun(x0), success=False, nit=30,
                message="Maximum number of iterations has been exceeded.",
            )

        monkeypatch.setattr(fit_module, "minimize", stalled_minimize)
        target = CircleObj((5, 5), 4).within_flag((10, 10))

        result = fit_centred_obj(CircleObj(), target)
        assert result.discrepancy >= 0.0

        strict = ThermovisorConfig(fitting=FittingOptions(strict=True))
        with pytest.raises(OptimizerFailureError, match="failed"):
            fit_centred_obj(CircleObj(), target, config=strict)

    def test_fit_to_filtered_image(self):
        image = np.full((20, 20), 10.0)
        image[SquareObj((9, 9), 4).within_flag(image.shape)] = 50.0
        filtered = filter_image(image, SquareObj((9, 9), 4))

        reduced = fit_centred_obj_to_filtered(SquareObj(), filtered)
        assert reduced.discrepancy < 1e-6
        assert tuple(reduced.obj.center) == (2, 2)

        full = fit_centred_obj_to_filtered(SquareObj(), filtered, fit_reduced=False)
        assert full.discrepancy < 1e-6
        assert tuple(full.obj.center) == (9, 9)


class TestFitAll:
    @pytest.fixture
    def markers(self):
        markers = np.zeros((30, 30), dtype=int)
        markers[CircleObj((8, 8), 6).within_flag(markers.shape)] = 1
        markers[CircleObj((20, 20), 6).within_flag(markers.shape)] = 2
        return markers

    def test_fit_all(self, markers):
        fitted = fit_all(markers, CircleObj)
        assert fitted == [CircleObj((8, 8), 6), CircleObj((20, 20), 6)]

    def test_fit_all_is_ordered_by_label(self, markers):
        swapped = np.where(markers == 1, 2, np.where(markers == 2, 1, 0))
        fitted = fit_all(swapped, CircleObj, config=ThermovisorConfig(max_workers=2))
        assert [tuple(c.center) for c in fitted] == [(20, 20), (8, 8)]

    def test_max_patterns(self, markers):
        fitted = fit_all(markers, CircleObj, max_patterns=1)
        assert len(fitted) == 1
        assert tuple(fitted[0].center) == (8, 8)

    def test_no_patterns(self):
        assert fit_all(np.zeros((5, 5), dtype=int)) == []

    def test_failed_pattern_fails_batch(self, markers):
        markers[markers == 2] = 3  # label 2 has no pixels
        with pytest.raises(EmptyRegionError):
            fit_all(markers, CircleObj)

    def test_fit_all_patterns(self):
        image = np.full((30, 30), 20.0)
        image[CircleObj((8, 8), 6).within_flag(image.shape)] = 80.0
        image[CircleObj((20, 20), 6).within_flag(image.shape)] = 90.0
        fitted = fit_all_patterns(image, CircleObj, level_threshold=0.5)
        assert fitted == [CircleObj((8, 8), 6), CircleObj((20, 20), 6)]
