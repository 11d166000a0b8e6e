from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import numpy as np


# Custom Exception Classes for thermal image analysis
class ThermalAnalysisError(Exception):
    """Base exception for thermal image analysis operations."""

    pass


class InvalidGeometryError(ThermalAnalysisError, ValueError):
    """Exception raised for malformed ROI dimensions or parameter vectors."""

    pass


class EmptyRegionError(ThermalAnalysisError, ValueError):
    """Exception raised when a selected pixel set turns out to be empty."""

    pass


class DegenerateImageError(ThermalAnalysisError, ValueError):
    """Exception raised when an image has zero dynamic range."""

    pass


class UnsupportedShapeError(ThermalAnalysisError, TypeError):
    """Exception raised when a ROI type lacks a required capability."""

    pass


class OptimizerFailureError(ThermalAnalysisError, RuntimeError):
    """Exception raised when the optimizer returns an unusable result."""

    pass


@dataclass
class FittingOptions:
    """
    Options of the derivative-free optimizer used to fit ROIs.

    Parameters
    ----------
    method : str, default "Nelder-Mead"
        Zeroth-order method name understood by ``scipy.optimize.minimize``
    xatol : float, default 1.0
        Absolute tolerance on the parameter vector (pixels)
    fatol : float, default 1e-4
        Absolute tolerance on the discrepancy value
    maxiter : int, default 30
        Maximum number of optimizer iterations
    strict : bool, default False
        Raise ``OptimizerFailureError`` when the optimizer reports no convergence
    simplex_shift : float, default 0.5
        Constant offset of the initial Nelder-Mead simplex vertices
    simplex_scale : float, default 0.025
        Relative offset of the initial Nelder-Mead simplex vertices
    """

    method: str = "Nelder-Mead"
    xatol: float = 1.0
    fatol: float = 1e-4
    maxiter: int = 30
    strict: bool = False
    simplex_shift: float = 0.5
    simplex_scale: float = 0.025

    def initial_simplex(self, x0: np.ndarray) -> np.ndarray:
        """
        Affine initial simplex: vertex i shifts coordinate i by
        ``simplex_scale * x0[i] + simplex_shift``.

        The ROI parameters are floored before use, so the default scipy
        simplex (5% steps) is often too narrow to change the objective.
        """
        x0 = np.asarray(x0, dtype=float)
        simplex = np.tile(x0, (x0.size + 1, 1))
        for i in range(x0.size):
            simplex[i + 1, i] += self.simplex_scale * x0[i] + self.simplex_shift
        return simplex

    def to_scipy_options(self, x0: Optional[np.ndarray] = None) -> Dict[str, Any]:
        """Convert to the ``options`` mapping of ``scipy.optimize.minimize``."""
        if self.method == "Powell":
            return {"xtol": self.xatol, "ftol": self.fatol, "maxiter": self.maxiter}
        options = {"xatol": self.xatol, "fatol": self.fatol, "maxiter": self.maxiter}
        if self.method == "Nelder-Mead" and x0 is not None:
            options["initial_simplex"] = self.initial_simplex(x0)
        return options


@dataclass
class ThermovisorConfig:
    """
    Configuration threaded through fitting, marking and sweeping calls.

    Parameters
    ----------
    fitting : FittingOptions
        Optimizer settings for ROI fitting
    level_threshold : float, default 0.8
        Rescaled intensity above which pixels belong to a pattern
    distance_threshold : float, default 1e-3
        Binarization criterion applied after the distance transform
    max_patterns : int, default 200
        Maximum number of patterns fitted by ``fit_all``
    max_workers : int, optional
        Thread pool size for concurrent fits and sweeps
    images_folder : Path, optional
        Folder searched for temperature files given by bare name
    """

    fitting: FittingOptions = field(default_factory=FittingOptions)
    level_threshold: float = 0.8
    distance_threshold: float = 1e-3
    max_patterns: int = 200
    max_workers: Optional[int] = None
    images_folder: Optional[Path] = None


@dataclass
class FitResult:
    obj: Any
    discrepancy: float
    optimizer_result: Any


@dataclass
class DistributionStatistics:
    """Row-wise statistics of a distribution matrix."""

    coordinate: np.ndarray
    mean: np.ndarray
    std: np.ndarray
    lower_bound: np.ndarray
    upper_bound: np.ndarray
    t_value: float

    def __iter__(self):
        # allows tuple unpacking of the result
        return iter(
            (
                self.coordinate,
                self.mean,
                self.std,
                self.lower_bound,
                self.upper_bound,
                self.t_value,
            )
        )
