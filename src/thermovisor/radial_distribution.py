"""
Radial and angular temperature distributions

A ROI is sampled along lines going through its center at a range of
angles. Every line is interpolated onto the coordinates of the line at
zero angle, so the distributions form one matrix (rows are positions along
the line, columns are angles). Row-wise statistics give the averaged radial
distribution; column-wise statistics give the angular distribution.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence, Tuple
import numpy as np
from scipy.interpolate import interp1d

from .centred_obj import CentredObj
from .line_distribution import along_mask_line_distribution
from .models.models import DistributionStatistics, EmptyRegionError, ThermovisorConfig
from .utils.math import student_coefficient

logger = logging.getLogger(__name__)

CONFIDENCE_PROBABILITY = 0.95


def _interpolate_onto(
    along_line_length: np.ndarray, distrib: np.ndarray, basis: np.ndarray
) -> np.ndarray:
    """Linear interpolation (and extrapolation) of the distribution onto ``basis``."""
    coordinate, inverse = np.unique(along_line_length, return_inverse=True)
    # values sharing the same coordinate are averaged
    inverse = inverse.ravel()
    values = np.bincount(inverse, weights=distrib) / np.bincount(inverse)
    if coordinate.size == 1:
        return np.full(basis.shape, values[0], dtype=float)
    return interp1d(
        coordinate, values, kind="linear", fill_value="extrapolate", assume_sorted=True
    )(basis)


def radial_distribution(
    imag,
    c: CentredObj,
    angles_range: Sequence[float],
    line_length: float = 0.0,
    length_per_pixel: float = 1.0,
    use_wu: bool = False,
    config: Optional[ThermovisorConfig] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample the ROI along lines oriented at every angle of ``angles_range``.

    Parameters
    ----------
    imag : np.ndarray or RescaledImage
        Temperature matrix
    c : CentredObj
        ROI, lines go through its center
    angles_range : sequence of float
        Line orientations in degrees
    line_length : float, default 0.0
        Line length in units of ``length_per_pixel``, the smallest ROI
        dimension is taken if not positive
    length_per_pixel : float, default 1.0
        Length calibration
    use_wu : bool, default False
        Use Xiaolin Wu's line algorithm
    config : ThermovisorConfig, optional
        ``config.max_workers`` sets the thread pool size

    Returns
    -------
    along_line_length : np.ndarray
        Coordinates along the zero angle line (common for all columns)
    radial_distrib_matrix : np.ndarray
        (points, angles) matrix, column j is the distribution along the line
        oriented at ``angles_range[j]``
    """
    config = config if config is not None else ThermovisorConfig()
    angles = np.asarray(angles_range, dtype=float).ravel()
    if line_length <= 0:
        line_length = float(np.min(c.dimensions)) * length_per_pixel

    basis, _, _ = along_mask_line_distribution(
        imag, c, 0.0, line_length, length_per_pixel=length_per_pixel, use_wu=use_wu
    )
    radial_distrib_matrix = np.full((basis.size, angles.size), np.nan)
    logger.info(f"Sampling {c} along {angles.size} angles, {basis.size} points per line")

    def sample_column(i: int, angle: float) -> None:
        along_line_length, distrib, _ = along_mask_line_distribution(
            imag, c, angle, line_length, length_per_pixel=length_per_pixel, use_wu=use_wu
        )
        # every task writes only its own column
        radial_distrib_matrix[:, i] = _interpolate_onto(along_line_length, distrib, basis)

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures = [
            executor.submit(sample_column, i, angle) for i, angle in enumerate(angles)
        ]
    for future in futures:
        future.result()
    return basis, radial_distrib_matrix


def _inbounds_flag(
    coordinate: np.ndarray, distrib: np.ndarray, max_length: float, min_length: float
) -> np.ndarray:
    """
    Flag of the rows of ``distrib`` without NaNs and with the coordinate
    within [min_length, max_length].

    The window is applied only when ``max_length`` is positive and smaller
    than the maximal coordinate, its lower bound only when ``min_length`` is
    positive and greater than the minimal coordinate.
    """
    flag = ~np.any(np.isnan(distrib), axis=1)
    if coordinate.size == 0:
        return flag
    if 0 < max_length < np.max(coordinate):
        flag &= coordinate <= max_length
        if 0 < min_length and min_length > np.min(coordinate):
            flag &= coordinate >= min_length
    return flag


def _eval_stats(
    coordinate: np.ndarray, distrib: np.ndarray, is_use_student: bool
) -> DistributionStatistics:
    if distrib.shape[0] == 0:
        raise EmptyRegionError("No distribution rows left for the statistics")
    mean_d = np.mean(distrib, axis=1)
    std_d = np.std(distrib, axis=1, ddof=1)
    samples_number = distrib.shape[1]
    t_value = student_coefficient(samples_number, CONFIDENCE_PROBABILITY)
    half_width = t_value * std_d if is_use_student else std_d
    return DistributionStatistics(
        coordinate=np.array(coordinate, dtype=float),
        mean=mean_d,
        std=std_d,
        lower_bound=mean_d - half_width,
        upper_bound=mean_d + half_width,
        t_value=t_value,
    )


def _as_2d(distrib) -> np.ndarray:
    distrib = np.asarray(distrib, dtype=float)
    return distrib.reshape(-1, 1) if distrib.ndim == 1 else distrib


def radial_distribution_statistics(
    along_length_coordinate,
    distrib,
    is_use_student: bool = True,
    min_length: float = -1.0,
    max_length: float = -1.0,
) -> DistributionStatistics:
    """
    Mean radial distribution, its standard deviation and confidence bounds.

    All rows of ``distrib`` containing NaNs are dropped, as well as the rows
    with coordinate outside of [min_length, max_length] (see
    ``_inbounds_flag``).

    Parameters
    ----------
    along_length_coordinate : array_like
        Coordinate of every row of ``distrib``
    distrib : array_like
        (positions, samples) distribution matrix
    is_use_student : bool, default True
        Multiply the standard deviation by Student's coefficient for the bounds
    min_length, max_length : float, default -1.0
        Coordinate window

    Returns
    -------
    DistributionStatistics
        coordinate, mean, std, lower_bound, upper_bound, t_value
    """
    coordinate = np.asarray(along_length_coordinate, dtype=float).ravel()
    distrib = _as_2d(distrib)
    if coordinate.size != distrib.shape[0]:
        raise ValueError(
            "Vector of coordinate should have the same length as the number of distrib rows"
        )
    flag = _inbounds_flag(coordinate, distrib, max_length, min_length)
    return _eval_stats(coordinate[flag], distrib[flag, :], is_use_student)


def angular_distribution_statistics(
    angles,
    along_length_coordinate,
    distrib,
    is_use_student: bool = True,
    min_length: float = -1.0,
    max_length: float = -1.0,
) -> DistributionStatistics:
    """
    Averaged temperature versus the line orientation angle.

    Rows are filtered as in ``radial_distribution_statistics``, then the
    statistics are evaluated over the positions along the line for every angle.
    """
    angles = np.asarray(angles, dtype=float).ravel()
    coordinate = np.asarray(along_length_coordinate, dtype=float).ravel()
    distrib = _as_2d(distrib)
    if coordinate.size != distrib.shape[0]:
        raise ValueError(
            "Vector of coordinate should have the same length as the number of distrib rows"
        )
    if angles.size != distrib.shape[1]:
        raise ValueError("Vector of angles should have the same length as the number of distrib columns")
    flag = _inbounds_flag(coordinate, distrib, max_length, min_length)
    return _eval_stats(angles, distrib[flag, :].T, is_use_student)


# short names
radial_sweep = radial_distribution
aggregate_statistics = radial_distribution_statistics
