"""
ROI Fitting Module

This module fits centred ROI objects (circles, squares, rectangles) to binary
patterns of thermal images. The ROI parameters are adjusted by a zeroth-order
optimizer from ``scipy.optimize`` minimizing the discrepancy between the
rasterized ROI and the pattern. All patterns of an image can be fitted
concurrently.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Type, Union
import numpy as np
from scipy.optimize import minimize

from .centred_obj import CentredObj, CircleObj, fill_im
from .filter_image import FilteredImage, full_image_flag, reduced_image_flag
from .marker_image import count_separate_patterns, marker_image
from .models.models import (
    FitResult,
    OptimizerFailureError,
    ThermovisorConfig,
)
from .rescaled_image import RescaledImage

logger = logging.getLogger(__name__)

DERIVATIVE_FREE_METHODS = ("Nelder-Mead", "Powell")


def image_discr(im1: np.ndarray, im2: np.ndarray) -> float:
    """
    Scalar distance between two boolean matrices of the same size.

    The number of unequal elements is divided by twice the number of
    elements, so the distance lies within [0, 0.5].
    """
    im1 = np.asarray(im1)
    im2 = np.asarray(im2)
    if im1.shape != im2.shape:
        raise ValueError(f"Image shapes differ: {im1.shape} and {im2.shape}")
    n_elements = im1.size
    return float(np.count_nonzero(im1 != im2)) / (2 * n_elements)


def image_fill_discr(im_bin: np.ndarray, c: CentredObj) -> Callable[[np.ndarray], float]:
    """
    Objective function of the fitting: the discrepancy between ``im_bin``
    and the rasterized ``c`` filled from the parameters vector.

    ``c`` is modified on every call.
    """
    im_copy = np.zeros(im_bin.shape, dtype=bool)

    def discrepancy(x: np.ndarray) -> float:
        return image_discr(im_bin, fill_im(im_copy, c.fill_from_vect(x)))

    return discrepancy


def fit_centred_obj(
    c: CentredObj,
    im_bin: np.ndarray,
    starting_point: Optional[np.ndarray] = None,
    config: Optional[ThermovisorConfig] = None,
) -> FitResult:
    """
    Fit the ROI to the binary pattern by adjusting its center and dimensions.

    Parameters
    ----------
    c : CentredObj
        ROI object, modified in place
    im_bin : np.ndarray
        Boolean pattern image
    starting_point : np.ndarray, optional
        Optimization starting vector, ``c.starting_vector(im_bin)`` by default
    config : ThermovisorConfig, optional
        Optimizer settings are taken from ``config.fitting``

    Returns
    -------
    FitResult
        The fitted ``c``, the achieved discrepancy and the optimizer result
    """
    config = config if config is not None else ThermovisorConfig()
    options = config.fitting
    if options.method not in DERIVATIVE_FREE_METHODS:
        raise ValueError(
            f"Fitting needs a derivative-free method {DERIVATIVE_FREE_METHODS}, "
            f"got {options.method}"
        )
    im_bin = np.asarray(im_bin, dtype=bool)

    if starting_point is None:
        x0 = c.starting_vector(im_bin)
    else:
        x0 = np.asarray(starting_point, dtype=float).ravel()
        if x0.size != c.parnumber():
            raise ValueError(
                f"Starting point should have {c.parnumber()} values, got {x0.size}"
            )

    optim_fun = image_fill_discr(im_bin, c)
    optim_out = minimize(
        optim_fun,
        x0,
        method=options.method,
        options=options.to_scipy_options(x0),
    )

    best_vector = np.asarray(optim_out.x, dtype=float).ravel()
    if best_vector.size != c.parnumber() or not np.all(np.isfinite(best_vector)):
        raise OptimizerFailureError(
            f"Optimizer returned an invalid parameters vector {optim_out.x}"
        )
    if not optim_out.success:
        if options.strict:
            raise OptimizerFailureError(f"Fitting of {type(c).__name__} failed: {optim_out.message}")
        logger.warning(f"Fitting of {type(c).__name__} did not converge: {optim_out.message}")

    # the objective leaves c filled from the last evaluated vector
    c.fill_from_vect(best_vector)
    discrepancy = float(optim_out.fun)
    logger.debug(f"Fitted {c} with discrepancy {discrepancy:.5f} after {optim_out.nit} iterations")
    return FitResult(obj=c, discrepancy=discrepancy, optimizer_result=optim_out)


def fit_centred_obj_to_filtered(
    c: CentredObj,
    image: FilteredImage,
    starting_point: Optional[np.ndarray] = None,
    fit_reduced: bool = True,
    config: Optional[ThermovisorConfig] = None,
) -> FitResult:
    """
    Fit the ROI to the region of a filtered image.

    With ``fit_reduced`` the bounding rectangle of the region is fitted,
    so the resulting center is relative to that rectangle.
    """
    im_bin = reduced_image_flag(image) if fit_reduced else full_image_flag(image)
    return fit_centred_obj(c, im_bin, starting_point=starting_point, config=config)


def fit_all(
    pattern_markers: np.ndarray,
    obj_type: Type[CentredObj] = CircleObj,
    max_patterns: Optional[int] = None,
    config: Optional[ThermovisorConfig] = None,
) -> List[CentredObj]:
    """
    Fit a new ROI of ``obj_type`` to every labelled pattern.

    Parameters
    ----------
    pattern_markers : np.ndarray
        Integer matrix, 0 is background, k > 0 marks the k-th pattern
    obj_type : type, default CircleObj
        ROI type
    max_patterns : int, optional
        Maximal number of fitted patterns (default ``config.max_patterns``)
    config : ThermovisorConfig, optional

    Returns
    -------
    list of CentredObj
        Fitted ROIs ordered by pattern label
    """
    config = config if config is not None else ThermovisorConfig()
    if max_patterns is None:
        max_patterns = config.max_patterns
    pattern_markers = np.asarray(pattern_markers)

    markers_number = min(count_separate_patterns(pattern_markers), max_patterns)
    if markers_number <= 0:
        logger.info("No patterns to fit")
        return []
    logger.info(f"Fitting {markers_number} patterns with {obj_type.__name__}")

    objs_to_fit = [obj_type() for _ in range(markers_number)]
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures = [
            executor.submit(fit_centred_obj, c, pattern_markers == label, None, config)
            for label, c in enumerate(objs_to_fit, start=1)
        ]
    # leaving the executor joins all fits, result() re-raises the first failure
    for future in futures:
        future.result()
    return objs_to_fit


def fit_all_patterns(
    image: Union[RescaledImage, np.ndarray],
    obj_type: Type[CentredObj] = CircleObj,
    level_threshold: Optional[float] = None,
    distance_threshold: Optional[float] = None,
    max_patterns: Optional[int] = None,
    config: Optional[ThermovisorConfig] = None,
) -> List[CentredObj]:
    """
    Mark the patterns of the image (see ``marker_image``) and fit a ROI of
    ``obj_type`` to each of them.
    """
    if not isinstance(image, RescaledImage):
        image = RescaledImage(image)
    markers = marker_image(
        image,
        level_threshold=level_threshold,
        distance_threshold=distance_threshold,
        config=config,
    )
    return fit_all(markers, obj_type=obj_type, max_patterns=max_patterns, config=config)
