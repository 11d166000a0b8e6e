"""
Pattern markers of rescaled thermal images.

Hot patterns are separated from the surroundings by thresholding the
rescaled image, and every connected pattern gets its own integer label.
"""

import logging
from typing import Optional, Union
import numpy as np
from scipy import ndimage
from skimage.measure import label

from .models.models import ThermovisorConfig
from .rescaled_image import RescaledImage

logger = logging.getLogger(__name__)


def marker_image(
    rescaled: Union[RescaledImage, np.ndarray],
    level_threshold: Optional[float] = None,
    distance_threshold: Optional[float] = None,
    config: Optional[ThermovisorConfig] = None,
) -> np.ndarray:
    """
    Label the patterns of the image.

    Parameters
    ----------
    rescaled : RescaledImage or np.ndarray
        Image with values rescaled to [0, 1]
    level_threshold : float, optional
        Values above it belong to patterns, between 0.0 and 1.0
        (default from ``config``)
    distance_threshold : float, optional
        Binarization criterion after the distance transform
        (default from ``config``)
    config : ThermovisorConfig, optional

    Returns
    -------
    np.ndarray
        Integer matrix of the input size, 0 is background and each pattern
        is marked with its own label 1..N
    """
    config = config if config is not None else ThermovisorConfig()
    if level_threshold is None:
        level_threshold = config.level_threshold
    if distance_threshold is None:
        distance_threshold = config.distance_threshold
    if not 0.0 <= level_threshold <= 1.0:
        raise ValueError(f"level_threshold should be within [0, 1], got {level_threshold}")

    image = rescaled.im if isinstance(rescaled, RescaledImage) else np.asarray(rescaled)
    pattern_flag = image > level_threshold

    # distance of every pixel to the nearest pattern pixel
    if pattern_flag.any():
        distance = ndimage.distance_transform_edt(~pattern_flag)
    else:
        distance = np.full(image.shape, np.inf)
    markers = label(distance < distance_threshold, connectivity=2)

    logger.info(f"Found {count_separate_patterns(markers)} patterns above level {level_threshold}")
    return markers.astype(int)


def count_separate_patterns(markers: np.ndarray) -> int:
    """Number of separate patterns in the markers matrix."""
    if markers.size == 0:
        return 0
    return int(np.max(markers))
