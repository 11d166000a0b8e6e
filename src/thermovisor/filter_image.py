"""
Region extraction

Filtering keeps the pixels of one region of a thermal image (a ROI, a
boolean mask or a labelled pattern) and zeroes all others. The result gives
access to the full-size image and to the minimal bounding rectangle of the
region, both sharing the same data.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union
import numpy as np

from .centred_obj import CentredObj, cent_to_flag
from .marker_image import marker_image
from .models.models import EmptyRegionError, ThermovisorConfig
from .rescaled_image import RescaledImage

logger = logging.getLogger(__name__)


@dataclass
class FilteredImage:
    """
    Image with a filtered temperature region.

    Attributes
    ----------
    full : RescaledImage
        Filtered image of the input size, pixels outside the region are zero
    region_indices : np.ndarray
        (N, 2) array of (row, col) indices of the region pixels
    reduced : np.ndarray
        View of ``full.initial`` over the bounding rectangle of the region
    reduced_flag : np.ndarray
        Boolean view over the same rectangle, True for region pixels
    """

    full: RescaledImage
    region_indices: np.ndarray
    reduced: np.ndarray
    reduced_flag: np.ndarray

    @property
    def bounds(self):
        """(row_min, col_min, row_max, col_max) of the region, inclusive."""
        row_min, col_min = self.region_indices.min(axis=0)
        row_max, col_max = self.region_indices.max(axis=0)
        return int(row_min), int(col_min), int(row_max), int(col_max)


def _region_views(image: np.ndarray, external_region_flag: np.ndarray):
    """
    Zero ``image`` where ``external_region_flag`` is True and return the
    region indices and the bounding rectangle views of the kept region.
    """
    if external_region_flag.shape != image.shape:
        raise ValueError(
            f"Flag shape {external_region_flag.shape} does not match image shape {image.shape}"
        )
    region_flag = ~external_region_flag
    region_indices = np.argwhere(region_flag)
    if region_indices.shape[0] == 0:
        raise EmptyRegionError("Filtered region contains no pixels")
    image[external_region_flag] = 0.0

    row_min, col_min = region_indices.min(axis=0)
    row_max, col_max = region_indices.max(axis=0)
    logger.debug(
        f"Region of {region_indices.shape[0]} pixels within rows {row_min}:{row_max}, "
        f"cols {col_min}:{col_max}"
    )
    reduced = image[row_min : row_max + 1, col_min : col_max + 1]
    reduced_flag = region_flag[row_min : row_max + 1, col_min : col_max + 1]
    return region_indices, reduced, reduced_flag


def _external_flag(shape, selection, external: bool) -> np.ndarray:
    if isinstance(selection, CentredObj):
        return cent_to_flag(selection, shape, external=not external)
    flag = np.asarray(selection, dtype=bool)
    return flag.copy() if external else ~flag


def filter_image(
    image: Union[np.ndarray, RescaledImage],
    selection: Union[np.ndarray, CentredObj],
    external: bool = False,
) -> FilteredImage:
    """
    Filter a copy of the image keeping only the selected region.

    Parameters
    ----------
    image : np.ndarray or RescaledImage
        Input temperature matrix (the initial values of a RescaledImage)
    selection : np.ndarray or CentredObj
        Boolean mask of the pixels to keep, or a ROI
    external : bool, default False
        Keep the pixels outside of the selection instead

    Returns
    -------
    FilteredImage
    """
    initial = image.initial if isinstance(image, RescaledImage) else image
    working = np.array(initial, dtype=float)
    external_flag = _external_flag(working.shape, selection, external)
    region_indices, reduced, reduced_flag = _region_views(working, external_flag)
    return FilteredImage(RescaledImage(working), region_indices, reduced, reduced_flag)


def filter_image_inplace(
    image: RescaledImage,
    selection: Union[np.ndarray, CentredObj],
    external: bool = False,
) -> FilteredImage:
    """In-place version of ``filter_image``, ``image`` is rescaled after filtering."""
    external_flag = _external_flag(image.shape, selection, external)
    region_indices, reduced, reduced_flag = _region_views(image.initial, external_flag)
    image.rescale()
    return FilteredImage(image, region_indices, reduced, reduced_flag)


def external_flag_from_marker(
    markers: np.ndarray, label: int = 0, external: bool = True
) -> np.ndarray:
    """
    Flag matrix of the region outside (``external``) or inside of a pattern.

    If ``label`` is not a valid pattern label, the pattern with the maximal
    number of pixels is taken.
    """
    max_label = int(np.max(markers)) if markers.size else 0
    if 0 < label <= max_label:
        selected = label
    else:
        counts = np.bincount(markers[markers > 0].ravel(), minlength=max_label + 1)
        if max_label == 0 or counts.max() == 0:
            raise EmptyRegionError("Markers matrix contains no patterns")
        selected = int(np.argmax(counts))
    return markers != selected if external else markers == selected


def filter_image_by_marker(
    image: RescaledImage,
    markers: Optional[np.ndarray] = None,
    label: int = 0,
    config: Optional[ThermovisorConfig] = None,
) -> FilteredImage:
    """
    Zero all pixels of the image except those of one labelled pattern.

    ``markers`` defaults to ``marker_image(image)``; ``label`` 0 selects
    the largest pattern.
    """
    if markers is None:
        markers = marker_image(image, config=config)
    flag = external_flag_from_marker(markers, label=label, external=False)
    return filter_image(image, flag)


def full_image_flag(filtered_im: FilteredImage) -> np.ndarray:
    """Boolean matrix of the filtered region within the whole image."""
    flag = np.zeros(filtered_im.full.shape, dtype=bool)
    flag[filtered_im.region_indices[:, 0], filtered_im.region_indices[:, 1]] = True
    return flag


def reduced_image_flag(filtered_im: FilteredImage) -> np.ndarray:
    return filtered_im.reduced_flag.copy()


def reduced_image(filtered_im: FilteredImage) -> np.ndarray:
    return filtered_im.reduced.copy()


def filtered_mean(filtered_im: FilteredImage) -> float:
    return float(np.mean(filtered_im.reduced[filtered_im.reduced_flag]))


def filtered_std(filtered_im: FilteredImage) -> float:
    return float(np.std(filtered_im.reduced[filtered_im.reduced_flag], ddof=1))
