"""
Temperature distributions along lines

Two line traversal algorithms are provided: the integer Bresenham algorithm
visiting one pixel per step, and Xiaolin Wu's anti-aliased algorithm which
straddles two adjacent pixels per step and returns their average value.
Lines oriented at an arbitrary angle through a ROI center are clipped to the
ROI with ``CentredObj.line_within_mask``.
"""

import logging
from typing import Tuple, Union
import numpy as np

from .centred_obj import CentredObj
from .rescaled_image import RescaledImage

logger = logging.getLogger(__name__)


def _as_matrix(img: Union[np.ndarray, RescaledImage]) -> np.ndarray:
    return img.initial if isinstance(img, RescaledImage) else np.asarray(img)


def points_within_line(image_shape: Tuple[int, int], line_points: list) -> list:
    """
    Clamp line endpoints [row_0, col_0, row_1, col_1] into the image bounds.

    ``line_points`` is modified in place and returned.
    """
    for ind, value in enumerate(line_points):
        size = image_shape[0] if ind % 2 == 0 else image_shape[1]
        line_points[ind] = int(min(max(value, 0), size - 1))
    return line_points


def along_line_distribution(img, x0: int, y0: int, x1: int, y1: int):
    """
    Values of the matrix along the line between (x0, y0) and (x1, y1).

    Here ``x`` is the row index and ``y`` is the column index. Points are
    found with Bresenham's algorithm, both endpoints included.

    Returns
    -------
    points : np.ndarray
        (N, 2) array of (row, col) in traversal order
    distrib : np.ndarray
        (N,) values of ``img`` at the points
    """
    img = _as_matrix(img)
    x0, y0, x1, y1 = int(x0), int(y0), int(x1), int(y1)
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)

    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1

    err = (dx if dx > dy else -dy) / 2
    points = []
    distrib = []
    while True:
        points.append((x0, y0))
        distrib.append(img[x0, y0])
        if x0 == x1 and y0 == y1:
            break
        e2 = err
        if e2 > -dx:
            err -= dy
            x0 += sx
        if e2 < dy:
            err += dx
            y0 += sy
    return np.array(points, dtype=int), np.array(distrib, dtype=float)


def along_line_distribution_xiaolin_wu(img, y0, x0, y1, x1):
    """
    Values of the matrix along the line between (y0, x0) and (y1, x1)
    evaluated with Xiaolin Wu's algorithm.

    Here ``y`` is the row index and ``x`` is the column index. Wu's
    algorithm covers two adjacent pixels per step, the returned value is the
    average of both and the returned point is the first of them. Points are
    sorted by (row, col).

    Returns
    -------
    points : np.ndarray
        (N, 2) array of (row, col)
    distrib : np.ndarray
        (N,) averaged values
    """
    img = _as_matrix(img)
    n_rows, n_cols = img.shape[:2]
    dx = x1 - x0
    dy = y1 - y0

    swapped = False
    if abs(dx) < abs(dy):
        x0, y0 = y0, x0
        x1, y1 = y1, x1
        dx, dy = dy, dx
        swapped = True
    if x1 < x0:
        x0, x1 = x1, x0
        y0, y1 = y1, y0
    gradient = dy / dx if dx != 0 else 0.0

    points = []
    distrib = []

    def add_point(x, y):
        # (x, y) and (x, y + 1) are the straddled pixels
        if swapped:
            first = (x, y)
            second = (x, min(y + 1, n_cols - 1))
        else:
            first = (y, x)
            second = (min(y + 1, n_rows - 1), x)
        points.append(first)
        distrib.append(0.5 * (img[first] + img[second]))

    xend = int(round(x0))
    yend = y0 + gradient * (xend - x0)
    xpxl0 = xend
    add_point(xpxl0, int(yend))
    intery = yend + gradient

    xend = int(round(x1))
    yend = y1 + gradient * (xend - x1)
    xpxl1 = xend
    if xpxl1 != xpxl0:
        add_point(xpxl1, int(yend))

    for i in range(xpxl0 + 1, xpxl1):
        add_point(i, int(intery))
        intery += gradient

    points = np.array(points, dtype=int)
    distrib = np.array(distrib, dtype=float)
    order = np.lexsort((points[:, 1], points[:, 0]))
    return points[order], distrib[order]


def line_points_to_along_length(along_line_points: np.ndarray, line_points) -> np.ndarray:
    """Distance of every point from the first endpoint of the line."""
    line_start = np.asarray(line_points[:2], dtype=float)
    offsets = np.asarray(along_line_points, dtype=float) - line_start
    return np.sqrt(np.sum(offsets**2, axis=1))


def within_mask_line_points_distribution(
    imag,
    c: CentredObj,
    direction_angle: float = 0.0,
    line_length: float = 10.0,
    use_wu: bool = False,
):
    """
    Distribution of ``imag`` values along the line going through the ROI
    center and lying within the ROI.

    Parameters
    ----------
    imag : np.ndarray or RescaledImage
        Temperature matrix
    c : CentredObj
        ROI
    direction_angle : float, default 0.0
        Line orientation in degrees
    line_length : float, default 10.0
        Requested line length in pixels
    use_wu : bool, default False
        Use Xiaolin Wu's algorithm instead of Bresenham's

    Returns
    -------
    points : np.ndarray
        (N, 2) coordinates of image points lying on the line
    distrib : np.ndarray
        Values at the points
    line_points : list
        Line endpoints [row_0, col_0, row_1, col_1]
    """
    imag = _as_matrix(imag)
    line_points = c.line_within_mask(direction_angle, line_length)
    points_within_line(imag.shape, line_points)
    if use_wu:
        points, distrib = along_line_distribution_xiaolin_wu(imag, *line_points)
    else:
        points, distrib = along_line_distribution(imag, *line_points)
    return points, distrib, line_points


def along_mask_line_distribution(
    imag,
    c: CentredObj,
    direction_angle: float = 0.0,
    line_length: float = 10.0,
    length_per_pixel: float = 1.0,
    use_wu: bool = False,
):
    """
    The same as ``within_mask_line_points_distribution`` but returns the
    length along the line instead of the points.

    ``line_length`` and the returned length are in the units of
    ``length_per_pixel`` (e.g. mm per pixel).

    Returns
    -------
    along_line_length : np.ndarray
        Calibrated distance of every point from the first line endpoint
    distrib : np.ndarray
        Values at the points
    line_points : list
        Line endpoints [row_0, col_0, row_1, col_1]
    """
    if length_per_pixel <= 0:
        raise ValueError(f"length_per_pixel should be positive, got {length_per_pixel}")
    line_length = line_length / length_per_pixel
    points, distrib, line_points = within_mask_line_points_distribution(
        imag, c, direction_angle, line_length, use_wu=use_wu
    )
    along_line_length = line_points_to_along_length(points, line_points) * length_per_pixel
    return along_line_length, distrib, line_points


# short name
sample_along_angle = along_mask_line_distribution
