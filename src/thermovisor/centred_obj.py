"""
Centred ROI objects

This module provides the region of interest (ROI) markers used to fit hot or
cold patterns of thermal images and to sample temperature distributions along
lines going through the ROI center.

Every ROI has integer center coordinates ``(row, col)`` and one or more
integer size parameters (in pixels). Coordinates follow numpy indexing: the
first element is the row index, the second one is the column index.

A ROI type implements:

- ``_within_arrays`` - membership predicate, vectorized over row/col arrays
- ``area`` - surface area in pixels
- ``line_within_mask`` - endpoints of a line through the center lying inside
- ``to_drawable`` - pixel coordinates of the outline (or interior)

and declares the number of its size parameters in ``_dims_number``.
"""

import math
import numbers
from typing import List, Optional, Sequence, Tuple
import numpy as np
from skimage import draw

from .models.models import EmptyRegionError, InvalidGeometryError, UnsupportedShapeError
from .utils.math import atand, cosd, sind


def _trunc(value: float) -> int:
    # integer part, moving towards the center
    return int(math.floor(abs(value))) * (1 if value >= 0 else -1)


class CentredObj:
    """
    Base class of ROI markers with a center and integer size parameters.

    Parameters
    ----------
    center : sequence of two numbers, optional
        (row, col) of the center, floored to integers. Default (0, 0).
    dimensions : number or sequence, optional
        Size parameters in pixels, floored to integers. Default all ones.
    """

    _dims_number: Optional[int] = None

    def __init__(self, center=None, dimensions=None):
        n_dims = type(self)._checked_dims_number()
        center = (0, 0) if center is None else center
        dimensions = np.ones(n_dims) if dimensions is None else dimensions

        center = np.asarray(center, dtype=float).ravel()
        dimensions = np.atleast_1d(np.asarray(dimensions, dtype=float)).ravel()
        if center.size != 2 or not np.all(np.isfinite(center)):
            raise InvalidGeometryError(
                f"{type(self).__name__} center should be two finite numbers, got {center}"
            )
        if dimensions.size != n_dims or not np.all(np.isfinite(dimensions)):
            raise InvalidGeometryError(
                f"{type(self).__name__} expects {n_dims} finite size parameter(s), "
                f"got {dimensions}"
            )
        dimensions = np.floor(dimensions)
        if np.any(dimensions <= 0):
            raise InvalidGeometryError(
                f"{type(self).__name__} size parameters should be at least one pixel, "
                f"got {dimensions}"
            )
        self.center = np.floor(center).astype(int)
        self.dimensions = dimensions.astype(int)

    @classmethod
    def _checked_dims_number(cls) -> int:
        if cls._dims_number is None:
            raise UnsupportedShapeError(f"{cls.__name__} does not define its size parameters")
        return cls._dims_number

    @classmethod
    def parnumber(cls) -> int:
        """Total number of values needed to create the object: center + sizes."""
        return 2 + cls._checked_dims_number()

    def __len__(self):
        return self.parnumber()

    # ---------------------------------------------------------------- geometry
    def _within_arrays(self, rows, cols):
        raise UnsupportedShapeError(f"{type(self).__name__} has no membership test")

    def is_within(self, point) -> bool:
        """Check if the (row, col) point lies within the object."""
        return bool(self._within_arrays(point[0], point[1]))

    def within_flag(self, shape: Tuple[int, int]) -> np.ndarray:
        """Boolean matrix of ``shape``, True for all pixels within the object."""
        rows, cols = np.ogrid[0 : shape[0], 0 : shape[1]]
        return np.broadcast_to(self._within_arrays(rows, cols), shape).copy()

    def area(self) -> float:
        raise UnsupportedShapeError(f"{type(self).__name__} has no area")

    def line_within_mask(self, angle: float, line_length: float) -> List[int]:
        """
        Endpoints of a line through the center lying within the object.

        The offsets of the endpoints from the center are truncated toward
        zero, so both endpoints stay within the object boundary.

        Parameters
        ----------
        angle : float
            Line orientation in degrees, 0 is along the row index
        line_length : float
            Requested line length in pixels

        Returns
        -------
        list of int
            [row_0, col_0, row_1, col_1]
        """
        raise UnsupportedShapeError(f"{type(self).__name__} cannot clip lines")

    def to_drawable(self, fill: bool = False, shape=None):
        raise UnsupportedShapeError(f"{type(self).__name__} cannot be drawn")

    def _line_endpoints(self, row_offset: float, col_offset: float) -> List[int]:
        lcos = _trunc(row_offset)
        lsin = _trunc(col_offset)
        return [
            int(self.center[0] - lcos),
            int(self.center[1] - lsin),
            int(self.center[0] + lcos),
            int(self.center[1] + lsin),
        ]

    # ------------------------------------------------------------- parameters
    def starting_vector(self, im_bin: np.ndarray) -> np.ndarray:
        """
        Optimization starting vector for fitting the object to ``im_bin``.

        The center is the midpoint of the first and the last True pixels
        (row-major order), all size parameters equal the distance between them.
        """
        true_inds = np.flatnonzero(im_bin)
        if true_inds.size == 0:
            raise EmptyRegionError("Binary image has no pattern pixels to fit")
        min_ind = np.array(np.unravel_index(true_inds[0], im_bin.shape), dtype=float)
        max_ind = np.array(np.unravel_index(true_inds[-1], im_bin.shape), dtype=float)
        starting_size = np.sqrt(np.sum((max_ind - min_ind) ** 2))
        return np.concatenate(
            [(max_ind + min_ind) / 2, np.full(self._checked_dims_number(), starting_size)]
        )

    def to_vect(self) -> np.ndarray:
        """Parameters vector [center_row, center_col, dimension_1, ...]."""
        return np.concatenate([self.center, self.dimensions]).astype(float)

    def fill_from_vect(self, v) -> "CentredObj":
        """
        Fill the parameters from the vector [center_row, center_col, dimension_1, ...].

        Center values are floored, size values are floored absolute values.
        """
        v = np.asarray(v, dtype=float).ravel()
        if v.size != self.parnumber():
            raise InvalidGeometryError(
                f"{type(self).__name__} expects {self.parnumber()} parameters, got {v.size}"
            )
        if not np.all(np.isfinite(v)):
            raise InvalidGeometryError(f"Parameters vector has non-finite values: {v}")
        self.center = np.floor(v[:2]).astype(int)
        self.dimensions = np.floor(np.abs(v[2:])).astype(int)
        return self

    def copy(self) -> "CentredObj":
        return obj_from_vect(type(self), self.to_vect())

    def shift(self, delta) -> "CentredObj":
        """Relative shift of the center."""
        self.center = self.center + np.floor(np.asarray(delta, dtype=float)).astype(int)
        return self

    def diagonal_points(self) -> Tuple[int, int, int, int]:
        """Corner points (row_0, col_0, row_1, col_1) of the bounding square."""
        a = int(self.dimensions[0]) // 2
        b = int(self.dimensions[-1]) // 2
        return (
            int(self.center[0] - a),
            int(self.center[1] - b),
            int(self.center[0] + a),
            int(self.center[1] + b),
        )

    def rearranged_diagonal(self) -> Tuple[int, int, int, int]:
        """Corner points in (x, y) order: (col_0, row_0, col_1, row_1)."""
        r0, c0, r1, c1 = self.diagonal_points()
        return (c0, r0, c1, r1)

    # -------------------------------------------------------------- operators
    def _scaled(self, scale_function) -> "CentredObj":
        c_copy = self.copy()
        c_copy.dimensions = np.floor(np.abs(scale_function(c_copy.dimensions))).astype(int)
        return c_copy

    def __mul__(self, a):
        if not isinstance(a, numbers.Number):
            return NotImplemented
        return self._scaled(lambda d: d * a)

    __rmul__ = __mul__

    def __truediv__(self, a):
        if not isinstance(a, numbers.Number):
            return NotImplemented
        return self._scaled(lambda d: d / a)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return np.array_equal(self.center, other.center) and np.array_equal(
            self.dimensions, other.dimensions
        )

    __hash__ = None

    def __repr__(self):
        return (
            f"{type(self).__name__}(center={tuple(int(x) for x in self.center)}, "
            f"dimensions={tuple(int(x) for x in self.dimensions)})"
        )


class CircleObj(CentredObj):
    """Circle with defined center and diameter."""

    _dims_number = 1

    def __init__(self, center=None, diameter=None):
        super().__init__(center, diameter)

    @property
    def diameter(self) -> int:
        return int(self.dimensions[0])

    @property
    def radius(self) -> float:
        return self.dimensions[0] / 2

    @property
    def side(self) -> int:
        return self.diameter

    def area(self) -> float:
        return math.pi * self.radius**2

    def _within_arrays(self, rows, cols):
        return np.sqrt((self.center[0] - rows) ** 2 + (self.center[1] - cols) ** 2) < self.radius

    def line_within_mask(self, angle: float, line_length: float) -> List[int]:
        angle %= 360
        half_length = self.radius if line_length > self.diameter else line_length / 2
        return self._line_endpoints(half_length * cosd(angle), half_length * sind(angle))

    def to_drawable(self, fill: bool = False, shape=None):
        """Pixel coordinates (rr, cc) of the circle (disk if ``fill``)."""
        if fill:
            return draw.disk(tuple(self.center), self.radius, shape=shape)
        return draw.circle_perimeter(
            int(self.center[0]), int(self.center[1]), int(self.radius), shape=shape
        )


class SquareObj(CentredObj):
    """Square with defined center and side."""

    _dims_number = 1

    def __init__(self, center=None, side=None):
        super().__init__(center, side)

    @property
    def side(self) -> int:
        return int(self.dimensions[0])

    def area(self) -> float:
        return float(self.side**2)

    def _within_arrays(self, rows, cols):
        a = self.side / 2
        return (
            (self.center[0] - a <= rows)
            & (rows <= self.center[0] + a)
            & (self.center[1] - a <= cols)
            & (cols <= self.center[1] + a)
        )

    def line_within_mask(self, angle: float, line_length: float) -> List[int]:
        a = self.side
        angle %= 360
        if (45 <= angle <= 135) or (225 <= angle <= 315):
            limit = abs(a / sind(angle))
        else:
            limit = abs(a / cosd(angle))
        line_length = min(line_length, limit)
        return self._line_endpoints(
            line_length * cosd(angle) / 2, line_length * sind(angle) / 2
        )

    def to_drawable(self, fill: bool = False, shape=None):
        return _draw_box(self.diagonal_points(), fill, shape)


class RectangleObj(CentredObj):
    """Rectangle with defined center and two sides (along rows, along columns)."""

    _dims_number = 2

    def __init__(self, center=None, sides=None):
        super().__init__(center, sides)

    @property
    def side(self) -> Tuple[int, int]:
        return int(self.dimensions[0]), int(self.dimensions[1])

    def area(self) -> float:
        a, b = self.side
        return float(a * b)

    def diag_ang(self) -> float:
        """Angle between the diagonal and the column axis, degrees."""
        a, b = self.side
        return atand(a, b)

    def _within_arrays(self, rows, cols):
        a, b = self.side
        a /= 2
        b /= 2
        return (
            (self.center[0] - a <= rows)
            & (rows <= self.center[0] + a)
            & (self.center[1] - b <= cols)
            & (cols <= self.center[1] + b)
        )

    def line_within_mask(self, angle: float, line_length: float) -> List[int]:
        b, a = self.side
        angle %= 360
        rect_ang = self.diag_ang()
        # the column side limits the line around 90 and 270 degrees
        if (90 - rect_ang <= angle <= 90 + rect_ang) or (
            270 - rect_ang <= angle <= 270 + rect_ang
        ):
            s = sind(angle)
            limit = abs(a / s) if s != 0 else math.inf
        else:
            c = cosd(angle)
            limit = abs(b / c) if c != 0 else math.inf
        line_length = min(line_length, limit)
        return self._line_endpoints(
            line_length * cosd(angle) / 2, line_length * sind(angle) / 2
        )

    def to_drawable(self, fill: bool = False, shape=None):
        return _draw_box(self.diagonal_points(), fill, shape)


def _draw_box(diagonal: Sequence[int], fill: bool, shape):
    r0, c0, r1, c1 = diagonal
    rr, cc = draw.rectangle((r0, c0), end=(r1, c1), shape=shape)
    rr = rr.ravel().astype(int)
    cc = cc.ravel().astype(int)
    if fill:
        return rr, cc
    # outline pixels are the filled box pixels lying on its border
    border = (rr == min(r0, r1)) | (rr == max(r0, r1))
    border |= (cc == min(c0, c1)) | (cc == max(c0, c1))
    return rr[border], cc[border]


def obj_from_vect(obj_type, v) -> CentredObj:
    """
    Create a ROI of ``obj_type`` from the parameters vector
    [center_row, center_col, dimension_1, ...].
    """
    if not (isinstance(obj_type, type) and issubclass(obj_type, CentredObj)):
        raise UnsupportedShapeError(f"{obj_type} is not a CentredObj type")
    c = obj_type()
    return c.fill_from_vect(v)


def copyobj(c: CentredObj) -> CentredObj:
    """Copy the ROI creating a new instance."""
    return c.copy()


def fill_im(img: np.ndarray, c: CentredObj) -> np.ndarray:
    """Set pixels of the boolean ``img`` within ``c`` to True, others to False."""
    img[...] = c.within_flag(img.shape)
    return img


def fill_im_external(img: np.ndarray, c: CentredObj) -> np.ndarray:
    """Set pixels of the boolean ``img`` outside of ``c`` to True, others to False."""
    img[...] = ~c.within_flag(img.shape)
    return img


def cent_to_flag(c: CentredObj, shape: Tuple[int, int], external: bool = False) -> np.ndarray:
    """Convert the ROI to a boolean matrix of ``shape`` (inverse if ``external``)."""
    flag = np.zeros(shape, dtype=bool)
    return fill_im_external(flag, c) if external else fill_im(flag, c)


def values_within(img: np.ndarray, c: CentredObj) -> np.ndarray:
    """All values of ``img`` lying within ``c`` (row-major order)."""
    return img[c.within_flag(img.shape[:2])]


def set_within(img: np.ndarray, c: CentredObj, value) -> np.ndarray:
    """
    Assign ``value`` to the pixels of ``img`` lying within ``c``.

    ``value`` is either a scalar or a sequence with one element per pixel
    (row-major order, as returned by ``values_within``).
    """
    img[c.within_flag(img.shape[:2])] = value
    return img


def mean_within_mask(img: np.ndarray, c: CentredObj) -> float:
    """Average temperature of all points within the ROI."""
    values = values_within(img, c)
    if values.size == 0:
        raise EmptyRegionError(f"No image pixels within {c}")
    return float(np.mean(values))


def std_within_mask(img: np.ndarray, c: CentredObj) -> float:
    """Standard deviation of temperature for all points within the ROI."""
    values = values_within(img, c)
    if values.size == 0:
        raise EmptyRegionError(f"No image pixels within {c}")
    return float(np.std(values, ddof=1))


def draw_roi(image: np.ndarray, c: CentredObj, value=1, fill: bool = False) -> np.ndarray:
    """Burn the ROI outline (or interior) into ``image`` with ``value``."""
    rr, cc = c.to_drawable(fill=fill, shape=image.shape[:2])
    image[rr, cc] = value
    return image
